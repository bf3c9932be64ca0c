"""YAML-driven station catalog."""
from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field

from config.scoring import ScoringConfig

from .models import Station

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = (1,)


class StationNotFound(KeyError):
    """Raised when a station id is not present in the catalog."""

    def __init__(self, station_id: str):
        super().__init__(station_id)
        self.station_id = station_id

    def __str__(self) -> str:
        return f"Unknown station: {self.station_id}"


class CatalogFile(BaseModel):  # On-disk layout of the catalog table
    version: int
    default_station: Optional[str] = None
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    stations: List[Station] = Field(min_length=1)


class StationCatalog:
    """Read-only station lookup shared by every request."""

    def __init__(self, stations: List[Station], *, scoring: ScoringConfig, default_id: Optional[str] = None):
        table: Dict[str, Station] = {}
        for station in stations:
            if station.id in table:
                raise ValueError(f"Duplicate station id: {station.id}")
            table[station.id] = station
        if not table:
            raise ValueError("Station catalog is empty")
        self._stations: Mapping[str, Station] = MappingProxyType(table)
        self._scoring = scoring
        self._default_id = default_id or stations[0].id
        if self._default_id not in self._stations:
            raise ValueError(f"Default station {self._default_id!r} is not defined")

    @property
    def scoring(self) -> ScoringConfig:
        return self._scoring

    @property
    def default_id(self) -> str:
        return self._default_id

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._stations)

    def lookup(self, station_id: str) -> Station:
        try:
            return self._stations[station_id]
        except KeyError:
            raise StationNotFound(station_id) from None

    def __contains__(self, station_id: object) -> bool:
        return station_id in self._stations

    def __len__(self) -> int:
        return len(self._stations)


def catalog_from_data(data: Any) -> StationCatalog:
    if not isinstance(data, dict):
        raise ValueError("Catalog file must contain a mapping")
    parsed = CatalogFile.model_validate(data)
    if parsed.version not in SUPPORTED_VERSIONS:
        raise ValueError(f"Unsupported catalog version: {parsed.version}")
    return StationCatalog(parsed.stations, scoring=parsed.scoring, default_id=parsed.default_station)


def load_catalog(path: Union[str, Path]) -> StationCatalog:  # Load catalog from disk
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    catalog = catalog_from_data(data)
    logger.info("Loaded %d station(s) from %s", len(catalog), path)
    return catalog


__all__ = ["CatalogFile", "StationCatalog", "StationNotFound", "catalog_from_data", "load_catalog"]
