"""Station content: fixed questions, timings and reference answers."""
from .catalog import CatalogFile, StationCatalog, StationNotFound, catalog_from_data, load_catalog
from .models import QUESTION_IDS, LengthPolicy, Question, ReferenceAnswer, Station, Timings

__all__ = [
    "CatalogFile",
    "LengthPolicy",
    "QUESTION_IDS",
    "Question",
    "ReferenceAnswer",
    "Station",
    "StationCatalog",
    "StationNotFound",
    "Timings",
    "catalog_from_data",
    "load_catalog",
]
