from __future__ import annotations

import pytest
from pydantic import ValidationError

from stations.catalog import StationNotFound, load_catalog

STATION_YAML = """
version: {version}
stations:
  - id: custom
    title: Custom station
    description: Tests
    timings: {{reading: 1 minute, response: 5 minutes, followups: 2 minutes}}
    questions:
      - id: main
        label: MAIN
        prompt: Why medicine?
        length_policy: {{max_bullets: {max_bullets}}}
        reference:
          bullets: ["one", "two"]
          full: Because.
"""


def _write(tmp_path, **kwargs):
    values = {"version": 1, "max_bullets": 5}
    values.update(kwargs)
    path = tmp_path / "stations.yaml"
    path.write_text(STATION_YAML.format(**values), encoding="utf-8")
    return path


def test_shipped_station_layout(catalog, station):
    assert catalog.default_id == "blood_transfusion_refusal"
    assert station.question_ids == ("main", "f1", "f2", "f3")
    assert [q.label for q in station.questions] == ["MAIN", "FU1", "FU2", "FU3"]
    assert station.timings.reading == "2 minutes"
    assert catalog.scoring.overall_mode == "sum-scaled"


def test_reference_answers_are_fixed_text(station):
    main = station.question("main").reference
    assert len(main.bullets) == 7
    assert main.bullets[0] == "Confirm urgency + stabilise; seek senior help early."
    assert main.full.startswith("I would approach the patient calmly and respectfully")
    assert "\n\nI would explain the clinical situation" in main.full
    assert not main.full.endswith("\n")
    fu1 = station.question("f1").reference
    assert fu1.bullets[-1] == "Document reasoning and actions."
    assert "doesn’t decide" in fu1.bullets[3]
    fu3 = station.question("f3").reference
    assert fu3.bullets[2] == "Haemostatic agents/techniques where indicated (e.g., TXA) — specialist input."


def test_lookup_unknown_station(catalog):
    with pytest.raises(StationNotFound) as excinfo:
        catalog.lookup("nope")
    assert isinstance(excinfo.value, KeyError)
    assert "nope" in str(excinfo.value)


def test_stations_are_immutable(station):
    with pytest.raises(ValidationError):
        station.title = "changed"


def test_custom_catalog_defaults(tmp_path):
    catalog = load_catalog(_write(tmp_path))
    assert catalog.ids() == ("custom",)
    assert catalog.default_id == "custom"
    assert catalog.scoring.domain_max == 10
    assert catalog.lookup("custom").question_ids == ("main",)


def test_unknown_version_rejected(tmp_path):
    with pytest.raises(ValueError, match="Unsupported catalog version"):
        load_catalog(_write(tmp_path, version=2))


def test_bullets_over_policy_rejected(tmp_path):
    with pytest.raises(ValidationError):
        load_catalog(_write(tmp_path, max_bullets=1))
