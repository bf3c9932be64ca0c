import json
import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import DEFAULT_STATIONS_PATH
from stations.catalog import load_catalog

STATION_ID = "blood_transfusion_refusal"

GOOD_MARKS = {
    "empathy": 7,
    "communication": 8,
    "ethics": 6,
    "insight": 7,
    "overall": 7,
    "feedback_main": "Clear structure; state the capacity test explicitly.",
    "feedback_f1": "Mention advance decisions before best interests.",
    "feedback_f2": "Good MDT list; add consent for family involvement.",
    "feedback_f3": "Name cell salvage and iron optimisation.",
}


def responses_envelope(text: str) -> dict:
    return {
        "id": "resp_1",
        "output": [
            {"type": "reasoning", "summary": []},
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            },
        ],
    }


class StubGenerator:
    """Generation client double that records every request it receives."""

    def __init__(self, envelope=None, error=None):
        self.envelope = envelope if envelope is not None else responses_envelope(json.dumps(GOOD_MARKS))
        self.error = error
        self.requests = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def invoke(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.envelope


@pytest.fixture(scope="session")
def catalog():
    return load_catalog(DEFAULT_STATIONS_PATH)


@pytest.fixture
def station(catalog):
    return catalog.lookup(STATION_ID)


@pytest.fixture
def full_body():
    return {
        "stationId": STATION_ID,
        "candidateName": "Sam",
        "answers": {
            "main": "I would assess capacity and explore the patient's beliefs.",
            "f1": "Act in best interests after checking for an advance decision.",
            "f2": "Involve seniors, haematology and, with consent, family.",
            "f3": "Iron, EPO, cell salvage if acceptable.",
        },
    }


@pytest.fixture
def make_stub():
    return StubGenerator


@pytest.fixture
def envelope_for():
    return responses_envelope


@pytest.fixture
def good_marks():
    return dict(GOOD_MARKS)
