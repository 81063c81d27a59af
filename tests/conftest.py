import sys
from pathlib import Path

import pytest

# Put src/ on sys.path so the flat modules import the same way the app does
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import AppConfig  # noqa: E402
from core.query_builder import make_query  # noqa: E402


@pytest.fixture
def config():
    return AppConfig(base_url="http://search.test")


@pytest.fixture
def gru_lis_query():
    return make_query(
        origin="GRU",
        destination="LIS",
        departure_date="2025-11-10",
        adults=1,
        cabin="economy",
        provider="amadeus",
    )


def make_segments(n):
    return [
        {"carrier": "TP", "flight": str(100 + i), "from": f"X{i}A", "to": f"X{i + 1}A"}
        for i in range(n)
    ]


@pytest.fixture
def gru_lis_payload():
    """Offers A (3200, nonstop), B (1800, 2 stops), C (2600, 1 stop)."""
    return {
        "destination": "LIS",
        "offers": [
            {"id": "A", "total": 3200, "itineraries": [{"segments": make_segments(1), "durationHrs": 10}]},
            {"id": "B", "total": 1800, "itineraries": [{"segments": make_segments(3), "durationHrs": 20}]},
            {"id": "C", "total": 2600, "itineraries": [{"segments": make_segments(2), "durationHrs": 14}]},
        ],
    }
