"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest


# ===================
# SAMPLE DATA
# ===================

@pytest.fixture
def sample_column_samples() -> dict:
    """
    Seven-column journal export, one column per required field.

    Headers are deliberately unhelpful so matching has to rely on values.
    """
    return {
        "Date": ["2025-01-15", "2025-01-16"],
        "Time": ["09:30", "14:00"],
        "Pair": ["EURUSD", "GBPUSD"],
        "Dir": ["Long", "Short"],
        "Result": ["Win", "Lose"],
        "Risk": ["1%", "0.5%"],
        "RR": ["1:2", "1:3"],
    }


@pytest.fixture
def sample_rows() -> list:
    """Raw CSV rows (header -> cell) as a CSV reader produces them."""
    return [
        {"Date": "2025-01-15", "Time": "09:30", "Symbol": "EURUSD", "Side": "Buy",
         "Outcome": "Win", "Risk %": "1", "R:R": "1:2", "Notes": "clean setup"},
        {"Date": "2025-01-16", "Time": "14:00", "Symbol": "GBPUSD", "Side": "Sell",
         "Outcome": "Loss", "Risk %": "0.5", "R:R": "1:3", "Notes": ""},
        {"Date": "2025-01-17", "Time": "10:15", "Symbol": "XAUUSD", "Side": "Buy",
         "Outcome": "BE", "Risk %": "1", "R:R": "1:1.5", "Notes": "news"},
    ]


@pytest.fixture
def sample_csv_text() -> str:
    """Comma-separated journal export."""
    return (
        "Date,Time,Symbol,Side,Outcome,Risk %,R:R,Notes\n"
        "2025-01-15,09:30,EURUSD,Buy,Win,1,1:2,clean setup\n"
        "2025-01-16,14:00,GBP/USD,Sell,Loss,0.5,1:3,\n"
        "2025-01-17,10:15,Gold,Buy,BE,1,1.5R,\"news, NFP\"\n"
    )


@pytest.fixture
def sample_semicolon_csv() -> bytes:
    """EU export: semicolon separators, decimal commas, day-first dates, BOM."""
    text = (
        "\ufeffDatum;Uhrzeit;Instrument;Richtung;Ergebnis;Risiko;CRV\n"
        "15.01.2025;09:30;EURUSD;Long;Win;1,5;2,5\n"
        "16.01.2025;14:00;GBPUSD;Short;Lose;1;3\n"
    )
    return text.encode("utf-8")


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/import/schema")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
