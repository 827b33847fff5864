"""
API tests for the trade import routes.

Run with: pytest tests/test_import_routes.py -v
"""

import json

from config.trade_schema import DB_SCHEMA, REQUIRED_FIELDS


FULL_MAPPING = {
    "Date": "trade_date",
    "Time": "trade_time",
    "Symbol": "market",
    "Side": "direction",
    "Outcome": "trade_outcome",
    "Risk %": "risk_per_trade",
    "R:R": "risk_reward_ratio",
    "Notes": "notes",
}


def _upload(content, filename="trades.csv"):
    if isinstance(content, str):
        content = content.encode("utf-8")
    return {"file": (filename, content, "text/csv")}


# ===================
# APP
# ===================

class TestApp:
    """Health and root endpoints."""

    def test_health(self, test_client):
        """Health reports status and registry size."""
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["schema_fields"] == len(DB_SCHEMA)

    def test_root_lists_endpoints(self, test_client):
        """Root lists the import endpoints."""
        data = test_client.get("/").json()

        assert data["endpoints"]["preview"] == "/api/import/preview"


# ===================
# SCHEMA
# ===================

class TestSchemaRoutes:
    """GET /api/import/schema"""

    def test_list_all(self, test_client):
        """All fields, required first."""
        response = test_client.get("/api/import/schema")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == len(DB_SCHEMA)
        assert [f["key"] for f in data["data"][:len(REQUIRED_FIELDS)]] == list(REQUIRED_FIELDS)

    def test_list_required(self, test_client):
        """required=true filters to the required fields."""
        data = test_client.get("/api/import/schema", params={"required": "true"}).json()

        assert data["total"] == len(REQUIRED_FIELDS)
        assert all(f["required"] for f in data["data"])

    def test_get_field(self, test_client):
        """Single field by key."""
        response = test_client.get("/api/import/schema/market")

        assert response.status_code == 200
        data = response.json()
        assert data["key"] == "market"
        assert data["value_type"] == "string"
        assert "symbol" in data["synonyms"]

    def test_unknown_field_404(self, test_client):
        """Unknown keys return the standard error body."""
        response = test_client.get("/api/import/schema/nope")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "SCHEMA_FIELD_NOT_FOUND"
        assert error["details"] == {"id": "nope"}


# ===================
# MATCHING
# ===================

class TestMatchRoutes:
    """POST /api/import/match-headers and /match-columns"""

    def test_match_headers(self, test_client):
        """Headers map by text, unknown headers stay unmapped."""
        response = test_client.post(
            "/api/import/match-headers",
            json={"headers": ["Date", "Symbol", "zzqx"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["field_mapping"] == {"Date": "trade_date", "Symbol": "market"}
        assert [m["csv_header"] for m in data["matches"]] == ["Date", "Symbol", "zzqx"]
        assert data["matches"][2]["db_field"] is None

    def test_match_headers_threshold(self, test_client):
        """An explicit threshold overrides the configured one."""
        response = test_client.post(
            "/api/import/match-headers",
            json={"headers": ["Dat"], "threshold": 0.5},
        )
        assert response.json()["field_mapping"] == {"Dat": "trade_date"}

    def test_match_headers_bad_threshold(self, test_client):
        """Thresholds outside 0-1 are rejected by validation."""
        response = test_client.post(
            "/api/import/match-headers",
            json={"headers": ["Date"], "threshold": 2},
        )
        assert response.status_code == 422

    def test_match_columns_samples(self, test_client, sample_column_samples):
        """Column samples are matched by value."""
        response = test_client.post(
            "/api/import/match-columns",
            json={"column_samples": sample_column_samples},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["missing_required"] == []
        assert data["needs_review"] is False
        assert data["field_mapping"]["Pair"] == "market"
        assert data["matches"]["RR"]["source"] == "value"

    def test_match_columns_rows(self, test_client, sample_rows):
        """Raw rows are sampled server side."""
        response = test_client.post(
            "/api/import/match-columns",
            json={"rows": sample_rows},
        )

        data = response.json()
        assert data["field_mapping"] == FULL_MAPPING

    def test_match_columns_reports_missing(self, test_client, sample_column_samples):
        """Dropped columns show up as missing fields needing review."""
        samples = {k: v for k, v in sample_column_samples.items() if k != "Pair"}
        data = test_client.post(
            "/api/import/match-columns",
            json={"column_samples": samples},
        ).json()

        assert data["missing_required"] == ["market"]
        assert data["needs_review"] is True


# ===================
# PREVIEW
# ===================

class TestPreviewRoute:
    """POST /api/import/preview"""

    def test_auto_match(self, test_client, sample_csv_text):
        """Without a mapping, columns are matched and rows parsed."""
        response = test_client.post("/api/import/preview", files=_upload(sample_csv_text))

        assert response.status_code == 200
        data = response.json()
        assert data["filename"] == "trades.csv"
        assert data["headers"][0] == "Date"
        assert data["match"]["missing_required"] == []
        assert data["field_mapping"]["Symbol"] == "market"
        assert data["parse"]["trade_count"] == 3
        assert data["parse"]["error_count"] == 0

    def test_explicit_mapping(self, test_client, sample_csv_text):
        """A supplied mapping skips matching; balance derives P&L."""
        response = test_client.post(
            "/api/import/preview",
            files=_upload(sample_csv_text),
            data={"field_mapping": json.dumps(FULL_MAPPING), "account_balance": "10000"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["match"] is None
        assert data["field_mapping"] == FULL_MAPPING

        trades = data["parse"]["trades"]
        assert trades[0]["trade_date"] == "2025-01-15"
        assert trades[0]["calculated_profit"] == 200.0
        assert trades[2]["market"] == "XAUUSD"

    def test_default_risk(self, test_client):
        """Form defaults fill columns the file doesn't have."""
        csv = "Date,Symbol,Side,Outcome\n2025-01-15,EURUSD,Long,Win\n"
        mapping = {
            "Date": "trade_date",
            "Symbol": "market",
            "Side": "direction",
            "Outcome": "trade_outcome",
        }
        data = test_client.post(
            "/api/import/preview",
            files=_upload(csv),
            data={
                "field_mapping": json.dumps(mapping),
                "default_risk_per_trade": "1",
                "default_risk_reward_ratio": "2",
            },
        ).json()

        assert data["parse"]["trade_count"] == 1
        assert data["parse"]["trades"][0]["risk_reward_ratio"] == 2.0

    def test_row_errors_reported(self, test_client):
        """Bad rows are reported, good rows still parse."""
        csv = (
            "Date,Symbol,Side,Outcome,Risk,RR\n"
            "2025-01-15,EURUSD,Long,Win,1,2\n"
            "someday,EURUSD,Long,Win,1,2\n"
        )
        mapping = {
            "Date": "trade_date",
            "Symbol": "market",
            "Side": "direction",
            "Outcome": "trade_outcome",
            "Risk": "risk_per_trade",
            "RR": "risk_reward_ratio",
        }
        data = test_client.post(
            "/api/import/preview",
            files=_upload(csv),
            data={"field_mapping": json.dumps(mapping)},
        ).json()

        assert data["parse"]["trade_count"] == 1
        assert data["parse"]["errors"] == [{
            "row": 3,
            "field": "trade_date",
            "error": data["parse"]["errors"][0]["error"],
            "value": "someday",
        }]

    def test_invalid_mapping_json(self, test_client, sample_csv_text):
        """Malformed mapping JSON is a 422."""
        response = test_client.post(
            "/api/import/preview",
            files=_upload(sample_csv_text),
            data={"field_mapping": "{not json"},
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "TRADE_CSV_PARSE_ERROR"

    def test_mapping_wrong_shape(self, test_client, sample_csv_text):
        """Mapping values must be field keys or null."""
        response = test_client.post(
            "/api/import/preview",
            files=_upload(sample_csv_text),
            data={"field_mapping": json.dumps({"Date": 1})},
        )
        assert response.status_code == 422

    def test_empty_file(self, test_client):
        """Empty uploads can't be parsed."""
        response = test_client.post("/api/import/preview", files=_upload(b""))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "TRADE_CSV_PARSE_ERROR"
