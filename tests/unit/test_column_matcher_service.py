"""
Unit tests for the column matcher (assignment engine and diagnostics).
"""

import pytest

from config.settings import Settings
from config.trade_schema import REQUIRED_FIELDS
from services.column_matcher_service import (
    ColumnMatcherService,
    extract_column_samples,
    get_column_matcher_service,
    match_csv_columns,
    match_csv_rows,
)


# ===================
# SAMPLE EXTRACTION
# ===================

class TestExtractColumnSamples:
    """Tests for extract_column_samples."""

    def test_skips_empty_values(self):
        """Blank and None cells are not sampled."""
        rows = [{"A": "1", "B": ""}, {"A": None, "B": "  "}, {"A": "2", "B": "x"}]
        assert extract_column_samples(rows) == {"A": ["1", "2"], "B": ["x"]}

    def test_caps_samples(self):
        """No more than max_samples values per column."""
        rows = [{"A": str(i)} for i in range(50)]
        samples = extract_column_samples(rows, max_samples=5)
        assert samples["A"] == ["0", "1", "2", "3", "4"]

    def test_cleans_quotes_and_bom(self):
        """Wrapping quotes, BOMs and non-breaking spaces are removed."""
        rows = [{"A": '"EURUSD"'}, {"A": "\ufeffWin\u00a0"}]
        assert extract_column_samples(rows) == {"A": ["EURUSD", "Win"]}

    def test_keeps_empty_columns(self):
        """Columns with no values still appear, in first-seen order."""
        rows = [{"A": "", "B": "1"}]
        assert list(extract_column_samples(rows)) == ["A", "B"]


# ===================
# ASSIGNMENT
# ===================

class TestMatchCsvColumns:
    """Tests for match_csv_columns."""

    def test_seven_column_export(self, sample_column_samples):
        """Every required field is matched from values alone."""
        result = match_csv_columns(sample_column_samples)

        assert result.field_mapping == {
            "Date": "trade_date",
            "Time": "trade_time",
            "Pair": "market",
            "Dir": "direction",
            "Result": "trade_outcome",
            "Risk": "risk_per_trade",
            "RR": "risk_reward_ratio",
        }
        assert result.missing_required == []
        assert result.unmapped_columns == []
        assert result.suggestions == []
        assert result.needs_review is False

    def test_confidences_on_unit_scale(self, sample_column_samples):
        """Confidences are 0-1 and value-sourced."""
        result = match_csv_columns(sample_column_samples)

        for match in result.matches.values():
            assert 0.0 <= match.confidence <= 1.0
            assert match.source == "value"

    def test_unhelpful_headers(self, sample_column_samples):
        """Header text is not needed for value matching."""
        renamed = {f"col{i}": values for i, values in enumerate(sample_column_samples.values())}
        result = match_csv_columns(renamed)

        assert result.missing_required == []
        assert result.field_mapping["col2"] == "market"
        assert result.field_mapping["col6"] == "risk_reward_ratio"

    def test_each_field_and_column_used_once(self, sample_column_samples):
        """No field is claimed by two columns."""
        samples = dict(sample_column_samples)
        samples["Date 2"] = ["2025-02-01", "2025-02-02"]
        result = match_csv_columns(samples)

        fields = list(result.field_mapping.values())
        assert len(fields) == len(set(fields))
        assert result.field_mapping["Date"] == "trade_date"
        assert "Date 2" in result.unmapped_columns

    def test_deterministic(self, sample_column_samples):
        """Same input gives identical output."""
        first = match_csv_columns(sample_column_samples).model_dump()
        second = match_csv_columns(sample_column_samples).model_dump()
        assert first == second

    def test_threshold_monotonic(self, sample_column_samples):
        """Raising min_confidence never adds value matches."""
        samples = dict(sample_column_samples)
        samples["Mixed"] = ["Long", "hmm", "ok then", "later"]
        del samples["Dir"]

        low = match_csv_columns(samples, 0.1, include_optional=False).field_mapping
        high = match_csv_columns(samples, 0.9, include_optional=False).field_mapping

        assert set(high.items()) <= set(low.items())
        assert low.get("Mixed") == "direction"
        assert "Mixed" not in high

    def test_empty_input(self):
        """No columns: nothing matched, every required field missing."""
        result = match_csv_columns({})

        assert result.matches == {}
        assert result.unmapped_columns == []
        assert result.missing_required == list(REQUIRED_FIELDS)

    def test_empty_samples_unmapped(self):
        """A column without values can't be matched by value."""
        result = match_csv_columns({"Blank": []}, include_optional=False)

        assert result.unmapped_columns == ["Blank"]

    def test_missing_required_in_registry_order(self, sample_column_samples):
        """Missing fields are listed in registry order."""
        samples = {k: v for k, v in sample_column_samples.items() if k not in ("Dir", "Date")}
        result = match_csv_columns(samples)

        assert result.missing_required == ["trade_date", "direction"]

    def test_header_hint_breaks_tie(self):
        """Two equally date-like columns: the one with a date-ish header wins."""
        result = match_csv_columns({
            "Opened": ["2025-01-15", "x"],
            "Trade Date": ["2025-01-15", "x"],
        })

        assert result.field_mapping["Trade Date"] == "trade_date"
        assert result.matches["Trade Date"].confidence == pytest.approx(0.6)


# ===================
# OPTIONAL FIELDS
# ===================

class TestOptionalFieldPass:
    """Tests for header-based matching of leftover columns."""

    def test_leftover_columns_matched_by_header(self, sample_column_samples):
        """Unclaimed columns are matched to optional fields by header."""
        samples = dict(sample_column_samples)
        samples["Notes"] = ["clean setup", "news day"]
        result = match_csv_columns(samples)

        assert result.field_mapping["Notes"] == "notes"
        assert result.matches["Notes"].source == "header"

    def test_optional_pass_can_be_disabled(self, sample_column_samples):
        """include_optional=False leaves leftovers unmapped."""
        samples = dict(sample_column_samples)
        samples["Notes"] = ["clean setup", "news day"]
        result = match_csv_columns(samples, include_optional=False)

        assert "Notes" not in result.matches
        assert "Notes" in result.unmapped_columns

    def test_required_fields_never_claimed_by_header(self):
        """A header that names a required field doesn't claim it without values."""
        result = match_csv_columns({"Date": ["not a date", "nor this one"]})

        assert "trade_date" in result.missing_required
        assert result.field_mapping.get("Date") != "trade_date"


# ===================
# DIAGNOSTICS
# ===================

class TestSuggestions:
    """Tests for combined-datetime and ambiguity suggestions."""

    def test_combined_datetime(self, sample_column_samples):
        """A date+time column is flagged, not mapped to trade_date."""
        samples = {k: v for k, v in sample_column_samples.items() if k not in ("Date", "Time")}
        samples = {"Opened": ["2025-01-15 09:30:00", "2025-01-16 10:00:00"], **samples}
        result = match_csv_columns(samples)

        assert result.field_mapping.get("Opened") != "trade_date"
        assert result.missing_required == ["trade_date", "trade_time"]

        combined = [s for s in result.suggestions if s.csv_column == "Opened"]
        assert len(combined) == 1
        assert combined[0].possible_fields == ["trade_date", "trade_time"]
        assert "split" in combined[0].reason
        assert result.needs_review is True

    def test_ambiguous_candidates(self):
        """Several weak candidates for a missing field produce one suggestion."""
        weak = ["long", "no idea", "some text", "other note", "more text"]
        result = match_csv_columns({"Col A": weak, "Col B": weak}, include_optional=False)

        assert "direction" in result.missing_required
        suggestion = next(s for s in result.suggestions if s.possible_fields == ["direction"])
        assert suggestion.candidate_columns == ["Col A", "Col B"]
        assert suggestion.csv_column == "Col A / Col B"
        assert "manually" in suggestion.reason

    def test_single_candidate_no_suggestion(self):
        """One weak candidate is not ambiguous."""
        weak = ["long", "no idea", "some text", "other note", "more text"]
        result = match_csv_columns({"Col A": weak}, include_optional=False)

        assert result.suggestions == []

    def test_candidates_capped_at_three(self):
        """At most three candidates are listed."""
        weak = ["long", "no idea", "some text", "other note", "more text"]
        samples = {f"Col {i}": weak for i in range(5)}
        result = match_csv_columns(samples, include_optional=False)

        suggestion = next(s for s in result.suggestions if s.possible_fields == ["direction"])
        assert len(suggestion.candidate_columns) == 3

    def test_suggestions_do_not_change_mapping(self, sample_column_samples):
        """Diagnostics only add suggestions."""
        samples = dict(sample_column_samples)
        samples["Opened"] = ["2025-01-15 09:30:00"]
        with_combined = match_csv_columns(samples, include_optional=False)
        without = match_csv_columns(sample_column_samples, include_optional=False)

        assert with_combined.field_mapping == without.field_mapping


# ===================
# ROWS / SERVICE
# ===================

class TestMatchCsvRows:
    """Tests for match_csv_rows and ColumnMatcherService."""

    def test_rows(self, sample_rows):
        """Raw rows are sampled and matched, notes by header."""
        result = match_csv_rows(sample_rows)

        assert result.field_mapping == {
            "Date": "trade_date",
            "Time": "trade_time",
            "Symbol": "market",
            "Side": "direction",
            "Outcome": "trade_outcome",
            "Risk %": "risk_per_trade",
            "R:R": "risk_reward_ratio",
            "Notes": "notes",
        }
        assert result.missing_required == []

    def test_rows_kwargs_forwarded(self, sample_rows):
        """Keyword options reach match_csv_columns."""
        result = match_csv_rows(sample_rows, include_optional=False)
        assert "Notes" in result.unmapped_columns

    def test_service_uses_settings(self, sample_column_samples):
        """A stricter configured threshold drops weaker matches."""
        samples = dict(sample_column_samples)
        samples["Mixed"] = ["Long", "hmm", "ok then", "later"]
        del samples["Dir"]

        lenient = ColumnMatcherService(Settings(min_value_confidence=0.1))
        strict = ColumnMatcherService(Settings(min_value_confidence=0.9))

        assert lenient.match_columns(samples).field_mapping.get("Mixed") == "direction"
        assert "Mixed" not in strict.match_columns(samples).field_mapping

    def test_service_match_rows(self, sample_rows):
        """Service wraps row sampling."""
        service = ColumnMatcherService(Settings())
        result = service.match_rows(sample_rows, max_samples=2)
        assert result.missing_required == []

    def test_singleton(self):
        """get_column_matcher_service returns one instance."""
        assert get_column_matcher_service() is get_column_matcher_service()
