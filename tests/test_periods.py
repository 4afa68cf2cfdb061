"""Tests for period normalisation."""

from datetime import date

import pytest

from kpi_payroll.calculators.periods import (
    InvalidPeriodError,
    month_start,
    normalize_period,
    period_label,
    periods_equal,
)


class TestNormalizePeriod:
    """Test period label parsing."""

    @pytest.mark.parametrize(
        "label",
        ["2026-02", "2026-2", "2026-02-01", "2026-02-28", "2026 Fevral", "2026 fevral", " 2026-02 "],
    )
    def test_equivalent_labels(self, label):
        assert normalize_period(label) == "2026-02"

    def test_date(self):
        assert normalize_period(date(2026, 11, 15)) == "2026-11"

    @pytest.mark.parametrize("label", ["", "2026", "2026-13", "2026 Foo", "February 2026"])
    def test_invalid(self, label):
        with pytest.raises(InvalidPeriodError):
            normalize_period(label)


class TestPeriodHelpers:
    def test_periods_equal(self):
        assert periods_equal("2026-02", "2026 Fevral") is True
        assert periods_equal("2026-02-01", "2026-02") is True
        assert periods_equal("2026-02", "2026-03") is False
        assert periods_equal(None, "2026-02") is False

    def test_unparseable_periods_compare_verbatim(self):
        assert periods_equal("Q1 2026", "Q1 2026") is True
        assert periods_equal("Q1 2026", "2026-01") is False

    def test_month_start_and_label(self):
        assert month_start("2026-02") == date(2026, 2, 1)
        assert period_label("2026-12") == "2026 Dekabr"
