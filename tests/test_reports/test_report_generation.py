"""Tests for the text report generators.

Reports are rendered from real engine results so the templates are exercised
against the same fields the CLI prints.
"""

from datetime import date
from decimal import Decimal

import pytest

from taxcore.engines import AMTEngine, LotSelector, QuarterlyEstimator, TaxEstimator
from taxcore.models import AmtInput, FilingStatus, IncomeSummary, QuarterlyPaymentMade
from taxcore.reports import (
    AMTWorksheetGenerator,
    LotComparisonGenerator,
    QuarterlyScheduleGenerator,
    TaxSummaryGenerator,
)
from taxcore.reports.formatting import money, percent

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def wage_estimate(wage_earner):
    return TaxEstimator().estimate(2025, FilingStatus.SINGLE, wage_earner, state="CA")


@pytest.fixture
def iso_amt():
    amt_input = AmtInput(
        taxable_income=Decimal("200000"),
        filing_status=FilingStatus.SINGLE,
        incentive_stock_option_bargain_element=Decimal("300000"),
        regular_tax=Decimal("35000"),
    )
    return amt_input, AMTEngine().compute(amt_input)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    def test_money(self):
        assert money(Decimal("1234.5")) == "$1,234.50"
        assert money(Decimal("-500")) == "-$500.00"
        assert money(Decimal("0")) == "$0.00"

    def test_percent(self):
        assert percent(Decimal("0.1361")) == "13.61%"
        assert percent(Decimal("0.0495")) == "4.95%"


# ---------------------------------------------------------------------------
# Tax summary
# ---------------------------------------------------------------------------


class TestTaxSummary:
    def test_sections(self, wage_estimate):
        report = TaxSummaryGenerator().render(wage_estimate)
        assert report.startswith("=== Tax Liability Estimate: 2025 (single) ===")
        for heading in ("INCOME", "DEDUCTIONS", "FEDERAL TAX", "TOTAL", "ASSUMPTIONS"):
            assert heading in report

    def test_figures(self, wage_estimate):
        report = TaxSummaryGenerator().render(wage_estimate)
        assert "$100,000.00" in report
        assert "$13,614.00" in report
        assert "(standard)" in report
        assert "  - Using standard deduction" in report

    def test_state_section(self, wage_estimate):
        report = TaxSummaryGenerator().render(wage_estimate)
        assert "STATE TAX (CA, progressive)" in report

    def test_no_state_section(self, wage_earner):
        estimate = TaxEstimator().estimate(2025, FilingStatus.SINGLE, wage_earner)
        assert "STATE TAX" not in TaxSummaryGenerator().render(estimate)

    def test_balance_due(self, wage_earner):
        estimate = TaxEstimator().estimate(2025, FilingStatus.SINGLE, wage_earner)
        report = TaxSummaryGenerator().render(estimate)
        assert "BALANCE DUE:" in report
        assert "$1,614.00" in report

    def test_refund(self):
        income = IncomeSummary(wages=Decimal("100000"), total_withholding=Decimal("20000"))
        estimate = TaxEstimator().estimate(2025, FilingStatus.SINGLE, income)
        report = TaxSummaryGenerator().render(estimate)
        assert "REFUND:" in report
        assert "$6,386.00" in report
        assert "BALANCE DUE" not in report

    def test_foreign_tax_credit_line(self):
        income = IncomeSummary(wages=Decimal("100000"), foreign_tax_credit=Decimal("250"))
        estimate = TaxEstimator().estimate(2025, FilingStatus.SINGLE, income)
        assert "Foreign Tax Credit" in TaxSummaryGenerator().render(estimate)


# ---------------------------------------------------------------------------
# AMT worksheet
# ---------------------------------------------------------------------------


class TestAMTWorksheet:
    def test_subject_to_amt(self, iso_amt):
        amt_input, result = iso_amt
        report = AMTWorksheetGenerator().render(amt_input, result)
        assert report.startswith("=== AMT Worksheet (Form 6251): 2025 (single) ===")
        assert "$300,000.00" in report
        assert "$110,366.00" in report
        assert "$75,366.00" in report
        assert "Subject to AMT" in report

    def test_not_subject(self):
        amt_input = AmtInput(
            taxable_income=Decimal("80000"),
            filing_status=FilingStatus.MFJ,
            regular_tax=Decimal("9000"),
        )
        report = AMTWorksheetGenerator().render(amt_input, AMTEngine().compute(amt_input))
        assert "Not subject to AMT." in report


# ---------------------------------------------------------------------------
# Quarterly schedule
# ---------------------------------------------------------------------------


class TestQuarterlySchedule:
    def test_rows_and_totals(self):
        result = QuarterlyEstimator().calculate(
            2025,
            FilingStatus.SINGLE,
            IncomeSummary(business_income=Decimal("100000")),
            Decimal("20000"),
            [QuarterlyPaymentMade(quarter=1, amount=Decimal("5000"), date_paid=date(2025, 4, 10))],
            date(2025, 7, 1),
        )
        report = QuarterlyScheduleGenerator().render(result)
        assert report.startswith("=== Estimated Tax Schedule: 2025 (single) ===")
        assert " 1 | 2025-04-15 | $5,000.00 | $5,000.00 | paid" in report
        assert " 2 | 2025-06-15 | $5,000.00 |     $0.00 | overdue" in report
        assert " 4 | 2026-01-15 |" in report
        assert "Underpayment Risk:         medium" in report
        assert "Safe Harbor Met:           no" in report


# ---------------------------------------------------------------------------
# Lot comparison
# ---------------------------------------------------------------------------


class TestLotComparison:
    def test_best_method_flagged(self, acme_lots):
        results = LotSelector().compare_strategies(
            acme_lots, "15", "120", date(2025, 6, 1),
            marginal_rate="0.32", long_term_rate="0.15",
        )
        report = LotComparisonGenerator().render(results)
        assert "[FIFO]\n" in report
        assert "[LIFO] (lowest tax impact)" in report
        assert "- lot-2025 (2025-03-01)" in report
        assert "-$304.00" in report

    def test_notes_rendered(self, acme_lots):
        results = LotSelector().compare_strategies(
            acme_lots, "40", "120", date(2025, 6, 1),
            marginal_rate="0.32", long_term_rate="0.15",
        )
        report = LotComparisonGenerator().render(results)
        assert "Note: Requested 40 shares but only 30 available" in report

    def test_empty(self):
        assert LotComparisonGenerator().render([]).startswith("=== Lot Selection Comparison ===")
