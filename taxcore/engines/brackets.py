"""Federal tax tables.

Ordinary and LTCG brackets, standard deductions, NIIT, self-employment, AMT
and capital-loss constants. Keyed by tax year and filing status. Never
hardcode brackets in computation functions.

Tables are read-only: brackets are tuples of frozen ``TaxBracket`` records and
every mapping is wrapped in ``MappingProxyType``.

Sources:
  - 2024: IRS Rev. Proc. 2023-34
  - 2025: IRS Rev. Proc. 2024-40
"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType

from taxcore.models.brackets import TaxBracket
from taxcore.models.enums import FilingStatus

logger = logging.getLogger(__name__)

BracketTable = tuple[TaxBracket, ...]


def build_brackets(*tiers: tuple[str | None, str]) -> BracketTable:
    """Build a partition of [0, inf) from (upper_bound, rate) pairs.

    The last tier must have an upper bound of None.
    """
    brackets: list[TaxBracket] = []
    lower = Decimal("0")
    for upper, rate in tiers:
        upper_dec = Decimal(upper) if upper is not None else None
        brackets.append(TaxBracket(min=lower, max=upper_dec, rate=Decimal(rate)))
        if upper_dec is not None:
            lower = upper_dec
    return tuple(brackets)


def _frozen(table: dict) -> Mapping:
    return MappingProxyType(
        {key: _frozen(value) if isinstance(value, dict) else value for key, value in table.items()}
    )


# ---------------------------------------------------------------------------
# Federal ordinary income brackets
# ---------------------------------------------------------------------------
FEDERAL_BRACKETS: Mapping[int, Mapping[FilingStatus, BracketTable]] = _frozen({
    2024: {
        FilingStatus.SINGLE: build_brackets(
            ("11600", "0.10"),
            ("47150", "0.12"),
            ("100525", "0.22"),
            ("191950", "0.24"),
            ("243725", "0.32"),
            ("609350", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MFJ: build_brackets(
            ("23200", "0.10"),
            ("94300", "0.12"),
            ("201050", "0.22"),
            ("383900", "0.24"),
            ("487450", "0.32"),
            ("731200", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MFS: build_brackets(
            ("11600", "0.10"),
            ("47150", "0.12"),
            ("100525", "0.22"),
            ("191950", "0.24"),
            ("243725", "0.32"),
            ("365600", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HOH: build_brackets(
            ("16550", "0.10"),
            ("63100", "0.12"),
            ("100500", "0.22"),
            ("191950", "0.24"),
            ("243700", "0.32"),
            ("609350", "0.35"),
            (None, "0.37"),
        ),
    },
    2025: {
        FilingStatus.SINGLE: build_brackets(
            ("11925", "0.10"),
            ("48475", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250525", "0.32"),
            ("626350", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MFJ: build_brackets(
            ("23850", "0.10"),
            ("96950", "0.12"),
            ("206700", "0.22"),
            ("394600", "0.24"),
            ("501050", "0.32"),
            ("751600", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.MFS: build_brackets(
            ("11925", "0.10"),
            ("48475", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250525", "0.32"),
            ("375800", "0.35"),
            (None, "0.37"),
        ),
        FilingStatus.HOH: build_brackets(
            ("17000", "0.10"),
            ("64850", "0.12"),
            ("103350", "0.22"),
            ("197300", "0.24"),
            ("250500", "0.32"),
            ("626350", "0.35"),
            (None, "0.37"),
        ),
    },
})

SUPPORTED_TAX_YEARS: tuple[int, ...] = tuple(sorted(FEDERAL_BRACKETS))

# ---------------------------------------------------------------------------
# Federal LTCG / qualified dividend brackets (0% / 15% / 20%)
# Thresholds are on total taxable income, per IRC Section 1(h).
# ---------------------------------------------------------------------------
FEDERAL_LTCG_BRACKETS: Mapping[int, Mapping[FilingStatus, BracketTable]] = _frozen({
    2024: {
        FilingStatus.SINGLE: build_brackets(("47025", "0.00"), ("518900", "0.15"), (None, "0.20")),
        FilingStatus.MFJ: build_brackets(("94050", "0.00"), ("583750", "0.15"), (None, "0.20")),
        FilingStatus.MFS: build_brackets(("47025", "0.00"), ("291850", "0.15"), (None, "0.20")),
        FilingStatus.HOH: build_brackets(("63000", "0.00"), ("551350", "0.15"), (None, "0.20")),
    },
    2025: {
        FilingStatus.SINGLE: build_brackets(("48350", "0.00"), ("533400", "0.15"), (None, "0.20")),
        FilingStatus.MFJ: build_brackets(("96700", "0.00"), ("600050", "0.15"), (None, "0.20")),
        FilingStatus.MFS: build_brackets(("48350", "0.00"), ("300025", "0.15"), (None, "0.20")),
        FilingStatus.HOH: build_brackets(("64750", "0.00"), ("566700", "0.15"), (None, "0.20")),
    },
})

# ---------------------------------------------------------------------------
# Federal standard deduction
# ---------------------------------------------------------------------------
FEDERAL_STANDARD_DEDUCTION: Mapping[int, Mapping[FilingStatus, Decimal]] = _frozen({
    2024: {
        FilingStatus.SINGLE: Decimal("14600"),
        FilingStatus.MFJ: Decimal("29200"),
        FilingStatus.MFS: Decimal("14600"),
        FilingStatus.HOH: Decimal("21900"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("15000"),
        FilingStatus.MFJ: Decimal("30000"),
        FilingStatus.MFS: Decimal("15000"),
        FilingStatus.HOH: Decimal("22500"),
    },
})

# ---------------------------------------------------------------------------
# NIIT (IRC Section 1411). Thresholds are statutory, not inflation-adjusted.
# ---------------------------------------------------------------------------
NIIT_RATE = Decimal("0.038")
NIIT_THRESHOLD: Mapping[FilingStatus, Decimal] = _frozen({
    FilingStatus.SINGLE: Decimal("200000"),
    FilingStatus.MFJ: Decimal("250000"),
    FilingStatus.MFS: Decimal("125000"),
    FilingStatus.HOH: Decimal("200000"),
})

# ---------------------------------------------------------------------------
# Self-employment tax (Schedule SE)
# ---------------------------------------------------------------------------
SE_NET_EARNINGS_FACTOR = Decimal("0.9235")
SE_SOCIAL_SECURITY_RATE = Decimal("0.124")
SE_MEDICARE_RATE = Decimal("0.029")
SE_TAX_RATE = SE_SOCIAL_SECURITY_RATE + SE_MEDICARE_RATE  # 15.3%
SE_SOCIAL_SECURITY_WAGE_BASE: Mapping[int, Decimal] = _frozen({
    2024: Decimal("168600"),
    2025: Decimal("176100"),
})

# Additional Medicare Tax (IRC Section 1401(b)(2)), statutory thresholds
ADDITIONAL_MEDICARE_TAX_RATE = Decimal("0.009")
ADDITIONAL_MEDICARE_TAX_THRESHOLD: Mapping[FilingStatus, Decimal] = _frozen({
    FilingStatus.SINGLE: Decimal("200000"),
    FilingStatus.MFJ: Decimal("250000"),
    FilingStatus.MFS: Decimal("125000"),
    FilingStatus.HOH: Decimal("200000"),
})

# ---------------------------------------------------------------------------
# Capital loss limitation per IRC Section 1211(b)
# ---------------------------------------------------------------------------
CAPITAL_LOSS_LIMIT: Mapping[FilingStatus, Decimal] = _frozen({
    FilingStatus.SINGLE: Decimal("3000"),
    FilingStatus.MFJ: Decimal("3000"),
    FilingStatus.MFS: Decimal("1500"),
    FilingStatus.HOH: Decimal("3000"),
})

# ---------------------------------------------------------------------------
# AMT (Form 6251): exemption, phase-out start, 26%/28% breakpoint.
# MFS has its own breakpoint rather than half of the joint one.
# ---------------------------------------------------------------------------
AMT_LOW_RATE = Decimal("0.26")
AMT_HIGH_RATE = Decimal("0.28")
AMT_PHASEOUT_RATE = Decimal("0.25")

AMT_EXEMPTION: Mapping[int, Mapping[FilingStatus, Decimal]] = _frozen({
    2024: {
        FilingStatus.SINGLE: Decimal("85700"),
        FilingStatus.MFJ: Decimal("133300"),
        FilingStatus.MFS: Decimal("66650"),
        FilingStatus.HOH: Decimal("85700"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("88100"),
        FilingStatus.MFJ: Decimal("137000"),
        FilingStatus.MFS: Decimal("68500"),
        FilingStatus.HOH: Decimal("88100"),
    },
})

AMT_PHASEOUT_START: Mapping[int, Mapping[FilingStatus, Decimal]] = _frozen({
    2024: {
        FilingStatus.SINGLE: Decimal("609350"),
        FilingStatus.MFJ: Decimal("1218700"),
        FilingStatus.MFS: Decimal("609350"),
        FilingStatus.HOH: Decimal("609350"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("609350"),
        FilingStatus.MFJ: Decimal("1218700"),
        FilingStatus.MFS: Decimal("609350"),
        FilingStatus.HOH: Decimal("609350"),
    },
})

AMT_28_PERCENT_THRESHOLD: Mapping[int, Mapping[FilingStatus, Decimal]] = _frozen({
    2024: {
        FilingStatus.SINGLE: Decimal("232600"),
        FilingStatus.MFJ: Decimal("232600"),
        FilingStatus.MFS: Decimal("116300"),
        FilingStatus.HOH: Decimal("232600"),
    },
    2025: {
        FilingStatus.SINGLE: Decimal("248300"),
        FilingStatus.MFJ: Decimal("248300"),
        FilingStatus.MFS: Decimal("124150"),
        FilingStatus.HOH: Decimal("248300"),
    },
})

# ---------------------------------------------------------------------------
# Estimated tax safe harbor (IRC Section 6654(d))
# ---------------------------------------------------------------------------
SAFE_HARBOR_CURRENT_YEAR_RATE = Decimal("0.90")
SAFE_HARBOR_PRIOR_YEAR_RATE = Decimal("1.00")
SAFE_HARBOR_HIGH_INCOME_PRIOR_YEAR_RATE = Decimal("1.10")
SAFE_HARBOR_HIGH_INCOME_AGI: Mapping[FilingStatus, Decimal] = _frozen({
    FilingStatus.SINGLE: Decimal("150000"),
    FilingStatus.MFJ: Decimal("150000"),
    FilingStatus.MFS: Decimal("75000"),
    FilingStatus.HOH: Decimal("150000"),
})


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def resolve_tax_year(tax_year: int) -> int:
    """Map a requested year to the nearest year with published tables.

    Picks the latest supported year not after ``tax_year``; requests older
    than every table fall forward to the earliest one.
    """
    if tax_year in SUPPORTED_TAX_YEARS:
        return tax_year
    earlier = [year for year in SUPPORTED_TAX_YEARS if year < tax_year]
    resolved = earlier[-1] if earlier else SUPPORTED_TAX_YEARS[0]
    logger.debug("No tables for tax year %d; using %d", tax_year, resolved)
    return resolved


def get_ordinary_brackets(tax_year: int, filing_status: FilingStatus) -> BracketTable:
    return FEDERAL_BRACKETS[resolve_tax_year(tax_year)][filing_status]


def get_ltcg_brackets(tax_year: int, filing_status: FilingStatus) -> BracketTable:
    return FEDERAL_LTCG_BRACKETS[resolve_tax_year(tax_year)][filing_status]


def get_standard_deduction(tax_year: int, filing_status: FilingStatus) -> Decimal:
    return FEDERAL_STANDARD_DEDUCTION[resolve_tax_year(tax_year)][filing_status]


def get_social_security_wage_base(tax_year: int) -> Decimal:
    return SE_SOCIAL_SECURITY_WAGE_BASE[resolve_tax_year(tax_year)]


def get_capital_loss_limit(filing_status: FilingStatus | None) -> Decimal:
    if filing_status is None:
        return CAPITAL_LOSS_LIMIT[FilingStatus.SINGLE]
    return CAPITAL_LOSS_LIMIT[filing_status]


def get_amt_parameters(
    tax_year: int, filing_status: FilingStatus
) -> tuple[Decimal, Decimal, Decimal]:
    """Return (exemption, phaseout_start, 28% threshold) for a year and status."""
    year = resolve_tax_year(tax_year)
    return (
        AMT_EXEMPTION[year][filing_status],
        AMT_PHASEOUT_START[year][filing_status],
        AMT_28_PERCENT_THRESHOLD[year][filing_status],
    )
