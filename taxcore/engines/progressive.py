"""Progressive bracket engine shared by the federal and state calculators."""

from collections.abc import Sequence
from decimal import Decimal

from taxcore.engines.money import (
    ZERO,
    apply_rate,
    clamp_min,
    round_to_whole_dollar,
    subtract,
    sum_all,
    to_decimal,
)
from taxcore.models.brackets import TaxBracket


def bracket_tax(income: Decimal | int | str, brackets: Sequence[TaxBracket]) -> Decimal:
    """Apply progressive brackets to income, returning cent-exact tax.

    Each bracket taxes the slice of income between its min and max; the walk
    stops as soon as income is exhausted. Negative income is treated as zero.
    """
    remaining = clamp_min(to_decimal(income), ZERO)
    bracket_taxes: list[Decimal] = []

    for bracket in brackets:
        if remaining <= ZERO:
            break
        width = subtract(bracket.max, bracket.min) if bracket.max is not None else remaining
        taxable_in_bracket = min(remaining, width)
        bracket_taxes.append(apply_rate(taxable_in_bracket, bracket.rate))
        remaining = subtract(remaining, taxable_in_bracket)

    return sum_all(bracket_taxes)


def apply_brackets(income: Decimal | int | str, brackets: Sequence[TaxBracket]) -> Decimal:
    """Progressive tax on income, rounded to whole dollars."""
    return round_to_whole_dollar(bracket_tax(income, brackets))


def marginal_rate(income: Decimal | int | str, brackets: Sequence[TaxBracket]) -> Decimal:
    """Rate of the highest bracket whose lower bound is below ``income``."""
    income = to_decimal(income)
    for bracket in reversed(brackets):
        if income > bracket.min:
            return bracket.rate
    return brackets[0].rate
