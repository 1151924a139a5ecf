"""Enumerations for taxcore."""

from enum import StrEnum


class FilingStatus(StrEnum):
    SINGLE = "single"
    MFJ = "married_filing_jointly"
    MFS = "married_filing_separately"
    HOH = "head_of_household"


class HoldingPeriod(StrEnum):
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"


class LotSelectionMethod(StrEnum):
    FIFO = "fifo"
    LIFO = "lifo"
    SPECIFIC_ID = "specific_id"


class DeductionType(StrEnum):
    STANDARD = "standard"
    ITEMIZED = "itemized"


class StateTaxRegime(StrEnum):
    NO_TAX = "no_tax"
    FLAT = "flat"
    FLAT_SURTAX = "flat_surtax"
    PROGRESSIVE = "progressive"
    UNSUPPORTED = "unsupported"


class QuarterStatus(StrEnum):
    PAID = "paid"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"


class UnderpaymentRisk(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_FILING_STATUS_ALIASES: dict[str, FilingStatus] = {
    "SINGLE": FilingStatus.SINGLE,
    "S": FilingStatus.SINGLE,
    "MFJ": FilingStatus.MFJ,
    "JOINT": FilingStatus.MFJ,
    "MARRIED_FILING_JOINTLY": FilingStatus.MFJ,
    "MFS": FilingStatus.MFS,
    "MARRIED_FILING_SEPARATELY": FilingStatus.MFS,
    "HOH": FilingStatus.HOH,
    "HEAD_OF_HOUSEHOLD": FilingStatus.HOH,
}


def parse_filing_status(value: str | FilingStatus | None) -> tuple[FilingStatus, str | None]:
    """Resolve a caller-supplied filing status.

    Accepts enum values ("married_filing_jointly"), member names and short
    aliases ("MFJ", "HOH") in any case. Unrecognized values fall back to
    SINGLE and return an advisory note instead of raising.

    Returns:
        (filing_status, note) where note is None when the value was recognized.
    """
    if isinstance(value, FilingStatus):
        return value, None
    key = (value or "").strip().upper().replace("-", "_").replace(" ", "_")
    status = _FILING_STATUS_ALIASES.get(key)
    if status is not None:
        return status, None
    return FilingStatus.SINGLE, (
        f"Unrecognized filing status '{value}'; defaulted to {FilingStatus.SINGLE.value}"
    )
