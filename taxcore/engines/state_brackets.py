"""State income tax regimes (2025).

Each supported jurisdiction maps to exactly one regime variant:
no income tax, flat rate, flat rate plus surtax, or progressive brackets.
Codes missing from ``STATE_REGIMES`` are unsupported.

Joint tables are defined independently of the single tables; they roughly
double the single thresholds but are not a scalar multiple.

Sources: CA FTB Publication 1001, NY IT-201 instructions, NJ-1040 instructions,
MA Form 1 (4% surtax, Art. XLIV amendment), IL/PA/CO/AZ/NC flat rates.
"""

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import Literal

from pydantic import BaseModel, ConfigDict

from taxcore.engines.brackets import BracketTable, build_brackets
from taxcore.models.enums import FilingStatus


class NoIncomeTax(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["no_tax"] = "no_tax"


class FlatTax(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["flat"] = "flat"
    rate: Decimal


class FlatSurtaxTax(BaseModel):
    """Base rate on all income plus a surtax on income above a threshold."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["flat_surtax"] = "flat_surtax"
    base_rate: Decimal
    surtax_rate: Decimal
    surtax_threshold: Decimal
    surtax_note: str


class ProgressiveTax(BaseModel):
    """Progressive brackets with separate single and joint tables.

    When ``top_addon_note`` is set, the top bracket of each table already
    includes an add-on rate; the note is reported when income reaches it.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["progressive"] = "progressive"
    single: BracketTable
    joint: BracketTable
    top_addon_note: str | None = None

    def table_for(self, filing_status: FilingStatus) -> BracketTable:
        return self.joint if filing_status == FilingStatus.MFJ else self.single


StateRegime = NoIncomeTax | FlatTax | FlatSurtaxTax | ProgressiveTax


# ---------------------------------------------------------------------------
# California (R&TC Section 17041). Top bracket includes the 1% Mental Health
# Services Tax (R&TC Section 17043(a)).
# ---------------------------------------------------------------------------
CA_SINGLE = build_brackets(
    ("10412", "0.01"),
    ("24684", "0.02"),
    ("38959", "0.04"),
    ("54081", "0.06"),
    ("68350", "0.08"),
    ("349137", "0.093"),
    ("418961", "0.103"),
    ("698271", "0.113"),
    ("1000000", "0.123"),
    (None, "0.133"),
)

CA_MFJ = build_brackets(
    ("20824", "0.01"),
    ("49368", "0.02"),
    ("77918", "0.04"),
    ("108162", "0.06"),
    ("136700", "0.08"),
    ("698274", "0.093"),
    ("837922", "0.103"),
    ("1396542", "0.113"),
    ("2000000", "0.123"),
    (None, "0.133"),
)

# ---------------------------------------------------------------------------
# New York
# ---------------------------------------------------------------------------
NY_SINGLE = build_brackets(
    ("8500", "0.04"),
    ("11700", "0.045"),
    ("13900", "0.0525"),
    ("80650", "0.0585"),
    ("215400", "0.0625"),
    ("1077550", "0.0685"),
    ("5000000", "0.0965"),
    ("25000000", "0.103"),
    (None, "0.109"),
)

NY_MFJ = build_brackets(
    ("17150", "0.04"),
    ("23600", "0.045"),
    ("27900", "0.0525"),
    ("161550", "0.0585"),
    ("323200", "0.0625"),
    ("2155350", "0.0685"),
    ("5000000", "0.0965"),
    ("25000000", "0.103"),
    (None, "0.109"),
)

# ---------------------------------------------------------------------------
# New Jersey
# ---------------------------------------------------------------------------
NJ_SINGLE = build_brackets(
    ("20000", "0.014"),
    ("35000", "0.0175"),
    ("40000", "0.035"),
    ("75000", "0.05525"),
    ("500000", "0.0637"),
    ("1000000", "0.0897"),
    (None, "0.1075"),
)

NJ_MFJ = build_brackets(
    ("20000", "0.014"),
    ("50000", "0.0175"),
    ("70000", "0.035"),
    ("80000", "0.05525"),
    ("150000", "0.0637"),
    ("500000", "0.0637"),
    ("1000000", "0.0897"),
    (None, "0.1075"),
)

STATE_REGIMES: Mapping[str, StateRegime] = (
    MappingProxyType({
        "TX": NoIncomeTax(),
        "FL": NoIncomeTax(),
        "WA": NoIncomeTax(),
        "NV": NoIncomeTax(),
        "IL": FlatTax(rate=Decimal("0.0495")),
        "PA": FlatTax(rate=Decimal("0.0307")),
        "CO": FlatTax(rate=Decimal("0.044")),
        "AZ": FlatTax(rate=Decimal("0.025")),
        "NC": FlatTax(rate=Decimal("0.045")),
        "MA": FlatSurtaxTax(
            base_rate=Decimal("0.05"),
            surtax_rate=Decimal("0.04"),
            surtax_threshold=Decimal("1000000"),
            surtax_note="Includes 4% millionaire surtax on income over $1,000,000",
        ),
        "CA": ProgressiveTax(
            single=CA_SINGLE,
            joint=CA_MFJ,
            top_addon_note="Includes Mental Health Services Tax (1% over $1M)",
        ),
        "NY": ProgressiveTax(single=NY_SINGLE, joint=NY_MFJ),
        "NJ": ProgressiveTax(single=NJ_SINGLE, joint=NJ_MFJ),
    })
)


def get_state_regime(state_code: str) -> StateRegime | None:
    """Look up a jurisdiction's regime; None when unsupported."""
    return STATE_REGIMES.get(state_code.strip().upper())
