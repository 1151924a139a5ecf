"""Tax bracket record."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaxBracket(BaseModel):
    """One slice of a progressive schedule: income in [min, max) taxed at rate.

    ``max`` is None for the unbounded top bracket.
    """

    model_config = ConfigDict(frozen=True)

    min: Decimal = Field(ge=0)
    max: Decimal | None = None
    rate: Decimal = Field(ge=0, le=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "TaxBracket":
        if self.max is not None and self.max <= self.min:
            raise ValueError(f"Bracket max {self.max} must exceed min {self.min}")
        return self
