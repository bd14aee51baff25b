"""Analysis schemas - strict JSON structure for model output validation.

A reply that does not validate is a failed analysis; nothing is guessed.
"""

from typing import Any
from pydantic import Field, field_validator

from catchbook.schemas.records import CamelModel, as_text


class FishAnalysis(CamelModel):
    """Species and estimated weight read from a catch photo."""
    fish_species: str
    quantity: str  # e.g. "10.5kg"
    confidence: float = Field(ge=0.0, le=1.0)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, v: Any) -> Any:
        return as_text(v)


class ReceiptAnalysis(CamelModel):
    """Fields read from a receipt photo."""
    date: str  # YYYY-MM-DD as printed; not validated as a date
    amount: str  # digits only, no separators
    vendor: str
    category: str  # 燃料費 / 資材費 / 修理費 / その他
    confidence: float = Field(ge=0.0, le=1.0)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_text(cls, v: Any) -> Any:
        return as_text(v)
