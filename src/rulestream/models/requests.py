"""Request DTOs for the evaluation tools."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator


class ScenarioRequest(BaseModel):
    """A customer scenario to evaluate rules against."""

    held_codes: list[str] = Field(
        default_factory=list,
        description="Product codes the customer currently holds",
    )
    renewal_codes: list[str] = Field(
        default_factory=list,
        description="Product codes up for renewal",
    )
    as_of: date | None = Field(
        default=None,
        description="Evaluation date (YYYY-MM-DD); defaults to today",
    )

    @field_validator("held_codes", "renewal_codes")
    @classmethod
    def _drop_blank(cls, value: list[str]) -> list[str]:
        return [code.strip() for code in value if code and code.strip()]

    def effective_date(self) -> date:
        return self.as_of or date.today()
