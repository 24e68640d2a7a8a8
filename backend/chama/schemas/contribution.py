"""
Pydantic schemas for Contribution endpoints.
"""
from typing import Optional, Union
from datetime import datetime
from pydantic import BaseModel, Field

from chama.schemas.member import MemberSummary


class ContributionUpdate(BaseModel):
    """
    Overwrite fields of a contribution record by id.

    ``total`` and the owning member cannot be written; unknown keys are ignored.
    """
    year: Optional[Union[int, str]] = None
    january: Optional[float] = Field(None, allow_inf_nan=False)
    february: Optional[float] = Field(None, allow_inf_nan=False)
    march: Optional[float] = Field(None, allow_inf_nan=False)
    april: Optional[float] = Field(None, allow_inf_nan=False)
    may: Optional[float] = Field(None, allow_inf_nan=False)
    june: Optional[float] = Field(None, allow_inf_nan=False)
    july: Optional[float] = Field(None, allow_inf_nan=False)
    august: Optional[float] = Field(None, allow_inf_nan=False)
    september: Optional[float] = Field(None, allow_inf_nan=False)
    october: Optional[float] = Field(None, allow_inf_nan=False)
    november: Optional[float] = Field(None, allow_inf_nan=False)
    december: Optional[float] = Field(None, allow_inf_nan=False)


class MonthContributionUpdate(BaseModel):
    """Set one month's amount; year defaults to the current year."""
    amount: Optional[float] = Field(None, allow_inf_nan=False)
    year: Optional[Union[int, str]] = None


class ContributionResponse(BaseModel):
    """Contribution record with its member summary."""
    id: str
    member_id: str
    member: Optional[MemberSummary] = None
    year: int
    january: float = 0
    february: float = 0
    march: float = 0
    april: float = 0
    may: float = 0
    june: float = 0
    july: float = 0
    august: float = 0
    september: float = 0
    october: float = 0
    november: float = 0
    december: float = 0
    total: float = 0
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True
