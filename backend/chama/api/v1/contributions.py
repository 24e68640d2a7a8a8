"""
Contribution endpoints.

Every response embeds the owning member's summary (name, phone, email).
Year parameters accept 2000..2100; month names are case-insensitive.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from chama.core.periods import parse_year
from chama.db.base import get_db
from chama.models.contribution import Contribution
from chama.schemas.contribution import (
    ContributionResponse,
    ContributionUpdate,
    MonthContributionUpdate,
)
from chama.services import contributions as service

router = APIRouter()


def contribution_to_response(contribution: Contribution) -> ContributionResponse:
    """Convert Contribution model to ContributionResponse schema."""
    return ContributionResponse.model_validate(contribution)


@router.get("/contributions", response_model=list[ContributionResponse])
async def list_contributions(
    year: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """List all contribution records for a year (default: current year)."""
    contribution_year = parse_year(year)
    records = await service.list_contributions_for_year(db, contribution_year)
    return [contribution_to_response(c) for c in records]


@router.get("/contributions/member/{member_id}", response_model=list[ContributionResponse])
async def list_member_contributions(
    member_id: str,
    year: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """List a member's records, newest year first, optionally for one year."""
    contribution_year = parse_year(year) if year else None
    records = await service.list_member_contributions(db, member_id, contribution_year)
    return [contribution_to_response(c) for c in records]


@router.get("/contributions/{year}", response_model=list[ContributionResponse])
async def list_contributions_by_year(year: str, db: AsyncSession = Depends(get_db)):
    """List all records for the year in the path, ordered by member name."""
    contribution_year = parse_year(year)
    records = await service.list_contributions_by_member_name(db, contribution_year)
    return [contribution_to_response(c) for c in records]


@router.put(
    "/contributions/member/{member_id}/month/{month}",
    response_model=ContributionResponse
)
async def update_month_contribution(
    member_id: str,
    month: str,
    data: MonthContributionUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Set one month's amount for a member.

    Creates the member's record for the year first if it does not exist.
    """
    contribution = await service.upsert_month_contribution(
        db,
        member_id=member_id,
        month=month,
        amount=data.amount,
        year=data.year,
    )
    return contribution_to_response(contribution)


@router.put("/contributions/{contribution_id}", response_model=ContributionResponse)
async def update_contribution(
    contribution_id: str,
    data: ContributionUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Overwrite the provided fields of a record and recompute its total."""
    contribution = await service.update_contribution(
        db, contribution_id, data.model_dump(exclude_unset=True)
    )
    return contribution_to_response(contribution)
