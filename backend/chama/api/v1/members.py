"""
Member endpoints.

Creating a member also creates its contribution record for the current
year; deleting a member removes all of its contribution records.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from chama.db.base import get_db
from chama.models.member import Member
from chama.schemas.common import DeletedResponse
from chama.schemas.member import MemberCreate, MemberUpdate, MemberResponse
from chama.services.contributions import (
    create_contribution,
    delete_member_with_contributions,
    get_member_or_404,
)

logger = logging.getLogger(__name__)

router = APIRouter()

REQUIRED_MEMBER_FIELDS = ("name", "is_active")


def member_to_response(member: Member) -> MemberResponse:
    """Convert Member model to MemberResponse schema."""
    return MemberResponse(
        id=member.id,
        name=member.name,
        phone=member.phone,
        email=member.email,
        join_date=member.join_date,
        is_active=member.is_active,
        created=member.created,
        updated=member.updated,
    )


@router.get("/members", response_model=list[MemberResponse])
async def list_members(db: AsyncSession = Depends(get_db)):
    """List all members ordered by name."""
    result = await db.execute(select(Member).order_by(Member.name.asc()))
    return [member_to_response(m) for m in result.scalars().all()]


@router.get("/members/{member_id}", response_model=MemberResponse)
async def get_member(member_id: str, db: AsyncSession = Depends(get_db)):
    """Get a member by ID."""
    member = await get_member_or_404(db, member_id)
    return member_to_response(member)


@router.post("/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(member_data: MemberCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a new member.

    The current-year contribution record is created in the same transaction.
    """
    member = Member(
        name=member_data.name,
        phone=member_data.phone,
        email=member_data.email,
        is_active=member_data.is_active,
    )
    db.add(member)
    await db.flush()

    await create_contribution(db, member)
    logger.info(f"Created member {member.id} ({member.name})")

    return member_to_response(member)


@router.put("/members/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: str,
    member_data: MemberUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Update the provided fields of a member.

    An explicit null clears ``phone`` or ``email``; ``name`` and
    ``is_active`` are required columns, so a null for them is ignored.
    """
    member = await get_member_or_404(db, member_id)

    for field, value in member_data.model_dump(exclude_unset=True).items():
        if value is None and field in REQUIRED_MEMBER_FIELDS:
            continue
        setattr(member, field, value)

    await db.flush()
    await db.refresh(member)

    return member_to_response(member)


@router.delete("/members/{member_id}", response_model=DeletedResponse)
async def delete_member(member_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a member and all of its contribution records."""
    member = await get_member_or_404(db, member_id)
    await delete_member_with_contributions(db, member)
    return DeletedResponse(id=member_id)
