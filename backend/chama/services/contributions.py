"""
Contribution service.

Business logic for yearly contribution records:
- Seeding the current-year record for a new member
- Upsert-by-month (find-or-create the yearly record, then set one month)
- Year/member queries with their ordering contracts
- Overwriting a record by id
- Deleting a member together with all of its records
"""
import logging
from typing import Any, Optional, Sequence

from sqlalchemy import select, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chama.core.exceptions import ConflictError, NotFoundError
from chama.core.periods import MONTHS, current_year, normalize_month, parse_year
from chama.models.contribution import Contribution, zeroed_contribution_values
from chama.models.member import Member

logger = logging.getLogger(__name__)

_INSERT_BUILDERS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _with_member(query):
    return query.options(selectinload(Contribution.member))


async def get_member_or_404(db: AsyncSession, member_id: str) -> Member:
    """Get a member or raise NotFoundError."""
    result = await db.execute(select(Member).where(Member.id == member_id))
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFoundError("Member not found")
    return member


async def get_contribution(db: AsyncSession, contribution_id: str) -> Contribution:
    """Get a contribution with its member loaded, or raise NotFoundError."""
    result = await db.execute(
        _with_member(select(Contribution))
        .where(Contribution.id == contribution_id)
        .execution_options(populate_existing=True)
    )
    contribution = result.scalar_one_or_none()
    if contribution is None:
        raise NotFoundError("Contribution not found")
    return contribution


async def find_contribution(
    db: AsyncSession,
    member_id: str,
    year: int,
    for_update: bool = False
) -> Optional[Contribution]:
    """Find the record for (member, year), if any."""
    query = _with_member(select(Contribution)).where(
        Contribution.member_id == member_id,
        Contribution.year == year
    )
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def create_contribution(
    db: AsyncSession,
    member: Member,
    year: Optional[int] = None
) -> Contribution:
    """Create an all-zero record for ``member``; used when a member is created."""
    contribution = Contribution(
        member_id=member.id,
        year=year or current_year(),
        **{month: 0 for month in MONTHS}
    )
    db.add(contribution)
    await db.flush()
    return contribution


async def ensure_contribution(db: AsyncSession, member_id: str, year: int) -> None:
    """
    Make sure a record for (member, year) exists.

    Uses INSERT ... ON CONFLICT DO NOTHING on the (member_id, year) unique
    constraint, so concurrent callers cannot create two records.
    """
    values = zeroed_contribution_values(member_id, year)
    dialect = db.get_bind().dialect.name
    build_insert = _INSERT_BUILDERS.get(dialect)

    if build_insert is None:
        raise NotImplementedError(f"Unsupported database dialect: {dialect}")

    stmt = build_insert(Contribution).values(**values).on_conflict_do_nothing(
        index_elements=["member_id", "year"]
    )
    await db.execute(stmt)


async def upsert_month_contribution(
    db: AsyncSession,
    member_id: str,
    month: str,
    amount: Optional[float] = None,
    year: Any = None
) -> Contribution:
    """
    Set one month's amount on the member's record for ``year``.

    The record is created (all months zero) if the member has none for that
    year. The amount replaces the stored month value; an omitted amount is 0.
    Raises InvalidInputError for a bad month or year and NotFoundError when a
    new record is needed for a member that does not exist.
    """
    field = normalize_month(month)
    contribution_year = parse_year(year)

    contribution = await find_contribution(db, member_id, contribution_year)
    if contribution is None:
        await get_member_or_404(db, member_id)
        await ensure_contribution(db, member_id, contribution_year)
        logger.info(f"Created {contribution_year} contribution record for member {member_id}")

    contribution = await find_contribution(db, member_id, contribution_year, for_update=True)
    if contribution is None:
        raise NotFoundError("Contribution not found")

    setattr(contribution, field, amount if amount is not None else 0)
    contribution.recompute_total()
    await db.flush()

    return await get_contribution(db, contribution.id)


async def update_contribution(
    db: AsyncSession,
    contribution_id: str,
    changes: dict[str, Any]
) -> Contribution:
    """
    Overwrite the provided fields of a record by id and recompute its total.

    Only ``year`` and the twelve month fields are writable.
    """
    contribution = await get_contribution(db, contribution_id)

    if changes.get("year") is not None:
        year = parse_year(changes["year"], default=contribution.year)
        if year != contribution.year:
            existing = await find_contribution(db, contribution.member_id, year)
            if existing is not None:
                raise ConflictError("A contribution record already exists for this member and year")
            contribution.year = year

    for month in MONTHS:
        if changes.get(month) is not None:
            setattr(contribution, month, changes[month])

    contribution.recompute_total()
    await db.flush()

    return await get_contribution(db, contribution_id)


async def list_contributions_for_year(db: AsyncSession, year: int) -> Sequence[Contribution]:
    """All records for ``year`` in creation order."""
    result = await db.execute(
        _with_member(select(Contribution))
        .where(Contribution.year == year)
        .order_by(Contribution.created.asc(), Contribution.id.asc())
    )
    return result.scalars().all()


async def list_contributions_by_member_name(db: AsyncSession, year: int) -> Sequence[Contribution]:
    """All records for ``year`` ordered by member name ascending."""
    result = await db.execute(
        _with_member(select(Contribution))
        .join(Member, Contribution.member_id == Member.id)
        .where(Contribution.year == year)
        .order_by(Member.name.asc(), Contribution.id.asc())
    )
    return result.scalars().all()


async def list_member_contributions(
    db: AsyncSession,
    member_id: str,
    year: Optional[int] = None
) -> Sequence[Contribution]:
    """All records of one member, newest year first."""
    query = _with_member(select(Contribution)).where(Contribution.member_id == member_id)
    if year is not None:
        query = query.where(Contribution.year == year)
    result = await db.execute(query.order_by(Contribution.year.desc()))
    return result.scalars().all()


async def delete_member_with_contributions(db: AsyncSession, member: Member) -> int:
    """
    Delete all of the member's records, then the member.

    Both deletes run in the caller's transaction, so either both happen or
    neither does. Returns the number of contribution records removed.
    """
    result = await db.execute(
        delete(Contribution).where(Contribution.member_id == member.id)
    )
    await db.execute(delete(Member).where(Member.id == member.id))
    removed = result.rowcount or 0
    logger.info(f"Deleted member {member.id} and {removed} contribution record(s)")
    return removed
