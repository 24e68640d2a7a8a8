"""
Contribution model.

One record per member and year with twelve monthly amounts. ``total`` is
derived and is recomputed every time a row is inserted or updated.
"""
from typing import TYPE_CHECKING
from sqlalchemy import String, Integer, Float, ForeignKey, UniqueConstraint, event
from sqlalchemy.orm import Mapped, mapped_column, relationship
from chama.core.periods import MONTHS, current_year
from chama.models.base import BaseModel

if TYPE_CHECKING:
    from chama.models.member import Member


class Contribution(BaseModel):
    """A member's monthly contributions for one calendar year."""
    __tablename__ = "contributions"
    __table_args__ = (
        UniqueConstraint("member_id", "year", name="uq_contributions_member_year"),
    )

    member_id: Mapped[str] = mapped_column(
        String(15),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False, default=current_year, index=True)

    january: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    february: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    march: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    april: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    may: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    june: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    july: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    august: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    september: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    october: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    november: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    december: Mapped[float] = mapped_column(Float, default=0, nullable=False)

    total: Mapped[float] = mapped_column(Float, default=0, nullable=False)

    member: Mapped["Member"] = relationship(
        "Member",
        foreign_keys=[member_id],
        back_populates="contributions"
    )

    def month_amounts(self) -> dict[str, float]:
        return {month: getattr(self, month) or 0 for month in MONTHS}

    def recompute_total(self) -> float:
        self.total = sum(self.month_amounts().values())
        return self.total

    def __repr__(self) -> str:
        return f"<Contribution {self.member_id} {self.year} total={self.total}>"


def zeroed_contribution_values(member_id: str, year: int) -> dict:
    """Column values for a fresh record, used by Core inserts that skip ORM hooks."""
    values = {month: 0 for month in MONTHS}
    values.update(member_id=member_id, year=year, total=0)
    return values


@event.listens_for(Contribution, "before_insert")
@event.listens_for(Contribution, "before_update")
def _recompute_total_before_write(mapper, connection, target: Contribution) -> None:
    target.recompute_total()
