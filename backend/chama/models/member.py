"""
Member model.

A member is a tracked individual of the group. Members own their yearly
contribution records; deleting a member removes them too.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from chama.models.base import BaseModel, utcnow

if TYPE_CHECKING:
    from chama.models.contribution import Contribution


class Member(BaseModel):
    """Group member with contact details."""
    __tablename__ = "members"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    join_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    contributions: Mapped[list["Contribution"]] = relationship(
        "Contribution",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Member {self.name}>"
