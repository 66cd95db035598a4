"""Mini README: SQLAlchemy table mappings for the sql backend.

Structure:
    * Base - declarative base shared by the mapped tables.
    * CollectionRecord - row in ``collections``.
    * ContributorRecord - row in ``contributors``; cascades with its collection.

The schema mirrors the Postgres tables the tracker has always used: an
integer surrogate key per row and an opaque ``contributor_id`` that callers
see. ``payment_status`` is stored for query convenience only; readers derive
the status from the two amount columns.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all fund tracker tables."""


class CollectionRecord(Base):
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    target_amount = Column(Float, nullable=True)
    # Naive UTC; the store attaches the timezone on the way out.
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False)

    contributors = relationship(
        "ContributorRecord",
        back_populates="collection",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<CollectionRecord(id={self.id}, name={self.name!r})>"


class ContributorRecord(Base):
    __tablename__ = "contributors"
    __table_args__ = (UniqueConstraint("collection_id", "contributor_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    collection_id = Column(
        Integer,
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contributor_id = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    paid_amount = Column(Float, nullable=False, default=0.0)
    payment_status = Column(String(20), nullable=False, default="pending")
    added_at = Column(DateTime, nullable=False)

    collection = relationship("CollectionRecord", back_populates="contributors")

    def __repr__(self) -> str:
        return (
            f"<ContributorRecord(id={self.id}, contributor_id={self.contributor_id!r},"
            f" paid={self.paid_amount}/{self.amount})>"
        )
