"""Mini README: SQLAlchemy-backed collection store.

Structure:
    * SqlCollectionStore - CollectionStore over the ``collections`` and
      ``contributors`` tables.

Each operation runs in one session scope, so a failure anywhere rolls back
both the contributor write and the collection timestamp refresh. Guarded
payment writes are a single ``UPDATE ... WHERE paid_amount = :expected``;
an unmatched row count means another writer got there first. Rows are mapped
back to ledger dataclasses with the status derived from the stored amounts.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..configuration import FundTrackerSettings
from ..ledger import (
    Collection,
    Contributor,
    InvalidAmount,
    NotFound,
    PaymentStatus,
    StaleWrite,
    add_contributor,
    derive_status,
    touch,
    utcnow,
)
from ..logging_utils import get_logger
from .base import CollectionStore, validate_collection_fields, validate_paid_amount
from .database import Database
from .records import CollectionRecord, ContributorRecord

LOGGER = get_logger(__name__)


def _to_db(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db(moment: datetime) -> datetime:
    return moment.replace(tzinfo=timezone.utc) if moment.tzinfo is None else moment


def _to_contributor(record: ContributorRecord) -> Contributor:
    """Map a row, deriving status from its amounts rather than the stored column."""

    amount = float(record.amount)
    paid_amount = float(record.paid_amount)
    if not (amount > 0 and 0 <= paid_amount <= amount):
        raise InvalidAmount(
            f"Stored contributor {record.contributor_id} has paid {paid_amount} against a pledge of {amount}"
        )
    status = derive_status(amount, paid_amount)
    if record.payment_status != status.value:
        LOGGER.warning(
            "Stored status %s for contributor %s disagrees with its amounts; serving %s",
            record.payment_status,
            record.contributor_id,
            status.value,
        )
    return Contributor(
        contributor_id=record.contributor_id,
        name=record.name,
        amount=amount,
        paid_amount=paid_amount,
        payment_status=status,
        added_at=_from_db(record.added_at),
    )


def _to_collection(record: CollectionRecord, contributors: List[Contributor]) -> Collection:
    return Collection(
        collection_id=str(record.id),
        name=record.name,
        description=record.description or "",
        target_amount=float(record.target_amount) if record.target_amount is not None else None,
        contributors=contributors,
        created_at=_from_db(record.created_at),
        updated_at=_from_db(record.updated_at),
    )


class SqlCollectionStore(CollectionStore):
    """Persist collections through SQLAlchemy."""

    backend_name = "sql"

    def __init__(self, database: Database) -> None:
        self.database = database

    @classmethod
    def from_settings(cls, settings: FundTrackerSettings) -> "SqlCollectionStore":
        if settings.database_url is None:
            settings.data_directory.mkdir(parents=True, exist_ok=True)
        return cls(Database(settings.resolved_database_url, echo=settings.sql_echo))

    def initialise(self) -> List[str]:
        return self.database.init_db()

    @staticmethod
    def _require(session: Session, collection_id: str) -> CollectionRecord:
        try:
            primary_key = int(collection_id)
        except (TypeError, ValueError):
            primary_key = None
        record = session.get(CollectionRecord, primary_key) if primary_key is not None else None
        if record is None:
            raise NotFound(f"Collection {collection_id} not found")
        return record

    @staticmethod
    def _contributors(session: Session, record: CollectionRecord) -> List[Contributor]:
        rows = session.execute(
            select(ContributorRecord)
            .where(ContributorRecord.collection_id == record.id)
            .order_by(ContributorRecord.added_at.desc(), ContributorRecord.id.desc())
        ).scalars()
        return [_to_contributor(row) for row in rows]

    def create_collection(
        self,
        name: str,
        description: str = "",
        target_amount: Optional[float] = None,
    ) -> Collection:
        name, description, target_amount = validate_collection_fields(name, description, target_amount)
        now = _to_db(utcnow())
        with self.database.session_scope() as session:
            record = CollectionRecord(
                name=name,
                description=description,
                target_amount=target_amount,
                created_at=now,
                updated_at=now,
            )
            session.add(record)
            session.flush()
            collection = _to_collection(record, [])
        LOGGER.info("Created collection %s (%s)", collection.collection_id, collection.name)
        return collection

    def get_collection(self, collection_id: str) -> Collection:
        with self.database.session_scope() as session:
            record = self._require(session, collection_id)
            return _to_collection(record, self._contributors(session, record))

    def list_collections(self) -> List[Collection]:
        with self.database.session_scope() as session:
            records = session.execute(
                select(CollectionRecord).order_by(
                    CollectionRecord.created_at.desc(), CollectionRecord.id.desc()
                )
            ).scalars().all()
            return [_to_collection(record, self._contributors(session, record)) for record in records]

    def add_contributor(self, collection_id: str, name: str, amount: float) -> Contributor:
        with self.database.session_scope() as session:
            record = self._require(session, collection_id)
            working = _to_collection(record, self._contributors(session, record))
            contributor = add_contributor(working, name, amount)
            session.add(
                ContributorRecord(
                    collection_id=record.id,
                    contributor_id=contributor.contributor_id,
                    name=contributor.name,
                    amount=contributor.amount,
                    paid_amount=contributor.paid_amount,
                    payment_status=contributor.payment_status.value,
                    added_at=_to_db(contributor.added_at),
                )
            )
            record.updated_at = _to_db(working.updated_at)
        LOGGER.info("Added contributor %s to collection %s", contributor.contributor_id, collection_id)
        return contributor

    def update_contributor(
        self,
        collection_id: str,
        contributor_id: str,
        paid_amount: float,
        status: Optional[PaymentStatus | str] = None,
        *,
        expected_paid_amount: Optional[float] = None,
    ) -> Contributor:
        with self.database.session_scope() as session:
            record = self._require(session, collection_id)
            row = session.execute(
                select(ContributorRecord).where(
                    ContributorRecord.collection_id == record.id,
                    ContributorRecord.contributor_id == contributor_id,
                )
            ).scalar_one_or_none()
            if row is None:
                raise NotFound(f"Contributor {contributor_id} not found in collection {collection_id}")

            contributor = _to_contributor(row)
            paid_amount = validate_paid_amount(contributor, paid_amount)
            derived = derive_status(contributor.amount, paid_amount)
            if status is not None and PaymentStatus.from_str(status) is not derived:
                LOGGER.warning(
                    "Ignoring status %s for contributor %s; amounts imply %s",
                    status,
                    contributor_id,
                    derived.value,
                )

            statement = update(ContributorRecord).where(ContributorRecord.id == row.id)
            if expected_paid_amount is not None:
                statement = statement.where(ContributorRecord.paid_amount == expected_paid_amount)
            result = session.execute(
                statement.values(paid_amount=paid_amount, payment_status=derived.value),
                execution_options={"synchronize_session": False},
            )
            if result.rowcount == 0:
                raise StaleWrite(
                    f"Contributor {contributor_id} changed: expected paid amount "
                    f"{expected_paid_amount}, found {contributor.paid_amount}"
                )

            header = touch(_to_collection(record, []))
            record.updated_at = _to_db(header.updated_at)
            contributor.paid_amount = paid_amount
            contributor.payment_status = derived
        LOGGER.info(
            "Updated contributor %s in collection %s: paid=%.2f status=%s",
            contributor_id,
            collection_id,
            contributor.paid_amount,
            contributor.payment_status.value,
        )
        return contributor

    def delete_collection(self, collection_id: str) -> None:
        with self.database.session_scope() as session:
            record = self._require(session, collection_id)
            session.delete(record)
        LOGGER.info("Deleted collection %s", collection_id)
