# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Partitioned storage for tags and like counters.

The store knows nothing about encryption.  It receives opaque strings: a
partition hash, blind-index tokens used for exact-match lookups, and
envelopes that it persists and hands back untouched.

Failure policy
--------------
* Duplicate (partition, target, tag) → ``ConflictError``.
* Any other SQLAlchemy error        → ``StorageError`` (session rolled back).
* "Nothing stored yet" is not an error: empty list / zero count.
"""

from dataclasses import dataclass
from typing import List

from sqlalchemy import exc as sa_exc, insert
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session

from core.errors import ConflictError, StorageError
from core.logger import logger
from models.like import Like
from models.tag import TargetTag


@dataclass(frozen=True)
class SealedValue:
    """A field as stored: its blind index plus its encrypted envelope."""

    index: str
    envelope: str


def _upsert_like(dialect: str, values: dict):
    """
    Build ``INSERT … like_count=1`` that turns into ``like_count + 1`` on a
    primary-key clash – a single statement, so concurrent likes never lose an
    increment.
    """
    if dialect == "mysql":
        return mysql.insert(Like).values(**values).on_duplicate_key_update(
            like_count=Like.like_count + 1,
        )
    if dialect == "postgresql":
        stmt = postgresql.insert(Like)
    elif dialect == "sqlite":
        stmt = sqlite.insert(Like)
    else:
        raise StorageError(f"Unsupported database backend: {dialect}")
    return stmt.values(**values).on_conflict_do_update(
        index_elements=[Like.partition_hash, Like.target_index],
        set_={"like_count": Like.like_count + 1},
    )


class PartitionedStore:
    """Thin repository over one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, op: str, exc: Exception) -> StorageError:
        self.db.rollback()
        logger.error("Storage failure in %s: %s", op, exc.__class__.__name__)
        return StorageError()

    # -- Tags ---------------------------------------------------------------

    def insert_tag(self, partition_hash: str, target: SealedValue, tag: SealedValue) -> None:
        # Core INSERT rather than session.add(): a duplicate must reach the
        # database as a unique-constraint violation, not trip the identity map.
        stmt = insert(TargetTag).values(
            partition_hash=partition_hash,
            target_index=target.index,
            tag_index=tag.index,
            target=target.envelope,
            tag=tag.envelope,
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except sa_exc.IntegrityError:
            self.db.rollback()
            raise ConflictError("Tag already recorded for this target")
        except sa_exc.SQLAlchemyError as exc:
            raise self._fail("insert_tag", exc) from exc

    def list_tags(self, partition_hash: str, target_index: str) -> List[str]:
        """Tag envelopes recorded for one target, oldest first."""
        try:
            rows = (
                self.db.query(TargetTag.tag)
                .filter(
                    TargetTag.partition_hash == partition_hash,
                    TargetTag.target_index == target_index,
                )
                .order_by(TargetTag.id.asc())
                .all()
            )
        except sa_exc.SQLAlchemyError as exc:
            raise self._fail("list_tags", exc) from exc
        return [r[0] for r in rows]

    def list_targets(self, partition_hash: str, tag_index: str) -> List[str]:
        """Target envelopes carrying one tag, oldest first."""
        try:
            rows = (
                self.db.query(TargetTag.target)
                .filter(
                    TargetTag.partition_hash == partition_hash,
                    TargetTag.tag_index == tag_index,
                )
                .order_by(TargetTag.id.asc())
                .all()
            )
        except sa_exc.SQLAlchemyError as exc:
            raise self._fail("list_targets", exc) from exc
        return [r[0] for r in rows]

    # -- Likes --------------------------------------------------------------

    def increment_like(self, partition_hash: str, target: SealedValue) -> None:
        try:
            stmt = _upsert_like(self.db.get_bind().dialect.name, {
                "partition_hash": partition_hash,
                "target_index": target.index,
                "target": target.envelope,
                "like_count": 1,
            })
            self.db.execute(stmt)
            self.db.commit()
        except sa_exc.SQLAlchemyError as exc:
            raise self._fail("increment_like", exc) from exc

    def get_like_count(self, partition_hash: str, target_index: str) -> int:
        try:
            count = (
                self.db.query(Like.like_count)
                .filter(
                    Like.partition_hash == partition_hash,
                    Like.target_index == target_index,
                )
                .scalar()
            )
        except sa_exc.SQLAlchemyError as exc:
            raise self._fail("get_like_count", exc) from exc
        return count or 0
