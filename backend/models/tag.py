# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""TargetTag ORM model – one row per (credential, target, tag)."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Index, UniqueConstraint
from sqlalchemy.sql import func

from database import Base


class TargetTag(Base):
    __tablename__ = "targets_tags"

    # Insertion order; created_at alone ties within one second on SQLite
    id = Column(Integer, primary_key=True, autoincrement=True)
    # hex SHA-256 of the credential – the only link between a row and its owner
    partition_hash = Column(String(64), nullable=False)
    # hex HMAC-SHA256 blind indexes of the plaintext target / tag
    target_index = Column(String(64), nullable=False)
    tag_index = Column(String(64), nullable=False)
    # base64url envelopes – never plaintext
    target = Column(Text, nullable=False)
    tag = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        # One row per logical (target, tag) pair; also serves get-tags lookups
        UniqueConstraint("partition_hash", "target_index", "tag_index", name="uq_targets_tags_pair"),
        # get-targets: "all targets with tag X for credential Y"
        Index("idx_targets_tags_tag", "partition_hash", "tag_index"),
    )
