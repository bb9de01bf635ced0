# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Like ORM model – one counter per (credential, target)."""

from sqlalchemy import Column, Integer, String, Text

from database import Base


class Like(Base):
    __tablename__ = "likes"

    partition_hash = Column(String(64), primary_key=True)
    target_index = Column(String(64), primary_key=True)
    # Envelope of the target as sent with the first like; later likes keep it
    target = Column(Text, nullable=False)
    like_count = Column(Integer, nullable=False, default=0, server_default="0")
