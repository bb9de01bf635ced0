"""Initial schema – targets_tags and likes

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Every row is scoped by partition_hash (hex SHA-256 of the credential).
Targets and tags are stored as base64url envelopes next to their hex
HMAC blind indexes; only the indexes take part in keys and lookups.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # -- targets_tags ---------------------------------------------------
    op.create_table(
        "targets_tags",
        # Insertion order for get-tags / get-targets
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("partition_hash", sa.String(64), nullable=False),
        sa.Column("target_index", sa.String(64), nullable=False),
        sa.Column("tag_index", sa.String(64), nullable=False),
        # base64url( nonce || ciphertext [|| tag] ) – never plaintext
        sa.Column("target", sa.Text(), nullable=False),
        sa.Column("tag", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "partition_hash", "target_index", "tag_index", name="uq_targets_tags_pair"
        ),
    )
    # get-targets: "all targets with tag X for credential Y"
    op.create_index("idx_targets_tags_tag", "targets_tags", ["partition_hash", "tag_index"])

    # -- likes ----------------------------------------------------------
    op.create_table(
        "likes",
        sa.Column("partition_hash", sa.String(64), nullable=False),
        sa.Column("target_index", sa.String(64), nullable=False),
        sa.Column("target", sa.Text(), nullable=False),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("partition_hash", "target_index"),
    )


def downgrade() -> None:
    op.drop_table("likes")
    op.drop_index("idx_targets_tags_tag", table_name="targets_tags")
    op.drop_table("targets_tags")
