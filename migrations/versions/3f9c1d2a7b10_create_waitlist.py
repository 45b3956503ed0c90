"""Create the waitlist signups table."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1d2a7b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the waitlist table with verification columns."""

    op.create_table(
        "waitlist",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("age_bracket", sa.String(length=255), nullable=True),
        sa.Column("gender", sa.String(length=255), nullable=True),
        sa.Column("goal", sa.String(length=255), nullable=True),
        sa.Column("biggest_issue", sa.String(length=255), nullable=True),
        sa.Column("timeframe", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("source", sa.String(length=255), nullable=True),
        sa.Column("landing_url", sa.Text(), nullable=True),
        sa.Column("referrer", sa.Text(), nullable=True),
        sa.Column("utm_source", sa.String(length=255), nullable=True),
        sa.Column("utm_medium", sa.String(length=255), nullable=True),
        sa.Column("utm_campaign", sa.String(length=255), nullable=True),
        sa.Column("utm_content", sa.String(length=255), nullable=True),
        sa.Column("utm_term", sa.String(length=255), nullable=True),
        sa.Column("verification_token_digest", sa.String(length=64), nullable=True),
        sa.Column("verification_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_token_digest", sa.String(length=64), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_waitlist_email", "waitlist", ["email"], unique=True)
    op.create_index(
        "ix_waitlist_verification_token_digest",
        "waitlist",
        ["verification_token_digest"],
    )
    op.create_index(
        "ix_waitlist_confirmed_token_digest",
        "waitlist",
        ["confirmed_token_digest"],
    )


def downgrade() -> None:
    """Drop the waitlist table."""

    op.drop_index("ix_waitlist_confirmed_token_digest", table_name="waitlist")
    op.drop_index("ix_waitlist_verification_token_digest", table_name="waitlist")
    op.drop_index("ix_waitlist_email", table_name="waitlist")
    op.drop_table("waitlist")
