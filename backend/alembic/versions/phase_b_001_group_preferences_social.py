"""Phase B: trip preference summaries, RSVPs, comments, proposed guests

Revision ID: phase_b_001
Revises: phase_a_001
Create Date: 2026-09-28
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "phase_b_001"
down_revision = "phase_a_001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- trip_preferences (one summary per trip) ---
    op.create_table(
        "trip_preferences",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("trip_id", UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("activity_counts", JSONB, server_default="{}"),
        sa.Column("dietary_counts", JSONB, server_default="{}"),
        sa.Column("lifestyle_counts", JSONB, server_default="{}"),
        sa.Column("travel_style_counts", JSONB, server_default="{}"),
        sa.Column("budget_counts", JSONB, server_default='{"1": 0, "2": 0, "3": 0, "4": 0}'),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- trip_rsvps ---
    op.create_table(
        "trip_rsvps",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("trip_id", UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "trip_id", name="uq_trip_rsvps_user_trip"),
    )
    op.create_index("idx_trip_rsvps_trip", "trip_rsvps", ["trip_id", "status"])

    # --- comments ---
    op.create_table(
        "comments",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("trip_id", UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_comments_trip", "comments", ["trip_id", "created_at"])

    # --- proposed_guests ---
    op.create_table(
        "proposed_guests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("trip_id", UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255)),
        sa.Column("email", sa.String(255), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("proposed_guests")
    op.drop_index("idx_comments_trip", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_trip_rsvps_trip", table_name="trip_rsvps")
    op.drop_table("trip_rsvps")
    op.drop_table("trip_preferences")
