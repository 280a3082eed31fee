"""Phase A: users, preferences, locations, trips

Revision ID: phase_a_001
Revises:
Create Date: 2026-09-14
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "phase_a_001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255)),
        sa.Column("phone_number", sa.String(32)),
        sa.Column("avatar_url", sa.String(500)),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- user_preferences (one row per user) ---
    op.create_table(
        "user_preferences",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("age", sa.Integer),
        sa.Column("location", sa.String(255)),
        sa.Column("dietary_restrictions", JSONB, server_default="[]"),
        sa.Column("activity_preferences", JSONB, server_default="[]"),
        sa.Column("budget", sa.String(8)),
        sa.Column("travel_style", JSONB, server_default="[]"),
        sa.Column("lifestyle_choices", JSONB, server_default="[]"),
        sa.Column("accessibility_needs", JSONB, server_default="[]"),
        sa.Column("preferred_transportation", JSONB, server_default="[]"),
        sa.Column("typical_trip_length", sa.String(50)),
        sa.Column("planning_role", sa.String(50)),
        sa.Column("typical_audience", JSONB, server_default="[]"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- locations ---
    op.create_table(
        "locations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("google_place_id", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500)),
        sa.Column("latitude", sa.Float),
        sa.Column("longitude", sa.Float),
        sa.Column("types", JSONB, server_default="[]"),
        sa.Column("image", sa.String(500)),
    )

    # --- trips ---
    op.create_table(
        "trips",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("host_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(255), server_default="New Trip"),
        sa.Column("description", sa.Text),
        sa.Column("city", sa.String(100)),
        sa.Column("status", sa.String(20), server_default="PLANNING"),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("estimated_time", sa.String(50)),
        sa.Column("trip_image", sa.String(500)),
        sa.Column("is_private", sa.Boolean, server_default="false"),
        sa.Column("max_guests", sa.Integer),
        sa.Column("location_order", JSONB, server_default="[]"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_trips_host_id", "trips", ["host_id"])
    # The hourly sweep filters on these two
    op.create_index("idx_trips_status_end", "trips", ["status", "end_time"])

    op.create_table(
        "trip_locations",
        sa.Column("trip_id", UUID(as_uuid=True), sa.ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("location_id", UUID(as_uuid=True), sa.ForeignKey("locations.id", ondelete="CASCADE"), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table("trip_locations")
    op.drop_index("idx_trips_status_end", table_name="trips")
    op.drop_index("ix_trips_host_id", table_name="trips")
    op.drop_table("trips")
    op.drop_table("locations")
    op.drop_table("user_preferences")
    op.drop_table("users")
