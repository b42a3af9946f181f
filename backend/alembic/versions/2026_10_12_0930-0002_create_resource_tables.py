"""create resource tables and data_versions

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-12

One table per upstream resource type, all sharing:
  id (upstream id) · raw_payload (JSONB) · version · created_at · updated_at
plus the append-only data_versions history.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# (table, typed columns, indexed columns)
_RESOURCE_TABLES: list[tuple[str, list[sa.Column], list[str]]] = [
    ("continents", [
        sa.Column("name", sa.Text()),
        sa.Column("code", sa.String(20)),
    ], []),
    ("countries", [
        sa.Column("continent_id", sa.BigInteger()),
        sa.Column("name", sa.Text()),
        sa.Column("code", sa.String(20)),
        sa.Column("image_path", sa.Text()),
    ], ["continent_id"]),
    ("leagues", [
        sa.Column("country_id", sa.BigInteger()),
        sa.Column("name", sa.Text()),
        sa.Column("code", sa.String(20)),
        sa.Column("image_path", sa.Text()),
        sa.Column("type", sa.String(50)),
    ], ["country_id"]),
    ("seasons", [
        sa.Column("league_id", sa.BigInteger()),
        sa.Column("name", sa.Text()),
        sa.Column("code", sa.String(20)),
        sa.Column("starting_at", sa.String(40)),
        sa.Column("ending_at", sa.String(40)),
    ], ["league_id"]),
    ("fixtures", [
        sa.Column("league_id", sa.BigInteger()),
        sa.Column("season_id", sa.BigInteger()),
        sa.Column("venue_id", sa.BigInteger()),
        sa.Column("localteam_id", sa.BigInteger()),
        sa.Column("visitorteam_id", sa.BigInteger()),
        sa.Column("starting_at", sa.String(40)),
        sa.Column("type", sa.String(50)),
        sa.Column("status", sa.String(50)),
        sa.Column("note", sa.Text()),
    ], ["league_id", "season_id"]),
    ("livescores", [
        sa.Column("fixture_id", sa.BigInteger()),
        sa.Column("league_id", sa.BigInteger()),
        sa.Column("status", sa.String(50)),
        sa.Column("type", sa.String(50)),
        sa.Column("note", sa.Text()),
    ], ["fixture_id"]),
    ("teams", [
        sa.Column("country_id", sa.BigInteger()),
        sa.Column("name", sa.Text()),
        sa.Column("code", sa.String(20)),
        sa.Column("image_path", sa.Text()),
        sa.Column("national_team", sa.Boolean(), server_default="false", nullable=False),
    ], ["country_id"]),
    ("players", [
        sa.Column("country_id", sa.BigInteger()),
        sa.Column("firstname", sa.Text()),
        sa.Column("lastname", sa.Text()),
        sa.Column("fullname", sa.Text()),
        sa.Column("image_path", sa.Text()),
        sa.Column("dateofbirth", sa.String(40)),
        sa.Column("battingstyle", sa.String(50)),
        sa.Column("bowlingstyle", sa.String(100)),
        sa.Column("position_name", sa.String(50)),
    ], ["country_id"]),
    ("officials", [
        sa.Column("country_id", sa.BigInteger()),
        sa.Column("firstname", sa.Text()),
        sa.Column("lastname", sa.Text()),
        sa.Column("fullname", sa.Text()),
        sa.Column("dateofbirth", sa.String(40)),
    ], ["country_id"]),
    ("venues", [
        sa.Column("country_id", sa.BigInteger()),
        sa.Column("name", sa.Text()),
        sa.Column("city", sa.Text()),
        sa.Column("capacity", sa.Integer()),
        sa.Column("image_path", sa.Text()),
    ], ["country_id"]),
    ("stages", [
        sa.Column("season_id", sa.BigInteger()),
        sa.Column("league_id", sa.BigInteger()),
        sa.Column("name", sa.Text()),
        sa.Column("type", sa.String(50)),
    ], ["season_id"]),
    ("positions", [
        sa.Column("name", sa.Text()),
    ], []),
    ("scores", [
        sa.Column("name", sa.Text()),
        sa.Column("runs", sa.Integer()),
        sa.Column("four", sa.Boolean()),
        sa.Column("six", sa.Boolean()),
        sa.Column("bye", sa.Integer()),
        sa.Column("leg_bye", sa.Integer()),
        sa.Column("noball", sa.Integer()),
        sa.Column("out", sa.Boolean()),
        sa.Column("is_wicket", sa.Boolean()),
        sa.Column("ball", sa.Boolean()),
    ], []),
]


def upgrade() -> None:
    for table, columns, indexed in _RESOURCE_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
            *columns,
            sa.Column("raw_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
            sa.Column("version", sa.Integer(), server_default="1", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )
        for column in indexed:
            op.create_index(f"ix_{table}_{column}", table, [column])

    # ── Version history ─────────────────────────────────────
    op.create_table(
        "data_versions",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("table_name", sa.String(50), nullable=False),
        sa.Column("record_id", sa.String(64), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("data_snapshot", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_data_versions_record",
        "data_versions",
        ["table_name", "record_id", "version"],
    )


def downgrade() -> None:
    op.drop_index("ix_data_versions_record", table_name="data_versions")
    op.drop_table("data_versions")
    for table, _columns, indexed in reversed(_RESOURCE_TABLES):
        for column in indexed:
            op.drop_index(f"ix_{table}_{column}", table_name=table)
        op.drop_table(table)
