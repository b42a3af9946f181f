"""
SQLAlchemy models for the local copies of upstream cricket collections.

One table per resource type. Every table shares the same bookkeeping
columns (ResourceMixin) and adds the handful of typed columns projected
from the upstream record.

Design notes:
  • `id` is the upstream identifier — no surrogate key, so a merge is an
    INSERT … ON CONFLICT (id) DO UPDATE.
  • `raw_payload` keeps the full upstream record verbatim (JSONB), so
    fields not modelled yet are never lost.
  • `version` starts at 1 and grows by exactly 1 per overwrite; the sync
    engine is the only writer.
  • Upstream dates are kept as the provider's strings; they are display
    values here, not query keys.
"""

import datetime
from typing import Any

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from cricket_api.core.database import Base, JSONPayload


class ResourceMixin:
    """Columns common to every synced resource table."""

    id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False,
    )
    raw_payload: Mapped[dict[str, Any]] = mapped_column(
        JSONPayload, nullable=False,
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1, server_default="1",
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class Continent(ResourceMixin, Base):
    __tablename__ = "continents"

    name: Mapped[str | None] = mapped_column(Text)
    code: Mapped[str | None] = mapped_column(String(20))


class Country(ResourceMixin, Base):
    __tablename__ = "countries"

    continent_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    name: Mapped[str | None] = mapped_column(Text)
    code: Mapped[str | None] = mapped_column(String(20))
    image_path: Mapped[str | None] = mapped_column(Text)


class League(ResourceMixin, Base):
    __tablename__ = "leagues"

    country_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    name: Mapped[str | None] = mapped_column(Text)
    code: Mapped[str | None] = mapped_column(String(20))
    image_path: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str | None] = mapped_column(String(50))


class Season(ResourceMixin, Base):
    __tablename__ = "seasons"

    league_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    name: Mapped[str | None] = mapped_column(Text)
    code: Mapped[str | None] = mapped_column(String(20))
    starting_at: Mapped[str | None] = mapped_column(String(40))
    ending_at: Mapped[str | None] = mapped_column(String(40))


class Fixture(ResourceMixin, Base):
    """A scheduled, live or finished match."""

    __tablename__ = "fixtures"

    league_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    season_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    venue_id: Mapped[int | None] = mapped_column(BigInteger)
    localteam_id: Mapped[int | None] = mapped_column(BigInteger)
    visitorteam_id: Mapped[int | None] = mapped_column(BigInteger)
    starting_at: Mapped[str | None] = mapped_column(String(40))
    type: Mapped[str | None] = mapped_column(String(50))
    status: Mapped[str | None] = mapped_column(String(50))
    note: Mapped[str | None] = mapped_column(Text)


class Livescore(ResourceMixin, Base):
    """Fixtures currently in play, as reported by the livescores feed."""

    __tablename__ = "livescores"

    fixture_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    league_id: Mapped[int | None] = mapped_column(BigInteger)
    status: Mapped[str | None] = mapped_column(String(50))
    type: Mapped[str | None] = mapped_column(String(50))
    note: Mapped[str | None] = mapped_column(Text)


class Team(ResourceMixin, Base):
    __tablename__ = "teams"

    country_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    name: Mapped[str | None] = mapped_column(Text)
    code: Mapped[str | None] = mapped_column(String(20))
    image_path: Mapped[str | None] = mapped_column(Text)
    national_team: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )


class Player(ResourceMixin, Base):
    __tablename__ = "players"

    country_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    firstname: Mapped[str | None] = mapped_column(Text)
    lastname: Mapped[str | None] = mapped_column(Text)
    fullname: Mapped[str | None] = mapped_column(Text)
    image_path: Mapped[str | None] = mapped_column(Text)
    dateofbirth: Mapped[str | None] = mapped_column(String(40))
    battingstyle: Mapped[str | None] = mapped_column(String(50))
    bowlingstyle: Mapped[str | None] = mapped_column(String(100))
    position_name: Mapped[str | None] = mapped_column(String(50))


class Official(ResourceMixin, Base):
    """Umpires and referees."""

    __tablename__ = "officials"

    country_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    firstname: Mapped[str | None] = mapped_column(Text)
    lastname: Mapped[str | None] = mapped_column(Text)
    fullname: Mapped[str | None] = mapped_column(Text)
    dateofbirth: Mapped[str | None] = mapped_column(String(40))


class Venue(ResourceMixin, Base):
    __tablename__ = "venues"

    country_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    name: Mapped[str | None] = mapped_column(Text)
    city: Mapped[str | None] = mapped_column(Text)
    capacity: Mapped[int | None] = mapped_column(Integer)
    image_path: Mapped[str | None] = mapped_column(Text)


class Stage(ResourceMixin, Base):
    __tablename__ = "stages"

    season_id: Mapped[int | None] = mapped_column(BigInteger, index=True)
    league_id: Mapped[int | None] = mapped_column(BigInteger)
    name: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str | None] = mapped_column(String(50))


class Position(ResourceMixin, Base):
    __tablename__ = "positions"

    name: Mapped[str | None] = mapped_column(Text)


class Score(ResourceMixin, Base):
    """Ball outcome definitions (runs, extras, wickets)."""

    __tablename__ = "scores"

    name: Mapped[str | None] = mapped_column(Text)
    runs: Mapped[int | None] = mapped_column(Integer)
    four: Mapped[bool | None] = mapped_column(Boolean)
    six: Mapped[bool | None] = mapped_column(Boolean)
    bye: Mapped[int | None] = mapped_column(Integer)
    leg_bye: Mapped[int | None] = mapped_column(Integer)
    noball: Mapped[int | None] = mapped_column(Integer)
    out: Mapped[bool | None] = mapped_column(Boolean)
    is_wicket: Mapped[bool | None] = mapped_column(Boolean)
    ball: Mapped[bool | None] = mapped_column(Boolean)
