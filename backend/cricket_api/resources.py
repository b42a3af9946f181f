"""
The closed set of resource types served by the gateway and synced from
upstream.

Each ResourceType carries:
  • its storage model (one table per type)
  • its field projection — upstream record → typed column values
  • whether it is synced from upstream (`scores` is served only; the
    provider exposes no `scores` collection)

Anything outside the enum is rejected at the boundary with InvalidResource.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import status

from cricket_api.core.errors import ApiError
from cricket_api.models.cricket import (
    Continent,
    Country,
    Fixture,
    League,
    Livescore,
    Official,
    Player,
    Position,
    ResourceMixin,
    Score,
    Season,
    Stage,
    Team,
    Venue,
)

Projection = Callable[[dict[str, Any]], dict[str, Any]]


class ResourceType(str, enum.Enum):
    """Resource types in their fixed serving/sync order."""

    CONTINENTS = "continents"
    COUNTRIES = "countries"
    LEAGUES = "leagues"
    SEASONS = "seasons"
    FIXTURES = "fixtures"
    LIVESCORES = "livescores"
    TEAMS = "teams"
    PLAYERS = "players"
    OFFICIALS = "officials"
    VENUES = "venues"
    STAGES = "stages"
    POSITIONS = "positions"
    SCORES = "scores"

    @property
    def model(self) -> type[ResourceMixin]:
        return _REGISTRY[self].model

    @property
    def syncable(self) -> bool:
        return _REGISTRY[self].syncable

    def project(self, record: dict[str, Any]) -> dict[str, Any]:
        """Map an upstream record onto this type's typed columns."""
        return _REGISTRY[self].projection(record)


VALID_RESOURCES: list[str] = [r.value for r in ResourceType]


class InvalidResource(ApiError):
    """Raised for a resource name outside ResourceType."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid endpoint"

    def __init__(self, name: str, valid: list[str] | None = None) -> None:
        super().__init__()
        self.name = name
        self.valid = valid if valid is not None else VALID_RESOURCES

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "valid_endpoints": self.valid}


def parse_resource(name: str | None) -> ResourceType:
    """Resolve a path segment to a ResourceType or raise InvalidResource."""
    try:
        return ResourceType(name)
    except ValueError:
        raise InvalidResource(str(name)) from None


def parse_syncable(name: str) -> ResourceType:
    """Like parse_resource, but only accepts types synced from upstream."""
    resource = ResourceType(name) if name in VALID_RESOURCES else None
    if resource is None or not resource.syncable:
        raise InvalidResource(name, valid=[r.value for r in SYNC_ORDER])
    return resource


# ── Projections ─────────────────────────────────────────────
def _pick(*fields: str) -> Projection:
    def project(record: dict[str, Any]) -> dict[str, Any]:
        return {field: record.get(field) for field in fields}

    return project


def _project_team(record: dict[str, Any]) -> dict[str, Any]:
    values = _pick("country_id", "name", "code", "image_path")(record)
    values["national_team"] = bool(record.get("national_team") or False)
    return values


def _project_player(record: dict[str, Any]) -> dict[str, Any]:
    values = _pick(
        "country_id", "firstname", "lastname", "fullname", "image_path",
        "dateofbirth", "battingstyle", "bowlingstyle",
    )(record)
    position = record.get("position")
    values["position_name"] = position.get("name") if isinstance(position, dict) else None
    return values


@dataclass(frozen=True, slots=True)
class _ResourceEntry:
    model: type[ResourceMixin]
    projection: Projection
    syncable: bool = True


_REGISTRY: dict[ResourceType, _ResourceEntry] = {
    ResourceType.CONTINENTS: _ResourceEntry(Continent, _pick("name", "code")),
    ResourceType.COUNTRIES: _ResourceEntry(
        Country, _pick("continent_id", "name", "code", "image_path"),
    ),
    ResourceType.LEAGUES: _ResourceEntry(
        League, _pick("country_id", "name", "code", "image_path", "type"),
    ),
    ResourceType.SEASONS: _ResourceEntry(
        Season, _pick("league_id", "name", "code", "starting_at", "ending_at"),
    ),
    ResourceType.FIXTURES: _ResourceEntry(
        Fixture,
        _pick(
            "league_id", "season_id", "venue_id", "localteam_id",
            "visitorteam_id", "starting_at", "type", "status", "note",
        ),
    ),
    ResourceType.LIVESCORES: _ResourceEntry(
        Livescore, _pick("fixture_id", "league_id", "status", "type", "note"),
    ),
    ResourceType.TEAMS: _ResourceEntry(Team, _project_team),
    ResourceType.PLAYERS: _ResourceEntry(Player, _project_player),
    ResourceType.OFFICIALS: _ResourceEntry(
        Official,
        _pick("country_id", "firstname", "lastname", "fullname", "dateofbirth"),
    ),
    ResourceType.VENUES: _ResourceEntry(
        Venue, _pick("country_id", "name", "city", "capacity", "image_path"),
    ),
    ResourceType.STAGES: _ResourceEntry(
        Stage, _pick("season_id", "league_id", "name", "type"),
    ),
    ResourceType.POSITIONS: _ResourceEntry(Position, _pick("name")),
    ResourceType.SCORES: _ResourceEntry(
        Score,
        _pick(
            "name", "runs", "four", "six", "bye", "leg_bye", "noball",
            "out", "is_wicket", "ball",
        ),
        syncable=False,
    ),
}

# Fixed order for sync_all — one type at a time, never interleaved.
SYNC_ORDER: list[ResourceType] = [r for r in ResourceType if r.syncable]
