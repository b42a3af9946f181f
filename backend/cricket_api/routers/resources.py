"""
Data gateway router — read access to every cricket resource table.

GET /{resource_name}
  1. Validates the resource name (400 lists the valid names).
  2. Authenticates via X-API-Key header or ?api_key= (401 / 403).
  3. Enforces the key's sliding-window rate limit (429).
  4. Returns every row with a count; usage is logged either way (200 / 500).

Errors are raised as ApiError subclasses and rendered by the handler
registered in main.py.

This router is mounted LAST: its catch-all path would otherwise shadow
/health and friends.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.auth.dependencies import get_presented_key
from cricket_api.core.database import get_db_session
from cricket_api.resources import VALID_RESOURCES
from cricket_api.schemas.resources import ErrorOut, ResourceListOut, ResourceMeta
from cricket_api.services.gateway import serve

router = APIRouter(tags=["Cricket Data"])

# Type aliases for cleaner signatures
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
PresentedKey = Annotated[str | None, Depends(get_presented_key)]


@router.get(
    "/{resource_name}",
    response_model=ResourceListOut,
    summary="List every record of one resource type",
    description=(
        "Valid resources: " + ", ".join(VALID_RESOURCES) + ". "
        "Authenticate with the X-API-Key header or the api_key query "
        "parameter. Rate limited per key over a sliding 60-second window."
    ),
    responses={
        400: {"model": ErrorOut},
        401: {"model": ErrorOut},
        403: {"model": ErrorOut},
        429: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
async def get_resource(
    resource_name: str,
    request: Request,
    session: DbSession,
    presented_key: PresentedKey,
) -> ResourceListOut:
    """Thin HTTP wrapper over services.gateway.serve()."""
    result = await serve(
        session,
        resource_name,
        presented_key,
        method=request.method,
    )
    return ResourceListOut(data=result.records, meta=ResourceMeta(count=result.count))
