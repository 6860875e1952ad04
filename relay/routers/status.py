from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..constants import STATUS_ONLINE
from ..room import RoomRegistry
from ..schemas import StatusResponse
from ..state import get_registry

router = APIRouter(prefix="", tags=["status"])


@router.get("/", response_model=StatusResponse)
@router.get("/health", response_model=StatusResponse)
async def status(registry: RoomRegistry = Depends(get_registry)):
    return StatusResponse(
        status=STATUS_ONLINE,
        activeRooms=len(registry),
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
