"""Pydantic schemas for the relay wire protocol and the status endpoint.

Inbound models only describe the fields the server reads; unknown keys are
ignored. Outbound models are dumped with ``exclude_none`` so optional fields
only show up when they carry a value.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

# -----------------------------
# Inbound
# -----------------------------


class JoinRequest(BaseModel):
    """``controller_join`` / ``target_join`` body."""

    model_config = ConfigDict(extra="ignore")

    type: str
    roomCode: Optional[str] = None


class RelayRequest(BaseModel):
    """``relay_message`` body; *payload* is forwarded verbatim."""

    model_config = ConfigDict(extra="ignore")

    type: str
    payload: Any

# -----------------------------
# Outbound
# -----------------------------


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    error_code: str
    message: str


class Notice(BaseModel):
    """Presence / lifecycle notification sent to either role."""

    type: str
    message: Optional[str] = None
    count: Optional[int] = None


class RelayedPayload(BaseModel):
    type: Literal["prank_message"] = "prank_message"
    payload: Any = None


class DeliveryReceipt(BaseModel):
    type: Literal["prank_delivered"] = "prank_delivered"
    delivered: int
    total: int
    message: str


class StatusResponse(BaseModel):
    status: str
    activeRooms: int
    timestamp: str


__all__ = [
    "JoinRequest",
    "RelayRequest",
    "ErrorMessage",
    "Notice",
    "RelayedPayload",
    "DeliveryReceipt",
    "StatusResponse",
]
