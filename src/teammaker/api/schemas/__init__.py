"""Pydantic models for API I/O."""

from .roster import (
    AssignmentRequest,
    AssignmentResponse,
    PlayersSyncRequest,
    RosterEntryPayload,
    RosterEntryResponse,
    SyncResponse,
    TeamSummaryResponse,
    TeamsSyncRequest,
)
from .saved import SavedConfigPayload, SavedConfigResponse

__all__ = [
    "AssignmentRequest",
    "AssignmentResponse",
    "PlayersSyncRequest",
    "RosterEntryPayload",
    "RosterEntryResponse",
    "SavedConfigPayload",
    "SavedConfigResponse",
    "SyncResponse",
    "TeamSummaryResponse",
    "TeamsSyncRequest",
]
