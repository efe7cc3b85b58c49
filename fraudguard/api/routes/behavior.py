"""Behavioral telemetry endpoints.

Session start, telemetry appends, and read-only views of the caller's
session risk and baseline profile.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fraudguard.api.dependencies import current_user_id
from fraudguard.db.database import get_session
from fraudguard.domains.behavior.models import (
    KeystrokeBatch,
    NavigationRequest,
    PointerBatch,
    StartSessionRequest,
)
from fraudguard.domains.behavior.profile import BehaviorProfileStore
from fraudguard.domains.behavior.sessions import BehaviorSessionStore
from fraudguard.domains.behavior.worker import get_risk_worker

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/behavior", tags=["behavior"])

_profile_store = BehaviorProfileStore()
_session_store = BehaviorSessionStore(scheduler=get_risk_worker())


@router.post("/sessions")
async def start_behavior_session(
    request: StartSessionRequest,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    """Start a behavior session and seed the user's profile on first use."""
    behavior_session, created = await _session_store.start_session(
        user_id, request.session_id, session
    )
    profile_created = await _profile_store.ensure_profile(
        user_id, request.device_fingerprint, session
    )
    return {
        "success": True,
        "session_id": behavior_session.session_id,
        "created": created,
        "profile_created": profile_created,
    }


@router.post("/sessions/{session_id}/keystrokes")
async def record_keystrokes(
    session_id: str,
    batch: KeystrokeBatch,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    result = await _session_store.append_keystrokes(
        user_id, session_id, batch.keystroke_data, session
    )
    return {"success": True, **result.model_dump()}


@router.post("/sessions/{session_id}/pointer")
async def record_pointer_events(
    session_id: str,
    batch: PointerBatch,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    result = await _session_store.append_pointer_events(
        user_id, session_id, batch.pointer_data, session
    )
    return {"success": True, **result.model_dump()}


@router.post("/sessions/{session_id}/navigation")
async def record_navigation(
    session_id: str,
    request: NavigationRequest,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    result = await _session_store.append_navigation(
        user_id, session_id, request.page, request.action, session
    )
    return {"success": True, **result.model_dump()}


@router.post("/sessions/{session_id}/end")
async def end_behavior_session(
    session_id: str,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    ended = await _session_store.end_session(user_id, session_id, session)
    return {
        "success": True,
        "session_id": ended.session_id,
        "end_time": ended.end_time.isoformat() if ended.end_time else None,
    }


@router.get("/sessions/{session_id}")
async def get_session_risk(
    session_id: str,
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    """Last computed risk for a session, with buffered telemetry counts."""
    behavior_session = await _session_store.get_session(user_id, session_id, session)
    if behavior_session is None:
        raise LookupError(f"Session not found: {session_id}")

    return {
        "session_id": behavior_session.session_id,
        "start_time": behavior_session.start_time.isoformat(),
        "end_time": (
            behavior_session.end_time.isoformat() if behavior_session.end_time else None
        ),
        "risk_score": behavior_session.risk_score,
        "anomalies": behavior_session.anomalies,
        "keystroke_count": len(behavior_session.keystroke_data),
        "pointer_event_count": len(behavior_session.pointer_data),
        "navigation_count": len(behavior_session.navigation_data),
    }


@router.get("/profile")
async def get_behavior_profile(
    user_id: str = Depends(current_user_id),
    session: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict:
    profile = await _profile_store.get_profile(user_id, session)
    if profile is None:
        return {
            "user_id": user_id,
            "profile": None,
            "message": "No behavioral profile found for this user",
        }
    return {"user_id": user_id, "profile": profile.model_dump(mode="json")}
