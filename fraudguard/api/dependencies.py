"""Request-scoped dependencies shared by the routers."""

from fastapi import Depends, Header, HTTPException

from fraudguard.config import settings


async def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity resolved by the upstream auth layer.

    Requests that reach the service without it are rejected before any
    engine code runs.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id


async def admin_user_id(user_id: str = Depends(current_user_id)) -> str:  # noqa: B008
    """Caller identity, restricted to the configured operators."""
    if user_id not in settings.admin_user_ids:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user_id
