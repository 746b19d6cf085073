"""
Session inspection API endpoints.

These endpoints read and modify the cookie-held session of the caller.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel

from session_cookie.core.lifecycle import SessionHandle
from session_cookie.core.middleware import get_session_handle
from session_cookie.core.session import SessionAssignmentError

logger = logging.getLogger(__name__)

router = APIRouter()


class SessionStatus(BaseModel):
    """Response model for the current session"""
    data: Dict[str, Any]
    is_new: bool
    is_changed: bool
    is_populated: bool

    model_config = {
        "json_schema_extra": {
            "example": {
                "data": {"id": 7, "role": "admin"},
                "is_new": False,
                "is_changed": False,
                "is_populated": True
            }
        }
    }


def _status(handle: SessionHandle) -> SessionStatus:
    session = handle.get()
    return SessionStatus(
        data=dict(session) if session is not None else {},
        is_new=handle.is_new,
        is_changed=handle.is_changed,
        is_populated=handle.is_populated,
    )


@router.get("", response_model=SessionStatus)
def read_session(handle: SessionHandle = Depends(get_session_handle)) -> SessionStatus:
    """Return the caller's session data and its tracking flags."""
    return _status(handle)


@router.put("", response_model=SessionStatus)
def replace_session(
    data: Any = Body(None),
    handle: SessionHandle = Depends(get_session_handle),
) -> SessionStatus:
    """Replace the whole session. A null or missing body clears it."""
    try:
        handle.set(data)
    except SessionAssignmentError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from None
    return _status(handle)


@router.patch("", response_model=SessionStatus)
def update_session(
    data: Dict[str, Any] = Body(...),
    handle: SessionHandle = Depends(get_session_handle),
) -> SessionStatus:
    """Merge keys into the session, keeping the ones not mentioned."""
    session = handle.get()
    if session is None:
        session = handle.set({})
    session.update(data)
    return _status(handle)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_session(handle: SessionHandle = Depends(get_session_handle)) -> None:
    """Clear the session and remove the cookie."""
    handle.clear()
    logger.debug("Session cleared on request")


@router.post("/regenerate", response_model=SessionStatus)
def regenerate_session(handle: SessionHandle = Depends(get_session_handle)) -> SessionStatus:
    """Mark the current session as new, as login flows do."""
    session = handle.get()
    if session is None:
        session = handle.set({})
    session.regenerate()
    session.save()
    return _status(handle)
