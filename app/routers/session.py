"""
Session router.

PUT    /session   set the current user identity
DELETE /session   sign out
"""
from fastapi import APIRouter, Depends

from app.schemas.session import SessionRequest, SessionResponse
from app.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/session", tags=["session"])


@router.put(
    "",
    response_model=SessionResponse,
    summary="Set the current user",
    responses={200: {"description": "Identity is ready; pending waiters are released."}},
)
def set_session(payload: SessionRequest, container: ServiceContainer = Depends(get_container)):
    """
    Establish the signed-in user. Switching to a different user clears the
    home cache and resets the reflection progress animation state.
    """
    changed = container.identity.set_user(payload.user_id)
    return SessionResponse(state=container.identity.state, user_id=container.identity.user_id, changed=changed)


@router.delete("", response_model=SessionResponse, summary="Clear the current user")
def clear_session(container: ServiceContainer = Depends(get_container)):
    had_user = container.identity.is_ready
    container.identity.clear()
    return SessionResponse(state=container.identity.state, user_id=None, changed=had_user)
