"""
FastAPI dependencies resolving the services stored on app.state
"""
from typing import Optional

from fastapi import Depends, Header, Request

from .errors import UnauthorizedError
from .models.user import User
from .services.room_manager import RoomManager
from .services.session_registry import SessionRegistry
from .services.user_registry import UserRegistry

BEARER_PREFIX = "bearer "


def get_user_registry(request: Request) -> UserRegistry:
    return request.app.state.users


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_room_manager(request: Request) -> RoomManager:
    return request.app.state.room_manager


def get_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Session token from the Authorization header, raw or as 'Bearer <token>'"""
    if not authorization:
        return None
    token = authorization.strip()
    if token.lower().startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX):].strip()
    return token or None


def get_current_user(
    token: Optional[str] = Depends(get_token),
    sessions: SessionRegistry = Depends(get_session_registry),
    users: UserRegistry = Depends(get_user_registry),
) -> User:
    user_id = sessions.resolve(token)
    user = users.get(user_id) if user_id else None
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return user
