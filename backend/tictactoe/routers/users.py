from fastapi import APIRouter, Depends, Request
from typing import List, Optional
import logging

from ..dependencies import (
    get_current_user,
    get_session_registry,
    get_token,
    get_user_registry,
)
from ..models.user import User
from ..schemas import AuthResponse, ScoreRequest, StatusResponse, UserModel, UsernameRequest
from ..services.session_registry import SessionRegistry
from ..services.user_registry import UserRegistry

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["users"],
)


@router.post("/register", response_model=AuthResponse)
def register(
    payload: UsernameRequest,
    users: UserRegistry = Depends(get_user_registry),
    sessions: SessionRegistry = Depends(get_session_registry),
):
    """Create a user and log it in"""
    user = users.register(payload.username)
    token = sessions.create(user.id)
    return {"user": user.to_dict(), "token": token}


@router.post("/login", response_model=AuthResponse)
def login(
    payload: UsernameRequest,
    users: UserRegistry = Depends(get_user_registry),
    sessions: SessionRegistry = Depends(get_session_registry),
):
    """Open a new session for an existing user"""
    user = users.login(payload.username)
    token = sessions.create(user.id)
    logger.info(f"User {user.username} logged in")
    return {"user": user.to_dict(), "token": token}


@router.post("/logout", response_model=StatusResponse)
def logout(
    token: Optional[str] = Depends(get_token),
    sessions: SessionRegistry = Depends(get_session_registry),
):
    sessions.revoke(token)
    return {"status": "ok"}


@router.get("/user", response_model=UserModel)
def get_user(user: User = Depends(get_current_user)):
    return user.to_dict()


@router.post("/score", response_model=UserModel)
def update_score(
    payload: ScoreRequest,
    user: User = Depends(get_current_user),
    users: UserRegistry = Depends(get_user_registry),
):
    """Record a locally played game result (win, loss or draw)"""
    return users.record_result(user.id, payload.result).to_dict()


@router.get("/leaderboard", response_model=List[UserModel])
def leaderboard(request: Request, users: UserRegistry = Depends(get_user_registry)):
    limit = request.app.state.settings.leaderboard_limit
    return [user.to_dict() for user in users.leaderboard(limit)]
