from fastapi import APIRouter, Depends, Query
from typing import Optional
import logging

from ..dependencies import get_current_user, get_room_manager
from ..models.user import User
from ..schemas import (
    CreateGameRequest,
    EmoteRequest,
    GameRoomModel,
    JoinGameRequest,
    LeaveGameRequest,
    MoveRequest,
    StatusResponse,
)
from ..services.room_manager import RoomManager

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/game",
    tags=["game"],
    responses={404: {"description": "Not found"}}
)


@router.post("/create", response_model=GameRoomModel)
def create_game(
    payload: Optional[CreateGameRequest] = None,
    user: User = Depends(get_current_user),
    manager: RoomManager = Depends(get_room_manager),
):
    """Create a room; the caller plays X"""
    board_size = payload.board_size if payload else None
    return manager.create_room(user, board_size)


@router.post("/join", response_model=GameRoomModel)
def join_game(
    payload: JoinGameRequest,
    user: User = Depends(get_current_user),
    manager: RoomManager = Depends(get_room_manager),
):
    """Join a room by its code; the caller plays O"""
    return manager.join_room(user, payload.code)


@router.get("/state", response_model=GameRoomModel)
def game_state(
    room_id: str = Query("", description="Room identifier"),
    manager: RoomManager = Depends(get_room_manager),
):
    return manager.get_state(room_id)


@router.post("/move", response_model=GameRoomModel)
def make_move(
    payload: MoveRequest,
    user: User = Depends(get_current_user),
    manager: RoomManager = Depends(get_room_manager),
):
    return manager.make_move(user, payload.room_id, payload.index)


@router.post("/leave", response_model=StatusResponse)
def leave_game(
    payload: LeaveGameRequest,
    user: User = Depends(get_current_user),
    manager: RoomManager = Depends(get_room_manager),
):
    """Leave a room; leaving a game in progress forfeits it"""
    manager.leave_room(user, payload.room_id)
    return {"status": "ok"}


@router.post("/emote", response_model=GameRoomModel)
def send_emote(
    payload: EmoteRequest,
    user: User = Depends(get_current_user),
    manager: RoomManager = Depends(get_room_manager),
):
    return manager.send_emote(user, payload.room_id, payload.emote_type)
