from typing import List, Optional
from pydantic import BaseModel, Field


# Request bodies
class UsernameRequest(BaseModel):
    """Body for register and login"""
    username: Optional[str] = Field(None, description="Display name, 2-20 characters")


class ScoreRequest(BaseModel):
    result: str = Field("", description="One of win, loss or draw")


class CreateGameRequest(BaseModel):
    board_size: Optional[int] = Field(None, description="3 or 5; anything else becomes 3")


class JoinGameRequest(BaseModel):
    code: str = Field("", description="Six character join code")


class MoveRequest(BaseModel):
    room_id: str = Field("", description="Room identifier")
    index: int = Field(..., description="Cell index in row-major order")


class LeaveGameRequest(BaseModel):
    room_id: str = Field("", description="Room identifier")


class EmoteRequest(BaseModel):
    room_id: str = Field("", description="Room identifier")
    emote_type: str = Field("", description="Emote kind, e.g. deal_with_it")


# Responses
class ScoresModel(BaseModel):
    wins: int = 0
    losses: int = 0
    draws: int = 0


class UserModel(BaseModel):
    id: str
    username: str
    scores: ScoresModel
    created_at: str


class AuthResponse(BaseModel):
    user: UserModel
    token: str


class StatusResponse(BaseModel):
    status: str = "ok"


class GameRoomModel(BaseModel):
    """Full snapshot of a game room as polled by clients"""
    id: str
    code: str
    board_size: int
    board: List[str]
    player_x: Optional[UserModel] = None
    player_o: Optional[UserModel] = None
    current_turn: str
    status: str
    winner: str
    winning_line: List[int]
    last_move: int
    show_emote: bool
    emote_type: str
    emote_by: str
    emote_at: Optional[str] = None
    created_at: str
    updated_at: str
