from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import enum

SUPPORTED_BOARD_SIZES = (3, 5)
DEFAULT_BOARD_SIZE = 3

MARK_X = "X"
MARK_O = "O"
EMPTY = ""
DRAW = "draw"


class RoomStatus(str, enum.Enum):
    """Game room status"""
    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


def normalize_board_size(board_size: Optional[int]) -> int:
    """Anything other than a supported size falls back to 3x3"""
    if board_size in SUPPORTED_BOARD_SIZES:
        return board_size
    return DEFAULT_BOARD_SIZE


def other_mark(mark: str) -> str:
    return MARK_O if mark == MARK_X else MARK_X


class GameRoom:
    """
    State of one online game between two seated players.

    Seats hold user ids only; user records are owned by the user registry and
    resolved through it when the room is rendered or scores change.
    """

    def __init__(self, id: str, code: str, player_x_id: str, board_size: int = DEFAULT_BOARD_SIZE,
                 now: Optional[datetime] = None):
        now = now or datetime.now(timezone.utc)
        self.id = id
        self.code = code
        self.board_size = normalize_board_size(board_size)
        self.board: List[str] = [EMPTY] * (self.board_size * self.board_size)
        self.player_x_id: Optional[str] = player_x_id
        self.player_o_id: Optional[str] = None
        self.current_turn = MARK_X
        self.status = RoomStatus.WAITING
        self.winner = EMPTY
        self.winning_line: List[int] = []
        self.last_move = -1

        # Transient emote display state
        self.show_emote = False
        self.emote_type = ""
        self.emote_by = ""
        self.emote_at: Optional[datetime] = None

        self.created_at = now
        self.updated_at = now

    def __repr__(self):
        return f"<GameRoom {self.code} - {self.status.value}>"

    def mark_for(self, user_id: str) -> Optional[str]:
        """Return the mark of the seat held by user_id, or None if not seated"""
        if self.player_x_id is not None and self.player_x_id == user_id:
            return MARK_X
        if self.player_o_id is not None and self.player_o_id == user_id:
            return MARK_O
        return None

    def seat_of(self, mark: str) -> Optional[str]:
        return self.player_x_id if mark == MARK_X else self.player_o_id

    def is_seated(self, user_id: str) -> bool:
        return self.mark_for(user_id) is not None

    def touch(self, now: Optional[datetime] = None):
        self.updated_at = now or datetime.now(timezone.utc)

    def finish(self, winner: str, winning_line: Optional[List[int]] = None):
        self.winner = winner
        self.winning_line = list(winning_line or [])
        self.status = RoomStatus.FINISHED

    def clear_emote(self):
        self.show_emote = False
        self.emote_type = ""
        self.emote_by = ""

    def to_dict(self, player_x: Optional[Dict[str, Any]] = None,
                player_o: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Convert room to a JSON snapshot; seats are filled with rendered user dicts"""
        return {
            "id": self.id,
            "code": self.code,
            "board_size": self.board_size,
            "board": list(self.board),
            "player_x": player_x,
            "player_o": player_o,
            "current_turn": self.current_turn,
            "status": self.status.value,
            "winner": self.winner,
            "winning_line": list(self.winning_line),
            "last_move": self.last_move,
            "show_emote": self.show_emote,
            "emote_type": self.emote_type,
            "emote_by": self.emote_by,
            "emote_at": self.emote_at.isoformat() if self.emote_at else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
