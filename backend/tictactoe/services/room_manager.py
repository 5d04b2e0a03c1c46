"""
Room lifecycle: create, join, move, leave, emote, state polling and expiry

Room state machine: waiting -> playing -> finished. Each terminal transition
(win, draw, forfeit) settles scores exactly once because nothing leaves the
finished state.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from ..models.game_room import DRAW, EMPTY, GameRoom, RoomStatus, other_mark
from ..models.user import User
from .board import evaluate_winner, is_draw
from .room_registry import RoomRegistry
from .user_registry import UserRegistry

logger = logging.getLogger(__name__)

DEFAULT_ROOM_TTL_SECONDS = 3600
DEFAULT_EMOTE_DURATION_SECONDS = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RoomManager:
    """
    Applies player actions to rooms.

    Every operation runs under the room registry lock for its full
    read-modify-write. Score updates take the user registry lock while the
    room lock is held, so the acquisition order is always rooms -> users.
    """

    def __init__(self, rooms: RoomRegistry, users: UserRegistry,
                 room_ttl_seconds: int = DEFAULT_ROOM_TTL_SECONDS,
                 emote_duration_seconds: float = DEFAULT_EMOTE_DURATION_SECONDS):
        self.rooms = rooms
        self.users = users
        self.room_ttl = timedelta(seconds=room_ttl_seconds)
        self.emote_duration = timedelta(seconds=emote_duration_seconds)

    def snapshot(self, room: GameRoom) -> Dict[str, Any]:
        """Render a room with both seats resolved to current user records"""
        return room.to_dict(
            player_x=self.users.render(room.player_x_id),
            player_o=self.users.render(room.player_o_id),
        )

    def create_room(self, user: User, board_size: Optional[int] = None) -> Dict[str, Any]:
        with self.rooms.locked():
            room = self.rooms.create(user.id, board_size)
            logger.info(f"Game created: {room.code} ({room.board_size}x{room.board_size}) by {user.username}")
            return self.snapshot(room)

    def join_room(self, user: User, code: Optional[str]) -> Dict[str, Any]:
        """
        Seat the caller as player O in the room with the given join code

        Joining a room the caller already sits in returns it unchanged.

        Raises:
            NotFoundError: if no room uses the code
            ConflictError: if both seats are taken
        """
        code = (code or "").strip().upper()
        with self.rooms.locked():
            room = self.rooms.get_by_code(code)
            if room is None:
                raise NotFoundError("Game not found")

            if room.is_seated(user.id):
                return self.snapshot(room)

            if room.player_o_id is not None:
                raise ConflictError("Game is full")

            room.player_o_id = user.id
            room.status = RoomStatus.PLAYING
            room.touch()
            logger.info(f"Game {room.code}: {user.username} joined as O")
            return self.snapshot(room)

    def make_move(self, user: User, room_id: Optional[str], index: int) -> Dict[str, Any]:
        """
        Place the caller's mark at index and advance the game

        Raises:
            NotFoundError: unknown room
            BadRequestError: game not in progress, not the caller's turn,
                index out of range or cell already taken
            ForbiddenError: caller is not seated in the room
        """
        with self.rooms.locked():
            room = self.rooms.get(room_id)
            if room is None:
                raise NotFoundError("Game not found")

            if room.status != RoomStatus.PLAYING:
                raise BadRequestError("Game is not in progress")

            mark = room.mark_for(user.id)
            if mark is None:
                raise ForbiddenError("You are not in this game")

            if room.current_turn != mark:
                raise BadRequestError("Not your turn")

            if index is None or not 0 <= index < len(room.board):
                raise BadRequestError("Invalid move position")

            if room.board[index] != EMPTY:
                raise BadRequestError("Cell already taken")

            room.board[index] = mark
            room.last_move = index
            room.touch()

            winner, line = evaluate_winner(room.board, room.board_size)
            if winner is not None:
                room.finish(winner, line)
                logger.info(f"Game {room.code}: {winner} wins on line {line}")
                self._settle(room)
            elif is_draw(room.board):
                room.finish(DRAW)
                logger.info(f"Game {room.code}: draw")
                self._settle(room)
            else:
                room.current_turn = other_mark(room.current_turn)

            return self.snapshot(room)

    def leave_room(self, user: User, room_id: Optional[str]) -> None:
        """
        Leave a room

        A waiting or finished room is deleted along with its join code. Leaving
        a game in progress forfeits it to the opponent. Unknown rooms, and
        callers without a seat in a game in progress, are ignored.
        """
        with self.rooms.locked():
            room = self.rooms.get(room_id)
            if room is None:
                return

            if room.status in (RoomStatus.WAITING, RoomStatus.FINISHED):
                self.rooms.remove(room)
                logger.info(f"Game {room.code}: closed by {user.username}")
                return

            mark = room.mark_for(user.id)
            if mark is None:
                logger.info(f"Game {room.code}: ignoring leave from non-participant {user.username}")
                return

            room.finish(other_mark(mark))
            room.touch()
            logger.info(f"Game {room.code}: {user.username} forfeited, {room.winner} wins")
            self._settle(room)

    def send_emote(self, user: User, room_id: Optional[str], emote_type: str) -> Dict[str, Any]:
        with self.rooms.locked():
            room = self.rooms.get(room_id)
            if room is None:
                raise NotFoundError("Game not found")

            if not room.is_seated(user.id):
                raise ForbiddenError("You are not in this game")

            now = _utcnow()
            room.show_emote = True
            room.emote_type = emote_type
            room.emote_by = user.username
            room.emote_at = now
            room.touch(now)
            logger.info(f"Game {room.code}: {user.username} triggered emote {emote_type}")
            return self.snapshot(room)

    def get_state(self, room_id: Optional[str], now: Optional[datetime] = None) -> Dict[str, Any]:
        """Return a room snapshot, clearing an emote that has been shown long enough"""
        if not room_id:
            raise BadRequestError("Room ID required")

        now = now or _utcnow()
        with self.rooms.locked():
            room = self.rooms.get(room_id)
            if room is None:
                raise NotFoundError("Game not found")

            if room.show_emote and room.emote_at is not None and now - room.emote_at > self.emote_duration:
                room.clear_emote()
            return self.snapshot(room)

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """Delete rooms idle for longer than the room TTL; returns how many were removed"""
        cutoff = (now or _utcnow()) - self.room_ttl
        with self.rooms.locked():
            expired = self.rooms.idle_since(cutoff)
            for room in expired:
                self.rooms.remove(room)
                logger.info(f"Cleaned up old game room: {room.code}")
        return len(expired)

    def _settle(self, room: GameRoom):
        """Apply score deltas for a finished room and persist them"""
        if room.winner == DRAW:
            results = {room.player_x_id: "draw", room.player_o_id: "draw"}
        else:
            results = {
                room.seat_of(room.winner): "win",
                room.seat_of(other_mark(room.winner)): "loss",
            }
        self.users.apply_results({user_id: result for user_id, result in results.items() if user_id})
