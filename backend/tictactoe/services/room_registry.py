"""
Live game rooms plus the join-code index, guarded by one lock
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from threading import RLock
from typing import Dict, Iterator, List, Optional

from ..models.game_room import GameRoom
from .identifiers import generate_id, generate_join_code

logger = logging.getLogger(__name__)


class RoomRegistry:
    """
    Rooms keyed by id and a secondary index from join code to room id.

    Callers performing a read-modify-write on a room must hold locked() for
    the whole sequence; the individual methods take the same reentrant lock so
    they are also safe on their own.
    """

    def __init__(self):
        self._rooms: Dict[str, GameRoom] = {}
        self._codes: Dict[str, str] = {}
        self._lock = RLock()

    @contextmanager
    def locked(self) -> Iterator["RoomRegistry"]:
        with self._lock:
            yield self

    def create(self, player_x_id: str, board_size: int, now: Optional[datetime] = None) -> GameRoom:
        """Register a new waiting room under a join code no live room uses"""
        with self._lock:
            code = generate_join_code()
            while self.code_in_use(code):
                code = generate_join_code()
            room = GameRoom(id=generate_id(), code=code, player_x_id=player_x_id,
                            board_size=board_size, now=now)
            self._rooms[room.id] = room
            self._codes[code] = room.id
            return room

    def get(self, room_id: Optional[str]) -> Optional[GameRoom]:
        if not room_id:
            return None
        with self._lock:
            return self._rooms.get(room_id)

    def get_by_code(self, code: str) -> Optional[GameRoom]:
        with self._lock:
            room_id = self._codes.get(code)
            if room_id is None:
                return None
            return self._rooms.get(room_id)

    def remove(self, room: GameRoom) -> None:
        """Drop a room and its code mapping together"""
        with self._lock:
            self._rooms.pop(room.id, None)
            if self._codes.get(room.code) == room.id:
                del self._codes[room.code]

    def idle_since(self, cutoff: datetime) -> List[GameRoom]:
        """Rooms whose last update is older than cutoff"""
        with self._lock:
            return [room for room in self._rooms.values() if room.updated_at < cutoff]

    def code_in_use(self, code: str) -> bool:
        with self._lock:
            return code in self._codes

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id):
        with self._lock:
            return room_id in self._rooms
