from .user import User, Scores
from .game_room import GameRoom, RoomStatus

__all__ = ["User", "Scores", "GameRoom", "RoomStatus"]
