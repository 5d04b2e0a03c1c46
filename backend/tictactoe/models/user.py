from datetime import datetime, timezone
from typing import Any, Dict, Optional


class Scores:
    """Cumulative win/loss/draw counters for a user"""

    def __init__(self, wins: int = 0, losses: int = 0, draws: int = 0):
        self.wins = wins
        self.losses = losses
        self.draws = draws

    def to_dict(self) -> Dict[str, int]:
        return {"wins": self.wins, "losses": self.losses, "draws": self.draws}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Scores":
        data = data or {}
        return cls(
            wins=int(data.get("wins", 0)),
            losses=int(data.get("losses", 0)),
            draws=int(data.get("draws", 0)),
        )


class User:
    """User account with its scores"""

    def __init__(self, id: str, username: str, scores: Optional[Scores] = None,
                 created_at: Optional[datetime] = None):
        self.id = id
        self.username = username
        self.scores = scores or Scores()
        self.created_at = created_at or datetime.now(timezone.utc)

    def __repr__(self):
        return f"<User {self.username}>"

    def to_dict(self) -> Dict[str, Any]:
        """Convert user to its JSON shape (also the persisted shape)"""
        return {
            "id": self.id,
            "username": self.username,
            "scores": self.scores.to_dict(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        created_at = data.get("created_at")
        return cls(
            id=data["id"],
            username=data["username"],
            scores=Scores.from_dict(data.get("scores")),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
