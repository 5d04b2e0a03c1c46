"""
User registry: sole owner of User records and their scores
"""
import logging
from threading import RLock
from typing import Dict, List, Optional

from ..errors import BadRequestError, ConflictError, NotFoundError, StoreError
from ..models.user import User
from ..store.user_store import UserStore
from .identifiers import generate_id

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 2
MAX_USERNAME_LENGTH = 20
RESULTS = ("win", "loss", "draw")


class UserRegistry:
    """
    Users keyed by id, backed by a durable store.

    Every mutation is followed by a full save. Save failures are logged and
    never undo the in-memory change: memory is authoritative while the process
    runs.
    """

    def __init__(self, store: UserStore):
        self.store = store
        self._users: Dict[str, User] = {}
        self._lock = RLock()
        # Set while the stored record could not be read; saving then would overwrite it
        self._load_failed = False

    @property
    def load_failed(self) -> bool:
        return self._load_failed

    def load(self) -> int:
        """
        Replace the in-memory registry with the stored one

        If the store cannot be read the registry starts empty and saves are
        suspended until a later load() succeeds, so the unread record is never
        overwritten.

        Returns:
            Number of users in the registry
        """
        try:
            users = self.store.load()
        except StoreError as e:
            logger.error(f"{str(e)}; starting with an empty registry, saves suspended")
            with self._lock:
                self._load_failed = True
                self._users = {}
                return 0

        with self._lock:
            if self._load_failed:
                # Keep users registered while the store was unreadable
                taken = {user.username for user in users.values()}
                for user_id, user in self._users.items():
                    if user.username in taken:
                        logger.warning(f"Dropping user {user.username} registered during outage: name already stored")
                        continue
                    users.setdefault(user_id, user)
                self._load_failed = False
                logger.info("Stored users loaded, saves resumed")
            self._users = users
            return len(self._users)

    def save(self) -> bool:
        with self._lock:
            if self._load_failed:
                self.load()
                if self._load_failed:
                    logger.warning("Skipping save: stored users could not be loaded")
                    return False
            snapshot = dict(self._users)
            try:
                self.store.save(snapshot)
            except StoreError as e:
                logger.error(f"Error saving database: {str(e)}")
                return False
        return True

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def get(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user
        return None

    def register(self, username: Optional[str]) -> User:
        """
        Create a new user

        Args:
            username: Display name, 2-20 characters, unique (case-sensitive)

        Returns:
            The new user

        Raises:
            BadRequestError: if the name has an invalid length
            ConflictError: if the name is taken
        """
        if not username or not MIN_USERNAME_LENGTH <= len(username) <= MAX_USERNAME_LENGTH:
            raise BadRequestError(
                f"Username must be {MIN_USERNAME_LENGTH}-{MAX_USERNAME_LENGTH} characters"
            )

        with self._lock:
            if self.find_by_username(username) is not None:
                raise ConflictError("Username already taken")
            user = User(id=generate_id(), username=username)
            self._users[user.id] = user

        logger.info(f"Registered user {username}")
        self.save()
        return user

    def login(self, username: Optional[str]) -> User:
        user = self.find_by_username(username or "")
        if user is None:
            raise NotFoundError("User not found")
        return user

    def record_result(self, user_id: str, result: str) -> User:
        """Add one win, loss or draw to a user's scores and persist"""
        if result not in RESULTS:
            raise BadRequestError("Invalid result type")
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            self._bump(user, result)
        self.save()
        return user

    def apply_results(self, results: Dict[str, str]) -> None:
        """
        Apply the score deltas of one finished game in a single save

        Args:
            results: user id -> "win" | "loss" | "draw"; unknown ids are skipped
        """
        with self._lock:
            for user_id, result in results.items():
                user = self._users.get(user_id)
                if user is None:
                    logger.warning(f"Skipping score update for unknown user {user_id}")
                    continue
                self._bump(user, result)
        self.save()

    def leaderboard(self, limit: int = 10) -> List[User]:
        with self._lock:
            users = list(self._users.values())
        # sorted() is stable, so ties keep registration order
        return sorted(users, key=lambda user: user.scores.wins, reverse=True)[:limit]

    def render(self, user_id: Optional[str]) -> Optional[dict]:
        if user_id is None:
            return None
        user = self.get(user_id)
        return user.to_dict() if user else None

    @staticmethod
    def _bump(user: User, result: str):
        if result == "win":
            user.scores.wins += 1
        elif result == "loss":
            user.scores.losses += 1
        elif result == "draw":
            user.scores.draws += 1
        else:
            raise BadRequestError("Invalid result type")
