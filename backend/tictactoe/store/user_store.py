"""
Durable user stores: a JSON file on disk or a single Redis key

Both keep the whole user registry as one document that is loaded once at
startup and rewritten in full on every change.
"""
import os
import json
import logging
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import redis

from ..errors import StoreError
from ..models.user import User

logger = logging.getLogger(__name__)


def _encode_users(users: Dict[str, User]) -> str:
    return json.dumps({"users": {user_id: user.to_dict() for user_id, user in users.items()}}, indent=2)


def _decode_users(raw: str) -> Dict[str, User]:
    try:
        document: Dict[str, Any] = json.loads(raw) or {}
        records = document.get("users") or {}
        return {user_id: User.from_dict(record) for user_id, record in records.items()}
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise StoreError(f"Error parsing user database: {str(e)}") from e


class UserStore(ABC):
    """Base interface for all durable user stores"""

    @abstractmethod
    def load(self) -> Dict[str, User]:
        """
        Load every stored user

        Returns:
            Users keyed by id; empty if nothing has been stored yet

        Raises:
            StoreError: if the stored record exists but cannot be read
        """
        pass

    @abstractmethod
    def save(self, users: Dict[str, User]) -> None:
        """
        Replace the stored record with the given users

        Raises:
            StoreError: if the write fails
        """
        pass

    def is_available(self) -> bool:
        return True

    @abstractmethod
    def describe(self) -> str:
        pass


class JsonFileUserStore(UserStore):
    """User store backed by a JSON file"""

    def __init__(self, path: str):
        self.path = path

    def describe(self) -> str:
        return f"file:{self.path}"

    def load(self) -> Dict[str, User]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            logger.info("No existing database, starting fresh")
            return {}
        except OSError as e:
            raise StoreError(f"Error reading database: {str(e)}") from e

        users = _decode_users(raw)
        logger.info(f"Loaded {len(users)} users from {self.path}")
        return users

    def save(self, users: Dict[str, User]) -> None:
        data = _encode_users(users)
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            # Write next to the target and swap in, so readers never see a partial file
            fd, tmp_path = tempfile.mkstemp(prefix=".users-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StoreError(f"Error writing database: {str(e)}") from e


class RedisUserStore(UserStore):
    """User store keeping the whole registry under a single Redis key"""

    def __init__(self, host: str = "localhost", port: int = 6379, password: Optional[str] = None,
                 key: str = "tictactoe:users", client: Optional["redis.Redis"] = None):
        self.key = key
        self._client = client
        self._is_connected = False

        if self._client is None:
            self._client = redis.Redis(
                host=host,
                port=port,
                password=password,
                decode_responses=True,
                socket_timeout=2.0,
                socket_connect_timeout=2.0
            )

        try:
            if self._client.ping():
                self._is_connected = True
                logger.info("Successfully connected to Redis")
            else:
                logger.error("Failed to connect to Redis: ping returned False")
        except redis.exceptions.RedisError as e:
            logger.error(f"Failed to connect to Redis: {str(e)}")
            self._is_connected = False

    def describe(self) -> str:
        return f"redis:{self.key}"

    def is_available(self) -> bool:
        """
        Check if Redis is available

        Returns:
            bool: True if Redis answers a ping, False otherwise
        """
        try:
            self._is_connected = bool(self._client.ping())
        except redis.exceptions.RedisError:
            self._is_connected = False
        return self._is_connected

    def load(self) -> Dict[str, User]:
        try:
            raw = self._client.get(self.key)
        except redis.exceptions.RedisError as e:
            raise StoreError(f"Error reading users from Redis: {str(e)}") from e

        if not raw:
            logger.info("No existing database, starting fresh")
            return {}

        users = _decode_users(raw)
        logger.info(f"Loaded {len(users)} users from Redis key {self.key}")
        return users

    def save(self, users: Dict[str, User]) -> None:
        try:
            self._client.set(self.key, _encode_users(users))
        except redis.exceptions.RedisError as e:
            raise StoreError(f"Error writing users to Redis: {str(e)}") from e


def build_user_store(settings) -> UserStore:
    """Create the store selected by USER_STORE_BACKEND"""
    if settings.user_store_backend == "redis":
        return RedisUserStore(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            key=settings.redis_users_key,
        )
    if settings.user_store_backend != "file":
        logger.warning(f"Unknown user store backend '{settings.user_store_backend}', using file")
    return JsonFileUserStore(settings.user_db_file)
