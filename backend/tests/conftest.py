import sys
import os
import pytest

# Add the parent directory to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tictactoe.services.room_manager import RoomManager
from tictactoe.services.room_registry import RoomRegistry
from tictactoe.services.user_registry import UserRegistry
from tictactoe.store.user_store import JsonFileUserStore


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "users.json")


@pytest.fixture
def users(db_path):
    """User registry persisting to a temporary JSON file"""
    return UserRegistry(JsonFileUserStore(db_path))


@pytest.fixture
def rooms():
    return RoomRegistry()


@pytest.fixture
def manager(rooms, users):
    return RoomManager(rooms, users)


@pytest.fixture
def alice(users):
    return users.register("alice")


@pytest.fixture
def bob(users):
    return users.register("bob")


@pytest.fixture
def carol(users):
    return users.register("carol")


@pytest.fixture
def playing_room(manager, alice, bob):
    """A 3x3 room with alice as X and bob as O, ready for X's first move"""
    room = manager.create_room(alice, 3)
    return manager.join_room(bob, room["code"])
