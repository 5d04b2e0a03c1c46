"""
End-to-end tests of the HTTP API using FastAPI's TestClient
"""
import pytest
from fastapi.testclient import TestClient

from tictactoe.config import Settings
from tictactoe.main import create_app


@pytest.fixture
def client(db_path):
    app = create_app(Settings(user_store_backend="file", user_db_file=db_path, static_dir=None))
    with TestClient(app) as test_client:
        yield test_client


def register(client, username):
    res = client.post("/api/register", json={"username": username})
    assert res.status_code == 200
    body = res.json()
    return body["token"], body["user"]


def auth(token):
    return {"Authorization": token}


@pytest.fixture
def two_players(client):
    alice_token, _ = register(client, "alice")
    bob_token, _ = register(client, "bob")
    room = client.post("/api/game/create", json={"board_size": 3}, headers=auth(alice_token)).json()
    client.post("/api/game/join", json={"code": room["code"]}, headers=auth(bob_token))
    return alice_token, bob_token, room


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    health = client.get("/api/health").json()
    assert health["status"] == "ok"
    assert health["services"]["sweeper"] == "running"


def test_corrupt_database_is_reported_and_kept(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json")
    app = create_app(Settings(user_store_backend="file", user_db_file=str(path), static_dir=None))

    with TestClient(app) as client:
        health = client.get("/api/health").json()
        assert health["services"]["user_store"].endswith("unreadable")
        register(client, "alice")

    assert path.read_text() == "{not json"


class TestAccounts:

    def test_register_and_get_user(self, client):
        token, user = register(client, "alice")

        res = client.get("/api/user", headers=auth(token))
        assert res.status_code == 200
        assert res.json()["id"] == user["id"]
        assert res.json()["scores"] == {"wins": 0, "losses": 0, "draws": 0}

    def test_bearer_prefix_is_accepted(self, client):
        token, _ = register(client, "alice")
        res = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200

    def test_register_errors(self, client):
        register(client, "alice")

        res = client.post("/api/register", json={"username": "alice"})
        assert res.status_code == 409
        assert res.json() == {"error": "Username already taken"}

        res = client.post("/api/register", json={"username": "a"})
        assert res.status_code == 400

        res = client.post("/api/register", content="not json", headers={"Content-Type": "application/json"})
        assert res.status_code == 400
        assert res.json() == {"error": "Invalid request body"}

    def test_login_and_logout(self, client):
        register(client, "alice")

        res = client.post("/api/login", json={"username": "alice"})
        assert res.status_code == 200
        token = res.json()["token"]

        assert client.post("/api/logout", headers=auth(token)).json() == {"status": "ok"}
        assert client.get("/api/user", headers=auth(token)).status_code == 401

    def test_login_unknown(self, client):
        assert client.post("/api/login", json={"username": "ghost"}).status_code == 404

    def test_unauthenticated(self, client):
        res = client.get("/api/user")
        assert res.status_code == 401
        assert res.json() == {"error": "Not authenticated"}
        assert client.post("/api/game/create", json={}).status_code == 401

    def test_update_score_and_leaderboard(self, client):
        alice, _ = register(client, "alice")
        bob, _ = register(client, "bob")

        res = client.post("/api/score", json={"result": "win"}, headers=auth(bob))
        assert res.json()["scores"]["wins"] == 1
        assert client.post("/api/score", json={"result": "nope"}, headers=auth(bob)).status_code == 400

        board = client.get("/api/leaderboard").json()
        assert [user["username"] for user in board] == ["bob", "alice"]


class TestGames:

    def test_create_defaults_to_three(self, client):
        token, _ = register(client, "alice")
        room = client.post("/api/game/create", json={"board_size": 7}, headers=auth(token)).json()
        assert room["board_size"] == 3
        assert room["status"] == "waiting"

        room = client.post("/api/game/create", headers=auth(token)).json()
        assert room["board_size"] == 3

    def test_join_errors(self, client, two_players):
        carol, _ = register(client, "carol")
        _, _, room = two_players

        assert client.post("/api/game/join", json={"code": "QQQQQQ"}, headers=auth(carol)).status_code == 404
        res = client.post("/api/game/join", json={"code": room["code"]}, headers=auth(carol))
        assert res.status_code == 409
        assert res.json() == {"error": "Game is full"}

    def test_full_game(self, client, two_players):
        alice, bob, room = two_players
        for token, index in [(alice, 4), (bob, 0), (alice, 1), (bob, 2), (alice, 7)]:
            res = client.post("/api/game/move", json={"room_id": room["id"], "index": index},
                              headers=auth(token))
            assert res.status_code == 200

        state = client.get("/api/game/state", params={"room_id": room["id"]}).json()
        assert state["winner"] == "X"
        assert state["winning_line"] == [1, 4, 7]
        assert state["status"] == "finished"

        me = client.get("/api/user", headers=auth(alice)).json()
        assert me["scores"]["wins"] == 1

    def test_move_errors(self, client, two_players):
        alice, bob, room = two_players
        carol, _ = register(client, "carol")

        def move(token, index, room_id=room["id"]):
            return client.post("/api/game/move", json={"room_id": room_id, "index": index}, headers=auth(token))

        assert move(bob, 0).status_code == 400
        assert move(carol, 0).status_code == 403
        assert move(alice, 9).status_code == 400
        assert move(alice, 0, room_id="missing").status_code == 404
        assert move(alice, 0).status_code == 200
        assert move(bob, 0).json() == {"error": "Cell already taken"}

    def test_state_errors(self, client):
        assert client.get("/api/game/state").status_code == 400
        assert client.get("/api/game/state", params={"room_id": "missing"}).status_code == 404

    def test_leave_forfeits(self, client, two_players):
        alice, bob, room = two_players

        res = client.post("/api/game/leave", json={"room_id": room["id"]}, headers=auth(bob))
        assert res.json() == {"status": "ok"}

        state = client.get("/api/game/state", params={"room_id": room["id"]}).json()
        assert state["winner"] == "X"
        assert state["player_o"]["scores"]["losses"] == 1

        # Leaving again deletes the finished room; a third leave is still ok
        client.post("/api/game/leave", json={"room_id": room["id"]}, headers=auth(alice))
        assert client.get("/api/game/state", params={"room_id": room["id"]}).status_code == 404
        res = client.post("/api/game/leave", json={"room_id": room["id"]}, headers=auth(alice))
        assert res.status_code == 200

    def test_emote(self, client, two_players):
        alice, _, room = two_players
        carol, _ = register(client, "carol")

        res = client.post("/api/game/emote", json={"room_id": room["id"], "emote_type": "deal_with_it"},
                          headers=auth(alice))
        assert res.json()["show_emote"] is True
        assert res.json()["emote_by"] == "alice"

        res = client.post("/api/game/emote", json={"room_id": room["id"], "emote_type": "deal_with_it"},
                          headers=auth(carol))
        assert res.status_code == 403
        res = client.post("/api/game/emote", json={"room_id": "missing", "emote_type": "x"}, headers=auth(alice))
        assert res.status_code == 404
