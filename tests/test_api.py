import pytest

from app.core.config import settings


def register(client, username, password="secret123"):
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()


def login(client, identifier, password="secret123"):
    response = client.post("/api/auth/login", json={"identifier": identifier, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def game_id(client, name):
    games = client.get("/api/games").json()
    return next(g["id"] for g in games if g["name"] == name)


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


class TestAuthAPI:

    def test_register_logs_in(self, client):
        data = register(client, "alice")
        assert data["role"] == "ADMIN"
        assert "password_hash" not in data

        current = client.get("/api/auth/current").json()
        assert current["id"] == data["id"]

    def test_second_user_is_member(self, client):
        register(client, "alice")
        assert register(client, "bob")["role"] == "MEMBER"

    def test_duplicate_registration(self, client):
        register(client, "alice")
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "new@example.com", "password": "secret123"}
        )
        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "This username is already taken"}

    def test_invalid_email(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "not-an-email", "password": "secret123"}
        )
        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_logout_and_login(self, client):
        alice = register(client, "alice")
        client.post("/api/auth/logout")
        assert client.get("/api/auth/current").json() is None

        assert login(client, "alice@example.com")["id"] == alice["id"]

        response = client.post("/api/auth/login", json={"identifier": "alice", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid username/email or password"

    def test_password_reset_flow(self, client, monkeypatch):
        monkeypatch.setattr(settings, "EXPOSE_RESET_LINK", True)
        register(client, "alice")

        data = client.post("/api/auth/forgot-password", json={"email": "alice@example.com"}).json()
        token = data["reset_link"].split("token=", 1)[1]

        response = client.post("/api/auth/reset-password", json={"token": token, "password": "brandnew"})
        assert response.status_code == 200
        login(client, "alice", "brandnew")

        response = client.post("/api/auth/reset-password", json={"token": token, "password": "again123"})
        assert response.status_code == 404

    def test_reset_link_hidden_by_default(self, client, monkeypatch):
        monkeypatch.setattr(settings, "EXPOSE_RESET_LINK", False)
        register(client, "alice")

        data = client.post("/api/auth/forgot-password", json={"email": "alice@example.com"}).json()
        assert data["success"] is True
        assert data["reset_link"] is None


class TestScoresAPI:

    def test_games_are_seeded(self, client):
        games = client.get("/api/games").json()
        names = [g["name"] for g in games]
        assert "Speed Match" in names
        assert names == sorted(names)

    def test_submit_requires_login(self, client):
        response = client.post("/api/scores", json={"game_id": game_id(client, "Speed Match"), "score": 10})
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "You must be logged in"}

    def test_score_must_be_positive(self, client):
        register(client, "alice")
        response = client.post("/api/scores", json={"game_id": game_id(client, "Speed Match"), "score": 0})
        assert response.status_code == 422

    def test_unknown_game(self, client):
        register(client, "alice")
        response = client.post(
            "/api/scores", json={"game_id": "00000000-0000-0000-0000-000000000000", "score": 10}
        )
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_leader_change_scenario(self, client):
        speed_match = game_id(client, "Speed Match")
        register(client, "alice")
        register(client, "bob")

        login(client, "alice")
        data = client.post("/api/scores", json={"game_id": speed_match, "score": 100}).json()
        assert data["new_leader"] is True
        assert data["is_first_leader"] is True
        assert data["game_name"] == "Speed Match"
        assert data["score"]["score"] == 100
        assert data["unlocked_achievements"] == ["FIRST_SCORE", "TOP_10"]

        login(client, "bob")
        data = client.post("/api/scores", json={"game_id": speed_match, "score": 150}).json()
        assert data["new_leader"] is True
        assert data["is_first_leader"] is False
        assert data["previous_leader"] == "alice"

        login(client, "alice")
        for stale in (90, 100):
            response = client.post("/api/scores", json={"game_id": speed_match, "score": stale})
            assert response.status_code == 400
            assert response.json() == {
                "success": False,
                "message": "New score must be higher than existing score"
            }

        scores = client.get("/api/scores").json()
        assert [(s["game"]["name"], s["score"]) for s in scores] == [("Speed Match", 100)]

        # Beats her own best but not the leader
        response = client.post("/api/scores", json={"game_id": speed_match, "score": 120})
        assert response.status_code == 200
        data = response.json()
        assert data["new_leader"] is False
        assert data["previous_leader"] is None
        assert data["score"]["score"] == 120

        board = client.get("/api/leaderboard", params={"gameName": "Speed Match"}).json()
        assert [(e["username"], e["score"]) for e in board] == [("bob", 150), ("alice", 120)]

    def test_score_too_large(self, client):
        register(client, "alice")
        response = client.post(
            "/api/scores", json={"game_id": game_id(client, "Speed Match"), "score": 2 ** 63}
        )
        assert response.status_code == 422
        assert response.json()["success"] is False
        assert client.get("/api/scores").json() == []

    def test_delete_own_score_only(self, client):
        register(client, "alice")
        register(client, "bob")

        login(client, "alice")
        client.post("/api/scores", json={"game_id": game_id(client, "Raindrops"), "score": 30})
        score_id = client.get("/api/scores").json()[0]["id"]

        login(client, "bob")
        response = client.delete(f"/api/scores/{score_id}")
        assert response.status_code == 403
        assert response.json()["message"] == "Unauthorized: You can only delete your own scores"

        login(client, "alice")
        response = client.delete(f"/api/scores/{score_id}")
        assert response.json() == {"success": True, "message": "Score deleted successfully"}
        assert client.get("/api/scores").json() == []

        response = client.delete(f"/api/scores/{score_id}")
        assert response.status_code == 404


class TestUsersAPI:

    def test_stats(self, client):
        alice = register(client, "alice")
        client.post("/api/scores", json={"game_id": game_id(client, "Eagle Eye"), "score": 77})

        stats = client.get(f"/api/users/{alice['id']}/stats").json()

        assert stats["total_games_played"] == 1
        assert stats["total_score_sum"] == 77
        assert stats["rank_by_game_count"] == 1
        assert {a["type"] for a in stats["achievements"]} == {"FIRST_SCORE", "TOP_10"}

    def test_unknown_user_stats(self, client):
        response = client.get("/api/users/nobody/stats")
        assert response.status_code == 404

    def test_update_profile(self, client):
        admin = register(client, "admin")
        bob = register(client, "bob")

        response = client.patch(
            f"/api/users/{admin['id']}",
            json={"username": "admin", "email": "admin@example.com"}
        )
        assert response.status_code == 403

        response = client.patch(
            f"/api/users/{bob['id']}",
            json={"username": "bobby", "email": "bob@example.com", "avatar_url": "ftp://x"}
        )
        assert response.status_code == 422

        login(client, "admin")
        response = client.patch(
            f"/api/users/{admin['id']}",
            json={"username": "admin", "email": "admin@example.com", "role": "MEMBER"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "At least one admin account must remain in the system"

    def test_list_users(self, client):
        register(client, "bob")
        register(client, "alice")
        assert [u["username"] for u in client.get("/api/users").json()] == ["alice", "bob"]


class TestFriendsAPI:

    def test_request_accept_and_compare(self, client):
        alice = register(client, "alice")
        bob = register(client, "bob")
        speed_match = game_id(client, "Speed Match")

        client.post("/api/scores", json={"game_id": speed_match, "score": 10})

        login(client, "alice")
        client.post("/api/scores", json={"game_id": speed_match, "score": 20})
        request = client.post("/api/friends/requests", json={"friend_id": bob["id"]}).json()
        assert request["status"] == "PENDING"

        response = client.post("/api/friends/requests", json={"friend_id": bob["id"]})
        assert response.status_code == 400
        assert response.json()["message"] == "Friend request already pending"

        login(client, "bob")
        pending = client.get("/api/friends/requests").json()
        assert [r["user"]["username"] for r in pending] == ["alice"]

        accepted = client.post(f"/api/friends/requests/{request['id']}/accept").json()
        assert accepted["status"] == "ACCEPTED"
        assert [u["username"] for u in client.get("/api/friends").json()] == ["alice"]

        comparison = client.get(
            "/api/friends/compare", params={"userId": bob["id"], "friendId": alice["id"]}
        ).json()
        assert comparison["record"] == {"wins": 0, "losses": 1, "ties": 0}
        assert comparison["comparisons"][0]["result"] == "loss"

    def test_self_request(self, client):
        alice = register(client, "alice")
        response = client.post("/api/friends/requests", json={"friend_id": alice["id"]})
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot send friend request to yourself"

    def test_compare_needs_both_users(self, client):
        alice = register(client, "alice")
        response = client.get("/api/friends/compare", params={"userId": alice["id"]})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Missing userId or friendId"}


class TestLeaderboardAPI:

    @pytest.fixture
    def played(self, client):
        users = {name: register(client, name) for name in ("alice", "bob", "carol")}
        plays = [
            ("alice", "Speed Match", 100), ("alice", "Raindrops", 300),
            ("bob", "Speed Match", 200),
            ("carol", "Eagle Eye", 50),
        ]
        for username, game_name, score in plays:
            login(client, username)
            response = client.post("/api/scores", json={"game_id": game_id(client, game_name), "score": score})
            assert response.status_code == 200
        return users

    def test_global(self, client, played):
        board = client.get("/api/leaderboard").json()

        assert [(e["rank"], e["username"]) for e in board] == [(1, "alice"), (2, "bob"), (3, "carol")]
        assert board[0]["game_count"] == 2
        assert board[0]["total_score"] == 400
        assert board[0]["best_game"] == "Raindrops"

    def test_per_game(self, client, played):
        board = client.get("/api/leaderboard", params={"gameName": "Speed Match"}).json()
        assert [(e["username"], e["score"], e["game_count"]) for e in board] == [
            ("bob", 200, 1), ("alice", 100, 2)
        ]

        by_id = client.get("/api/leaderboard", params={"gameId": game_id(client, "Speed Match")}).json()
        assert by_id == board

    def test_unknown_game(self, client, played):
        response = client.get("/api/leaderboard", params={"gameName": "Tetris"})
        assert response.status_code == 404

    def test_champions(self, client, played):
        champions = client.get("/api/leaderboard", params={"champions": "true"}).json()
        assert [(c["game_name"], c["username"]) for c in champions] == [
            ("Eagle Eye", "carol"), ("Raindrops", "alice"), ("Speed Match", "bob")
        ]

    def test_user_champions(self, client, played):
        champions = client.get("/api/leaderboard", params={"userChampions": "true"}).json()
        assert [(c["username"], c["games_led"]) for c in champions] == [
            ("alice", 1), ("bob", 1), ("carol", 1)
        ]

    def test_friends(self, client, played):
        login(client, "alice")
        request = client.post("/api/friends/requests", json={"friend_id": played["carol"]["id"]}).json()
        login(client, "carol")
        client.post(f"/api/friends/requests/{request['id']}/accept")

        board = client.get(
            "/api/leaderboard", params={"type": "friends", "userId": played["alice"]["id"]}
        ).json()
        assert [e["username"] for e in board] == ["alice", "carol"]

        game_board = client.get(
            "/api/leaderboard",
            params={"type": "friends", "userId": played["alice"]["id"], "gameName": "Speed Match"}
        ).json()
        assert [e["username"] for e in game_board] == ["alice"]
