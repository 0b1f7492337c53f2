from fastapi.testclient import TestClient

from tourneyhub.models import Team, TeamMember

CAPTAIN_HEADERS = {"x-user-uuid": "captain-1", "x-user-name": "Captain"}
OUTSIDER_HEADERS = {"x-user-uuid": "outsider", "x-user-name": "Outsider"}


def create_team(client, game, name="Night Owls"):
    response = client.post(
        "/teams",
        json={"action": "create", "name": name, "tag": "NOWL", "game_id": game.id},
        headers=CAPTAIN_HEADERS,
    )
    assert response.status_code == 200
    return response.json()["team"]


class TestTeamRoutes:

    def test_requires_identity(self, client: TestClient):
        response = client.post("/teams", json={"action": "get_user_teams"})

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_invalid_action(self, client: TestClient):
        response = client.post("/teams", json={"action": "promote_everyone"}, headers=CAPTAIN_HEADERS)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid action"}

    def test_create_team(self, client: TestClient, db, game):
        team = create_team(client, game)

        assert team["name"] == "Night Owls"
        assert team["captain_user_uuid"] == "captain-1"
        assert team["game_name"] == "Valorant"
        assert team["member_count"] == 1
        assert team["invite_code"].startswith("TEAM_")
        assert db.query(TeamMember).filter(TeamMember.team_id == team["id"]).count() == 1

    def test_create_team_ignores_captain_in_body(self, client: TestClient, game):
        response = client.post(
            "/teams",
            json={"action": "create", "name": "Ghosts", "game_id": game.id, "user_uuid": "someone-else"},
            headers=CAPTAIN_HEADERS,
        )

        assert response.json()["team"]["captain_user_uuid"] == "captain-1"

    def test_duplicate_team_name(self, client: TestClient, game):
        create_team(client, game)

        response = client.post(
            "/teams",
            json={"action": "create", "name": "Night Owls", "game_id": game.id},
            headers=OUTSIDER_HEADERS,
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "A team with this name already exists"}

    def test_get_team_by_id(self, client: TestClient, game):
        team = create_team(client, game)

        response = client.post("/teams", json={"action": "get_team_by_id", "team_id": team["id"]}, headers=CAPTAIN_HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["team"]["id"] == team["id"]
        assert "invite_code" not in body["team"]
        assert [m["user_uuid"] for m in body["members"]] == ["captain-1"]
        assert body["members"][0]["role"] == "captain"

    def test_get_team_by_id_forbidden_for_outsiders(self, client: TestClient, game):
        team = create_team(client, game)

        response = client.post("/teams", json={"action": "get_team_by_id", "team_id": team["id"]}, headers=OUTSIDER_HEADERS)

        assert response.status_code == 403

    def test_get_user_teams(self, client: TestClient, game):
        create_team(client, game, name="First")
        create_team(client, game, name="Second")

        response = client.post("/teams", json={"action": "get_user_teams"}, headers=CAPTAIN_HEADERS)

        assert response.status_code == 200
        assert sorted(t["name"] for t in response.json()["teams"]) == ["First", "Second"]

    def test_update_team_by_captain(self, client: TestClient, game):
        team = create_team(client, game)

        response = client.post(
            "/teams",
            json={"action": "update_team", "team_id": team["id"], "name": "Early Birds", "tag": "EB"},
            headers=CAPTAIN_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["team"]["name"] == "Early Birds"

    def test_update_team_by_non_captain(self, client: TestClient, db, game):
        team = create_team(client, game)

        response = client.post(
            "/teams",
            json={"action": "update_team", "team_id": team["id"], "name": "Hijacked"},
            headers=OUTSIDER_HEADERS,
        )

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Only the team captain can update the team"}
        db.expire_all()
        assert db.get(Team, team["id"]).name == "Night Owls"

    def test_update_team_by_non_captain_with_bad_name(self, client: TestClient, game):
        team = create_team(client, game)

        response = client.post(
            "/teams",
            json={"action": "update_team", "team_id": team["id"], "name": "A"},
            headers=OUTSIDER_HEADERS,
        )

        assert response.status_code == 403

    def test_update_team_requires_team_id(self, client: TestClient):
        response = client.post("/teams", json={"action": "update_team", "name": "Nobody"}, headers=CAPTAIN_HEADERS)

        assert response.status_code == 400

    def test_delete_team(self, client: TestClient, db, game):
        team = create_team(client, game)

        response = client.post("/teams", json={"action": "delete_team", "team_id": team["id"]}, headers=CAPTAIN_HEADERS)

        assert response.status_code == 200
        assert db.query(Team).count() == 0
        assert db.query(TeamMember).count() == 0
