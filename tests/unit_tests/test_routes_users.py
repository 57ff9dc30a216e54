"""Test suite for User API endpoints."""

from datetime import date

from fastapi import status

from filmops_api.db.repository_user import DuplicateEmailError
from tests.consts import API_BASE

REPOSITORY = "filmops_api.routes.routes_users.UserRepository"
TEAM_REPOSITORY = "filmops_api.routes.routes_users.TeamRepository"

USER_BODY = {"firstName": "Jo", "lastName": "Park", "email": "jo.park@filmops.test", "roleId": 2}


class TestUsers:
    """Tests for /api/users."""

    def test_list(self, client, patch_repository, user_row):
        patch_repository(REPOSITORY, list_users=[user_row])

        response = client.get(f"{API_BASE}/users")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["count"] == 1
        assert body["users"][0]["role"] == {"id": 2, "name": "Crew"}
        assert body["users"][0]["exclusiveUsage"] is True

    def test_get_not_found(self, client, patch_repository):
        patch_repository(REPOSITORY, get_user=None)

        response = client.get(f"{API_BASE}/users/4")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "error": "User not found"}

    def test_user_without_role(self, client, patch_repository, user_row):
        patch_repository(REPOSITORY, get_user={**user_row, "role_id": None, "role_name": None})

        response = client.get(f"{API_BASE}/users/4")

        assert response.json()["user"]["role"] is None

    def test_create(self, client, patch_repository, user_row):
        repo = patch_repository(REPOSITORY, create_user=user_row)

        response = client.post(f"{API_BASE}/users", json=USER_BODY)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["id"] == 4
        fields = repo.create_user.await_args.args[0]
        assert fields["first_name"] == "Jo"
        assert fields["role_id"] == 2
        assert fields["exclusive_usage"] is None

    def test_create_requires_names_and_email(self, client):
        response = client.post(f"{API_BASE}/users", json={"firstName": "Jo", "email": " "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "First name, last name, and email are required"

    def test_duplicate_email(self, client, patch_repository):
        repo = patch_repository(REPOSITORY)
        repo.create_user.side_effect = DuplicateEmailError("User with this email already exists")

        response = client.post(f"{API_BASE}/users", json=USER_BODY)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"success": False, "error": "User with this email already exists"}

    def test_update_email_taken(self, client, patch_repository):
        repo = patch_repository(REPOSITORY)
        repo.update_user.side_effect = DuplicateEmailError("Email already taken by another user")

        response = client.put(f"{API_BASE}/users/4", json=USER_BODY)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Email already taken by another user"

    def test_update_not_found(self, client, patch_repository):
        patch_repository(REPOSITORY, update_user=None)

        response = client.put(f"{API_BASE}/users/4", json=USER_BODY)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete(self, client, patch_repository):
        patch_repository(REPOSITORY, delete_user=True)

        response = client.delete(f"{API_BASE}/users/4")

        assert response.json() == {"success": True, "message": "User deleted successfully"}


class TestUserConflicts:
    """Tests for GET /api/users/{userId}/conflicts."""

    PARAMS = {"startDate": "2025-04-01", "endDate": "2025-04-05"}

    def test_exclusive_user_conflicts(self, client, patch_repository, user_row):
        patch_repository(REPOSITORY, get_user=user_row)
        team_repo = patch_repository(
            TEAM_REPOSITORY,
            find_exclusive_conflicts=[
                {
                    "id": 5,
                    "project_id": 12,
                    "project_name": "Night exteriors",
                    "role_name": "Gaffer",
                    "start_date": date(2025, 4, 3),
                    "end_date": date(2025, 4, 9),
                }
            ],
        )

        response = client.get(f"{API_BASE}/users/4/conflicts", params={**self.PARAMS, "excludeProjectId": 10})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["exclusiveUsage"] is True
        assert body["count"] == 1
        assert body["conflicts"][0]["projectName"] == "Night exteriors"
        team_repo.find_exclusive_conflicts.assert_awaited_once_with(
            4, date(2025, 4, 1), date(2025, 4, 5), exclude_project_id=10
        )

    def test_non_exclusive_user_never_conflicts(self, client, patch_repository, user_row):
        patch_repository(REPOSITORY, get_user={**user_row, "exclusive_usage": False})
        team_repo = patch_repository(TEAM_REPOSITORY, find_exclusive_conflicts=[])

        response = client.get(f"{API_BASE}/users/4/conflicts", params=self.PARAMS)

        assert response.json()["conflicts"] == []
        team_repo.find_exclusive_conflicts.assert_not_awaited()

    def test_reversed_range(self, client, patch_repository):
        repo = patch_repository(REPOSITORY, get_user=None)

        response = client.get(
            f"{API_BASE}/users/4/conflicts", params={"startDate": "2025-04-05", "endDate": "2025-04-01"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "End date cannot be before start date"
        repo.get_user.assert_not_awaited()

    def test_unknown_user(self, client, patch_repository):
        patch_repository(REPOSITORY, get_user=None)

        response = client.get(f"{API_BASE}/users/404/conflicts", params=self.PARAMS)

        assert response.status_code == status.HTTP_404_NOT_FOUND
