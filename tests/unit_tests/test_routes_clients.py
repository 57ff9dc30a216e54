"""Test suite for Client and Contact API endpoints."""

from fastapi import status

from tests.consts import API_BASE

CLIENT_REPOSITORY = "filmops_api.routes.routes_clients.ClientRepository"
CONTACT_REPOSITORY = "filmops_api.routes.routes_clients.ContactRepository"


class TestClients:
    """Tests for /api/clients."""

    def test_list_is_bare_array(self, client, patch_repository, client_row):
        patch_repository(CLIENT_REPOSITORY, list_clients=[client_row])

        response = client.get(f"{API_BASE}/clients")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data[0]["name"] == "Northwind Pictures"
        assert data[0]["contactPerson"] == "Alex Kim"

    def test_get(self, client, patch_repository, client_row):
        patch_repository(CLIENT_REPOSITORY, get_by_id=client_row)

        response = client.get(f"{API_BASE}/clients/3")

        assert response.json()["client"]["phoneNumber"] == "555-0100"

    def test_get_not_found(self, client, patch_repository):
        patch_repository(CLIENT_REPOSITORY, get_by_id=None)

        response = client.get(f"{API_BASE}/clients/3")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "error": "Client not found"}

    def test_create(self, client, patch_repository, client_row):
        repo = patch_repository(CLIENT_REPOSITORY, create_client=client_row)

        response = client.post(
            f"{API_BASE}/clients",
            json={"name": "Northwind Pictures", "contactPerson": "Alex Kim", "email": ""},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["success"] is True
        fields = repo.create_client.await_args.args[0]
        assert fields["contact_person"] == "Alex Kim"
        assert fields["email"] is None

    def test_create_requires_name(self, client, patch_repository):
        patch_repository(CLIENT_REPOSITORY, create_client=None)

        response = client.post(f"{API_BASE}/clients", json={"email": "a@b.test"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Client name is required"

    def test_update_not_found(self, client, patch_repository):
        patch_repository(CLIENT_REPOSITORY, update_client=None)

        response = client.put(f"{API_BASE}/clients/3", json={"name": "Renamed"})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete(self, client, patch_repository):
        patch_repository(CLIENT_REPOSITORY, delete_client=True)

        response = client.delete(f"{API_BASE}/clients/3")

        assert response.json() == {"success": True, "message": "Client deleted successfully"}

    def test_client_contacts_primary_first(self, client, patch_repository, contact_row):
        secondary = {**contact_row, "id": 22, "name": "Bo Lind", "is_primary": False}
        repo = patch_repository(CONTACT_REPOSITORY, list_for_client=[contact_row, secondary])

        response = client.get(f"{API_BASE}/clients/3/contacts")

        assert response.status_code == status.HTTP_200_OK
        assert [c["isPrimary"] for c in response.json()] == [True, False]
        repo.list_for_client.assert_awaited_once_with(3)


class TestContacts:
    """Tests for /api/contacts."""

    def test_list_has_count(self, client, patch_repository, contact_row):
        patch_repository(CONTACT_REPOSITORY, list_contacts=[contact_row])

        response = client.get(f"{API_BASE}/contacts")

        body = response.json()
        assert body["success"] is True
        assert body["count"] == 1
        assert body["contacts"][0]["clientName"] == "Northwind Pictures"

    def test_get_not_found(self, client, patch_repository):
        patch_repository(CONTACT_REPOSITORY, get_contact=None)

        response = client.get(f"{API_BASE}/contacts/21")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Contact not found"

    def test_create_primary(self, client, patch_repository, contact_row):
        repo = patch_repository(CONTACT_REPOSITORY, create_contact=contact_row)

        response = client.post(
            f"{API_BASE}/contacts",
            json={"clientId": 3, "name": "Alex Kim", "isPrimary": True},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["contact"]["isPrimary"] is True
        fields = repo.create_contact.await_args.args[0]
        assert fields["client_id"] == 3
        assert fields["is_primary"] is True

    def test_create_requires_name(self, client):
        response = client.post(f"{API_BASE}/contacts", json={"clientId": 3})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Contact name is required"

    def test_update(self, client, patch_repository, contact_row):
        repo = patch_repository(CONTACT_REPOSITORY, update_contact=contact_row)

        response = client.put(f"{API_BASE}/contacts/21", json={"clientId": 3, "name": "Alex Kim"})

        assert response.status_code == status.HTTP_200_OK
        assert repo.update_contact.await_args.args[0] == 21
        assert repo.update_contact.await_args.args[1]["is_primary"] is False

    def test_delete_not_found(self, client, patch_repository):
        patch_repository(CONTACT_REPOSITORY, delete_contact=False)

        response = client.delete(f"{API_BASE}/contacts/21")

        assert response.status_code == status.HTTP_404_NOT_FOUND
