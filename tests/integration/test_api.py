"""HTTP tests through TestClient with the in-memory repository."""

from unittest.mock import patch

import pytest

from services.errors import LinkBuildError
from tests.factories import TEST_ADDRESS_ID, TEST_USER_ID, make_users

USER_ID = str(TEST_USER_ID)
ADDRESS_ID = str(TEST_ADDRESS_ID)
MISSING_ID = "00000000-0000-0000-0000-000000000000"
BASE = "http://testserver"


def _links(body):
    return {link["relation"]: link["href"] for link in body["links"]}


def _new_user(**overrides):
    body = {
        "username": "goldberry",
        "email": "goldberry@river.example",
        "password": "river-daughter",
        "first_name": "Goldberry",
        "last_name": "Riverdaughter",
        "phone_number": "555-0101",
    }
    body.update(overrides)
    return body


class TestHealth:
    """Test health endpoints."""

    def test_health(self, client):
        response = client.get("/health", params={"echo": "hello"})
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == 200
        assert body["echo"] == "hello"
        assert "path_echo" not in body

    def test_health_with_path(self, client):
        response = client.get("/health/ping")
        assert response.status_code == 200
        assert response.json()["path_echo"] == "ping"


class TestUsersApi:
    """Test the user endpoints."""

    def test_get_user(self, client):
        response = client.get(f"/v1/users/{USER_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == USER_ID
        assert body["first_name"] == "Tom"
        assert "password_hash" not in body
        assert _links(body) == {
            "self": f"{BASE}/v1/users/{USER_ID}",
            "profile": f"{BASE}/v1/users/{USER_ID}/profile",
            "addresses": f"{BASE}/v1/users/{USER_ID}/addresses",
        }

    def test_nested_address_links(self, client):
        body = client.get(f"/v1/users/{USER_ID}").json()

        assert len(body["addresses"]) == 1
        assert _links(body["addresses"][0]) == {
            "self": f"{BASE}/v1/users/{USER_ID}/addresses/{ADDRESS_ID}",
            "user": f"{BASE}/v1/users/{USER_ID}",
        }

    def test_null_fields_omitted(self, client):
        body = client.get(f"/v1/users/{USER_ID}").json()
        assert "profile_image_url" not in body
        assert "address_line_2" not in body["addresses"][0]

    def test_empty_addresses_omitted(self, client, seeded_repository):
        user = make_users(1)[0]
        seeded_repository.users[user.id] = user

        body = client.get(f"/v1/users/{user.id}").json()

        assert "addresses" not in body
        assert _links(body)["self"] == f"{BASE}/v1/users/{user.id}"

    def test_get_missing_user(self, client):
        response = client.get(f"/v1/users/{MISSING_ID}")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Not Found",
            "message": f"User with id {MISSING_ID} not found",
            "status": 404,
        }

    def test_get_malformed_id(self, client):
        response = client.get("/v1/users/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid user id: not-a-uuid"

    def test_create_user(self, client):
        response = client.post(
            "/v1/users",
            json=_new_user(
                address={
                    "address_line_1": "River House",
                    "city": "Old Forest",
                    "state": "Eriador",
                    "zip_code": "12345",
                    "country": "Middle-earth",
                }
            ),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "goldberry"
        assert body["status"] == "active"
        assert "password" not in body
        assert _links(body)["self"] == f"{BASE}/v1/users/{body['user_id']}"
        assert body["addresses"][0]["address_type"] == "home"

    def test_create_user_missing_field(self, client):
        response = client.post("/v1/users", json=_new_user(email=None))

        assert response.status_code == 400
        assert response.json() == {
            "error": "Bad Request",
            "message": "Email must be included",
            "status": 400,
        }

    def test_create_user_bad_body(self, client):
        """Test that a schema failure is a 400 naming the field."""
        response = client.post("/v1/users", json=_new_user(address="somewhere"))
        assert response.status_code == 400
        assert "address" in response.json()["message"]

    def test_create_duplicate_username(self, client):
        response = client.post("/v1/users", json=_new_user(username="tbombadil"))
        assert response.status_code == 409
        assert response.json()["message"] == "User with username tbombadil already exists"

    def test_update_user(self, client):
        response = client.patch(f"/v1/users/{USER_ID}", json={"phone_number": "555-0199"})
        assert response.status_code == 200
        assert response.json()["phone_number"] == "555-0199"

    def test_update_username_rejected(self, client):
        response = client.patch(f"/v1/users/{USER_ID}", json={"username": "iarwain"})
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot change username or email"

    def test_update_empty_field_on_missing_user(self, client):
        response = client.patch(f"/v1/users/{MISSING_ID}", json={"first_name": ""})
        assert response.status_code == 400
        assert response.json()["message"] == "First name cannot be empty"

    def test_delete_user(self, client):
        assert client.delete(f"/v1/users/{USER_ID}").status_code == 204
        assert client.get(f"/v1/users/{USER_ID}").status_code == 404

    def test_delete_missing_user(self, client):
        assert client.delete(f"/v1/users/{MISSING_ID}").status_code == 404

    def test_link_failure_is_server_error(self, client):
        with patch("utils.hateoas.build_user_links", side_effect=LinkBuildError("no route")):
            response = client.get(f"/v1/users/{USER_ID}")
        assert response.status_code == 500
        assert response.json()["error"] == "Internal Server Error"


class TestListUsersApi:
    """Test the paginated listing."""

    @pytest.fixture
    def many(self, seeded_repository):
        for user in make_users(4):
            seeded_repository.users[user.id] = user
        return seeded_repository

    def test_middle_page(self, client, many):
        response = client.get("/v1/users", params={"page": 1, "size": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == {
            "page_number": 1,
            "page_size": 2,
            "total_pages": 3,
            "total_elements": 5,
        }
        assert len(body["users"]) == 2
        assert [link["relation"] for link in body["links"]] == ["self", "next", "prev", "first", "last"]
        assert _links(body)["next"] == f"{BASE}/v1/users?page=2&size=2"
        assert _links(body)["prev"] == f"{BASE}/v1/users?page=0&size=2"

    def test_default_single_page(self, client):
        body = client.get("/v1/users").json()
        assert body["page"]["page_size"] == 10
        assert _links(body) == {"self": f"{BASE}/v1/users?page=0&size=10"}

    def test_nested_address_links(self, client, seeded_repository):
        for user in make_users(2, with_addresses=True):
            seeded_repository.users[user.id] = user

        body = client.get("/v1/users").json()

        assert len(body["users"]) == 3
        for user in body["users"]:
            assert len(user["addresses"]) == 1
            address = user["addresses"][0]
            assert address["user_id"] == user["user_id"]
            assert _links(address) == {
                "self": f"{BASE}/v1/users/{user['user_id']}/addresses/{address['address_id']}",
                "user": f"{BASE}/v1/users/{user['user_id']}",
            }

    def test_filter(self, client, many):
        body = client.get("/v1/users", params={"username": "hobbit1"}).json()
        assert [u["username"] for u in body["users"]] == ["hobbit1"]

    def test_page_out_of_range(self, client):
        response = client.get("/v1/users", params={"page": 5})
        assert response.status_code == 400

    @pytest.mark.parametrize("params", [{"size": 0}, {"page": -1}, {"size": 1000}])
    def test_bad_pagination(self, client, params):
        assert client.get("/v1/users", params=params).status_code == 400


class TestProfileApi:
    def test_get_profile(self, client):
        response = client.get(f"/v1/users/{USER_ID}/profile")

        assert response.status_code == 200
        body = response.json()
        assert body["last_name"] == "Bombadil"
        assert [link["relation"] for link in body["links"]] == ["self", "user", "addresses"]

    def test_missing_profile(self, client):
        response = client.get(f"/v1/users/{MISSING_ID}/profile")
        assert response.status_code == 404
        assert response.json()["message"] == f"User profile not found for user id: {MISSING_ID}"


class TestAddressesApi:
    """Test the address endpoints."""

    def test_list(self, client):
        response = client.get(f"/v1/users/{USER_ID}/addresses")

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == USER_ID
        assert len(body["addresses"]) == 1
        assert _links(body) == {
            "self": f"{BASE}/v1/users/{USER_ID}/addresses",
            "user": f"{BASE}/v1/users/{USER_ID}",
            "profile": f"{BASE}/v1/users/{USER_ID}/profile",
        }

    def test_list_unknown_user_empty(self, client):
        body = client.get(f"/v1/users/{MISSING_ID}/addresses").json()
        assert "addresses" not in body
        assert _links(body)["self"] == f"{BASE}/v1/users/{MISSING_ID}/addresses"

    def test_links_use_canonical_user_id(self, client):
        """Test that a differently written user id still yields lowercase hrefs."""
        upper = USER_ID.upper()

        listing = client.get(f"/v1/users/{upper}/addresses").json()
        single = client.get(f"/v1/users/{upper}/addresses/{ADDRESS_ID}").json()

        assert listing["user_id"] == USER_ID
        assert _links(listing)["self"] == f"{BASE}/v1/users/{USER_ID}/addresses"
        assert _links(listing["addresses"][0])["user"] == f"{BASE}/v1/users/{USER_ID}"
        assert single["user_id"] == USER_ID
        assert _links(single)["self"] == f"{BASE}/v1/users/{USER_ID}/addresses/{ADDRESS_ID}"

    def test_get(self, client):
        response = client.get(f"/v1/users/{USER_ID}/addresses/{ADDRESS_ID}")
        assert response.status_code == 200
        assert response.json()["city"] == "Old Forest"

    def test_get_missing(self, client):
        response = client.get(f"/v1/users/{USER_ID}/addresses/{MISSING_ID}")
        assert response.status_code == 404

    def test_create(self, client):
        response = client.post(
            f"/v1/users/{USER_ID}/addresses",
            json={
                "address_type": "shipping",
                "address_line_1": "The Prancing Pony",
                "city": "Bree",
                "state": "Bree-land",
                "zip_code": "54321",
                "country": "Middle-earth",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == USER_ID
        assert _links(body)["self"] == f"{BASE}/v1/users/{USER_ID}/addresses/{body['address_id']}"

    def test_create_missing_field(self, client):
        response = client.post(f"/v1/users/{USER_ID}/addresses", json={"address_line_1": "x"})
        assert response.status_code == 400
        assert response.json()["message"] == "City must be included in create user address request"

    def test_create_for_unknown_user(self, client):
        response = client.post(
            f"/v1/users/{MISSING_ID}/addresses",
            json={
                "address_line_1": "Nowhere",
                "city": "Nowhere",
                "state": "Nowhere",
                "zip_code": "00000",
                "country": "Nowhere",
            },
        )
        assert response.status_code == 404

    def test_update(self, client):
        response = client.patch(
            f"/v1/users/{USER_ID}/addresses/{ADDRESS_ID}", json={"zip_code": "99999"}
        )
        assert response.status_code == 200
        assert response.json()["zip_code"] == "99999"

    def test_update_empty_field_on_missing_address(self, client):
        response = client.patch(
            f"/v1/users/{USER_ID}/addresses/{MISSING_ID}", json={"city": ""}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "City cannot be empty"

    def test_delete(self, client):
        url = f"/v1/users/{USER_ID}/addresses/{ADDRESS_ID}"
        assert client.delete(url).status_code == 204
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404
