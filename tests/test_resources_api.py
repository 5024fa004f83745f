import pytest


class TestResourceValidation:
    @pytest.mark.parametrize("name", ["", "x" * 31, None])
    def test_rejects_bad_names(self, client, alice, name):
        response = client.post("/v1/resources", json={"name": name}, headers=alice)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "InvalidInputException"

    @pytest.mark.parametrize("name", ["x", "x" * 30])
    def test_accepts_boundary_names(self, client, alice, name):
        response = client.post("/v1/resources", json={"name": name}, headers=alice)

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == name
        assert body["description"] is None
        assert body["owner"]["username"] == "alice"
        assert body["reservation_count"] == 0

    def test_rejects_long_description(self, client, alice):
        response = client.post("/v1/resources", json={"name": "Sauna", "description": "d" * 281}, headers=alice)

        assert response.status_code == 400

    def test_malformed_body_is_a_validation_error(self, client, alice):
        response = client.post("/v1/resources", content="not json", headers={**alice, "Content-Type": "application/json"})

        assert response.status_code == 400


class TestResourceLifecycle:
    def test_detail_lists_upcoming_reservations(self, client, alice, bob, make_resource, make_reservation):
        resource = make_resource(alice)
        make_reservation(bob, resource["id"], "2000-01-01T10:00:00Z", "2000-01-01T11:00:00Z")
        upcoming = make_reservation(bob, resource["id"], "2099-01-01T10:00:00Z", "2099-01-01T11:00:00Z")

        response = client.get(f"/v1/resources/{resource['id']}", headers=bob)

        assert response.status_code == 200
        body = response.json()
        assert body["reservation_count"] == 2
        assert [r["id"] for r in body["reservations"]] == [upcoming["id"]]
        assert body["reservations"][0]["reservee"]["username"] == "bob"

    def test_unknown_resource(self, client, alice):
        response = client.get("/v1/resources/missing", headers=alice)

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Resource not found"

    def test_owner_can_update(self, client, alice, make_resource):
        resource = make_resource(alice, name="Sauna", description="Top floor")

        response = client.patch(f"/v1/resources/{resource['id']}", json={"name": "Big sauna"}, headers=alice)

        assert response.status_code == 200
        assert response.json()["name"] == "Big sauna"
        assert response.json()["description"] == "Top floor"

    def test_update_can_clear_description(self, client, alice, make_resource):
        resource = make_resource(alice)

        response = client.patch(
            f"/v1/resources/{resource['id']}", json={"name": "Sauna", "description": None}, headers=alice
        )

        assert response.json()["description"] is None

    def test_update_validates_name(self, client, alice, make_resource):
        resource = make_resource(alice)

        response = client.patch(f"/v1/resources/{resource['id']}", json={"name": ""}, headers=alice)

        assert response.status_code == 400

    def test_delete_cascades_to_reservations(self, client, alice, bob, make_resource, make_reservation):
        resource = make_resource(alice)
        reservation = make_reservation(bob, resource["id"], "2030-05-01T12:00:00Z", "2030-05-01T13:00:00Z")

        response = client.delete(f"/v1/resources/{resource['id']}", headers=alice)

        assert response.status_code == 204
        assert client.get(f"/v1/resources/{resource['id']}", headers=alice).status_code == 404
        assert client.get(f"/v1/reservations/{reservation['id']}", headers=bob).status_code == 404


class TestResourceListing:
    @pytest.fixture
    def catalogue(self, alice, bob, make_resource, make_reservation):
        sauna = make_resource(alice, name="Sauna", description="Wood fired")
        gym = make_resource(alice, name="Gym", description="Weights")
        court = make_resource(bob, name="Tennis court", description="Clay")
        make_reservation(bob, gym["id"], "2030-05-01T08:00:00Z", "2030-05-01T09:00:00Z")
        make_reservation(bob, gym["id"], "2030-05-01T10:00:00Z", "2030-05-01T11:00:00Z")
        make_reservation(alice, court["id"], "2030-05-01T10:00:00Z", "2030-05-01T11:00:00Z")
        return {"sauna": sauna, "gym": gym, "court": court}

    def test_default_sort_is_by_name(self, client, alice, catalogue):
        body = client.get("/v1/resources", headers=alice).json()

        assert [r["name"] for r in body["items"]] == ["Gym", "Sauna", "Tennis court"]
        assert body["total"] == 3
        assert body["total_pages"] == 1

    def test_sort_by_reservation_count_desc(self, client, alice, catalogue):
        body = client.get("/v1/resources", params={"col": "reservationCount", "dir": "desc"}, headers=alice).json()

        assert [(r["name"], r["reservation_count"]) for r in body["items"]] == [
            ("Gym", 2),
            ("Tennis court", 1),
            ("Sauna", 0),
        ]

    def test_pagination(self, client, alice, catalogue):
        first = client.get("/v1/resources", params={"size": "2", "page": "1"}, headers=alice).json()
        second = client.get("/v1/resources", params={"size": "2", "page": "2"}, headers=alice).json()

        assert [r["name"] for r in first["items"]] == ["Gym", "Sauna"]
        assert [r["name"] for r in second["items"]] == ["Tennis court"]
        assert first["total"] == second["total"] == 3
        assert first["total_pages"] == 2

    def test_filters(self, client, alice, catalogue):
        def names(**params):
            return [r["name"] for r in client.get("/v1/resources", params=params, headers=alice).json()["items"]]

        assert names(resource="au") == ["Sauna"]
        assert names(description="eigh") == ["Gym"]
        assert names(user="bo") == ["Tennis court"]
        assert names(userID=catalogue["court"]["owner"]["id"]) == ["Tennis court"]
        assert names(resourceID=catalogue["gym"]["id"]) == ["Gym"]

    def test_wildcards_match_literally(self, client, alice, catalogue):
        body = client.get("/v1/resources", params={"resource": "%"}, headers=alice).json()

        assert body["items"] == []

    def test_invalid_query(self, client, alice):
        response = client.get("/v1/resources", params={"size": "0"}, headers=alice)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Page size must be a positive non-zero integer"
