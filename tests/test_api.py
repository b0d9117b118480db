import pytest

ORDER = {
    "name": "Ada Lovelace",
    "phone": "07123 456789",
    "email": "ada@example.com",
    "items": [{"lessonId": "1", "quantity": 3}],
}


class TestLessonEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "GET /lessons" in response.text

    def test_health_reports_mode(self, client):
        response = client.get("/health")
        assert response.json()["mode"] == "fallback"

    def test_list_lessons(self, client):
        response = client.get("/lessons")
        assert response.status_code == 200
        assert response.headers["X-Inventory-Mode"] == "fallback"
        lessons = response.json()
        assert len(lessons) == 10
        assert set(lessons[0]) == {"id", "subject", "location", "price", "spaces", "description", "image"}

    def test_get_lesson(self, client):
        assert client.get("/lessons/2").json()["subject"] == "Science"
        assert client.get("/lessons/999").status_code == 404

    def test_search(self, client):
        response = client.get("/search", params={"q": "north"})
        assert response.status_code == 200
        assert [l["subject"] for l in response.json()] == ["Math", "History"]

    def test_search_without_query_lists_everything(self, client):
        assert client.get("/search").json() == client.get("/lessons").json()
        assert len(client.get("/search", params={"q": ""}).json()) == 10

    def test_put_sets_spaces_only(self, client):
        before = client.get("/lessons/1").json()
        response = client.put("/lessons/1", json={"spaces": 10})
        assert response.status_code == 200
        assert response.json() == {**before, "spaces": 10}

    def test_put_unknown_lesson(self, client):
        assert client.put("/lessons/999", json={"spaces": 1}).status_code == 404

    def test_put_unknown_lesson_with_empty_body(self, client):
        assert client.put("/lessons/999", json={}).status_code == 404

    @pytest.mark.parametrize("body", [{}, {"colour": "red"}, {"spaces": -1}, {"price": "free"}])
    def test_put_rejects_bad_body(self, client, body):
        assert client.put("/lessons/1", json=body).status_code == 400
        assert client.get("/lessons/1").json()["spaces"] == 5


class TestOrderEndpoints:
    def test_place_order(self, client):
        response = client.post("/orders", json=ORDER)
        assert response.status_code == 201
        body = response.json()
        assert body["orderId"]
        assert body["finalTotal"] == 63.0
        assert body["mode"] == "fallback"
        assert client.get("/lessons/1").json()["spaces"] == 2

        order = client.get(f"/orders/{body['orderId']}").json()
        assert order["items"] == [{"lessonId": "1", "quantity": 3, "price": 21.0}]
        assert order["createdAt"]

    def test_insufficient_spaces_is_conflict(self, client):
        client.put("/lessons/1", json={"spaces": 2})
        response = client.post("/orders", json={**ORDER, "items": [{"lessonId": "1", "quantity": 5}]})
        assert response.status_code == 409
        assert client.get("/lessons/1").json()["spaces"] == 2

    def test_numeric_lesson_id_is_accepted(self, client):
        response = client.post("/orders", json={**ORDER, "items": [{"lessonId": 1, "quantity": 1}]})
        assert response.status_code == 201

    @pytest.mark.parametrize(
        "body",
        [
            {**ORDER, "name": ""},
            {k: v for k, v in ORDER.items() if k != "phone"},
            {**ORDER, "items": []},
            {**ORDER, "items": "lesson 1"},
            {**ORDER, "items": [{"lessonId": "1", "quantity": "three"}]},
            {**ORDER, "items": [{"lessonId": "1", "quantity": 0}]},
            {**ORDER, "items": [{"lessonId": "999", "quantity": 1}]},
        ],
    )
    def test_bad_order_is_rejected(self, client, body):
        assert client.post("/orders", json=body).status_code == 400
        assert client.get("/lessons/1").json()["spaces"] == 5

    def test_unknown_order(self, client):
        assert client.get("/orders/12345").status_code == 404


class TestImages:
    def test_existing_image(self, client, tmp_path):
        (tmp_path / "math.jpg").write_bytes(b"\xff\xd8\xff")
        response = client.get("/images/math.jpg")
        assert response.status_code == 200
        assert response.content == b"\xff\xd8\xff"

    def test_missing_image(self, client):
        response = client.get("/images/nope.jpg")
        assert response.status_code == 404
        assert response.json()["detail"] == "Image file does not exist"


class TestConnectedMode:
    def test_mode_header(self, connected_client):
        response = connected_client.get("/lessons")
        assert response.headers["X-Inventory-Mode"] == "connected"
        assert len(response.json()) == 10

    def test_order_round_trip(self, connected_client):
        response = connected_client.post("/orders", json=ORDER)
        assert response.status_code == 201
        assert response.json()["message"] == "Order stored"
        assert connected_client.get("/lessons/1").json()["spaces"] == 2

        rejected = connected_client.post("/orders", json={**ORDER, "items": [{"lessonId": "1", "quantity": 5}]})
        assert rejected.status_code == 409
        assert connected_client.get("/lessons/1").json()["spaces"] == 2

    @pytest.mark.parametrize("lesson_id", ["99999999999999999999", "2147483648", "-1"])
    def test_out_of_range_lesson_ids(self, connected_client, lesson_id):
        assert connected_client.get(f"/lessons/{lesson_id}").status_code == 404
        assert connected_client.put(f"/lessons/{lesson_id}", json={"spaces": 1}).status_code == 404
        order = {**ORDER, "items": [{"lessonId": lesson_id, "quantity": 1}]}
        assert connected_client.post("/orders", json=order).status_code == 400
        assert connected_client.get(f"/orders/{lesson_id}").status_code == 404

    def test_put_and_search(self, connected_client):
        connected_client.put("/lessons/1", json={"spaces": 10})
        results = connected_client.get("/search", params={"q": "math"}).json()
        assert [(l["id"], l["spaces"]) for l in results] == [("1", 10)]
