"""
Tests for the /courses endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from courses_api.api.main import app
from courses_api.db.db import get_db
from courses_api.db.models import Course


def create(client, auth_headers, payload) -> int:
    response = client.post("/courses", json=payload, headers=auth_headers)
    assert response.status_code == 201
    return int(response.headers["Location"].rsplit("/", 1)[-1])


class TestReadCourses:

    def test_empty_list(self, client):
        response = client.get("/courses")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_includes_owner(self, client, auth_headers, course_payload, user):
        create(client, auth_headers, course_payload)
        create(client, auth_headers, dict(course_payload, title="Learn How to Program"))

        response = client.get("/courses")

        assert response.status_code == 200
        courses = response.json()
        assert [c["title"] for c in courses] == ["Build a Basic Bookcase", "Learn How to Program"]
        assert courses[0]["owner"] == {
            "id": user.id,
            "firstName": "Joe",
            "lastName": "Smith",
            "emailAddress": "joe@smith.com",
        }
        assert "password" not in courses[0]["owner"]

    @pytest.mark.parametrize("course_id", ["999", "abc"])
    def test_unknown_id(self, client, course_id):
        response = client.get(f"/courses/{course_id}")

        assert response.status_code == 404
        assert response.json() == {"message": "There is no course associated with this id"}


class TestCreateCourse:

    def test_round_trip(self, client, auth_headers, course_payload):
        response = client.post("/courses", json=course_payload, headers=auth_headers)

        assert response.status_code == 201
        assert response.content == b""
        location = response.headers["Location"]
        assert location.startswith("/courses/")

        fetched = client.get(location)
        assert fetched.status_code == 200
        body = fetched.json()
        for field in ("title", "description", "userId"):
            assert body[field] == course_payload[field]

    def test_missing_fields(self, client, db, auth_headers):
        response = client.post("/courses", json={"title": "Only a title"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"errors": [
            'Please provide a value for "description"',
            'Please provide a value for "userID"',
        ]}
        assert db.query(Course).count() == 0

    def test_requires_auth_even_with_invalid_payload(self, client):
        response = client.post("/courses", json={})

        assert response.status_code == 401
        assert response.json() == {"message": "Access Denied"}

    def test_wrong_password(self, client, db, user, basic_auth, course_payload):
        response = client.post("/courses", json=course_payload, headers=basic_auth(user.emailAddress, "bad"))

        assert response.status_code == 401
        assert db.query(Course).count() == 0

    def test_empty_title_rejected(self, client, db, auth_headers, course_payload):
        response = client.post("/courses", json=dict(course_payload, title=""), headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"errors": ["A title is required"]}
        assert db.query(Course).count() == 0


class TestUpdateCourse:

    def test_updates_fields(self, client, auth_headers, course_payload):
        course_id = create(client, auth_headers, course_payload)
        changes = dict(course_payload, title="New Title", description="New description")

        response = client.put(f"/courses/{course_id}", json=changes, headers=auth_headers)

        assert response.status_code == 204
        assert response.content == b""
        body = client.get(f"/courses/{course_id}").json()
        assert body["title"] == "New Title"
        assert body["description"] == "New description"

    def test_unknown_id_leaves_collection_unchanged(self, client, auth_headers, course_payload):
        create(client, auth_headers, course_payload)
        before = client.get("/courses").json()

        response = client.put("/courses/999", json=course_payload, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"message": "No courses found to Update"}
        assert client.get("/courses").json() == before

    def test_invalid_payload_does_not_update(self, client, auth_headers, course_payload):
        course_id = create(client, auth_headers, course_payload)

        response = client.put(f"/courses/{course_id}", json={"title": "Changed"}, headers=auth_headers)

        assert response.status_code == 400
        assert len(response.json()["errors"]) == 2
        assert client.get(f"/courses/{course_id}").json()["title"] == course_payload["title"]

    def test_rejected_value_does_not_update(self, client, auth_headers, course_payload):
        course_id = create(client, auth_headers, course_payload)

        response = client.put(
            f"/courses/{course_id}",
            json=dict(course_payload, title="Changed", description=""),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert client.get(f"/courses/{course_id}").json()["title"] == course_payload["title"]

    def test_ignores_fields_that_are_not_updatable(self, client, auth_headers, course_payload):
        course_id = create(client, auth_headers, course_payload)

        response = client.put(
            f"/courses/{course_id}", json=dict(course_payload, id=12345), headers=auth_headers
        )

        assert response.status_code == 204
        assert client.get(f"/courses/{course_id}").json()["id"] == course_id

    def test_requires_auth(self, client, auth_headers, course_payload):
        course_id = create(client, auth_headers, course_payload)

        response = client.put(f"/courses/{course_id}", json=course_payload)

        assert response.status_code == 401


class TestDeleteCourse:

    def test_delete_twice(self, client, auth_headers, course_payload):
        course_id = create(client, auth_headers, course_payload)

        first = client.delete(f"/courses/{course_id}", headers=auth_headers)
        second = client.delete(f"/courses/{course_id}", headers=auth_headers)

        assert first.status_code == 204
        assert first.content == b""
        assert client.get(f"/courses/{course_id}").status_code == 404
        assert second.status_code == 404
        assert second.json() == {"message": "No courses found to Delete"}

    def test_requires_auth(self, client, auth_headers, course_payload):
        course_id = create(client, auth_headers, course_payload)

        response = client.delete(f"/courses/{course_id}")

        assert response.status_code == 401
        assert client.get(f"/courses/{course_id}").status_code == 200


class TestUnhandledErrors:

    def test_database_failure_returns_generic_500(self):
        class BrokenSession:
            def query(self, *args, **kwargs):
                raise RuntimeError("connection string with secrets")

            def close(self):
                pass

        def broken_db():
            yield BrokenSession()

        app.dependency_overrides[get_db] = broken_db
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/courses")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"message": "Internal Server Error"}
        assert "secrets" not in response.text
