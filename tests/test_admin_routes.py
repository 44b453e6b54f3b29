"""
Tests for the back-office: content CRUD, exam settings, certification review
and user management.
"""
import pytest

import services.certification_service
from conftest import ADMIN_ID, LEARNER_ID, make_token
from factories import complete, seed_course, seed_workflow


class TestAdminGuard:
    @pytest.mark.parametrize("path", [
        "/api/v1/admin/courses",
        "/api/v1/admin/users",
        "/api/v1/admin/certifications/pending",
        "/api/v1/admin/analytics/stats",
    ])
    def test_learner_is_forbidden(self, client, store, learner_headers, path):
        assert client.get(path, headers=learner_headers).status_code == 403

    def test_unknown_user_defaults_to_student(self, client, store):
        headers = {"Authorization": f"Bearer {make_token('nobody')}"}
        assert client.get("/api/v1/admin/courses", headers=headers).status_code == 403

    def test_role_lookup_failure_is_500(self, client, store, admin_headers):
        store.broken.add("user_roles")
        resp = client.get("/api/v1/admin/courses", headers=admin_headers)
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to verify admin privileges"


class TestCourses:
    def test_create_and_list(self, client, store, admin_headers):
        resp = client.post(
            "/api/v1/admin/courses",
            json={"title": "Level 2 Advanced", "level": 2},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        created = resp.json()["data"]
        assert created["is_available"] is False
        assert created["is_coming_soon"] is True

        seed_course(store, "course-1", level=1)
        listed = client.get("/api/v1/admin/courses", headers=admin_headers).json()
        assert [c["level"] for c in listed] == [1, 2]

    def test_invalid_level_is_422(self, client, store, admin_headers):
        resp = client.post("/api/v1/admin/courses", json={"title": "X", "level": 0}, headers=admin_headers)
        assert resp.status_code == 422

    def test_partial_update(self, client, store, admin_headers):
        seed_course(store, "course-1", title="Old title")
        resp = client.put("/api/v1/admin/courses/course-1", json={"title": "New title"}, headers=admin_headers)
        assert resp.json()["data"]["title"] == "New title"
        assert resp.json()["data"]["level"] == 1

    def test_update_missing_is_404(self, client, store, admin_headers):
        resp = client.put("/api/v1/admin/courses/missing", json={"title": "x"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_toggle_availability(self, client, store, admin_headers):
        seed_course(store, "course-1", is_available=True)
        body = client.post("/api/v1/admin/courses/course-1/availability", headers=admin_headers).json()
        assert body["message"] == "Course unpublished"
        body = client.post("/api/v1/admin/courses/course-1/availability", headers=admin_headers).json()
        assert body["message"] == "Course published"
        assert body["data"]["is_available"] is True

    def test_delete(self, client, store, admin_headers):
        seed_course(store, "course-1")
        assert client.delete("/api/v1/admin/courses/course-1", headers=admin_headers).status_code == 200
        assert store.tables["courses"] == []
        assert client.delete("/api/v1/admin/courses/course-1", headers=admin_headers).status_code == 404

    def test_save_failure_message(self, client, store, admin_headers):
        store.broken.add("courses")
        resp = client.post("/api/v1/admin/courses", json={"title": "X"}, headers=admin_headers)
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to save course"


class TestSectionsAndSubsections:
    def test_new_section_is_appended(self, client, store, admin_headers):
        seed_course(store, "course-1", sections=(1, 1))
        body = client.post(
            "/api/v1/admin/courses/course-1/sections",
            json={"title": "Wrap-up"},
            headers=admin_headers,
        ).json()["data"]
        assert body["order_index"] == 2
        assert body["course_id"] == "course-1"

        titles = [s["title"] for s in client.get("/api/v1/admin/courses/course-1/sections", headers=admin_headers).json()]
        assert titles == ["Section 1", "Section 2", "Wrap-up"]

    def test_section_for_missing_course_is_404(self, client, store, admin_headers):
        resp = client.post("/api/v1/admin/courses/missing/sections", json={"title": "S"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_section_info(self, client, store, admin_headers):
        seed_course(store, "course-1", level=1, sections=(2,), title="Basics")
        info = client.get("/api/v1/admin/sections/course-1-s0", headers=admin_headers).json()
        assert info["course_title"] == "Basics"
        assert info["course_level"] == 1
        assert info["subsection_count"] == 2

    def test_new_subsection_is_appended(self, client, store, admin_headers):
        seed_course(store, "course-1", sections=(2,))
        body = client.post(
            "/api/v1/admin/sections/course-1-s0/subsections",
            json={"title": "Check yourself", "subsection_type": "quiz", "duration_minutes": 5},
            headers=admin_headers,
        ).json()["data"]
        assert body["order_index"] == 2
        assert body["subsection_type"] == "quiz"

        listed = client.get("/api/v1/admin/sections/course-1-s0/subsections", headers=admin_headers).json()
        assert [s["order_index"] for s in listed] == [0, 1, 2]

    def test_invalid_subsection_type_is_422(self, client, store, admin_headers):
        seed_course(store, "course-1", sections=(1,))
        resp = client.post(
            "/api/v1/admin/sections/course-1-s0/subsections",
            json={"title": "x", "subsection_type": "podcast"},
            headers=admin_headers,
        )
        assert resp.status_code == 422

    def test_update_and_delete_subsection(self, client, store, admin_headers):
        seed_course(store, "course-1", sections=(1,))
        resp = client.put(
            "/api/v1/admin/subsections/course-1-s0-0",
            json={"title": "Renamed"},
            headers=admin_headers,
        )
        assert resp.json()["data"]["title"] == "Renamed"
        assert client.delete("/api/v1/admin/subsections/course-1-s0-0", headers=admin_headers).status_code == 200
        assert client.get("/api/v1/admin/subsections/course-1-s0-0", headers=admin_headers).status_code == 404


class TestExamSettings:
    def test_update_only_exam_fields(self, client, store, admin_headers):
        seed_course(store, "course-1", level=1)
        resp = client.put(
            "/api/v1/admin/exams/course-1",
            json={"exam_url": "https://exams.example.com/new", "exam_duration_minutes": 90},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        settings = client.get("/api/v1/admin/exams", headers=admin_headers).json()[0]
        assert settings["exam_url"] == "https://exams.example.com/new"
        assert settings["exam_duration_minutes"] == 90
        assert settings["exam_instructions"] == "Answer every question"

    def test_missing_course_is_404(self, client, store, admin_headers):
        resp = client.put("/api/v1/admin/exams/missing", json={"exam_url": "x"}, headers=admin_headers)
        assert resp.status_code == 404


class TestCertificationReview:
    def test_pending_queue_with_names(self, client, store, admin_headers):
        store.seed("profiles", {"user_id": LEARNER_ID, "first_name": "Ada", "last_name": "Lovelace"})
        seed_workflow(store, LEARNER_ID, level=1, exam_status="under_review", admin_approval_status="pending",
                      created_at="2026-10-01T09:00:00+00:00")
        seed_workflow(store, "user-2", level=1, exam_status="under_review", admin_approval_status="pending",
                      created_at="2026-10-02T09:00:00+00:00")
        seed_workflow(store, "user-3", level=1, admin_approval_status="approved")

        queue = client.get("/api/v1/admin/certifications/pending", headers=admin_headers).json()
        assert [w["user_id"] for w in queue] == ["user-2", LEARNER_ID]
        assert queue[1]["first_name"] == "Ada"
        assert queue[0]["first_name"] == ""

    def test_approve_invokes_platform_function(self, client, store, admin_headers, monkeypatch):
        calls = []

        def fake_invoke(name, body):
            calls.append((name, body))
            return {"success": True}

        monkeypatch.setattr(services.certification_service, "invoke_function", fake_invoke)
        resp = client.post(
            "/api/v1/admin/certifications/action",
            json={"user_id": LEARNER_ID, "level": 1, "action": "approve"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "Certification approved successfully"
        assert calls == [(
            "handle-admin-certification-action",
            {"user_id": LEARNER_ID, "level": 1, "action": "approve"},
        )]

    def test_reject_message(self, client, store, admin_headers, monkeypatch):
        monkeypatch.setattr(services.certification_service, "invoke_function", lambda name, body: {})
        resp = client.post(
            "/api/v1/admin/certifications/action",
            json={"user_id": LEARNER_ID, "level": 1, "action": "reject"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "Certification rejected successfully"

    def test_unknown_action_is_400(self, client, store, admin_headers, monkeypatch):
        monkeypatch.setattr(services.certification_service, "invoke_function", lambda name, body: {})
        resp = client.post(
            "/api/v1/admin/certifications/action",
            json={"user_id": LEARNER_ID, "level": 1, "action": "escalate"},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_platform_failure_is_500(self, client, store, admin_headers, monkeypatch):
        def failing(name, body):
            raise RuntimeError("edge function down")

        monkeypatch.setattr(services.certification_service, "invoke_function", failing)
        resp = client.post(
            "/api/v1/admin/certifications/action",
            json={"user_id": LEARNER_ID, "level": 1, "action": "reject"},
            headers=admin_headers,
        )
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to reject certification"


class TestUsers:
    def test_list_users(self, client, store, admin_headers):
        seed_course(store, "course-1", level=1)
        seed_course(store, "course-2", level=2)
        store.seed(
            "profiles",
            {"user_id": LEARNER_ID, "first_name": "Ada", "last_name": "Lovelace", "created_at": "2026-09-01"},
            {"user_id": "user-new", "first_name": "New", "last_name": "Person", "created_at": "2026-10-01"},
        )
        complete(store, LEARNER_ID, "course-1", "course-1-s0-0")
        complete(store, LEARNER_ID, "course-1", "course-1-s0-1", completed=False)
        store.seed("course_completions", {"user_id": LEARNER_ID, "course_id": "course-1"})

        users = {u["id"]: u for u in client.get("/api/v1/admin/users", headers=admin_headers).json()}
        learner = users[LEARNER_ID]
        assert learner["role"] == "student"
        assert learner["profile"]["first_name"] == "Ada"
        assert learner["course_progress"] == {"total_courses": 2, "completed_courses": 1, "overall_progress": 50}
        assert users["user-new"]["course_progress"]["overall_progress"] == 0

    def test_promote_learner(self, client, store, admin_headers):
        resp = client.put(f"/api/v1/admin/users/{LEARNER_ID}/role", json={"role": "admin"}, headers=admin_headers)
        assert resp.status_code == 200
        roles = {r["user_id"]: r["role"] for r in store.tables["user_roles"]}
        assert roles[LEARNER_ID] == "admin"

    def test_role_for_user_without_row(self, client, store, admin_headers):
        client.put("/api/v1/admin/users/user-new/role", json={"role": "student"}, headers=admin_headers)
        assert {"user_id": "user-new", "role": "student"}.items() <= store.tables["user_roles"][-1].items()

    def test_cannot_demote_self(self, client, store, admin_headers):
        resp = client.put(f"/api/v1/admin/users/{ADMIN_ID}/role", json={"role": "student"}, headers=admin_headers)
        assert resp.status_code == 400
        roles = {r["user_id"]: r["role"] for r in store.tables["user_roles"]}
        assert roles[ADMIN_ID] == "admin"

    def test_unknown_role_is_422(self, client, store, admin_headers):
        resp = client.put(f"/api/v1/admin/users/{LEARNER_ID}/role", json={"role": "owner"}, headers=admin_headers)
        assert resp.status_code == 422
