"""
Admin endpoints: access control, moderation, catalogue imports and reports.
"""
import pytest

from studyhub.models.engagement import MaterialReport, ReportReason, ReportStatus
from studyhub.models.institution import Programme
from studyhub.models.material import Material, ModerationStatus
from studyhub.models.user import UserRole
from studyhub.services.catalogue_import import import_summary, validate_programme_rows


def auth(user):
    return {"X-User-Id": str(user.id)}


@pytest.mark.parametrize("role", [UserRole.student, UserRole.instructor, UserRole.institution])
def test_admin_routes_reject_other_roles(client, make_user, role):
    user = make_user(role)

    response = client.get("/api/admin/stats", headers=auth(user))

    assert response.status_code == 403
    assert response.json() == {"message": "Access denied"}


def test_admin_stats(client, admin, make_user, make_institution, instructor, make_material, make_quiz):
    make_user(role=None, onboarded=False)
    make_institution()
    make_material(instructor)
    make_quiz()

    data = client.get("/api/admin/stats", headers=auth(admin)).json()

    # admin, instructor and one pending user
    assert data == {"totalUsers": 3, "institutionsCount": 1, "contentCount": 2, "activityRate": 67}


class TestModeration:

    def test_invalid_status_is_rejected(self, client, db, admin, instructor, make_material):
        material = make_material(instructor, status=ModerationStatus.pending)

        response = client.patch(
            f"/api/admin/content/materials/{material.id}/moderate",
            json={"status": "pending"},
            headers=auth(admin),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid status. Must be 'approved' or 'rejected'"}
        db.expire_all()
        assert db.get(Material, material.id).moderated_by_id is None

    def test_approval_records_moderator(self, client, db, admin, student, instructor, make_material):
        material = make_material(instructor, status=ModerationStatus.pending)

        response = client.patch(
            f"/api/admin/content/materials/{material.id}/moderate",
            json={"status": "approved", "reason": "Looks good"},
            headers=auth(admin),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Material moderated successfully"
        assert data["material"]["moderationStatus"] == "approved"
        assert data["material"]["moderatedById"] == admin.id
        assert data["material"]["moderationNotes"] == "Looks good"
        assert data["material"]["moderatedAt"] is not None

        listing = client.get("/api/materials", headers=auth(student)).json()
        assert listing["pagination"]["total"] == 1

    def test_material_can_be_moderated_again(self, client, admin, instructor, make_material):
        material = make_material(instructor)

        response = client.patch(
            f"/api/admin/content/materials/{material.id}/moderate",
            json={"status": "rejected"},
            headers=auth(admin),
        )

        assert response.json()["material"]["moderationStatus"] == "rejected"

    def test_quiz_moderation(self, client, admin, make_quiz):
        quiz = make_quiz(status=ModerationStatus.pending)

        response = client.patch(
            f"/api/admin/content/quizzes/{quiz.id}/moderate",
            json={"status": "approved"},
            headers=auth(admin),
        )

        assert response.json()["message"] == "Quiz moderated successfully"
        assert response.json()["quiz"]["moderationStatus"] == "approved"

    def test_moderation_queue_filters_by_status(self, client, admin, instructor, make_material):
        make_material(instructor, title="Waiting", status=ModerationStatus.pending)
        make_material(instructor, title="Done", status=ModerationStatus.approved)

        pending = client.get("/api/admin/content/materials", params={"status": "pending"}, headers=auth(admin)).json()
        everything = client.get("/api/admin/content/materials", params={"status": "bogus"}, headers=auth(admin)).json()

        assert [m["title"] for m in pending] == ["Waiting"]
        assert [m["title"] for m in everything] == ["Done", "Waiting"]


class TestCatalogueImports:

    def test_import_summary_wording(self):
        assert import_summary(2, 1, "course") == "2 courses added successfully, 1 duplicate skipped."
        assert import_summary(1, 0, "institution") == "1 institution added successfully."
        assert import_summary(0, 3, "course") == "0 courses added successfully, 3 duplicates skipped."

    def test_bulk_institutions_skip_existing_names(self, client, admin, make_institution):
        make_institution(name="Existing University")

        response = client.post(
            "/api/admin/institutions/bulk",
            json={"institutions": [{"name": "Existing University"}, {"name": "New College"}]},
            headers=auth(admin),
        )

        assert response.json() == {
            "success": True,
            "added": 1,
            "skipped": 1,
            "message": "1 institution added successfully, 1 duplicate skipped.",
        }

    def test_bulk_courses_skip_duplicates_within_institution(self, client, instructor, make_institution, make_course):
        institution = make_institution()
        make_course(title="Algorithms", institution_id=institution.id)

        response = client.post(
            "/api/courses/bulk",
            json={
                "courses": [
                    {"title": "Algorithms", "institutionId": institution.id},
                    {"title": "Algorithms"},
                    {"title": "Databases", "institutionId": institution.id},
                ]
            },
            headers=auth(instructor),
        )

        data = response.json()
        assert (data["added"], data["skipped"]) == (2, 1)
        assert data["message"] == "2 courses added successfully, 1 duplicate skipped."

    def test_programme_csv_rows(self, client, db, admin, make_institution):
        institution = make_institution()

        response = client.post(
            "/api/admin/programmes/bulk",
            json={
                "institutionId": institution.id,
                "format": "csv",
                "programmes": [
                    {"Name": "Computer Science", "Code": "CSC", "Degree": "Bachelor", "Duration": "4"},
                    {"programme_name": "Statistics", "Duration": ""},
                ],
            },
            headers=auth(admin),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [p["name"] for p in data["programmes"]] == ["Computer Science", "Statistics"]
        assert data["programmes"][0]["duration"] == 4
        assert all(p["institutionId"] == institution.id for p in data["programmes"])

    def test_programme_import_is_all_or_nothing(self, client, db, admin, make_institution):
        institution = make_institution()

        response = client.post(
            "/api/admin/programmes/bulk",
            json={
                "institutionId": institution.id,
                "programmes": [{"name": "Good"}, {"code": "NONAME"}],
            },
            headers=auth(admin),
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid data at row 2")
        db.expire_all()
        assert db.query(Programme).count() == 0

    def test_programme_rows_take_the_target_institution(self):
        rows = validate_programme_rows([{"name": "Law", "institutionId": 99}], institution_id=3)
        assert rows[0].institution_id == 3

    def test_programme_for_unknown_institution(self, client, admin):
        response = client.post(
            "/api/admin/programmes",
            json={"institutionId": 12345, "name": "Ghost"},
            headers=auth(admin),
        )
        assert response.status_code == 404


class TestReports:

    def test_report_lifecycle(self, client, db, admin, student, instructor, make_material):
        material = make_material(instructor)

        submitted = client.post(
            f"/api/materials/{material.id}/reports",
            json={"reason": "copyright", "description": "Scanned textbook"},
            headers=auth(student),
        )
        assert submitted.status_code == 201
        report_id = submitted.json()["report"]["id"]

        pending = client.get("/api/admin/reports", params={"status": "pending"}, headers=auth(admin)).json()
        assert [r["id"] for r in pending] == [report_id]
        assert client.get("/api/admin/reports", params={"status": "nope"}, headers=auth(admin)).json() == []

        updated = client.put(
            f"/api/admin/reports/{report_id}",
            json={"status": "resolved", "adminNotes": "Removed"},
            headers=auth(admin),
        ).json()
        assert updated["status"] == "resolved"
        assert updated["reviewedById"] == admin.id

        db.expire_all()
        report = db.get(MaterialReport, report_id)
        assert report.status == ReportStatus.resolved
        assert report.reason == ReportReason.copyright
        assert report.admin_notes == "Removed"
