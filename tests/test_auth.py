"""
Identity, onboarding and profile endpoints.
"""
from datetime import date

from studyhub.models.institution import Institution
from studyhub.models.user import User, UserRole


def auth(user):
    return {"X-User-Id": str(user.id)}


def student_form(institution_id, programme_id, **overrides):
    year = date.today().year
    form = {
        "role": "student",
        "firstName": "Ada",
        "lastName": "Obi",
        "gender": "female",
        "institutionId": institution_id,
        "programmeId": programme_id,
        "currentLevel": 200,
        "yearOfAdmission": year - 1,
        "expectedGraduationYear": year + 3,
        "modeOfStudy": "Full-time",
        "studyGoals": ["Pass exams", "Learn deeply"],
        "learningStyle": ["Visual", "Reading"],
        "studySchedule": ["Evenings"],
    }
    form.update(overrides)
    return form


class TestIdentity:

    def test_missing_header(self, client):
        response = client.get("/api/auth/user")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_malformed_header(self, client):
        assert client.get("/api/auth/user", headers={"X-User-Id": "abc"}).status_code == 401

    def test_current_user_is_camel_case(self, client, make_user):
        user = make_user(role=None, onboarded=False, first_name="Ada")

        data = client.get("/api/auth/user", headers=auth(user)).json()

        assert data["id"] == user.id
        assert data["firstName"] == "Ada"
        assert data["onboardingCompleted"] is False
        assert data["role"] is None

    def test_create_user_rejects_duplicate_email(self, client):
        first = client.post("/api/users", json={"email": "ada@example.com", "firstName": "Ada"})
        second = client.post("/api/users", json={"email": "ada@example.com"})

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json() == {"message": "User with this email already exists"}

    def test_invalid_email_is_a_400(self, client):
        response = client.post("/api/users", json={"email": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["message"].startswith("email")

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestOnboarding:

    def test_student_onboarding(self, client, db, make_user, make_institution, make_programme):
        user = make_user(role=None, onboarded=False)
        institution = make_institution()
        programme = make_programme(institution)

        response = client.post(
            "/api/auth/onboarding",
            json=student_form(institution.id, programme.id),
            headers=auth(user),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Onboarding completed"
        assert data["user"]["role"] == "student"
        assert data["user"]["onboardingCompleted"] is True
        assert data["user"]["institutionId"] == institution.id

        # Onboarded users can now use the library
        assert client.get("/api/materials", headers=auth(user)).status_code == 200

    def test_programme_must_belong_to_institution(self, client, make_user, make_institution, make_programme):
        user = make_user(role=None, onboarded=False)
        chosen = make_institution(name="Chosen")
        other = make_institution(name="Other")
        foreign_programme = make_programme(other)

        response = client.post(
            "/api/auth/onboarding",
            json=student_form(chosen.id, foreign_programme.id),
            headers=auth(user),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Selected programme does not belong to the selected institution"}

    def test_unknown_programme(self, client, make_user, make_institution):
        user = make_user(role=None, onboarded=False)
        institution = make_institution()

        response = client.post(
            "/api/auth/onboarding",
            json=student_form(institution.id, 9999),
            headers=auth(user),
        )

        assert response.json() == {"message": "Invalid programme selected"}

    def test_student_without_institution(self, client, make_user):
        user = make_user(role=None, onboarded=False)

        response = client.post(
            "/api/auth/onboarding",
            json=student_form("no-institution", 1),
            headers=auth(user),
        )

        assert response.status_code == 200
        assert response.json()["user"]["institutionId"] is None

    def test_student_form_is_validated(self, client, make_user):
        user = make_user(role=None, onboarded=False)

        response = client.post(
            "/api/auth/onboarding",
            json=student_form("no-institution", 1, studyGoals=["Only one"]),
            headers=auth(user),
        )

        assert response.status_code == 400
        assert "studyGoals" in response.json()["message"]

    def test_institution_onboarding_creates_institution(self, client, db, make_user):
        user = make_user(role=None, onboarded=False)

        response = client.post(
            "/api/auth/onboarding",
            json={
                "role": "institution",
                "firstName": "Registrar",
                "lastName": "Office",
                "institutionName": "Harbour University",
                "institutionType": "University",
                "numberOfStudents": 12000,
                "departments": ["Sciences"],
                "institutionAddress": "1 Harbour Road",
                "institutionPhone": "+2348000000000",
                "bio": "A research university by the sea.",
            },
            headers=auth(user),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["institution"]["name"] == "Harbour University"
        assert data["user"]["institutionId"] == data["institution"]["id"]

        db.expire_all()
        assert db.query(Institution).count() == 1
        assert db.get(User, user.id).role == UserRole.institution

    def test_instructor_with_unknown_institution(self, client, make_user):
        user = make_user(role=None, onboarded=False)

        response = client.post(
            "/api/auth/onboarding",
            json={
                "role": "instructor",
                "firstName": "Tunde",
                "lastName": "Ade",
                "institutionId": 4242,
                "specialization": ["Maths"],
                "yearsOfExperience": 5,
                "teachingSubjects": ["Algebra"],
                "qualifications": ["PhD"],
                "teachingMethods": ["Lectures"],
                "bio": "Ten years of teaching algebra.",
            },
            headers=auth(user),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid institution selected"}


def test_profile_update(client, student):
    response = client.patch("/api/auth/profile", json={"firstName": "Renamed"}, headers=auth(student))

    assert response.status_code == 200
    assert response.json()["message"] == "Profile updated successfully"
    assert response.json()["user"]["firstName"] == "Renamed"


def test_institution_lists_are_readable_before_onboarding(client, make_user, make_institution, make_programme):
    user = make_user(role=None, onboarded=False)
    institution = make_institution()
    make_programme(institution, name="Physics")

    institutions = client.get("/api/institutions", headers=auth(user)).json()
    programmes = client.get(f"/api/programmes/{institution.id}", headers=auth(user)).json()

    assert [i["name"] for i in institutions] == [institution.name]
    assert [p["name"] for p in programmes] == ["Physics"]
