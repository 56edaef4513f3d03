"""
Bookmarks, reviews and ratings on materials.
"""
from studyhub.models.user import UserRole


def auth(user):
    return {"X-User-Id": str(user.id)}


class TestBookmarks:

    def test_bookmark_flow(self, client, student, instructor, make_material):
        material = make_material(instructor)

        created = client.post("/api/bookmarks", json={"materialId": material.id}, headers=auth(student))
        assert created.status_code == 201

        duplicate = client.post("/api/bookmarks", json={"materialId": material.id}, headers=auth(student))
        assert duplicate.status_code == 400
        assert duplicate.json() == {"message": "Material already bookmarked"}

        check = client.get(f"/api/bookmarks/check/{material.id}", headers=auth(student)).json()
        assert check["bookmarked"] is True
        assert check["bookmark"]["id"] == created.json()["id"]

        removed = client.delete(f"/api/bookmarks/by-material/{material.id}", headers=auth(student))
        assert removed.json() == {"message": "Bookmark removed"}
        assert client.get(f"/api/bookmarks/check/{material.id}", headers=auth(student)).json() == {
            "bookmarked": False,
            "bookmark": None,
        }

    def test_bookmark_missing_material(self, client, student):
        response = client.post("/api/bookmarks", json={"materialId": 777}, headers=auth(student))
        assert response.status_code == 404

    def test_cannot_delete_someone_elses_bookmark(self, client, make_user, instructor, make_material):
        owner = make_user(UserRole.student)
        intruder = make_user(UserRole.student)
        material = make_material(instructor)
        bookmark_id = client.post("/api/bookmarks", json={"materialId": material.id}, headers=auth(owner)).json()["id"]

        assert client.delete(f"/api/bookmarks/{bookmark_id}", headers=auth(intruder)).status_code == 404
        assert client.delete(f"/api/bookmarks/{bookmark_id}", headers=auth(owner)).json() == {"message": "Bookmark deleted"}

    def test_bookmarks_feed_student_stats(self, client, student, instructor, make_material):
        material = make_material(instructor)
        client.post("/api/bookmarks", json={"materialId": material.id}, headers=auth(student))

        stats = client.get("/api/student/stats", headers=auth(student)).json()

        assert stats["materialsCount"] == 1


class TestReviews:

    def test_one_review_per_user(self, client, student, instructor, make_material):
        material = make_material(instructor)
        url = f"/api/materials/{material.id}/reviews"

        first = client.post(url, json={"reviewText": "Very clear"}, headers=auth(student))
        second = client.post(url, json={"reviewText": "Again"}, headers=auth(student))

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json() == {"message": "You have already reviewed this material"}
        assert [r["reviewText"] for r in client.get(url, headers=auth(student)).json()] == ["Very clear"]

    def test_only_author_edits_review(self, client, make_user, instructor, make_material):
        author = make_user(UserRole.student)
        other = make_user(UserRole.student)
        material = make_material(instructor)
        review_id = client.post(
            f"/api/materials/{material.id}/reviews", json={"reviewText": "Good"}, headers=auth(author)
        ).json()["id"]

        assert client.put(f"/api/reviews/{review_id}", json={"reviewText": "Bad"}, headers=auth(other)).status_code == 403
        updated = client.put(f"/api/reviews/{review_id}", json={"reviewText": "Great"}, headers=auth(author))
        assert updated.json()["reviewText"] == "Great"

    def test_reviews_show_up_in_library_stats(self, client, student, instructor, make_material):
        material = make_material(instructor)
        client.post(f"/api/materials/{material.id}/reviews", json={"reviewText": "Nice"}, headers=auth(student))

        item = client.get("/api/materials", headers=auth(student)).json()["materials"][0]

        assert item["stats"]["reviewCount"] == 1


class TestRatings:

    def test_rating_again_replaces_previous(self, client, make_user, instructor, make_material):
        me = make_user(UserRole.student)
        other = make_user(UserRole.student)
        material = make_material(instructor)
        url = f"/api/materials/{material.id}/ratings"

        client.post(url, json={"rating": 2}, headers=auth(me))
        client.post(url, json={"rating": 5}, headers=auth(me))
        client.post(url, json={"rating": 4}, headers=auth(other))

        data = client.get(url, headers=auth(me)).json()

        assert data["count"] == 2
        assert data["average"] == 4.5
        assert data["userRating"]["rating"] == 5

    def test_rating_out_of_range(self, client, student, instructor, make_material):
        material = make_material(instructor)

        response = client.post(f"/api/materials/{material.id}/ratings", json={"rating": 6}, headers=auth(student))

        assert response.status_code == 400

    def test_unrated_material(self, client, student, instructor, make_material):
        material = make_material(instructor)

        data = client.get(f"/api/materials/{material.id}/ratings", headers=auth(student)).json()

        assert data == {"ratings": [], "average": 0.0, "userRating": None, "count": 0}
