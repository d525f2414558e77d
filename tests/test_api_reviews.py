import pytest

from gamereview.constants import ModerationStatus
from gamereview.models import Review

API = "/api/v1"


def _review(client, headers, game_id, rating, comment="Really enjoyed it"):
    return client.post(
        f"{API}/reviews",
        json={"game_id": game_id, "rating": rating, "comment": comment},
        headers=headers,
    )


def _game(client, game_id):
    return client.get(f"{API}/games/{game_id}").json()


def test_rating_lifecycle(client, user, other_user, admin, make_game, auth_headers):
    game = make_game(admin)

    x = _review(client, auth_headers(user), game.id, 4)
    y = _review(client, auth_headers(other_user), game.id, 5)
    assert x.status_code == 201
    assert x.json()["status"] == "PENDING"

    for review in (x.json(), y.json()):
        resp = client.post(f"{API}/reviews/{review['id']}/approve", headers=auth_headers(admin))
        assert resp.status_code == 200
    assert resp.json()["game_average_rating"] == 4.5
    assert (_game(client, game.id)["average_rating"], _game(client, game.id)["review_count"]) == (4.5, 2)

    again = _review(client, auth_headers(user), game.id, 1)
    assert again.status_code == 400
    assert again.json()["code"] == "CONFLICT"
    assert _game(client, game.id)["review_count"] == 2

    rejected = client.post(f"{API}/reviews/{y.json()['id']}/reject", headers=auth_headers(admin))
    assert rejected.json()["status"] == "REJECTED"
    assert rejected.json()["game_average_rating"] == 4.0
    assert rejected.json()["game_review_count"] == 1


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_out_of_range_creates_nothing(client, db, user, make_game, auth_headers, rating):
    game = make_game(user)

    response = _review(client, auth_headers(user), game.id, rating)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert db.query(Review).count() == 0


def test_review_of_missing_game_is_404(client, user, auth_headers):
    assert _review(client, auth_headers(user), "missing", 3).status_code == 404


def test_public_review_listing_hides_pending(client, user, other_user, admin, make_game, make_review, auth_headers):
    game = make_game(admin)
    make_review(user, game, 4)
    pending = make_review(other_user, game, 2, status=ModerationStatus.PENDING)

    public = client.get(f"{API}/reviews").json()
    assert public["total"] == 1
    assert client.get(f"{API}/reviews/{pending.id}").status_code == 404
    assert client.get(f"{API}/reviews/{pending.id}", headers=auth_headers(other_user)).status_code == 200

    as_admin = client.get(f"{API}/reviews", params={"status": "PENDING"}, headers=auth_headers(admin)).json()
    assert [r["id"] for r in as_admin["data"]] == [pending.id]


def test_only_author_or_admin_edits(client, user, other_user, admin, make_game, make_review, auth_headers):
    game = make_game(admin)
    review = make_review(user, game, 2)

    denied = client.put(f"{API}/reviews/{review.id}", json={"rating": 5}, headers=auth_headers(other_user))
    assert denied.status_code == 403

    own = client.put(f"{API}/reviews/{review.id}", json={"rating": 5}, headers=auth_headers(user))
    assert own.status_code == 200
    assert own.json()["rating"] == 5
    assert _game(client, game.id)["average_rating"] == 5.0

    moderated = client.patch(f"{API}/reviews/{review.id}", json={"status": "REJECTED"}, headers=auth_headers(admin))
    assert moderated.json()["status"] == "REJECTED"
    assert _game(client, game.id)["review_count"] == 0


def test_delete_review(client, user, other_user, admin, make_game, make_review, auth_headers):
    game = make_game(admin)
    review = make_review(user, game, 3)

    assert client.delete(f"{API}/reviews/{review.id}", headers=auth_headers(other_user)).status_code == 403
    assert client.delete(f"{API}/reviews/{review.id}", headers=auth_headers(user)).status_code == 204
    assert client.delete(f"{API}/reviews/{review.id}", headers=auth_headers(user)).status_code == 404


def test_non_admin_cannot_approve_review(client, user, make_game, make_review, auth_headers):
    game = make_game(user)
    review = make_review(user, game, 3, status=ModerationStatus.PENDING)

    response = client.post(f"{API}/reviews/{review.id}/approve", headers=auth_headers(user))

    assert response.status_code == 403


def test_user_reviews_include_every_status(client, user, other_user, admin, make_game, make_review, auth_headers):
    game = make_game(admin)
    make_review(user, game, 3, status=ModerationStatus.REJECTED)

    own = client.get(f"{API}/users/{user.id}/reviews", headers=auth_headers(user)).json()
    assert own["total"] == 1
    assert own["data"][0]["status"] == "REJECTED"

    assert client.get(f"{API}/users/{user.id}/reviews", headers=auth_headers(other_user)).status_code == 403


def test_reviews_of_rejected_game_are_hidden(client, user, other_user, admin, make_game, make_review, auth_headers):
    game = make_game(user, title="Offensive Title")
    review = make_review(other_user, game, 4)
    client.post(f"{API}/games/{game.id}/reject", headers=auth_headers(admin))

    assert client.get(f"{API}/games/{game.id}").status_code == 404
    listing = client.get(f"{API}/reviews").json()
    assert listing["total"] == 0
    assert listing["data"] == []
    assert client.get(f"{API}/reviews/{review.id}").status_code == 404
    assert client.get(f"{API}/reviews/{review.id}", headers=auth_headers(other_user)).status_code == 404

    # The game's creator and admins still see them
    as_creator = client.get(f"{API}/reviews", headers=auth_headers(user)).json()
    assert [r["id"] for r in as_creator["data"]] == [review.id]
    assert client.get(f"{API}/reviews/{review.id}", headers=auth_headers(admin)).status_code == 200
