from datetime import datetime, timezone

from gamereview.constants import ModerationStatus
from gamereview.models import Game, Review, User

API = "/api/v1/admin"


def test_admin_routes_reject_regular_users(client, user, auth_headers):
    for path in ("/summary", "/stats", "/stats/genres", "/stats/ratings", "/games", "/users"):
        response = client.get(f"{API}{path}", headers=auth_headers(user))
        assert response.status_code == 403, path
    assert client.get(f"{API}/summary").status_code == 401


def test_summary(client, user, admin, make_game, make_review, auth_headers):
    game = make_game(user, status=ModerationStatus.PENDING)
    make_review(admin, game, 5, status=ModerationStatus.PENDING)

    body = client.get(f"{API}/summary", headers=auth_headers(admin)).json()

    assert body["total_users"] == 2
    assert body["pending_games"] == 1
    assert body["pending_reviews"] == 1
    assert body["recent_activity"] == []


def test_stats_with_explicit_window(client, user, admin, make_game, auth_headers):
    make_game(user, title="a", created_at=datetime(2023, 1, 5, tzinfo=timezone.utc))
    make_game(user, title="b", created_at=datetime(2023, 1, 20, tzinfo=timezone.utc))
    make_game(user, title="c", created_at=datetime(2023, 3, 10, tzinfo=timezone.utc))

    response = client.get(
        f"{API}/stats",
        params={"range": "monthly", "startDate": "2023-01-01", "endDate": "2023-03-31"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["range"] == "monthly"
    assert body["game_stats"] == {
        "time_series": [{"bucket": "2023-01", "count": 2}, {"bucket": "2023-03", "count": 1}],
        "total": 3,
    }
    assert body["review_stats"]["total"] == 0


def test_stats_rejects_bad_range_and_window(client, admin, auth_headers):
    headers = auth_headers(admin)
    assert client.get(f"{API}/stats", params={"range": "hourly"}, headers=headers).status_code == 400
    inverted = client.get(
        f"{API}/stats",
        params={"range": "daily", "startDate": "2024-02-01", "endDate": "2024-01-01"},
        headers=headers,
    )
    assert inverted.status_code == 400
    assert inverted.json()["code"] == "VALIDATION_ERROR"


def test_distributions(client, user, admin, make_game, make_review, auth_headers):
    game = make_game(user, genre=None)
    make_review(user, game, 4)

    genres = client.get(f"{API}/stats/genres", headers=auth_headers(admin)).json()
    ratings = client.get(f"{API}/stats/ratings", headers=auth_headers(admin)).json()

    assert genres == [{"genre": "Uncategorized", "count": 1}]
    assert len(ratings) == 5
    assert ratings[3] == {"rating": 4, "count": 1}


def test_pending_queues(client, user, admin, make_game, make_review, auth_headers):
    approved = make_game(user, title="Done")
    make_game(user, title="Queue", status=ModerationStatus.PENDING)
    make_review(user, approved, 2, status=ModerationStatus.PENDING)

    games = client.get(f"{API}/games/pending", headers=auth_headers(admin)).json()
    reviews = client.get(f"{API}/reviews/pending", headers=auth_headers(admin)).json()
    every_game = client.get(f"{API}/games", headers=auth_headers(admin)).json()

    assert [g["title"] for g in games] == ["Queue"]
    assert len(reviews) == 1
    assert every_game["total"] == 2


def test_batch_approve_games(client, db, user, admin, make_game, auth_headers):
    first = make_game(user, title="One", status=ModerationStatus.PENDING)
    second = make_game(user, title="Two", status=ModerationStatus.PENDING)

    response = client.post(
        f"{API}/games/approve",
        json={"ids": [first.id, "ghost", second.id]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert [(r["id"], r["ok"]) for r in response.json()] == [
        (first.id, True),
        ("ghost", False),
        (second.id, True),
    ]
    db.expire_all()
    assert db.query(Game).filter(Game.status == "APPROVED").count() == 2


def test_batch_reject_reviews_recomputes(client, db, user, other_user, admin, make_game, make_review, auth_headers):
    game = make_game(admin)
    keep = make_review(user, game, 5)
    drop = make_review(other_user, game, 1)

    response = client.post(f"{API}/reviews/reject", json={"ids": [drop.id]}, headers=auth_headers(admin))

    assert response.json() == [{"id": drop.id, "ok": True, "status": "REJECTED"}]
    db.expire_all()
    stored = db.query(Game).filter(Game.id == game.id).one()
    assert (stored.average_rating, stored.review_count) == (5.0, 1)
    assert db.query(Review).filter(Review.id == keep.id).one().status == "APPROVED"


def test_batch_requires_admin(client, user, auth_headers):
    response = client.post(f"{API}/games/approve", json={"ids": ["x"]}, headers=auth_headers(user))
    assert response.status_code == 403


def test_user_listing_and_role_change(client, db, user, other_user, admin, auth_headers):
    listing = client.get(
        f"{API}/users", params={"search": "player", "sort": "username:asc"}, headers=auth_headers(admin)
    ).json()
    assert [u["username"] for u in listing["items"]] == ["player_x", "player_y"]
    assert listing["total_count"] == 2
    assert listing["total_pages"] == 1

    bad_sort = client.get(f"{API}/users", params={"sort": "shoe_size:asc"}, headers=auth_headers(admin))
    assert bad_sort.status_code == 400

    promoted = client.patch(f"{API}/users/{user.id}/role", json={"role": "admin"}, headers=auth_headers(admin))
    assert promoted.json()["role"] == "admin"
    invalid = client.patch(f"{API}/users/{user.id}/role", json={"role": "emperor"}, headers=auth_headers(admin))
    assert invalid.status_code == 400
    db.expire_all()
    assert db.query(User).filter(User.id == user.id).one().is_admin


def test_delete_user_removes_content_and_recomputes(client, db, user, other_user, admin, make_game, make_review, auth_headers):
    their_game = make_game(user, title="Theirs")
    other_game = make_game(admin, title="Other")
    make_review(other_user, their_game, 3)
    make_review(user, other_game, 1)
    make_review(other_user, other_game, 5)

    assert client.delete(f"/api/v1/users/{user.id}", headers=auth_headers(other_user)).status_code == 403
    assert client.delete(f"/api/v1/users/{user.id}", headers=auth_headers(admin)).status_code == 204

    db.expire_all()
    assert db.query(User).filter(User.id == user.id).count() == 0
    assert db.query(Game).filter(Game.id == their_game.id).count() == 0
    stored = db.query(Game).filter(Game.id == other_game.id).one()
    assert (stored.average_rating, stored.review_count) == (5.0, 1)


def test_export_csv_and_json(client, user, admin, make_game, auth_headers):
    make_game(user, title="Exported")

    as_csv = client.get(f"{API}/export/games", headers=auth_headers(admin))
    assert as_csv.status_code == 200
    assert as_csv.headers["content-type"].startswith("text/csv")
    header, row = as_csv.text.strip().splitlines()
    assert header.startswith("id,title,author")
    assert "Exported" in row

    as_json = client.get(f"{API}/export/users", params={"format": "json"}, headers=auth_headers(admin)).json()
    assert {u["username"] for u in as_json} == {"player_x", "boss"}
    assert "hashed_password" not in as_json[0]

    assert client.get(f"{API}/export/secrets", headers=auth_headers(admin)).status_code == 400
