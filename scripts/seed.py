"""Seed script to populate initial data for development."""
import sys
from datetime import date
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from gamereview.constants import ModerationStatus
from gamereview.database import SessionLocal, init_db
from gamereview.models import Company, Game, GameTag, Review, Tag, User
from gamereview.services.auth import get_password_hash
from gamereview.services.ratings import recompute_game_rating
from gamereview.services.seed_admin import default_avatar
from gamereview.utils import generate_id

COMPANIES = [
    ("Nintendo", 1889, "Kyoto, Japan"),
    ("FromSoftware", 1986, "Tokyo, Japan"),
    ("Supergiant Games", 2009, "San Francisco, USA"),
]

TAGS = ["Singleplayer", "Multiplayer", "Open World", "Roguelike", "Indie", "Co-op"]

GAMES = [
    ("Hollow Quest", "Ari Tanaka", "RPG", "FromSoftware", date(2022, 2, 25), ["Singleplayer", "Open World"], 5),
    ("Skyline Racer", "Mina Ortiz", "Racing", "Nintendo", date(2019, 6, 14), ["Multiplayer"], 4),
    ("Underworld Run", "Greg Kasavin", "Action", "Supergiant Games", date(2020, 9, 17), ["Roguelike", "Indie"], 5),
    ("Block Garden", "Lea Novak", "Sandbox", "Nintendo", None, ["Co-op"], 3),
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        if db.query(User).first():
            print("Database already seeded.")
            return
        user = User(
            id=generate_id(),
            username="demo_player",
            email="demo@gamereview.io",
            hashed_password=get_password_hash("demo123"),
            avatar_url=default_avatar("demo_player"),
        )
        db.add(user)

        companies = {}
        for name, founded, hq in COMPANIES:
            companies[name] = Company(id=generate_id(), name=name, founded_year=founded, headquarters=hq)
            db.add(companies[name])
        tags = {}
        for name in TAGS:
            tags[name] = Tag(id=generate_id(), name=name)
            db.add(tags[name])

        game_ids = []
        for title, author, genre, company, released, tag_names, rating in GAMES:
            game = Game(
                id=generate_id(),
                title=title,
                author=author,
                genre=genre,
                release_date=released,
                status=ModerationStatus.APPROVED.value,
                company_id=companies[company].id,
                created_by_id=user.id,
            )
            game.tags = [GameTag(tag_id=tags[n].id) for n in tag_names]
            db.add(game)
            db.add(
                Review(
                    id=generate_id(),
                    user_id=user.id,
                    game_id=game.id,
                    rating=rating,
                    comment=f"{title} is worth your time.",
                    status=ModerationStatus.APPROVED.value,
                )
            )
            game_ids.append(game.id)
        db.commit()
        for game_id in game_ids:
            recompute_game_rating(db, game_id)
        print("Seed complete. User: demo@gamereview.io / demo123")
    finally:
        db.close()

if __name__ == "__main__":
    seed()
