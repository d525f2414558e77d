"""Model to JSON dict conversion shared by the routers."""
from gamereview.models import Company, Game, Review, Tag, User
from gamereview.utils import isoformat


def user_to_dict(u: User, include_email: bool = True) -> dict:
    d = {
        "id": u.id,
        "username": u.username,
        "avatar_url": u.avatar_url,
        "role": u.role,
        "created_at": isoformat(u.created_at),
    }
    if include_email:
        d["email"] = u.email
    return d


def company_to_dict(c: Company) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "description": c.description,
        "founded_year": c.founded_year,
        "website": c.website,
        "logo_url": c.logo_url,
        "headquarters": c.headquarters,
    }


def tag_to_dict(t: Tag) -> dict:
    return {"id": t.id, "name": t.name}


def game_to_dict(g: Game) -> dict:
    return {
        "id": g.id,
        "title": g.title,
        "author": g.author,
        "composer": g.composer,
        "description": g.description,
        "genre": g.genre,
        "release_date": g.release_date.isoformat() if g.release_date else None,
        "cover_image": g.cover_image,
        "status": g.status,
        "average_rating": g.average_rating,
        "review_count": g.review_count,
        "company": {"id": g.company.id, "name": g.company.name} if g.company else None,
        "created_by": (
            {"id": g.created_by.id, "username": g.created_by.username} if g.created_by else None
        ),
        "tags": [tag_to_dict(gt.tag) for gt in g.tags if gt.tag],
        "created_at": isoformat(g.created_at),
        "updated_at": isoformat(g.updated_at),
    }


def review_to_dict(r: Review, include_game: bool = True) -> dict:
    d = {
        "id": r.id,
        "user_id": r.user_id,
        "game_id": r.game_id,
        "rating": r.rating,
        "comment": r.comment,
        "status": r.status,
        "created_at": isoformat(r.created_at),
        "updated_at": isoformat(r.updated_at),
        "username": r.user.username if r.user else None,
        "user_avatar": r.user.avatar_url if r.user else None,
    }
    if include_game:
        d["game"] = (
            {"id": r.game.id, "title": r.game.title, "cover_image": r.game.cover_image}
            if r.game
            else None
        )
    return d


def page(items: list, total: int, limit: int, offset: int) -> dict:
    return {"data": items, "total": total, "limit": limit, "offset": offset}
