"""Tag routes."""
from fastapi import APIRouter, Depends, Response, status

from gamereview.database import get_db
from gamereview.exceptions import ConflictError, NotFoundError
from gamereview.middleware.auth import get_current_admin
from gamereview.models import Tag, User
from gamereview.schemas.catalog import TagCreate
from gamereview.serializers import tag_to_dict
from gamereview.utils import generate_id

router = APIRouter(prefix="/tags", tags=["tags"])


def _get_tag_or_404(db, tag_id: str) -> Tag:
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise NotFoundError("Tag not found")
    return tag


@router.get("")
def list_tags(db=Depends(get_db)):
    return [tag_to_dict(t) for t in db.query(Tag).order_by(Tag.name.asc()).all()]


@router.get("/{tag_id}")
def get_tag(tag_id: str, db=Depends(get_db)):
    return tag_to_dict(_get_tag_or_404(db, tag_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_tag(
    data: TagCreate,
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
):
    name = data.name.strip()
    if db.query(Tag).filter(Tag.name == name).first():
        raise ConflictError("Tag already exists")
    tag = Tag(id=generate_id(), name=name)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag_to_dict(tag)


@router.api_route("/{tag_id}", methods=["PUT", "PATCH"])
def update_tag(
    tag_id: str,
    data: TagCreate,
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
):
    tag = _get_tag_or_404(db, tag_id)
    name = data.name.strip()
    if db.query(Tag).filter(Tag.name == name, Tag.id != tag_id).first():
        raise ConflictError("Tag already exists")
    tag.name = name
    db.commit()
    db.refresh(tag)
    return tag_to_dict(tag)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(
    tag_id: str,
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
):
    db.delete(_get_tag_or_404(db, tag_id))
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
