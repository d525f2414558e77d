"""Company routes. Reads are public, writes are admin only."""
from fastapi import APIRouter, Depends, Response, status

from gamereview.database import get_db
from gamereview.exceptions import ConflictError, NotFoundError
from gamereview.middleware.auth import get_current_admin
from gamereview.models import Company, User
from gamereview.schemas.catalog import CompanyCreate, CompanyUpdate
from gamereview.serializers import company_to_dict
from gamereview.utils import generate_id

router = APIRouter(prefix="/companies", tags=["companies"])


def _get_company_or_404(db, company_id: str) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise NotFoundError("Company not found")
    return company


def _ensure_unique_name(db, name: str, exclude_id: str | None = None) -> None:
    qry = db.query(Company).filter(Company.name == name)
    if exclude_id:
        qry = qry.filter(Company.id != exclude_id)
    if qry.first():
        raise ConflictError("Company name already exists")


@router.get("")
def list_companies(db=Depends(get_db)):
    return [company_to_dict(c) for c in db.query(Company).order_by(Company.name.asc()).all()]


@router.get("/{company_id}")
def get_company(company_id: str, db=Depends(get_db)):
    return company_to_dict(_get_company_or_404(db, company_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_company(
    data: CompanyCreate,
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
):
    name = data.name.strip()
    _ensure_unique_name(db, name)
    company = Company(id=generate_id(), **{**data.model_dump(), "name": name})
    db.add(company)
    db.commit()
    db.refresh(company)
    return company_to_dict(company)


@router.api_route("/{company_id}", methods=["PUT", "PATCH"])
def update_company(
    company_id: str,
    data: CompanyUpdate,
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
):
    company = _get_company_or_404(db, company_id)
    fields = data.model_dump(exclude_unset=True)
    if fields.get("name"):
        fields["name"] = fields["name"].strip()
        _ensure_unique_name(db, fields["name"], exclude_id=company.id)
    elif "name" in fields:
        fields.pop("name")
    for key, value in fields.items():
        setattr(company, key, value)
    db.commit()
    db.refresh(company)
    return company_to_dict(company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(
    company_id: str,
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
):
    """Delete a company. Its games stay, with no company."""
    company = _get_company_or_404(db, company_id)
    db.delete(company)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
