"""Pantry items."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..errors import NotFound
from ..models import PantryItem, User
from ..schemas import PantryItemIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pantry", tags=["pantry"])


def serialize_item(item: PantryItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "category": item.category,
        "quantity": item.quantity,
        "unit": item.unit,
        "expiryDate": item.expiry_date.isoformat() if item.expiry_date else None,
        "createdAt": item.created_at.isoformat() if item.created_at else None,
    }


@router.get("")
def list_items(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    items = (
        db.query(PantryItem)
        .filter(PantryItem.user_id == user.id)
        .order_by(PantryItem.created_at.desc(), PantryItem.id.desc())
        .all()
    )
    return {"items": [serialize_item(item) for item in items]}


@router.post("")
def create_item(
    body: PantryItemIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = PantryItem(
        user_id=user.id,
        name=body.name.strip(),
        category=body.category or "Other",
        quantity=body.quantity,
        unit=body.unit,
        expiry_date=body.expiry_date,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info(f"Added pantry item '{item.name}' for {user.id}")
    return {"item": serialize_item(item)}


@router.delete("/{item_id}")
def delete_item(item_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete one of the caller's pantry items."""
    item = (
        db.query(PantryItem)
        .filter(PantryItem.id == item_id, PantryItem.user_id == user.id)
        .first()
    )
    if not item:
        raise NotFound("Item not found")

    db.delete(item)
    db.commit()
    return {"success": True}
