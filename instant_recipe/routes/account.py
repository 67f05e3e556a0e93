"""Account deletion."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/account", tags=["account"])


@router.delete("")
def delete_account(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete the caller and every row they own.

    Recipes themselves are shared rows and are left in place; only the
    caller's links to them go.
    """
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"Deleted account {user_id}")
    return {"success": True}
