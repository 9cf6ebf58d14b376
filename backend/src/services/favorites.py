import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..auth.tokens import AuthenticatedPrincipal
from ..models_geo import Destination
from ..models_feedback import Favorite
from .errors import Conflict, NotFound, Unauthorized

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "This destination is already in your favorites."


def add_favorite(db: Session, principal: Optional[AuthenticatedPrincipal], destination_id: str) -> Favorite:
    """Bookmark a destination for the caller. A pair can only be stored once."""
    if principal is None or not principal.user_id:
        raise Unauthorized("User is not authenticated.")

    if not db.query(Destination.id).filter(Destination.id == destination_id).first():
        raise NotFound("Destination not found.")

    existing = (
        db.query(Favorite)
        .filter(Favorite.user_id == principal.user_id, Favorite.destination_id == destination_id)
        .first()
    )
    if existing:
        raise Conflict(DUPLICATE_MESSAGE)

    favorite = Favorite(user_id=principal.user_id, destination_id=destination_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent insert of the same pair
        db.rollback()
        raise Conflict(DUPLICATE_MESSAGE)
    db.refresh(favorite)

    logger.info("User %s added destination %s to favorites", principal.user_id, destination_id)
    return favorite


def list_favorites(db: Session, user_id: str) -> List[Favorite]:
    return (
        db.query(Favorite)
        .options(joinedload(Favorite.destination))
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .all()
    )
