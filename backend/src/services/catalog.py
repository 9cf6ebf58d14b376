"""
Destination catalog: creation and the read-side queries (listing,
details, category filter, free-text search).
"""
import logging
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models_geo import Destination
from ..models_feedback import Feedback
from .errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)

SEARCH_SEPARATORS = re.compile(r"[\s,.!?]+")


def discounted_cost(cost, discount) -> Decimal:
    """Listed cost minus the discount percentage, rounded to cents."""
    cost = Decimal(str(cost or 0))
    discount = Decimal(str(discount or 0))
    return (cost - (discount / Decimal(100)) * cost).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def tokenize(query: str) -> List[str]:
    """Lower-case the query and split it on whitespace and , . ! ?"""
    return [t for t in SEARCH_SEPARATORS.split((query or "").lower()) if t]


def create_destination(db: Session, owner_id: str, *, name: str, category: str, description: Optional[str] = None,
                       location: Optional[str] = None, available_slots: int = 0, start_date=None, end_date=None,
                       cost=0, discount=0) -> Destination:
    name = (name or "").strip()
    category = (category or "").strip()
    if not name:
        raise InvalidInput("Destination name is required.")
    if not category:
        raise InvalidInput("Category is required.")
    if available_slots is None or available_slots < 0:
        raise InvalidInput("Available slots cannot be negative.")
    if start_date and end_date and end_date < start_date:
        raise InvalidInput("End date cannot be before start date.")

    destination = Destination(
        name=name,
        description=description,
        location=location,
        category=category,
        available_slots=available_slots,
        capacity=available_slots,
        is_available=available_slots > 0,
        start_date=start_date,
        end_date=end_date,
        discount=Decimal(str(discount or 0)),
        cost=discounted_cost(cost, discount),
        business_owner_id=owner_id,
    )
    db.add(destination)
    db.commit()
    db.refresh(destination)
    logger.info("Destination %s (%s) created by owner %s", destination.id, destination.name, owner_id)
    return destination


def list_available(db: Session) -> List[Destination]:
    return (
        db.query(Destination)
        .filter(Destination.is_available.is_(True))
        .order_by(Destination.average_rating.desc(), Destination.name)
        .all()
    )


def get_details(db: Session, destination_id: str) -> Destination:
    destination = (
        db.query(Destination)
        .options(
            selectinload(Destination.images),
            selectinload(Destination.feedbacks).joinedload(Feedback.user),
        )
        .filter(Destination.id == destination_id)
        .first()
    )
    if not destination:
        raise NotFound("Destination not found.")
    return destination


def list_by_category(db: Session, category: Optional[str]) -> List[Destination]:
    if not category or not category.strip():
        raise InvalidInput("Category is required.")

    results = (
        db.query(Destination)
        .filter(
            func.lower(Destination.category) == category.strip().lower(),
            Destination.is_available.is_(True),
        )
        .order_by(Destination.average_rating.desc(), Destination.name)
        .all()
    )
    if not results:
        raise NotFound(f"No destinations found under category: {category}")
    return results


def search(db: Session, query: Optional[str]) -> List[Destination]:
    """
    Destinations where any query word appears in the name, description or
    category. Matching is case-insensitive substring matching.
    """
    if not query or not query.strip():
        raise InvalidInput("Search input cannot be empty.")

    words = tokenize(query)
    if not words:
        raise NotFound("No destinations match your search.")

    conditions = []
    for word in words:
        for column in (Destination.name, Destination.description, Destination.category):
            conditions.append(func.lower(column).contains(word, autoescape=True))

    results = (
        db.query(Destination)
        .filter(or_(*conditions))
        .order_by(Destination.average_rating.desc(), Destination.name)
        .all()
    )
    if not results:
        raise NotFound("No destinations match your search.")
    return results


def list_comments(db: Session, destination_id: str) -> List[Feedback]:
    return (
        db.query(Feedback)
        .options(joinedload(Feedback.user))
        .filter(Feedback.destination_id == destination_id)
        .order_by(Feedback.submitted_at, Feedback.id)
        .all()
    )
