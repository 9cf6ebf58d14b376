"""
Rating aggregation for destinations.

A destination's ``average_rating`` and ``feedback_count`` are always
re-derived from the full set of feedback rows, never adjusted by delta.
"""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from .. import config
from ..models_geo import Destination
from ..models_feedback import Feedback
from .errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)


def average_of(ratings: List[int]) -> int:
    """Mean of the ratings rounded to the nearest integer (half to even)."""
    if not ratings:
        return 0
    return int(round(sum(ratings) / len(ratings)))


def validate_feedback(content: str, rating) -> str:
    content = (content or "").strip()
    if not content:
        raise InvalidInput("Feedback content is required.")
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidInput("Rating must be an integer.")
    if not config.FEEDBACK_MIN_RATING <= rating <= config.FEEDBACK_MAX_RATING:
        raise InvalidInput(
            f"Rating must be between {config.FEEDBACK_MIN_RATING} and {config.FEEDBACK_MAX_RATING}."
        )
    return content


def recompute_rating(db: Session, destination: Destination) -> Destination:
    """Re-read every rating of the destination and store the aggregate on it."""
    ratings = [
        r for (r,) in db.query(Feedback.rating).filter(Feedback.destination_id == destination.id).all()
    ]
    destination.average_rating = average_of(ratings)
    destination.feedback_count = len(ratings)
    return destination


def submit_feedback(db: Session, destination_id: str, user_id: str, content: str, rating: int) -> Dict[str, int]:
    """
    Store a feedback row and refresh the destination's rating aggregate.

    The insert and the aggregate update are committed together; the
    destination row is locked for the duration where the backend supports it
    so concurrent submissions see each other's rows.
    """
    content = validate_feedback(content, rating)

    destination = (
        db.query(Destination)
        .filter(Destination.id == destination_id)
        .with_for_update()
        .first()
    )
    if not destination:
        raise NotFound("Destination not found.")

    try:
        db.add(Feedback(
            destination_id=destination.id,
            user_id=user_id,
            content=content,
            rating=rating,
        ))
        db.flush()
        recompute_rating(db, destination)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Feedback on destination %s by user %s: average=%s count=%s",
        destination.id, user_id, destination.average_rating, destination.feedback_count,
    )
    return {
        "new_average_rating": destination.average_rating,
        "total_comments": destination.feedback_count,
    }
