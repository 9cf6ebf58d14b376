"""
Availability ledger: booking and releasing destination slots.

Both transitions are a single conditional UPDATE so two concurrent bookings
can never take the same last slot. ``is_available`` is written in the same
statement and always equals ``available_slots > 0`` afterwards.
"""
import logging
from typing import Dict

from sqlalchemy import case
from sqlalchemy.orm import Session

from .. import config
from ..models_geo import Destination
from .errors import FullyBooked, InvalidInput, NotFound, Unavailable

logger = logging.getLogger(__name__)


def _load(db: Session, destination_id: str) -> Destination:
    destination = db.query(Destination).filter(Destination.id == destination_id).first()
    if not destination:
        raise NotFound("Destination not found.")
    return destination


def book(db: Session, destination_id: str) -> Dict[str, int]:
    """Take one slot. Returns the number of slots left."""
    # SET expressions see the pre-update row
    updated = (
        db.query(Destination)
        .filter(
            Destination.id == destination_id,
            Destination.is_available.is_(True),
            Destination.available_slots > 0,
        )
        .update(
            {
                Destination.available_slots: Destination.available_slots - 1,
                Destination.is_available: case((Destination.available_slots > 1, True), else_=False),
            },
            synchronize_session=False,
        )
    )

    if updated == 0:
        db.rollback()
        destination = _load(db, destination_id)
        if destination.available_slots <= 0:
            logger.warning("Booking rejected, destination %s fully booked", destination_id)
            raise FullyBooked()
        logger.warning("Booking rejected, destination %s unavailable", destination_id)
        raise Unavailable()

    db.commit()
    destination = _load(db, destination_id)
    db.refresh(destination)
    logger.info("Booked destination %s, %s slots left", destination_id, destination.available_slots)
    return {"remaining_slots": destination.available_slots}


def unbook(db: Session, destination_id: str) -> Dict[str, int]:
    """Release one slot. Returns the number of available slots."""
    query = db.query(Destination).filter(Destination.id == destination_id)
    if config.UNBOOK_CAP_AT_CAPACITY:
        query = query.filter(Destination.available_slots < Destination.capacity)

    updated = query.update(
        {
            Destination.available_slots: Destination.available_slots + 1,
            Destination.is_available: True,
        },
        synchronize_session=False,
    )

    if updated == 0:
        db.rollback()
        _load(db, destination_id)
        logger.warning("Unbooking rejected, destination %s already at capacity", destination_id)
        raise InvalidInput("There are no booked slots to release for this destination.")

    db.commit()
    destination = _load(db, destination_id)
    db.refresh(destination)
    logger.info("Released slot on destination %s, %s slots available", destination_id, destination.available_slots)
    return {"available_slots": destination.available_slots}
