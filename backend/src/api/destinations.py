from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import config
from ..db import get_db
from ..models_geo import Destination
from ..models_feedback import Favorite, Feedback
from ..auth.tokens import AuthenticatedPrincipal
from ..services import availability, catalog, favorites, ratings
from .auth import get_principal, require_principal, require_role
from .schemas_geo import (
    BookingOut,
    CommentOut,
    DestinationCategoryOut,
    DestinationDetailOut,
    DestinationIn,
    DestinationOut,
    DestinationSummaryOut,
    FavoriteOut,
    FeedbackIn,
    FeedbackResultOut,
    ImageOut,
    UnbookingOut,
)

router = APIRouter(prefix="/api/Destinations", tags=["destinations"])


def _destination_fields(d: Destination) -> dict:
    return dict(
        destination_id=d.id,
        name=d.name,
        description=d.description,
        location=d.location,
        category=d.category,
        available_slots=d.available_slots,
        capacity=d.capacity,
        is_available=d.is_available,
        average_rating=d.average_rating,
        feedback_count=d.feedback_count,
        start_date=d.start_date,
        end_date=d.end_date,
        discount=float(d.discount or 0),
        cost=float(d.cost or 0),
        business_owner_id=d.business_owner_id,
    )


def _comment_out(f: Feedback) -> CommentOut:
    return CommentOut(
        feedback_id=f.id,
        content=f.content,
        rating=f.rating,
        submitted_at=f.submitted_at,
        username=f.user.username if f.user else None,
    )


def _favorite_out(f: Favorite) -> FavoriteOut:
    return FavoriteOut(
        favorite_id=f.id,
        user_id=f.user_id,
        destination_id=f.destination_id,
        destination_name=f.destination.name if f.destination else None,
        created_at=f.created_at,
    )


@router.get("/GetAllDestinations", response_model=List[DestinationSummaryOut])
def get_all_destinations(db: Session = Depends(get_db)):
    """Available destinations, best rated first."""
    return [
        DestinationSummaryOut(
            name=d.name,
            category=d.category,
            description=d.description,
            average_rating=d.average_rating,
        )
        for d in catalog.list_available(db)
    ]


@router.get("/GetDestinationDetails/{destination_id}", response_model=DestinationDetailOut)
def get_destination_details(destination_id: str, db: Session = Depends(get_db)):
    d = catalog.get_details(db, destination_id)
    return DestinationDetailOut(
        **_destination_fields(d),
        images=[ImageOut(image_id=i.id, image_url=i.image_url) for i in d.images],
        comments=[_comment_out(f) for f in d.feedbacks],
    )


@router.get("/GetByCategory", response_model=List[DestinationCategoryOut])
def get_by_category(
    category: Optional[str] = Query(None, description="Category name, case-insensitive"),
    db: Session = Depends(get_db),
):
    return [
        DestinationCategoryOut(
            destination_id=d.id,
            name=d.name,
            description=d.description,
            category=d.category,
            average_rating=d.average_rating,
            location=d.location,
            cost=float(d.cost or 0),
        )
        for d in catalog.list_by_category(db, category)
    ]


@router.post("/AddDestination", response_model=DestinationOut)
def add_destination(
    payload: DestinationIn,
    principal: AuthenticatedPrincipal = Depends(require_role(config.ROLE_BUSINESS_OWNER)),
    db: Session = Depends(get_db),
):
    """Create a destination owned by the calling business owner."""
    d = catalog.create_destination(
        db,
        principal.user_id,
        name=payload.name,
        description=payload.description,
        location=payload.location,
        category=payload.category,
        available_slots=payload.available_slots,
        start_date=payload.start_date,
        end_date=payload.end_date,
        cost=payload.cost,
        discount=payload.discount,
    )
    return DestinationOut(**_destination_fields(d))


@router.post("/AddFeedback/{destination_id}", response_model=FeedbackResultOut)
def add_feedback(
    destination_id: str,
    payload: FeedbackIn,
    principal: AuthenticatedPrincipal = Depends(require_principal),
    db: Session = Depends(get_db),
):
    result = ratings.submit_feedback(db, destination_id, principal.user_id, payload.content, payload.rating)
    return FeedbackResultOut(message="Comment and rating submitted successfully.", **result)


@router.put("/Booking/{destination_id}", response_model=BookingOut)
def book_destination(destination_id: str, db: Session = Depends(get_db)):
    result = availability.book(db, destination_id)
    return BookingOut(message="Booking successful.", **result)


@router.put("/UnBookDestination/{destination_id}", response_model=UnbookingOut)
def unbook_destination(destination_id: str, db: Session = Depends(get_db)):
    result = availability.unbook(db, destination_id)
    return UnbookingOut(message="Unbooking successful. Slot released.", **result)


@router.get("/GetCommentsForDestination/{destination_id}", response_model=List[CommentOut])
def get_comments_for_destination(destination_id: str, db: Session = Depends(get_db)):
    return [_comment_out(f) for f in catalog.list_comments(db, destination_id)]


@router.post("/AddToFavorites/{destination_id}", response_model=FavoriteOut)
def add_to_favorites(
    destination_id: str,
    principal: Optional[AuthenticatedPrincipal] = Depends(get_principal),
    db: Session = Depends(get_db),
):
    return _favorite_out(favorites.add_favorite(db, principal, destination_id))


@router.get("/GetMyFavorites", response_model=List[FavoriteOut])
def get_my_favorites(
    principal: AuthenticatedPrincipal = Depends(require_principal),
    db: Session = Depends(get_db),
):
    return [_favorite_out(f) for f in favorites.list_favorites(db, principal.user_id)]


@router.get("/Search", response_model=List[DestinationOut])
def search_destinations(
    input: Optional[str] = Query(None, description="Free text; any word may match"),
    db: Session = Depends(get_db),
):
    return [DestinationOut(**_destination_fields(d)) for d in catalog.search(db, input)]
