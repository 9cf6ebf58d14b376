from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, StrictInt, conint, constr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class DestinationIn(CamelModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    category: constr(strip_whitespace=True, min_length=1, max_length=100)
    available_slots: conint(ge=0) = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    cost: float = Field(0, ge=0)  # listed price, before discount
    discount: float = Field(0, ge=0, le=100)


class DestinationSummaryOut(CamelModel):
    name: str
    category: str
    description: Optional[str] = None
    average_rating: int


class DestinationCategoryOut(CamelModel):
    destination_id: str
    name: str
    description: Optional[str] = None
    category: str
    average_rating: int
    location: Optional[str] = None
    cost: float


class DestinationOut(CamelModel):
    destination_id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    category: str
    available_slots: int
    capacity: int
    is_available: bool
    average_rating: int
    feedback_count: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    discount: float
    cost: float
    business_owner_id: Optional[str] = None


class ImageOut(CamelModel):
    image_id: int
    image_url: str


class CommentOut(CamelModel):
    feedback_id: int
    content: str
    rating: int
    submitted_at: datetime = Field(alias="date")
    username: Optional[str] = None


class DestinationDetailOut(DestinationOut):
    images: List[ImageOut] = []
    comments: List[CommentOut] = []


class BookingOut(CamelModel):
    message: str
    remaining_slots: int


class UnbookingOut(CamelModel):
    message: str
    available_slots: int


class FeedbackIn(CamelModel):
    content: constr(strip_whitespace=True, min_length=1, max_length=2000)
    rating: StrictInt


class FeedbackResultOut(CamelModel):
    message: str
    new_average_rating: int
    total_comments: int


class FavoriteOut(CamelModel):
    favorite_id: int
    user_id: str
    destination_id: str
    destination_name: Optional[str] = None
    created_at: datetime
