from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import relationship
from .models.db import Base
from .models.auth_models import new_id, utcnow

DEC2 = Numeric(14, 2)


class Destination(Base):
    __tablename__ = "destinations"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    category = Column(String, nullable=False, index=True)

    # cost is stored after the discount has been applied
    cost = Column(DEC2, nullable=False, default=0)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # ---- Availability ledger ----
    available_slots = Column(Integer, nullable=False, default=0)
    capacity = Column(Integer, nullable=False, default=0)  # slots at creation
    is_available = Column(Boolean, nullable=False, default=False, index=True)

    # ---- Derived from feedbacks, recomputed on every submission ----
    average_rating = Column(Integer, nullable=False, default=0)
    feedback_count = Column(Integer, nullable=False, default=0)

    business_owner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    business_owner = relationship("User", back_populates="destinations")
    images = relationship(
        "DestinationImage", back_populates="destination", cascade="all, delete-orphan",
        order_by="DestinationImage.id",
    )
    feedbacks = relationship(
        "Feedback", back_populates="destination", cascade="all, delete-orphan",
        order_by="Feedback.submitted_at",
    )


class DestinationImage(Base):
    __tablename__ = "destination_images"

    id = Column(Integer, primary_key=True)
    destination_id = Column(String(36), ForeignKey("destinations.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    destination = relationship("Destination", back_populates="images")
