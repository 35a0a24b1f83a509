"""
Guest model
"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, Enum
from sqlalchemy.orm import relationship

from wedding_rsvp.core.db import Base

class GroupSide(str, enum.Enum):
    BRIDE = "Bride"
    GROOM = "Groom"

class DietaryPreference(str, enum.Enum):
    STANDARD = "standard"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"

class AttendanceStatus(str, enum.Enum):
    """Explicit RSVP state; persisted as a nullable boolean"""
    UNANSWERED = "unanswered"
    YES = "yes"
    NO = "no"

    @classmethod
    def from_flag(cls, flag):
        if flag is None:
            return cls.UNANSWERED
        return cls.YES if flag else cls.NO

    def as_flag(self):
        if self is AttendanceStatus.UNANSWERED:
            return None
        return self is AttendanceStatus.YES

def _new_id() -> str:
    return str(uuid.uuid4())

class Guest(Base):
    __tablename__ = "guests"

    id = Column(String(36), primary_key=True, default=_new_id)
    code = Column(String(6), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    # Python-lowered name; SQLite lower() only folds ASCII
    name_lower = Column(String(255), nullable=False, index=True)
    group_side = Column(Enum(GroupSide, values_callable=lambda e: [m.value for m in e]), nullable=True)
    plus_one_allowed = Column(Boolean, nullable=False, default=False)
    email = Column(String(255), nullable=True)

    # RSVP; attending is NULL until the first submission
    attending = Column(Boolean, nullable=True)
    dietary_preference = Column(String(20), nullable=True)
    allergies = Column(Text, nullable=True)
    rsvp_submitted_at = Column(DateTime, nullable=True)

    plus_one_name = Column(String(255), nullable=True)
    plus_one_attending = Column(Boolean, nullable=True)
    plus_one_dietary_preference = Column(String(20), nullable=True)
    plus_one_allergies = Column(Text, nullable=True)

    # Mailing address
    invitation_name = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)
    address_line1 = Column(String(255), nullable=True)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    region = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    address_freeform = Column(Text, nullable=True)
    address_formatted = Column(Text, nullable=True)
    address_updated_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    save_the_date_views = relationship("SaveTheDateView", back_populates="guest", cascade="all, delete-orphan")
