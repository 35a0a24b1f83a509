"""
Save-the-date view model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from wedding_rsvp.core.db import Base

class SaveTheDateView(Base):
    __tablename__ = "save_the_date_views"

    id = Column(Integer, primary_key=True, index=True)
    guest_id = Column(String(36), ForeignKey("guests.id"), nullable=False, index=True)
    viewed_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    guest = relationship("Guest", back_populates="save_the_date_views")
