"""
Admin Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from wedding_rsvp.models import GroupSide
from .common import RequestModel

class GuestCreate(RequestModel):
    """Schema for adding a single guest"""
    name: str = Field(min_length=1)
    plus_one_allowed: bool = False
    email: Optional[EmailStr] = None
    group_side: Optional[GroupSide] = None
    code: Optional[str] = Field(default=None, min_length=6, max_length=6)

class GuestResponse(BaseModel):
    """Admin view of a guest"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    plus_one_allowed: bool
    email: Optional[str] = None
    group_side: Optional[str] = None
    attending: Optional[bool] = None
    rsvp_submitted_at: Optional[datetime] = None
    address_formatted: Optional[str] = None

class GuestSummary(BaseModel):
    """RSVP and address progress across the guest list"""
    total: int
    with_address: int
    without_address: int
    without_address_names: List[str]
    max_headcount: int
    rsvp_yes: int
    rsvp_no: int
    rsvp_pending: int

class AddressWebhookPayload(BaseModel):
    """Row-change webhook body sent by the database"""
    type: str
    table: str
    schema_name: Optional[str] = Field(default=None, alias="schema")
    record: dict
    old_record: Optional[dict] = None
