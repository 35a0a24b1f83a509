"""
Guest-facing Pydantic schemas (RSVP, address, save-the-date)
"""

from typing import Optional
from pydantic import BaseModel, StrictBool

from wedding_rsvp.models import AttendanceStatus
from .common import RequestModel

class LookupRequest(RequestModel):
    """Guest lookup by full name"""
    name: str

class GuestLookupResult(BaseModel):
    """RSVP projection of a guest; never carries email, code or address"""
    id: str
    name: str
    plus_one_allowed: bool
    has_rsvp: bool
    attendance: AttendanceStatus
    attending: Optional[bool] = None
    dietary_preference: Optional[str] = None
    allergies: Optional[str] = None
    plus_one_name: Optional[str] = None
    plus_one_attending: Optional[bool] = None
    plus_one_dietary_preference: Optional[str] = None
    plus_one_allergies: Optional[str] = None

class RsvpSubmitRequest(RequestModel):
    """RSVP submission; replaces any earlier answer in full"""
    guest_id: str
    attending: StrictBool
    dietary_preference: Optional[str] = None
    allergies: Optional[str] = None
    plus_one_attending: Optional[StrictBool] = None
    plus_one_name: Optional[str] = None
    plus_one_dietary_preference: Optional[str] = None
    plus_one_allergies: Optional[str] = None

class AddressRequest(RequestModel):
    """Address save; blank fields are treated as not supplied"""
    code: str
    invitation_name: Optional[str] = None
    country: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    address_freeform: Optional[str] = None

class AddressInfo(BaseModel):
    """Stored address of a guest, for prefilling the form"""
    name: str
    invitation_name: Optional[str] = None
    country: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    address_freeform: Optional[str] = None
    address_formatted: Optional[str] = None

class SaveTheDateInfo(BaseModel):
    code: str
    name: str
    plus_one_allowed: bool
    rsvp_url: str
