"""
Guest-facing API routes: RSVP lookup/submit and address collection
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from wedding_rsvp.api.deps import get_address_service, get_rsvp_service
from wedding_rsvp.schemas.guest import AddressRequest, LookupRequest, RsvpSubmitRequest
from wedding_rsvp.services.address_service import AddressService
from wedding_rsvp.services.rsvp_service import RsvpService
from wedding_rsvp.utils.security import rate_limit_check, get_client_ip
from wedding_rsvp.utils.responses import success_response, rate_limit_error

router = APIRouter()

@router.post("/rsvp/lookup")
async def lookup_guest(
    request: Request,
    lookup_data: LookupRequest,
    rsvp_service: RsvpService = Depends(get_rsvp_service)
):
    """Find the invitation matching a full name"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        return rate_limit_error()

    guest = rsvp_service.lookup_guest(lookup_data.name)
    return success_response(
        message="Guest found",
        data=guest.model_dump()
    )

@router.post("/rsvp/submit")
async def submit_rsvp(
    submission: RsvpSubmitRequest,
    rsvp_service: RsvpService = Depends(get_rsvp_service)
):
    """Submit or change an RSVP"""
    result = await rsvp_service.submit(**submission.model_dump())
    message = "Thank you, we can't wait to see you!" if result["attending"] else "Thank you for letting us know."
    return success_response(message=message, data=result)

@router.get("/guests/address")
async def get_address(
    code: Optional[str] = Query(None),
    address_service: AddressService = Depends(get_address_service)
):
    """Fetch the stored address for a guest code"""
    address = address_service.get_address(code)
    return success_response(
        message="Address retrieved",
        data=address.model_dump()
    )

@router.post("/guests/address")
async def save_address(
    address_data: AddressRequest,
    address_service: AddressService = Depends(get_address_service)
):
    """Save mailing address fields for a guest code"""
    fields = address_data.model_dump(exclude={"code"})
    result = await address_service.save_address(address_data.code, fields)
    message = "Address saved" if result["updated"] else "No changes to save"
    return success_response(message=message, data=result)
