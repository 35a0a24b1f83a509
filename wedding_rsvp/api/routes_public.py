"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from wedding_rsvp.api.deps import get_guest_service
from wedding_rsvp.services.guest_service import GuestService
from wedding_rsvp.services.qr_service import QRService
from wedding_rsvp.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/save-the-date/{code}")
async def save_the_date(
    code: str,
    guest_service: GuestService = Depends(get_guest_service)
):
    """Resolve a save-the-date link and record the visit"""
    info = guest_service.get_save_the_date(code)
    return success_response(
        message="Save the date",
        data=info.model_dump()
    )

@router.get("/save-the-date/{code}/qr.png")
async def save_the_date_qr(
    code: str,
    guest_service: GuestService = Depends(get_guest_service)
):
    """QR code image for a guest's save-the-date link"""
    guest = guest_service.get_by_code(code)
    qr_bytes = QRService.generate_guest_qr(guest.code)

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=qr_{guest.code}.png"}
    )
