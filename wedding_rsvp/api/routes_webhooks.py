"""
Database webhook receiver for address changes made outside the API
"""

import logging

from fastapi import APIRouter, Depends

from wedding_rsvp.schemas.admin import AddressWebhookPayload
from wedding_rsvp.services.address_service import address_change_needs_notice
from wedding_rsvp.services.notifications import ADDRESS_UPDATED, dispatch, get_notifier
from wedding_rsvp.utils.security import verify_webhook_secret
from wedding_rsvp.utils.responses import success_response, error_response

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/address-update")
async def address_webhook_status():
    """Lets the database confirm the endpoint exists"""
    return {"status": "ok", "message": "Address update webhook endpoint"}

@router.post("/address-update", dependencies=[Depends(verify_webhook_secret)])
async def address_webhook(
    payload: AddressWebhookPayload,
    notifier=Depends(get_notifier)
):
    """Email the new label when a guest row's address_updated_at changes"""
    if payload.type != "UPDATE" or payload.table != "guests":
        return success_response(message="Ignored - not a guest update")

    if not address_change_needs_notice(payload.record, payload.old_record):
        return success_response(message="Ignored - address not updated")

    record = payload.record
    result = await dispatch(notifier, ADDRESS_UPDATED, {
        "name": record.get("name"),
        "invitation_name": record.get("invitation_name"),
        "country": record.get("country"),
        "address_formatted": record.get("address_formatted"),
        "address_updated_at": record.get("address_updated_at"),
    })
    if not result.success:
        return error_response(
            message="Failed to send notification",
            error_code="notification_error",
            status_code=500
        )

    logger.info("Address notification sent for guest: %s", record.get("name"))
    return success_response(message="Notification sent")
