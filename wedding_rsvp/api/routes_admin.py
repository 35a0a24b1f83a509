"""
Admin API routes - requires authentication
"""

from fastapi import APIRouter, Depends, UploadFile, File
from fastapi.responses import Response

from wedding_rsvp.api.deps import get_guest_service
from wedding_rsvp.core.config import settings
from wedding_rsvp.schemas.admin import GuestCreate, GuestResponse
from wedding_rsvp.services.excel_service import ExcelService
from wedding_rsvp.services.guest_service import GuestService
from wedding_rsvp.utils.security import verify_admin_token
from wedding_rsvp.utils.responses import success_response, error_response

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter(dependencies=[Depends(verify_admin_token)])

@router.post("/guests")
async def create_guest(
    guest_data: GuestCreate,
    guest_service: GuestService = Depends(get_guest_service)
):
    """Add a single guest"""
    guest = guest_service.create_guest(
        name=guest_data.name,
        plus_one_allowed=guest_data.plus_one_allowed,
        email=guest_data.email,
        group_side=guest_data.group_side.value if guest_data.group_side else None,
        code=guest_data.code,
    )
    return success_response(
        message="Guest added successfully",
        data=GuestResponse.model_validate(guest, from_attributes=True).model_dump(),
        status_code=201
    )

@router.get("/guests")
async def list_guests(guest_service: GuestService = Depends(get_guest_service)):
    """List every guest with RSVP and address status"""
    guests = guest_service.repo.list_all()
    return success_response(
        message="Guests retrieved successfully",
        data=[GuestResponse.model_validate(g, from_attributes=True).model_dump() for g in guests]
    )

@router.post("/guests/import")
async def import_guests(
    file: UploadFile = File(...),
    guest_service: GuestService = Depends(get_guest_service)
):
    """Bulk-add guests from an Excel file"""
    if not file.filename or not file.filename.endswith(('.xlsx', '.xls')):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            error_code="validation_error",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(
            message="File is too large",
            error_code="validation_error",
            status_code=413
        )

    success, errors, processed_count = ExcelService.process_excel_upload(file_content, guest_service)
    if not success:
        return error_response(
            message="Excel file validation failed",
            error_code="validation_error",
            details={"errors": errors, "processed_count": processed_count},
            status_code=422
        )

    return success_response(
        message=f"Excel file processed successfully. {processed_count} guests imported.",
        data={
            "processed_count": processed_count,
            "filename": file.filename
        }
    )

@router.get("/guests/template.xlsx")
async def download_template():
    """Download the guest import template"""
    return Response(
        content=ExcelService.create_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=guest_list_template.xlsx"}
    )

@router.get("/guests/export.xlsx")
async def export_guests(guest_service: GuestService = Depends(get_guest_service)):
    """Export guests with RSVP answers and formatted mailing addresses"""
    excel_content = ExcelService.export_guests(guest_service.repo.list_all())
    return Response(
        content=excel_content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=guest_list.xlsx"}
    )

@router.get("/summary")
async def get_summary(guest_service: GuestService = Depends(get_guest_service)):
    """RSVP and address progress"""
    return success_response(
        message="Summary retrieved",
        data=guest_service.summarize().model_dump()
    )

@router.post("/summary/send")
async def send_summary(guest_service: GuestService = Depends(get_guest_service)):
    """Email the summary to the notification recipients"""
    if not await guest_service.send_summary():
        return error_response(
            message="Failed to send summary",
            error_code="notification_error",
            status_code=502
        )
    return success_response(message="Summary sent")
