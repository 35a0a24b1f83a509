"""
QR code generation for save-the-date links
"""

import io

import qrcode

from wedding_rsvp.services.guest_service import save_the_date_url

class QRService:
    """Service for generating QR codes"""

    @staticmethod
    def generate_guest_qr(code: str, image_format: str = 'PNG') -> bytes:
        """QR code pointing at the guest's personal save-the-date page"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(save_the_date_url(code))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=image_format)
        return buffer.getvalue()
