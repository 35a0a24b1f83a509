"""
Excel processing service for guest list import/export
"""

import io
import logging
from typing import Dict, List, Optional, Tuple

import pandas as pd

from wedding_rsvp.models import GroupSide
from wedding_rsvp.services.exceptions import ServiceError
from wedding_rsvp.services.guest_service import GuestService, is_valid_code
from wedding_rsvp.services.repositories import GuestRecord

logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "yes", "y", "1", "x"}


def _cell(row, column: Optional[str]) -> str:
    """Cell as stripped text; missing columns and NaN become ''"""
    if column is None or pd.isna(row[column]):
        return ""
    value = row[column]
    # numeric columns with blanks come back as floats: 1 -> 1.0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


class ExcelService:
    """Service for handling guest list spreadsheets"""

    REQUIRED_COLUMNS = ['name', 'plus one']
    OPTIONAL_COLUMNS = ['email', 'group side', 'code']

    @staticmethod
    def create_template() -> bytes:
        """Create Excel template with the import columns"""
        df = pd.DataFrame(columns=['Name', 'Plus One', 'Email', 'Group Side', 'Code'])

        sample_data = [
            ['Sample Guest 1', 'TRUE', 'guest1@example.com', 'Bride', ''],
            ['Sample Guest 2', 'FALSE', '', 'Groom', ''],
        ]
        for row in sample_data:
            df.loc[len(df)] = row

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')
        return buffer.getvalue()

    @staticmethod
    def map_columns(df: pd.DataFrame) -> Dict[str, str]:
        """Map normalized column names to the spreadsheet's own headers"""
        known = ExcelService.REQUIRED_COLUMNS + ExcelService.OPTIONAL_COLUMNS
        mapping = {}
        for col in df.columns:
            col_lower = str(col).lower().strip()
            if col_lower in known:
                mapping[col_lower] = col
        return mapping

    @staticmethod
    def validate_excel_structure(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate Excel file structure"""
        errors = []
        mapping = ExcelService.map_columns(df)

        missing_columns = [col for col in ExcelService.REQUIRED_COLUMNS if col not in mapping]
        if missing_columns:
            errors.append(f"Missing required columns: {', '.join(missing_columns)}")

        return len(errors) == 0, errors

    @staticmethod
    def validate_data_constraints(df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate codes and group sides before anything is written"""
        errors = []
        mapping = ExcelService.map_columns(df)
        valid_sides = {side.value.lower() for side in GroupSide}
        seen_codes = set()

        for index, row in df.iterrows():
            if not _cell(row, mapping.get('name')):
                continue
            line = index + 2  # header row plus 1-based numbering

            side = _cell(row, mapping.get('group side'))
            if side and side.lower() not in valid_sides:
                errors.append(f"Row {line}: group side must be Bride or Groom, got '{side}'")

            code = _cell(row, mapping.get('code')).upper()
            if not code:
                continue
            if not is_valid_code(code):
                errors.append(f"Row {line}: invalid code '{code}'")
            elif code in seen_codes:
                errors.append(f"Row {line}: duplicate code '{code}'")
            seen_codes.add(code)

        return len(errors) == 0, errors

    @staticmethod
    def parse_plus_one(value: str) -> bool:
        return value.strip().lower() in TRUE_VALUES

    @staticmethod
    def process_excel_upload(file_content: bytes, guest_service: GuestService) -> Tuple[bool, List[str], int]:
        """Validate the whole sheet, then add or update one guest per non-empty row.

        Rows whose code matches an existing guest overwrite that guest's name,
        plus-one flag, email and side; RSVP and address data are left alone.
        """
        try:
            df = pd.read_excel(io.BytesIO(file_content))
        except Exception as e:
            return False, [f"Error reading Excel file: {str(e)}"], 0

        valid_structure, structure_errors = ExcelService.validate_excel_structure(df)
        if not valid_structure:
            return False, structure_errors, 0

        valid_data, data_errors = ExcelService.validate_data_constraints(df)
        if not valid_data:
            return False, data_errors, 0

        existing = {g.code: g for g in guest_service.repo.list_all()}
        mapping = ExcelService.map_columns(df)
        processed_count = 0
        for _, row in df.iterrows():
            name = _cell(row, mapping.get('name'))
            if not name:
                continue

            side = _cell(row, mapping.get('group side'))
            code = _cell(row, mapping.get('code')).upper()
            details = dict(
                name=name,
                plus_one_allowed=ExcelService.parse_plus_one(_cell(row, mapping.get('plus one'))),
                email=_cell(row, mapping.get('email')) or None,
                group_side=side.capitalize() if side else None,
            )
            try:
                if code in existing:
                    guest_service.update_guest(existing[code], **details)
                else:
                    guest_service.create_guest(code=code or None, **details)
            except ServiceError as e:
                logger.error("Guest import stopped at %s: %s", name, e.message)
                return False, [f"Failed to import {name}: {e.message}"], processed_count
            processed_count += 1

        return True, [], processed_count

    @staticmethod
    def export_guests(guests: List[GuestRecord]) -> bytes:
        """Export guests with RSVP state and printable mailing address"""
        data = []
        for guest in guests:
            data.append({
                'Code': guest.code,
                'Name': guest.name,
                'Group Side': guest.group_side or '',
                'Plus One Allowed': 'Yes' if guest.plus_one_allowed else 'No',
                'Email': guest.email or '',
                'RSVP': guest.attendance.value.capitalize(),
                'Dietary Preference': guest.dietary_preference or '',
                'Allergies': guest.allergies or '',
                'Plus One Name': guest.plus_one_name or '',
                'Plus One Attending': 'Yes' if guest.plus_one_attending else 'No',
                'Plus One Dietary Preference': guest.plus_one_dietary_preference or '',
                'Plus One Allergies': guest.plus_one_allergies or '',
                'Invitation Name': guest.invitation_name or guest.name,
                'Mailing Address': guest.address_formatted or '',
            })

        df = pd.DataFrame(data)
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Guest List')
        return buffer.getvalue()
