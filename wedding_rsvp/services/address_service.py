"""
Mailing address validation, formatting and collection.

Country handling is table driven: every supported country maps to the fields
it requires and a function producing its label lines. Countries without an
entry fall back to a single freeform field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from wedding_rsvp.schemas.guest import AddressInfo
from wedding_rsvp.services.exceptions import NotFoundError, ValidationError
from wedding_rsvp.services.notifications import ADDRESS_UPDATED, dispatch
from wedding_rsvp.services.repositories import GuestRecord

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = (
    "address_line1",
    "address_line2",
    "city",
    "region",
    "postal_code",
    "address_freeform",
)
SAVEABLE_FIELDS = ("invitation_name", "country") + ADDRESS_FIELDS

OTHER_COUNTRY = "Other"


def _value(fields: Mapping[str, Any], key: str) -> str:
    value = fields.get(key)
    return value.strip() if isinstance(value, str) else ""


def _postal_city(fields: Mapping[str, Any]) -> str:
    return " ".join(p for p in (_value(fields, "postal_code"), _value(fields, "city")) if p)


def _us_lines(fields: Mapping[str, Any], country: str) -> List[str]:
    city = _value(fields, "city")
    region = _value(fields, "region")
    postal_code = _value(fields, "postal_code")
    lines = [_value(fields, "address_line1"), _value(fields, "address_line2")]
    if city or region or postal_code:
        region_postal = f"{region} {postal_code}".strip() if region else postal_code
        lines.append(", ".join(p for p in (city, region_postal) if p))
    lines.append("United States")
    return lines


def _netherlands_lines(fields: Mapping[str, Any], country: str) -> List[str]:
    return [_value(fields, "address_line1"), _postal_city(fields), "Netherlands"]


def _france_lines(fields: Mapping[str, Any], country: str) -> List[str]:
    return [
        _value(fields, "address_line1"),
        _value(fields, "address_line2"),
        _postal_city(fields),
        "France",
    ]


def _freeform_lines(fields: Mapping[str, Any], country: str) -> List[str]:
    lines = [_value(fields, "address_freeform")]
    if country and country != OTHER_COUNTRY:
        lines.append(country)
    return lines


@dataclass(frozen=True)
class CountryRule:
    required_fields: Tuple[str, ...]
    lines: Callable[[Mapping[str, Any], str], List[str]]


COUNTRY_RULES: Dict[str, CountryRule] = {
    "United States": CountryRule(("address_line1", "city", "region", "postal_code"), _us_lines),
    "Netherlands": CountryRule(("address_line1", "postal_code", "city"), _netherlands_lines),
    "France": CountryRule(("address_line1", "postal_code", "city"), _france_lines),
}
FREEFORM_RULE = CountryRule(("address_freeform",), _freeform_lines)


def rule_for(country: str) -> CountryRule:
    return COUNTRY_RULES.get(country, FREEFORM_RULE)


def display_field_name(field: str) -> str:
    """address_line1 -> 'street address', postal_code -> 'postal code'"""
    return (
        field.replace("address_", "", 1)
        .replace("_", " ", 1)
        .replace("line1", "street address")
        .replace("freeform", "address")
    )


def validate_address(country: Optional[str], fields: Mapping[str, Any]) -> Optional[str]:
    """Return a human-readable error, or None when the fields are acceptable.

    Nothing is checked until both a country is chosen and at least one
    address field has content, so partial entry can be saved.
    """
    if not country:
        return None
    if not any(_value(fields, key) for key in ADDRESS_FIELDS):
        return None

    missing = [
        display_field_name(key)
        for key in rule_for(country).required_fields
        if not _value(fields, key)
    ]
    if missing:
        return f"Please fill in: {', '.join(missing)}"
    return None


def format_address(country: str, fields: Mapping[str, Any]) -> str:
    """Canonical newline-joined mailing label for the given country"""
    lines = rule_for(country).lines(fields, country)
    return "\n".join(line for line in lines if line)


def address_change_needs_notice(record: Mapping[str, Any], old_record: Optional[Mapping[str, Any]]) -> bool:
    """True when a row change stamped a new address_updated_at with a label to send"""
    updated_at = record.get("address_updated_at")
    if not updated_at:
        return False
    if old_record and old_record.get("address_updated_at") == updated_at:
        return False
    return bool(record.get("address_formatted"))


class AddressService:
    """Address collection for formal invitations, keyed by guest code"""

    def __init__(self, repo, notifier):
        self.repo = repo
        self.notifier = notifier

    @staticmethod
    def normalize_code(code: Optional[str]) -> str:
        code = (code or "").strip().upper()
        if not code:
            raise ValidationError("Guest code is required")
        return code

    def _get_guest(self, code: Optional[str]) -> GuestRecord:
        guest = self.repo.find_by_code(self.normalize_code(code))
        if not guest:
            raise NotFoundError("Guest not found")
        return guest

    def get_address(self, code: Optional[str]) -> AddressInfo:
        guest = self._get_guest(code)
        return AddressInfo(
            name=guest.name,
            invitation_name=guest.invitation_name,
            country=guest.country,
            address_line1=guest.address_line1,
            address_line2=guest.address_line2,
            city=guest.city,
            region=guest.region,
            postal_code=guest.postal_code,
            address_freeform=guest.address_freeform,
            address_formatted=guest.address_formatted,
        )

    async def save_address(self, code: Optional[str], fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Write the supplied non-blank fields and refresh the formatted label.

        Blank values mean "not supplied", so a stored field cannot be
        cleared through this operation.
        """
        guest = self._get_guest(code)

        error = validate_address(_value(fields, "country"), fields)
        if error:
            raise ValidationError(error)

        updates: Dict[str, Any] = {}
        has_address_update = False
        for key in SAVEABLE_FIELDS:
            value = _value(fields, key)
            if value:
                updates[key] = value
                if key != "invitation_name":
                    has_address_update = True

        country = updates.get("country") or guest.country
        if country and has_address_update:
            merged = {key: updates.get(key) or getattr(guest, key) for key in ADDRESS_FIELDS}
            updates["address_formatted"] = format_address(country, merged)
            updates["address_updated_at"] = datetime.utcnow()

        if not updates:
            return {"updated": False, "address_formatted": guest.address_formatted}

        self.repo.update(guest.id, updates)
        logger.info("Saved address fields %s for guest %s", sorted(updates), guest.id)

        if "address_updated_at" in updates:
            await dispatch(self.notifier, ADDRESS_UPDATED, {
                "name": guest.name,
                "invitation_name": updates.get("invitation_name") or guest.invitation_name,
                "country": country,
                "address_formatted": updates["address_formatted"],
                "address_updated_at": updates["address_updated_at"],
            })

        return {
            "updated": True,
            "address_formatted": updates.get("address_formatted", guest.address_formatted),
        }
