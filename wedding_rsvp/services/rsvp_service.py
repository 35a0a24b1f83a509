"""
Guest lookup and RSVP submission
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from wedding_rsvp.models import DietaryPreference
from wedding_rsvp.schemas.guest import GuestLookupResult
from wedding_rsvp.services.exceptions import NotFoundError, ValidationError
from wedding_rsvp.services.notifications import RSVP_SUBMITTED, dispatch
from wedding_rsvp.services.repositories import GuestRecord

logger = logging.getLogger(__name__)

VALID_DIETARY = {d.value for d in DietaryPreference}

PLUS_ONE_FIELDS = (
    "plus_one_attending",
    "plus_one_name",
    "plus_one_dietary_preference",
    "plus_one_allergies",
)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_dietary(value: Optional[str], message: str) -> None:
    if value is not None and value not in VALID_DIETARY:
        raise ValidationError(message)


class RsvpService:
    """RSVP workflow over the guest store.

    Every submission replaces the guest's whole RSVP field group, so a guest
    may change their answer any number of times.
    """

    def __init__(self, repo, notifier):
        self.repo = repo
        self.notifier = notifier

    def lookup_guest(self, name: Optional[str]) -> GuestLookupResult:
        """Exact, case-insensitive name match; partial names never match"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("name required")

        guest = self.repo.find_by_name(name)
        if not guest:
            raise NotFoundError("Guest not found. Please enter your full name as it appears on your invitation.")

        return GuestLookupResult(
            id=guest.id,
            name=guest.name,
            plus_one_allowed=guest.plus_one_allowed,
            has_rsvp=guest.has_rsvp,
            attendance=guest.attendance,
            attending=guest.attending,
            dietary_preference=guest.dietary_preference,
            allergies=guest.allergies,
            plus_one_name=guest.plus_one_name,
            plus_one_attending=guest.plus_one_attending,
            plus_one_dietary_preference=guest.plus_one_dietary_preference,
            plus_one_allergies=guest.plus_one_allergies,
        )

    @staticmethod
    def build_update(
        guest: GuestRecord,
        attending: bool,
        dietary_preference: Optional[str] = None,
        allergies: Optional[str] = None,
        plus_one_attending: Optional[bool] = None,
        plus_one_name: Optional[str] = None,
        plus_one_dietary_preference: Optional[str] = None,
        plus_one_allergies: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Full RSVP field group to write for one submission"""
        update: Dict[str, Any] = {
            "attending": attending,
            "rsvp_submitted_at": datetime.utcnow(),
        }

        if not attending:
            update["dietary_preference"] = None
            update["allergies"] = None
            update.update(dict.fromkeys(PLUS_ONE_FIELDS))
            return update

        update["dietary_preference"] = _clean(dietary_preference)
        update["allergies"] = _clean(allergies)

        if guest.plus_one_allowed and plus_one_attending is True:
            update["plus_one_attending"] = True
            update["plus_one_name"] = _clean(plus_one_name)
            update["plus_one_dietary_preference"] = _clean(plus_one_dietary_preference)
            update["plus_one_allergies"] = _clean(plus_one_allergies)
        else:
            update["plus_one_attending"] = False
            update["plus_one_name"] = None
            update["plus_one_dietary_preference"] = None
            update["plus_one_allergies"] = None

        return update

    async def submit(
        self,
        guest_id: Optional[str],
        attending: Any,
        dietary_preference: Optional[str] = None,
        allergies: Optional[str] = None,
        plus_one_attending: Optional[bool] = None,
        plus_one_name: Optional[str] = None,
        plus_one_dietary_preference: Optional[str] = None,
        plus_one_allergies: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Validate, overwrite the RSVP fields, then notify best-effort"""
        if not guest_id or not isinstance(attending, bool):
            raise ValidationError("Missing required fields: guest_id, attending")

        dietary_preference = _clean(dietary_preference)
        plus_one_dietary_preference = _clean(plus_one_dietary_preference)
        if attending:
            _check_dietary(dietary_preference, "Invalid dietary preference")
            if plus_one_attending is True:
                _check_dietary(plus_one_dietary_preference, "Invalid plus one dietary preference")

        guest = self.repo.find_by_id(guest_id)
        if not guest:
            raise NotFoundError("Guest not found")

        update = self.build_update(
            guest,
            attending,
            dietary_preference=dietary_preference,
            allergies=allergies,
            plus_one_attending=plus_one_attending,
            plus_one_name=plus_one_name,
            plus_one_dietary_preference=plus_one_dietary_preference,
            plus_one_allergies=plus_one_allergies,
        )
        self.repo.update(guest.id, update)
        logger.info(
            "RSVP %s for guest %s (%s)",
            "updated" if guest.has_rsvp else "submitted",
            guest.id,
            "attending" if attending else "declining",
        )

        await dispatch(self.notifier, RSVP_SUBMITTED, dict(update, name=guest.name))
        return {"attending": attending}
