"""
Guest creation, save-the-date access and guest list summary
"""

import logging
import secrets
from typing import Callable, Optional

from wedding_rsvp.core.config import settings
from wedding_rsvp.schemas.admin import GuestSummary
from wedding_rsvp.schemas.guest import SaveTheDateInfo
from wedding_rsvp.services.exceptions import (
    CodeGenerationError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from wedding_rsvp.services.notifications import WEEKLY_SUMMARY, dispatch
from wedding_rsvp.services.repositories import GuestRecord

logger = logging.getLogger(__name__)

# No O/0, I/1 or L, so codes survive being read aloud or hand-typed
CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 1000


def generate_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def is_valid_code(code: str) -> bool:
    return len(code) == CODE_LENGTH and all(c in CODE_ALPHABET for c in code)


def generate_unique_code(is_taken: Callable[[str], bool]) -> str:
    """Draw codes until one is free; give up after MAX_CODE_ATTEMPTS"""
    for _ in range(MAX_CODE_ATTEMPTS):
        code = generate_code()
        if not is_taken(code):
            return code
    raise CodeGenerationError(f"Could not generate a unique code after {MAX_CODE_ATTEMPTS} attempts")


def save_the_date_url(code: str) -> str:
    return f"{settings.BASE_URL}/save-the-date?code={code}"


class GuestService:
    """Guest list administration and code-based access"""

    def __init__(self, repo, notifier=None):
        self.repo = repo
        self.notifier = notifier

    def create_guest(
        self,
        name: str,
        plus_one_allowed: bool = False,
        email: Optional[str] = None,
        group_side: Optional[str] = None,
        code: Optional[str] = None,
    ) -> GuestRecord:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Guest name is required")

        if code:
            code = code.strip().upper()
            if not is_valid_code(code):
                raise ValidationError(f"Invalid guest code '{code}'")
            if self.repo.code_exists(code):
                raise ConflictError(f"Guest code {code} is already in use")
        else:
            code = generate_unique_code(self.repo.code_exists)

        guest = self.repo.create(
            name=name,
            code=code,
            plus_one_allowed=plus_one_allowed,
            email=email,
            group_side=group_side,
        )
        logger.info("Added guest %s with code %s", guest.name, guest.code)
        return guest

    def update_guest(
        self,
        guest: GuestRecord,
        name: str,
        plus_one_allowed: bool = False,
        email: Optional[str] = None,
        group_side: Optional[str] = None,
    ) -> None:
        """Overwrite the invitation details of an existing guest; RSVP and address are kept"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Guest name is required")

        self.repo.update(guest.id, {
            "name": name,
            "plus_one_allowed": plus_one_allowed,
            "email": email,
            "group_side": group_side,
        })
        logger.info("Updated guest %s with code %s", name, guest.code)

    def get_by_code(self, code: Optional[str]) -> GuestRecord:
        code = (code or "").strip().upper()
        if not code:
            raise ValidationError("Guest code is required")

        guest = self.repo.find_by_code(code)
        if not guest:
            raise NotFoundError("Invitation not found")
        return guest

    def get_save_the_date(self, code: Optional[str]) -> SaveTheDateInfo:
        """Resolve a save-the-date code and record the visit"""
        guest = self.get_by_code(code)

        try:
            self.repo.record_view(guest.id)
        except PersistenceError:
            logger.warning("Could not record save-the-date view for guest %s", guest.id)

        return SaveTheDateInfo(
            code=guest.code,
            name=guest.name,
            plus_one_allowed=guest.plus_one_allowed,
            rsvp_url=f"{settings.BASE_URL}/rsvp",
        )

    def summarize(self) -> GuestSummary:
        guests = self.repo.list_all()
        with_address = [g for g in guests if g.address_line1 or g.address_freeform]
        without_address = [g for g in guests if not (g.address_line1 or g.address_freeform)]

        return GuestSummary(
            total=len(guests),
            with_address=len(with_address),
            without_address=len(without_address),
            without_address_names=[g.name for g in without_address],
            max_headcount=len(with_address) + sum(1 for g in with_address if g.plus_one_allowed),
            rsvp_yes=sum(1 for g in guests if g.has_rsvp and g.attending is True),
            rsvp_no=sum(1 for g in guests if g.has_rsvp and g.attending is False),
            rsvp_pending=sum(1 for g in guests if not g.has_rsvp),
        )

    async def send_summary(self) -> bool:
        summary = self.summarize()
        result = await dispatch(self.notifier, WEEKLY_SUMMARY, summary.model_dump())
        return result.success
