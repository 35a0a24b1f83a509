"""
Repository layer abstracting guest storage (SQLAlchemy vs Firebase Firestore).

Both backends hand out ``GuestRecord`` snapshots so the services never touch
ORM instances or Firestore documents directly.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends
from google.api_core import exceptions as gcp_exceptions
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wedding_rsvp.core.config import settings
from wedding_rsvp.core.db import get_db
from wedding_rsvp.models import AttendanceStatus, GroupSide, Guest, SaveTheDateView
from wedding_rsvp.services.exceptions import NotFoundError, PersistenceError
from wedding_rsvp.services.firebase_client import get_firestore_client

logger = logging.getLogger(__name__)

GUESTS_COLLECTION = "guests"
VIEWS_COLLECTION = "save_the_date_views"


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


def _with_name_lower(values: Dict[str, Any]) -> Dict[str, Any]:
    """Keep the lookup key in step with any name change"""
    values = dict(values, updated_at=datetime.utcnow())
    if values.get("name"):
        values["name_lower"] = values["name"].lower()
    return values


def _creation_order(record: "GuestRecord"):
    # timestamp() works for naive and aware values alike
    created = record.created_at
    return (created is None, created.timestamp() if created else 0.0, record.id)


@dataclass
class GuestRecord:
    id: str
    code: str
    name: str
    plus_one_allowed: bool = False
    group_side: Optional[str] = None
    email: Optional[str] = None
    attending: Optional[bool] = None
    dietary_preference: Optional[str] = None
    allergies: Optional[str] = None
    rsvp_submitted_at: Optional[datetime] = None
    plus_one_name: Optional[str] = None
    plus_one_attending: Optional[bool] = None
    plus_one_dietary_preference: Optional[str] = None
    plus_one_allergies: Optional[str] = None
    invitation_name: Optional[str] = None
    country: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    address_freeform: Optional[str] = None
    address_formatted: Optional[str] = None
    address_updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def attendance(self) -> AttendanceStatus:
        return AttendanceStatus.from_flag(self.attending)

    @property
    def has_rsvp(self) -> bool:
        return self.rsvp_submitted_at is not None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_model(cls, guest: Guest) -> "GuestRecord":
        values = {name: getattr(guest, name) for name in cls.field_names()}
        if guest.group_side is not None:
            values["group_side"] = guest.group_side.value
        return cls(**values)

    @classmethod
    def from_doc(cls, doc_id: str, data: Dict[str, Any]) -> "GuestRecord":
        known = set(cls.field_names())
        values = {k: v for k, v in data.items() if k in known}
        values["id"] = doc_id
        return cls(**values)


class SqlGuestRepo:
    """Guest store backed by SQLAlchemy"""

    def __init__(self, db: Session):
        self.db = db

    def _first(self, query) -> Optional[GuestRecord]:
        try:
            guest = query.order_by(Guest.created_at, Guest.id).first()
        except SQLAlchemyError as e:
            logger.exception("Guest query failed")
            raise PersistenceError("Could not read the guest list") from e
        return GuestRecord.from_model(guest) if guest else None

    def find_by_name(self, name: str) -> Optional[GuestRecord]:
        return self._first(self.db.query(Guest).filter(Guest.name_lower == name.lower()))

    def find_by_code(self, code: str) -> Optional[GuestRecord]:
        return self._first(self.db.query(Guest).filter(Guest.code == code))

    def find_by_id(self, guest_id: str) -> Optional[GuestRecord]:
        return self._first(self.db.query(Guest).filter(Guest.id == guest_id))

    def code_exists(self, code: str) -> bool:
        return self.find_by_code(code) is not None

    def list_all(self) -> List[GuestRecord]:
        try:
            guests = self.db.query(Guest).order_by(Guest.name).all()
        except SQLAlchemyError as e:
            logger.exception("Guest listing failed")
            raise PersistenceError("Could not read the guest list") from e
        return [GuestRecord.from_model(g) for g in guests]

    def update(self, guest_id: str, values: Dict[str, Any]) -> None:
        """Write all values in one transaction or none of them"""
        values = _with_name_lower(values)
        if values.get("group_side"):
            values["group_side"] = GroupSide(values["group_side"])
        try:
            rows = self.db.query(Guest).filter(Guest.id == guest_id).update(values, synchronize_session=False)
            if rows == 0:
                self.db.rollback()
                raise NotFoundError("Guest not found")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Guest update failed for %s", guest_id)
            raise PersistenceError("Failed to save your changes. Please try again.") from e
        self.db.expire_all()

    def create(
        self,
        name: str,
        code: str,
        plus_one_allowed: bool = False,
        email: Optional[str] = None,
        group_side: Optional[str] = None,
    ) -> GuestRecord:
        guest = Guest(
            name=name,
            name_lower=name.lower(),
            code=code,
            plus_one_allowed=plus_one_allowed,
            email=email,
            group_side=GroupSide(group_side) if group_side else None,
        )
        try:
            self.db.add(guest)
            self.db.commit()
            self.db.refresh(guest)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Guest insert failed for code %s", code)
            raise PersistenceError("Failed to add guest") from e
        return GuestRecord.from_model(guest)

    def record_view(self, guest_id: str) -> None:
        try:
            self.db.add(SaveTheDateView(guest_id=guest_id))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Failed to record save-the-date view") from e


class FirestoreGuestRepo:
    """Guest store backed by Firestore; documents keyed by guest id.

    Each document carries a ``name_lower`` field so the exact, case-insensitive
    lookup stays a plain equality query.
    """

    def __init__(self, client):
        self.fs = client

    @property
    def _guests(self):
        return self.fs.collection(GUESTS_COLLECTION)

    def _first(self, query) -> Optional[GuestRecord]:
        try:
            docs = query.get()
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore guest query failed")
            raise PersistenceError("Could not read the guest list") from e
        if not docs:
            return None
        records = [GuestRecord.from_doc(d.id, d.to_dict()) for d in docs]
        records.sort(key=_creation_order)
        return records[0]

    def find_by_name(self, name: str) -> Optional[GuestRecord]:
        return self._first(self._guests.where("name_lower", "==", name.lower()))

    def find_by_code(self, code: str) -> Optional[GuestRecord]:
        return self._first(self._guests.where("code", "==", code))

    def find_by_id(self, guest_id: str) -> Optional[GuestRecord]:
        try:
            doc = self._guests.document(guest_id).get()
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore guest read failed")
            raise PersistenceError("Could not read the guest list") from e
        return GuestRecord.from_doc(doc.id, doc.to_dict()) if doc.exists else None

    def code_exists(self, code: str) -> bool:
        return self.find_by_code(code) is not None

    def list_all(self) -> List[GuestRecord]:
        try:
            docs = self._guests.order_by("name").get()
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore guest listing failed")
            raise PersistenceError("Could not read the guest list") from e
        return [GuestRecord.from_doc(d.id, d.to_dict()) for d in docs]

    def update(self, guest_id: str, values: Dict[str, Any]) -> None:
        values = _with_name_lower(values)
        try:
            self._guests.document(guest_id).update(values)
        except gcp_exceptions.NotFound as e:
            raise NotFoundError("Guest not found") from e
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore guest update failed for %s", guest_id)
            raise PersistenceError("Failed to save your changes. Please try again.") from e

    def create(
        self,
        name: str,
        code: str,
        plus_one_allowed: bool = False,
        email: Optional[str] = None,
        group_side: Optional[str] = None,
    ) -> GuestRecord:
        guest_id = str(uuid.uuid4())
        now = datetime.utcnow()
        data = {
            "code": code,
            "name": name,
            "name_lower": name.lower(),
            "plus_one_allowed": plus_one_allowed,
            "email": email,
            "group_side": group_side,
            "attending": None,
            "rsvp_submitted_at": None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            self._guests.document(guest_id).set(data)
        except gcp_exceptions.GoogleAPIError as e:
            logger.exception("Firestore guest insert failed for code %s", code)
            raise PersistenceError("Failed to add guest") from e
        return GuestRecord.from_doc(guest_id, data)

    def record_view(self, guest_id: str) -> None:
        try:
            self.fs.collection(VIEWS_COLLECTION).add({
                "guest_id": guest_id,
                "viewed_at": datetime.utcnow(),
            })
        except gcp_exceptions.GoogleAPIError as e:
            raise PersistenceError("Failed to record save-the-date view") from e


def get_guest_repo(db: Session = Depends(get_db)):
    """FastAPI dependency selecting the configured guest store"""
    if use_firestore():
        return FirestoreGuestRepo(get_firestore_client())
    return SqlGuestRepo(db)
