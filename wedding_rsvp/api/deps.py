"""
Service dependencies shared by the routers
"""

from fastapi import Depends

from wedding_rsvp.services.address_service import AddressService
from wedding_rsvp.services.guest_service import GuestService
from wedding_rsvp.services.notifications import get_notifier
from wedding_rsvp.services.repositories import get_guest_repo
from wedding_rsvp.services.rsvp_service import RsvpService

def get_rsvp_service(repo=Depends(get_guest_repo), notifier=Depends(get_notifier)) -> RsvpService:
    return RsvpService(repo, notifier)

def get_address_service(repo=Depends(get_guest_repo), notifier=Depends(get_notifier)) -> AddressService:
    return AddressService(repo, notifier)

def get_guest_service(repo=Depends(get_guest_repo), notifier=Depends(get_notifier)) -> GuestService:
    return GuestService(repo, notifier)
