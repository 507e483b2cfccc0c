"""
Role and ownership capability checks.

Roles are a tagged value (models.enums.Role), never a User subclass. Each
operation that is gated by role or ownership has one function here returning
a bool; services turn a False into ForbiddenError with an operation-specific
message.

Authorization rules:
    - create service:     provider or admin
    - confirm / complete: the service's provider, or an admin
    - cancel / view:      the booking's user, the service's provider, or an admin
    - mark message read:  the receiver only
    - view trip:          anyone if public; otherwise owner, members, admins
    - post to trip:       owner or members
"""

from typing import Callable, Dict

from triplink.models import Booking, BookingStatus, Message, Role, Service, Trip, User

SERVICE_CREATOR_ROLES = frozenset({Role.PROVIDER, Role.ADMIN})


def role_of(user: User) -> Role:
    return Role(user.role)


def is_admin(user: User) -> bool:
    return role_of(user) is Role.ADMIN


def can_create_service(user: User) -> bool:
    return role_of(user) in SERVICE_CREATOR_ROLES


def is_service_provider(user: User, service: Service) -> bool:
    return service.provider_id == user.id


def can_view_booking(user: User, booking: Booking, service: Service) -> bool:
    return is_admin(user) or booking.user_id == user.id or is_service_provider(user, service)


def can_confirm_booking(user: User, booking: Booking, service: Service) -> bool:
    return is_admin(user) or is_service_provider(user, service)


def can_complete_booking(user: User, booking: Booking, service: Service) -> bool:
    return is_admin(user) or is_service_provider(user, service)


def can_cancel_booking(user: User, booking: Booking, service: Service) -> bool:
    return can_view_booking(user, booking, service)


BookingCheck = Callable[[User, Booking, Service], bool]

# Target status → capability required to move a booking there
BOOKING_TRANSITION_CHECKS: Dict[BookingStatus, BookingCheck] = {
    BookingStatus.CONFIRMED: can_confirm_booking,
    BookingStatus.CANCELLED: can_cancel_booking,
    BookingStatus.COMPLETED: can_complete_booking,
}


def can_mark_read(user_id: int, message: Message) -> bool:
    return message.receiver_id == user_id


def can_view_trip(user: User, trip: Trip) -> bool:
    return not trip.is_private or trip.has_participant(user.id) or is_admin(user)


def can_post_to_trip(user: User, trip: Trip) -> bool:
    return trip.has_participant(user.id)
