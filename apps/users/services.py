"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Staff account management: updating profile, role and
             active flag, and deleting accounts, with lock-out guards.
-------------------------------------------------------------------------
"""
import logging
from typing import Any, Dict

from django.db import transaction
from django.db.models import ProtectedError

from apps.core.exceptions import InvalidStateException, UnauthorizedRoleException
from apps.users.models import CustomUser, Role

logger = logging.getLogger(__name__)


def primary_role(user: CustomUser) -> str:
    """Return the first role code held by user, or an empty string."""
    codes = user.get_role_codes()
    return codes[0] if codes else ''


@transaction.atomic
def update_user(actor: CustomUser, user: CustomUser, data: Dict[str, Any]) -> CustomUser:
    """
    Apply cleaned profile data to a staff account.

    Args:
        actor: The administrator performing the update.
        user: The account being updated.
        data: Cleaned UserUpdateForm data (first/last name, email,
            role, is_active, position, phone).

    Raises:
        InvalidStateException: If actor tries to change their own role
            or deactivate their own account.
    """
    role = data['role']
    if actor.pk == user.pk and (role not in user.get_role_codes() or not data['is_active']):
        raise InvalidStateException("You cannot change your own role or deactivate your account.")

    user.first_name = data['first_name']
    user.last_name = data['last_name']
    user.email = data['email']
    user.is_active = data['is_active']
    user.position = data.get('position') or ''
    user.phone = data.get('phone') or ''
    user.save()

    if actor.pk != user.pk:
        user.roles.set([Role.get_or_create_system_role(role)])

    logger.info("User %s updated by %s (role=%s, active=%s)", user.email, actor.email, role, user.is_active)
    return user


@transaction.atomic
def delete_user(actor: CustomUser, user: CustomUser) -> None:
    """
    Delete a staff account.

    Raises:
        InvalidStateException: On self-deletion, or when the account
            still owns recorded entries.
        UnauthorizedRoleException: When a non super admin deletes a
            super admin.
    """
    if actor.pk == user.pk:
        raise InvalidStateException("Cannot delete your own account.")

    if user.is_super_admin() and not actor.is_super_admin():
        raise UnauthorizedRoleException("Only Super Admin can delete other Super Admin accounts.")

    email = user.email
    try:
        user.delete()
    except ProtectedError:
        raise InvalidStateException(
            "User has recorded entries and cannot be deleted. Deactivate the account instead."
        )
    logger.info("User %s deleted by %s", email, actor.email)

