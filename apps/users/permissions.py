"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Role groups and role checks for role-based access
             control across residents, certificates and finance.
-------------------------------------------------------------------------
"""
from typing import Any, List

from apps.core.exceptions import UnauthorizedRoleException
from apps.users.models import RoleCode


# Role groups
RECORD_MANAGER_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.CAPTAIN, RoleCode.SECRETARY]
CERTIFICATE_UPDATE_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.CAPTAIN, RoleCode.SECRETARY]
CERTIFICATE_DELETE_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.CAPTAIN]
FINANCE_ROLES = [RoleCode.TREASURER, RoleCode.CAPTAIN, RoleCode.SUPER_ADMIN]
BLOTTER_DELETE_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.CAPTAIN]
AIP_DELETE_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.CAPTAIN]
AIP_INSIGHT_ROLES = [RoleCode.TREASURER, RoleCode.CAPTAIN, RoleCode.SUPER_ADMIN, RoleCode.SECRETARY]
USER_ADMIN_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.ADMIN]
USER_UPDATE_ROLES = [RoleCode.SUPER_ADMIN]
USER_DELETE_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.CAPTAIN]
SETTINGS_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.ADMIN, RoleCode.CAPTAIN, RoleCode.SECRETARY]


def has_role(user: Any, roles: List[str]) -> bool:
    """
    Check if user has any of the specified roles.

    Args:
        user: The user object to check.
        roles: List of role codes to check against. An empty list
            admits every authenticated user.

    Returns:
        True if user has any of the specified roles or is superuser.
    """
    if not user.is_authenticated:
        return False

    if user.is_superuser or not roles:
        return True

    return user.has_any_role(roles)


def require_role(user: Any, roles: List[str], action: str = "perform this action") -> None:
    """
    Raise UnauthorizedRoleException unless the user holds one of roles.

    Args:
        user: The user attempting the action.
        roles: Allowed role codes.
        action: Description used in the error message.
    """
    if not has_role(user, roles):
        raise UnauthorizedRoleException(
            f"You do not have the required role to {action}.",
            details={'required_roles': [str(role) for role in roles]}
        )
