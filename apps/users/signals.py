"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Signal receivers for authentication events.
-------------------------------------------------------------------------
"""
import logging
from typing import Optional

from django.contrib.auth.signals import user_logged_in, user_login_failed
from django.dispatch import receiver

logger = logging.getLogger(__name__)


def client_ip(request) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


@receiver(user_login_failed)
def log_failed_login(sender, credentials, request=None, **kwargs):
    """Log failed login attempts with the email tried and the client IP."""
    logger.warning(
        "Failed login attempt - email=%s ip=%s path=%s",
        credentials.get('email') or credentials.get('username'),
        client_ip(request),
        getattr(request, 'path', None)
    )


@receiver(user_logged_in)
def log_successful_login(sender, request, user, **kwargs):
    logger.info("User %s logged in from %s", user.email, client_ip(request))
