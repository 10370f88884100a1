"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Workflow state machine for certificate requests.
-------------------------------------------------------------------------
"""
from typing import List

from apps.core.exceptions import WorkflowTransitionException
from apps.core.utils import today
from apps.certificates.models import Certificate, CertificateStatus


# Define valid state transitions
CERTIFICATE_TRANSITIONS = {
    CertificateStatus.PENDING: [
        CertificateStatus.APPROVED,
        CertificateStatus.REJECTED,
        CertificateStatus.CANCELLED,
    ],
    CertificateStatus.APPROVED: [CertificateStatus.RELEASED, CertificateStatus.CANCELLED],
    CertificateStatus.RELEASED: [],
    CertificateStatus.REJECTED: [],
    CertificateStatus.CANCELLED: [],
}


def get_valid_transitions(current_status: str) -> List[str]:
    """Get the list of valid next states for a certificate status."""
    return CERTIFICATE_TRANSITIONS.get(current_status, [])


def can_transition(current_status: str, target_status: str) -> bool:
    return target_status in get_valid_transitions(current_status)


def perform_transition(certificate: Certificate, target_status: str, user, remarks: str = '') -> Certificate:
    """
    Move a certificate to target_status.

    Releasing stamps today's date as the issued date.

    Raises:
        WorkflowTransitionException: If the transition is not allowed.
    """
    if target_status not in CertificateStatus.values:
        raise WorkflowTransitionException("Invalid status.", details={'status': target_status})

    if not can_transition(certificate.status, target_status):
        raise WorkflowTransitionException(
            f"Cannot change certificate from {certificate.status} to {target_status}.",
            details={
                'current_status': certificate.status,
                'allowed': [str(status) for status in get_valid_transitions(certificate.status)],
            }
        )

    certificate.status = target_status
    if target_status == CertificateStatus.RELEASED:
        certificate.issued_date = today()
    if remarks:
        certificate.remarks = remarks
    certificate.save_with_user(user)
    return certificate
