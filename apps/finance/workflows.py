"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Workflow state machine for finance transactions.
-------------------------------------------------------------------------
"""
from typing import List

from apps.finance.models import TransactionStatus


# Define valid state transitions
TRANSACTION_TRANSITIONS = {
    TransactionStatus.DRAFT: [
        TransactionStatus.PENDING,
        TransactionStatus.APPROVED,
        TransactionStatus.REJECTED,
        TransactionStatus.VOIDED,
    ],
    TransactionStatus.PENDING: [
        TransactionStatus.APPROVED,
        TransactionStatus.REJECTED,
        TransactionStatus.VOIDED,
    ],
    TransactionStatus.APPROVED: [TransactionStatus.VOIDED],
    TransactionStatus.REJECTED: [TransactionStatus.DRAFT],
    TransactionStatus.VOIDED: [],
}


def get_valid_transitions(current_status: str) -> List[str]:
    """Get the list of valid next states for a transaction status."""
    return TRANSACTION_TRANSITIONS.get(current_status, [])


def can_transition(current_status: str, target_status: str) -> bool:
    return target_status in get_valid_transitions(current_status)
