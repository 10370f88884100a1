"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: AIP status transitions and the AIP/project statuses that
             allow each kind of change.
-------------------------------------------------------------------------
"""
from typing import List

from apps.aip.models import AIPStatus, ProjectStatus


# Define valid state transitions
AIP_TRANSITIONS = {
    AIPStatus.DRAFT: [AIPStatus.SUBMITTED],
    AIPStatus.SUBMITTED: [AIPStatus.APPROVED, AIPStatus.REJECTED, AIPStatus.DRAFT],
    AIPStatus.APPROVED: [AIPStatus.IMPLEMENTED],
    AIPStatus.REJECTED: [AIPStatus.DRAFT],
    AIPStatus.IMPLEMENTED: [AIPStatus.COMPLETED],
    AIPStatus.COMPLETED: [],
}

# AIP statuses that allow each change
AIP_EDITABLE_STATUSES = [AIPStatus.DRAFT]
AIP_DELETABLE_STATUSES = [AIPStatus.DRAFT, AIPStatus.REJECTED]
PROJECT_CREATE_STATUSES = [AIPStatus.DRAFT, AIPStatus.SUBMITTED]
PROJECT_EDIT_STATUSES = [AIPStatus.DRAFT, AIPStatus.SUBMITTED, AIPStatus.APPROVED]
MILESTONE_EDIT_STATUSES = [
    AIPStatus.DRAFT, AIPStatus.SUBMITTED, AIPStatus.APPROVED, AIPStatus.IMPLEMENTED,
]
MILESTONE_DELETE_STATUSES = [AIPStatus.DRAFT, AIPStatus.SUBMITTED, AIPStatus.APPROVED]

# Project statuses that accept expenses
EXPENSE_PROJECT_STATUSES = [ProjectStatus.PLANNED, ProjectStatus.ONGOING]


def get_valid_transitions(current_status: str) -> List[str]:
    """Get the list of valid next states for an AIP status."""
    return AIP_TRANSITIONS.get(current_status, [])


def can_transition(current_status: str, target_status: str) -> bool:
    return target_status in get_valid_transitions(current_status)
