"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Katarungang Pambarangay process flow. Maps a case status
             to its step in the nine-step barangay dispute procedure.
-------------------------------------------------------------------------
"""
from typing import Any, Dict, List

from apps.blotter.models import BlotterCase, BlotterCaseStatus


STATUS_STEP_MAP = {
    BlotterCaseStatus.FILED: 1,
    BlotterCaseStatus.DOCKETED: 2,
    BlotterCaseStatus.SUMMONED: 3,
    BlotterCaseStatus.MEDIATION: 4,
    BlotterCaseStatus.CONCILIATION: 5,
    BlotterCaseStatus.EXTENDED: 6,
    BlotterCaseStatus.RESOLVED: 7,
    BlotterCaseStatus.CERTIFIED: 7,
    BlotterCaseStatus.ESCALATED: 8,
    BlotterCaseStatus.CLOSED: 9,
    BlotterCaseStatus.DISMISSED: 9,
    BlotterCaseStatus.PENDING: 1,
    BlotterCaseStatus.ONGOING: 4,
}

PROCESS_STEPS = [
    (1, 'File Complaint', 'P100 Fee'),
    (2, 'Receive in Docket', 'Case is entered in the barangay docket'),
    (3, 'Summon Respondent', 'Respondent is summoned to appear'),
    (4, 'Mediation', '15 days, 3 sessions'),
    (5, 'Conciliation', '15 days, 3 sessions'),
    (6, 'Extension', '15 days'),
    (7, 'Certification to File Action', 'CFA'),
    (8, 'Escalate to Court', 'Elevated to court or government office'),
    (9, 'Case Closed', 'Resolved, dismissed or closed'),
]

FINISHED_STATUSES = (
    BlotterCaseStatus.CLOSED,
    BlotterCaseStatus.RESOLVED,
    BlotterCaseStatus.DISMISSED,
)


def get_current_step(status: str) -> int:
    return STATUS_STEP_MAP.get(status, 1)


def _step_state(step: int, case: BlotterCase, current_step: int) -> Dict[str, bool]:
    status = case.status
    dismissed = status == BlotterCaseStatus.DISMISSED
    resolved = status == BlotterCaseStatus.RESOLVED

    if step <= 3:
        completed = current_step > step or (step == 1 and case.filing_fee_paid)
        return {'completed': completed, 'current': current_step == step, 'skipped': False}
    if step == 4:
        return {
            'completed': current_step > 4 or resolved,
            'current': current_step == 4,
            'skipped': dismissed,
        }
    if step == 5:
        reached = case.conciliation_start_date is not None
        return {
            'completed': current_step > 5 or (resolved and reached),
            'current': current_step == 5,
            'skipped': dismissed or (resolved and not reached),
        }
    if step == 6:
        return {
            'completed': current_step > 6,
            'current': current_step == 6,
            'skipped': dismissed or resolved or (current_step > 6 and case.extension_date is None),
        }
    if step == 7:
        certified = status == BlotterCaseStatus.CERTIFIED
        return {
            'completed': certified,
            'current': certified,
            'skipped': status in (
                BlotterCaseStatus.DISMISSED, BlotterCaseStatus.RESOLVED, BlotterCaseStatus.ESCALATED
            ),
        }
    if step == 8:
        escalated = status == BlotterCaseStatus.ESCALATED
        return {
            'completed': escalated,
            'current': escalated,
            'skipped': status in (
                BlotterCaseStatus.DISMISSED, BlotterCaseStatus.RESOLVED,
                BlotterCaseStatus.CERTIFIED, BlotterCaseStatus.CLOSED,
            ),
        }
    finished = status in FINISHED_STATUSES
    return {'completed': finished, 'current': finished, 'skipped': False}


def get_process_flow(case: BlotterCase) -> Dict[str, Any]:
    """
    Describe where a case sits in the dispute procedure.

    Returns:
        Dict with the status, current step number and a list of steps,
        each flagged completed, current or skipped.
    """
    current_step = get_current_step(case.status)
    steps: List[Dict[str, Any]] = []
    for number, label, description in PROCESS_STEPS:
        step = {'step': number, 'label': label, 'description': description}
        step.update(_step_state(number, case, current_step))
        steps.append(step)
    return {
        'case_number': case.case_number,
        'status': case.status,
        'current_step': current_step,
        'total_steps': len(PROCESS_STEPS),
        'steps': steps,
    }
