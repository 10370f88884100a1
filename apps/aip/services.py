"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: AIP services: status workflow, edit guards, project
             progress from milestones, and expense recording.
-------------------------------------------------------------------------
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.utils import timezone

from apps.aip.models import (
    AIPExpense, AIPMilestone, AIPProject, AIPStatus, AnnualInvestmentProgram, MilestoneStatus,
    ProjectStatus,
)
from apps.aip.workflows import (
    AIP_DELETABLE_STATUSES, AIP_EDITABLE_STATUSES, EXPENSE_PROJECT_STATUSES,
    MILESTONE_DELETE_STATUSES, MILESTONE_EDIT_STATUSES, PROJECT_CREATE_STATUSES,
    PROJECT_EDIT_STATUSES, can_transition, get_valid_transitions,
)
from apps.core.exceptions import (
    DuplicateRecordException, InvalidStateException, RecordValidationException,
    WorkflowTransitionException,
)
from apps.finance.logging import FinanceLogger
from apps.finance.models import TransactionType
from apps.finance.services import require_financial_permission

logger = logging.getLogger(__name__)


# =====================================================================
# AIP
# =====================================================================

def ensure_aip_editable(aip: AnnualInvestmentProgram) -> None:
    if aip.status not in AIP_EDITABLE_STATUSES:
        raise InvalidStateException(
            "Cannot update AIP that is not in DRAFT status",
            details={'status': aip.status}
        )


@transaction.atomic
def change_aip_status(aip: AnnualInvestmentProgram, target_status: str, user) -> AnnualInvestmentProgram:
    """
    Move an AIP to target_status.

    Approval needs the can_approve_budget financial permission and
    records the approver and approval date.

    Raises:
        WorkflowTransitionException: For a disallowed transition.
        FinancialPermissionException: When approving without permission.
    """
    if target_status == aip.status:
        return aip

    if target_status not in AIPStatus.values or not can_transition(aip.status, target_status):
        raise WorkflowTransitionException(
            f"Invalid status transition from {aip.status} to {target_status}",
            details={
                'current_status': aip.status,
                'allowed': [str(status) for status in get_valid_transitions(aip.status)],
            }
        )

    if target_status == AIPStatus.APPROVED:
        require_financial_permission(user, 'can_approve_budget', "approve the AIP")
        aip.approved_by = user
        aip.approved_date = timezone.now()

    previous = aip.status
    aip.status = target_status
    aip.save_with_user(user)
    FinanceLogger.log_aip_status_changed(aip, previous, user)
    return aip


@transaction.atomic
def delete_aip(aip: AnnualInvestmentProgram, user) -> None:
    """
    Delete a DRAFT or REJECTED AIP with its projects.

    Raises:
        InvalidStateException: For other statuses, or when an expense of
            one of its projects is linked to a finance transaction.
    """
    if aip.status not in AIP_DELETABLE_STATUSES:
        raise InvalidStateException("Only DRAFT or REJECTED AIPs can be deleted")
    if AIPExpense.objects.filter(project__aip=aip, transaction__isnull=False).exists():
        raise InvalidStateException("Cannot delete AIP with linked financial transactions")

    title = aip.title
    aip.delete()
    logger.warning("AIP '%s' deleted by %s", title, user.email)


# =====================================================================
# PROJECTS
# =====================================================================

def ensure_unique_project_code(aip: AnnualInvestmentProgram, project_code: str, exclude_pk=None) -> None:
    queryset = AIPProject.objects.filter(aip=aip, project_code=project_code)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise DuplicateRecordException(
            f"Project code {project_code} already exists in this AIP.",
            details={'project_code': project_code}
        )


def ensure_project_can_be_added(aip: AnnualInvestmentProgram) -> None:
    if aip.status not in PROJECT_CREATE_STATUSES:
        raise InvalidStateException("Cannot add projects to AIP in current status")


def ensure_project_editable(project: AIPProject, action: str = "update") -> None:
    if project.aip.status not in PROJECT_EDIT_STATUSES:
        raise InvalidStateException(f"Cannot {action} project when AIP is in current status")


def recalculate_progress(project: AIPProject) -> AIPProject:
    """
    Set progress to the share of completed milestones (rounded half up).

    A project reaching 100% while ONGOING is marked COMPLETED. Projects
    without milestones keep their progress.
    """
    milestones = list(project.milestones.values_list('status', flat=True))
    if not milestones:
        return project

    completed = sum(1 for status in milestones if status == MilestoneStatus.COMPLETED)
    progress = int(
        (Decimal(completed) * 100 / Decimal(len(milestones))).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    )
    project.progress = progress
    fields = ['progress', 'updated_at']
    if progress == 100 and project.status == ProjectStatus.ONGOING:
        project.status = ProjectStatus.COMPLETED
        fields.append('status')
    project.save(update_fields=fields)
    return project


# =====================================================================
# MILESTONES
# =====================================================================

def ensure_milestone_editable(project: AIPProject, action: str = "update") -> None:
    allowed = MILESTONE_DELETE_STATUSES if action == "delete" else MILESTONE_EDIT_STATUSES
    if project.aip.status not in allowed:
        raise InvalidStateException(f"Cannot {action} milestone when AIP is in current status")


@transaction.atomic
def save_milestone(milestone: AIPMilestone, previous_status: str = None) -> AIPMilestone:
    """
    Save a milestone, keep completed_at in step with its status, and
    refresh the project's progress.
    """
    if milestone.status == MilestoneStatus.COMPLETED:
        if previous_status != MilestoneStatus.COMPLETED or milestone.completed_at is None:
            milestone.completed_at = timezone.now()
    else:
        milestone.completed_at = None
    milestone.save()
    recalculate_progress(milestone.project)
    return milestone


@transaction.atomic
def delete_milestone(milestone: AIPMilestone) -> None:
    project = milestone.project
    milestone.delete()
    recalculate_progress(project)


# =====================================================================
# EXPENSES
# =====================================================================

def ensure_expense_allowed(project: AIPProject, action: str = "add expenses to") -> None:
    if project.status not in EXPENSE_PROJECT_STATUSES:
        raise InvalidStateException(f"Cannot {action} a completed or cancelled project")


def validate_expense_transaction(expense: AIPExpense) -> None:
    if expense.transaction_id and expense.transaction.type != TransactionType.EXPENSE:
        raise RecordValidationException(
            "Transaction must be an expense type",
            details={'transaction': expense.transaction_id}
        )


@transaction.atomic
def record_expense(project: AIPProject, expense: AIPExpense, user) -> AIPExpense:
    """
    Charge an expense to a PLANNED or ONGOING project.

    The first expense of a PLANNED project moves it to ONGOING.
    """
    ensure_expense_allowed(project)
    validate_expense_transaction(expense)

    expense.project = project
    expense.save_with_user(user)

    if project.status == ProjectStatus.PLANNED:
        project.status = ProjectStatus.ONGOING
        project.save(update_fields=['status', 'updated_at'])

    FinanceLogger.log_expense_recorded(expense, user)
    return expense
