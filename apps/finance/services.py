"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Finance services: financial permission checks, transaction
             recording and approval, and the budget summary.
-------------------------------------------------------------------------
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db import transaction as db_transaction
from django.db.models import Sum

from apps.core.exceptions import (
    DuplicateRecordException,
    FinancialPermissionException,
    TransactionLimitExceededException,
    WorkflowTransitionException,
)
from apps.core.utils import format_currency, money, percentage
from apps.finance.logging import FinanceLogger
from apps.finance.models import (
    Budget, FinancialPermission, FiscalYear, Transaction, TransactionStatus, TransactionType,
)
from apps.finance.workflows import can_transition, get_valid_transitions
from apps.users.models import RoleCode

logger = logging.getLogger(__name__)


PERMISSION_FLAGS = (
    'can_create_budget',
    'can_approve_budget',
    'can_create_transaction',
    'can_approve_transaction',
    'can_view_reports',
)

# Roles that hold every financial permission without a limit
UNRESTRICTED_ROLES = [RoleCode.SUPER_ADMIN, RoleCode.CAPTAIN]


def is_unrestricted(user) -> bool:
    return user.is_superuser or user.has_any_role(UNRESTRICTED_ROLES)


def get_permission_record(user) -> Optional[FinancialPermission]:
    return FinancialPermission.objects.filter(user=user).first()


def has_financial_permission(user, flag: str) -> bool:
    """
    Check a FinancialPermission flag for a user.

    Args:
        user: The user to check.
        flag: One of PERMISSION_FLAGS.
    """
    if flag not in PERMISSION_FLAGS:
        raise ValueError(f"Unknown financial permission: {flag}")
    if is_unrestricted(user):
        return True
    record = get_permission_record(user)
    return bool(record and getattr(record, flag))


def get_transaction_limit(user) -> Optional[Decimal]:
    """Return the user's transaction amount limit, None for no limit."""
    if is_unrestricted(user):
        return None
    record = get_permission_record(user)
    return record.transaction_amount_limit if record else Decimal('0.00')


def require_financial_permission(user, flag: str, action: str) -> None:
    """
    Raise FinancialPermissionException unless the user holds flag.

    Args:
        action: Description used in the error message.
    """
    if not has_financial_permission(user, flag):
        FinanceLogger.log_permission_denied(user, flag)
        raise FinancialPermissionException(
            f"You don't have permission to {action}.",
            details={'permission': flag}
        )


def permissions_payload(user) -> Dict[str, Any]:
    """Effective financial permissions of a user for the API."""
    limit = get_transaction_limit(user)
    payload = {flag: has_financial_permission(user, flag) for flag in PERMISSION_FLAGS}
    payload.update({
        'user_id': user.pk,
        'email': user.email,
        'unrestricted': is_unrestricted(user),
        'transaction_amount_limit': None if limit is None else str(limit),
    })
    return payload


def ensure_unique(queryset, message: str, **details) -> None:
    """Raise DuplicateRecordException when queryset is not empty."""
    if queryset.exists():
        raise DuplicateRecordException(message, details=details)


@db_transaction.atomic
def record_transaction(txn: Transaction, user) -> Transaction:
    """
    Save a new transaction after permission and limit checks.

    Raises:
        FinancialPermissionException: Without can_create_transaction.
        TransactionLimitExceededException: When the amount is above the
            user's limit.
    """
    require_financial_permission(
        user, 'can_create_transaction', f"create {txn.type.lower()} transactions"
    )

    limit = get_transaction_limit(user)
    if limit is not None and txn.amount > limit:
        FinanceLogger.log_permission_denied(user, 'transaction_amount_limit', txn.amount)
        raise TransactionLimitExceededException(
            f"Transaction amount exceeds your limit of {format_currency(limit)}",
            details={'limit': str(limit), 'amount': str(txn.amount)}
        )

    if txn.status == TransactionStatus.APPROVED:
        require_financial_permission(user, 'can_approve_transaction', "approve transactions")
        txn.approved_by = user
    txn.save_with_user(user)
    FinanceLogger.log_transaction_recorded(txn, user)
    return txn


@db_transaction.atomic
def change_transaction_status(txn: Transaction, target_status: str, user) -> Transaction:
    """
    Approve, reject, void or resubmit a transaction.

    Raises:
        FinancialPermissionException: Without can_approve_transaction.
        WorkflowTransitionException: For a disallowed transition.
    """
    require_financial_permission(user, 'can_approve_transaction', "approve transactions")

    if target_status not in TransactionStatus.values or not can_transition(txn.status, target_status):
        raise WorkflowTransitionException(
            f"Cannot change transaction from {txn.status} to {target_status}.",
            details={
                'current_status': txn.status,
                'allowed': [str(status) for status in get_valid_transitions(txn.status)],
            }
        )

    previous = txn.status
    txn.status = target_status
    if target_status == TransactionStatus.APPROVED:
        txn.approved_by = user
    txn.save_with_user(user)
    FinanceLogger.log_transaction_status_changed(txn, previous, user)
    return txn


def budget_summary(fiscal_year: FiscalYear) -> Dict[str, Any]:
    """
    Budget position of a fiscal year.

    - total_budget: sum of the year's budgets;
    - allocated: approved EXPENSE transactions charged to those budgets;
    - spent: expenses recorded against the year's AIP projects.

    Returns:
        Dict with the totals, allocation/utilization percentages and a
        per-category breakdown.
    """
    from apps.aip.models import AIPExpense

    budgets = Budget.objects.filter(fiscal_year=fiscal_year).select_related('category')
    allocated_by_budget = dict(
        Transaction.objects.filter(
            fiscal_year=fiscal_year,
            type=TransactionType.EXPENSE,
            status=TransactionStatus.APPROVED,
            budget__isnull=False,
        ).values_list('budget').annotate(total=Sum('amount'))
    )

    categories = []
    total_budget = Decimal('0.00')
    allocated = Decimal('0.00')
    for budget in budgets:
        budget_allocated = money(allocated_by_budget.get(budget.pk))
        total_budget += budget.amount
        allocated += budget_allocated
        categories.append({
            'budget_id': budget.pk,
            'category_id': budget.category_id,
            'category_code': budget.category.code,
            'category_name': budget.category.name,
            'budget': str(budget.amount),
            'allocated': str(budget_allocated),
            'remaining': str(budget.amount - budget_allocated),
            'utilization_percentage': round(percentage(budget_allocated, budget.amount), 2),
        })

    spent = money(AIPExpense.objects.filter(
        project__aip__fiscal_year=fiscal_year
    ).aggregate(total=Sum('amount'))['total'])

    return {
        'fiscal_year': fiscal_year.to_dict(),
        'total_budget': str(total_budget),
        'allocated_budget': str(allocated),
        'spent_budget': str(spent),
        'remaining_budget': str(total_budget - allocated),
        'allocation_percentage': round(percentage(allocated, total_budget), 2),
        'utilization_percentage': round(percentage(spent, total_budget), 2),
        'categories': categories,
    }
