"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Centralized logging for finance and AIP operations.
-------------------------------------------------------------------------
"""
import logging

logger = logging.getLogger('finance')


class FinanceLogger:
    """Centralized logging for finance operations"""

    @staticmethod
    def log_transaction_recorded(txn, user):
        """Log a new transaction with full context"""
        logger.info(
            f"Transaction recorded: {txn.reference_number} | "
            f"Type: {txn.type} | "
            f"Amount: PHP {txn.amount} | "
            f"Status: {txn.status} | "
            f"Recorded by: {user.email}",
            extra={
                'transaction_id': txn.pk,
                'type': txn.type,
                'amount': str(txn.amount),
                'fiscal_year_id': txn.fiscal_year_id,
                'budget_id': txn.budget_id,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_transaction_status_changed(txn, previous_status: str, user):
        """Log approval, rejection or voiding"""
        logger.info(
            f"Transaction {txn.reference_number}: {previous_status} -> {txn.status} | "
            f"Amount: PHP {txn.amount} | "
            f"Changed by: {user.email}",
            extra={
                'transaction_id': txn.pk,
                'previous_status': previous_status,
                'new_status': txn.status,
                'amount': str(txn.amount),
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_permission_denied(user, permission: str, amount=None):
        """Log a refused financial action"""
        logger.warning(
            f"Financial permission denied: {permission} | "
            f"User: {user.email} | "
            f"Amount: {amount if amount is not None else '-'}",
            extra={
                'permission': permission,
                'amount': str(amount) if amount is not None else None,
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_aip_status_changed(aip, previous_status: str, user):
        """Log an AIP workflow transition"""
        logger.info(
            f"AIP status changed: {aip.title} | "
            f"FY: {aip.fiscal_year.year} | "
            f"{previous_status} -> {aip.status} | "
            f"Changed by: {user.email}",
            extra={
                'aip_id': aip.pk,
                'previous_status': previous_status,
                'new_status': aip.status,
                'total_amount': str(aip.total_amount),
                'user_id': user.id,
            }
        )

    @staticmethod
    def log_expense_recorded(expense, user):
        """Log an expense charged to an AIP project"""
        logger.info(
            f"AIP expense recorded: {expense.project.project_code} | "
            f"Amount: PHP {expense.amount} | "
            f"Reference: {expense.reference or '-'} | "
            f"Recorded by: {user.email}",
            extra={
                'expense_id': expense.pk,
                'project_id': expense.project_id,
                'amount': str(expense.amount),
                'transaction_id': expense.transaction_id,
                'user_id': user.id,
            }
        )
