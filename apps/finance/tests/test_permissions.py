"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for financial permissions, transaction limits and
             the transaction workflow.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from apps.core.exceptions import (
    FinancialPermissionException,
    TransactionLimitExceededException,
    WorkflowTransitionException,
)
from apps.finance.models import (
    FinancialPermission, FiscalYear, Transaction, TransactionStatus, TransactionType,
)
from apps.finance.services import (
    change_transaction_status, get_transaction_limit, has_financial_permission,
    record_transaction,
)


User = get_user_model()


class FinancialPermissionTests(TestCase):
    """Tests for permission flags and amount limits."""

    def setUp(self):
        self.captain = User.objects.create_user(
            email='captain@barangay.gov.ph', password='testpass123', first_name='Carlos', role='CAPTAIN'
        )
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph', password='testpass123', first_name='Tomas', role='TREASURER'
        )
        self.fiscal_year = FiscalYear.objects.create(
            year='2026-2027', start_date=date(2026, 1, 1), end_date=date(2026, 12, 31), is_active=True
        )

    def make_transaction(self, amount='5000.00', **overrides):
        data = {
            'type': TransactionType.EXPENSE,
            'reference_number': f"DV-{Transaction.objects.count() + 1:04d}",
            'date': date(2026, 2, 1),
            'amount': Decimal(amount),
            'description': 'Office supplies',
            'fiscal_year': self.fiscal_year,
        }
        data.update(overrides)
        return Transaction(**data)

    def test_captain_is_unrestricted(self):
        self.assertTrue(has_financial_permission(self.captain, 'can_approve_transaction'))
        self.assertIsNone(get_transaction_limit(self.captain))

    def test_user_without_record_has_nothing(self):
        self.assertFalse(has_financial_permission(self.treasurer, 'can_create_transaction'))
        self.assertEqual(get_transaction_limit(self.treasurer), Decimal('0.00'))
        with self.assertRaises(FinancialPermissionException):
            record_transaction(self.make_transaction(), self.treasurer)

    def test_limit_enforced(self):
        FinancialPermission.objects.create(
            user=self.treasurer,
            can_create_transaction=True,
            transaction_amount_limit=Decimal('10000.00')
        )
        txn = record_transaction(self.make_transaction('10000.00'), self.treasurer)
        self.assertEqual(txn.status, TransactionStatus.DRAFT)
        self.assertEqual(txn.created_by, self.treasurer)

        with self.assertRaisesMessage(TransactionLimitExceededException, 'Transaction amount exceeds your limit'):
            record_transaction(self.make_transaction('10000.01'), self.treasurer)

    def test_approved_on_create_sets_approver(self):
        txn = record_transaction(
            self.make_transaction(status=TransactionStatus.APPROVED), self.captain
        )
        self.assertEqual(txn.approved_by, self.captain)

    def test_status_workflow(self):
        txn = record_transaction(self.make_transaction(), self.captain)
        change_transaction_status(txn, TransactionStatus.APPROVED, self.captain)
        self.assertEqual(txn.approved_by, self.captain)
        change_transaction_status(txn, TransactionStatus.VOIDED, self.captain)
        with self.assertRaises(WorkflowTransitionException):
            change_transaction_status(txn, TransactionStatus.APPROVED, self.captain)

    def test_approval_requires_permission(self):
        FinancialPermission.objects.create(
            user=self.treasurer,
            can_create_transaction=True,
            transaction_amount_limit=Decimal('50000.00')
        )
        txn = record_transaction(self.make_transaction(), self.treasurer)
        with self.assertRaises(FinancialPermissionException):
            change_transaction_status(txn, TransactionStatus.APPROVED, self.treasurer)

    def test_activating_fiscal_year_deactivates_others(self):
        next_year = FiscalYear.objects.create(
            year='2027-2028', start_date=date(2027, 1, 1), end_date=date(2027, 12, 31), is_active=True
        )
        self.fiscal_year.refresh_from_db()
        self.assertFalse(self.fiscal_year.is_active)
        self.assertEqual(FiscalYear.get_active(), next_year)
