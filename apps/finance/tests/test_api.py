"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: API tests for fiscal years, categories, budgets, suppliers,
             transactions and the budget summary.
-------------------------------------------------------------------------
"""
import json
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.aip.models import AIPExpense, AIPProject, AnnualInvestmentProgram
from apps.finance.models import (
    Budget, BudgetCategory, FinancialPermission, FiscalYear, Transaction, TransactionStatus,
    TransactionType,
)


User = get_user_model()


class FinanceApiTestCase(TestCase):

    def setUp(self):
        self.client = Client()
        self.captain = User.objects.create_user(
            email='captain@barangay.gov.ph', password='testpass123', first_name='Carlos', role='CAPTAIN'
        )
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph', password='testpass123', first_name='Tomas', role='TREASURER'
        )
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph', password='testpass123', first_name='Sofia', role='SECRETARY'
        )
        self.admin = User.objects.create_user(
            email='admin@barangay.gov.ph', password='testpass123', first_name='Ada', role='ADMIN'
        )
        self.fiscal_year = FiscalYear.objects.create(
            year='2026-2027', start_date=date(2026, 1, 1), end_date=date(2026, 12, 31), is_active=True
        )
        self.category = BudgetCategory.objects.create(code='MOOE', name='Maintenance and Other Operating Expenses')

    def send(self, method, url, payload):
        return getattr(self.client, method)(url, data=json.dumps(payload), content_type='application/json')


class FiscalYearApiTests(FinanceApiTestCase):

    def test_secretary_forbidden(self):
        self.client.force_login(self.secretary)
        self.assertEqual(self.client.get(reverse('finance:fiscal_year_list')).status_code, 403)

    def test_create_validates_dates_and_length(self):
        self.client.force_login(self.treasurer)
        response = self.send('post', reverse('finance:fiscal_year_list'), {
            'year': '2028', 'start_date': '2028-12-31', 'end_date': '2028-01-01',
        })
        self.assertEqual(response.status_code, 400)
        details = response.json()['details']
        self.assertIn('year', details)
        self.assertIn('end_date', details)

    def test_active_endpoint(self):
        self.client.force_login(self.treasurer)
        response = self.client.get(reverse('finance:fiscal_year_active'))
        self.assertEqual(response.json()['year'], '2026-2027')

        FiscalYear.objects.update(is_active=False)
        self.assertEqual(self.client.get(reverse('finance:fiscal_year_active')).status_code, 404)

    def test_create_active_switches(self):
        self.client.force_login(self.treasurer)
        response = self.send('post', reverse('finance:fiscal_year_list'), {
            'year': '2027-2028', 'start_date': '2027-01-01', 'end_date': '2027-12-31', 'is_active': True,
        })
        self.assertEqual(response.status_code, 201, response.content)
        self.fiscal_year.refresh_from_db()
        self.assertFalse(self.fiscal_year.is_active)

    def test_delete_blocked_by_budgets(self):
        Budget.objects.create(fiscal_year=self.fiscal_year, category=self.category, amount=Decimal('1000'))
        self.client.force_login(self.captain)
        response = self.client.delete(reverse('finance:fiscal_year_detail', args=[self.fiscal_year.pk]))
        self.assertEqual(response.status_code, 400)


class BudgetApiTests(FinanceApiTestCase):

    def test_category_delete_blocked_by_children(self):
        BudgetCategory.objects.create(code='MOOE-01', name='Supplies', parent=self.category)
        self.client.force_login(self.captain)
        response = self.client.delete(reverse('finance:category_detail', args=[self.category.pk]))
        self.assertEqual(response.status_code, 400)

    def test_budget_requires_permission(self):
        self.client.force_login(self.treasurer)
        response = self.send('post', reverse('finance:budget_list'), {
            'fiscal_year': self.fiscal_year.pk, 'category': self.category.pk, 'amount': '50000',
        })
        self.assertEqual(response.status_code, 403)

    def test_duplicate_budget_conflict(self):
        self.client.force_login(self.captain)
        payload = {'fiscal_year': self.fiscal_year.pk, 'category': self.category.pk, 'amount': '50000'}
        self.assertEqual(self.send('post', reverse('finance:budget_list'), payload).status_code, 201)
        self.assertEqual(self.send('post', reverse('finance:budget_list'), payload).status_code, 409)

    def test_amount_must_be_positive(self):
        self.client.force_login(self.captain)
        response = self.send('post', reverse('finance:budget_list'), {
            'fiscal_year': self.fiscal_year.pk, 'category': self.category.pk, 'amount': '0',
        })
        self.assertEqual(response.status_code, 400)

    def test_summary(self):
        budget = Budget.objects.create(
            fiscal_year=self.fiscal_year, category=self.category, amount=Decimal('100000.00')
        )
        Transaction.objects.create(
            type=TransactionType.EXPENSE, reference_number='DV-0001', date=date(2026, 3, 1),
            amount=Decimal('25000.00'), description='Supplies', fiscal_year=self.fiscal_year,
            budget=budget, status=TransactionStatus.APPROVED
        )
        Transaction.objects.create(
            type=TransactionType.EXPENSE, reference_number='DV-0002', date=date(2026, 3, 2),
            amount=Decimal('9000.00'), description='Pending', fiscal_year=self.fiscal_year,
            budget=budget, status=TransactionStatus.PENDING
        )
        self.client.force_login(self.captain)
        response = self.client.get(reverse('finance:budget_summary'), {'fiscal_year': self.fiscal_year.pk})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['total_budget'], '100000.00')
        self.assertEqual(data['allocated_budget'], '25000.00')
        self.assertEqual(data['allocation_percentage'], 25.0)
        self.assertEqual(data['categories'][0]['utilization_percentage'], 25.0)

    def test_summary_spent_from_aip_expenses(self):
        Budget.objects.create(fiscal_year=self.fiscal_year, category=self.category, amount=Decimal('100000.00'))
        aip = AnnualInvestmentProgram.objects.create(
            fiscal_year=self.fiscal_year, title='AIP 2026', total_amount=Decimal('100000.00'),
            created_by=self.captain
        )
        project = AIPProject.objects.create(
            aip=aip, project_code='INF-001', title='Drainage', description='Purok 2 canal',
            sector='Infrastructure', start_date=date(2026, 2, 1), end_date=date(2026, 6, 30),
            total_cost=Decimal('60000.00')
        )
        AIPExpense.objects.create(
            project=project, amount=Decimal('25000.00'), description='Culverts', date=date(2026, 3, 1)
        )
        self.client.force_login(self.captain)
        data = self.client.get(reverse('finance:budget_summary'), {'fiscal_year': self.fiscal_year.pk}).json()
        self.assertEqual(data['spent_budget'], '25000.00')
        self.assertEqual(data['utilization_percentage'], 25.0)

    def test_summary_requires_fiscal_year(self):
        self.client.force_login(self.captain)
        self.assertEqual(self.client.get(reverse('finance:budget_summary')).status_code, 400)


class SupplierApiTests(FinanceApiTestCase):

    def test_duplicate_name_conflict_and_search(self):
        self.client.force_login(self.treasurer)
        url = reverse('finance:supplier_list')
        response = self.send('post', url, {'name': 'Aling Nena Store', 'contact_person': 'Nena Cruz'})
        self.assertEqual(response.status_code, 201, response.content)
        self.assertTrue(response.json()['is_active'])
        self.assertEqual(self.send('post', url, {'name': 'aling nena store'}).status_code, 409)

        response = self.client.get(url, {'search': 'nena cruz'})
        self.assertEqual(len(response.json()['suppliers']), 1)


class TransactionApiTests(FinanceApiTestCase):

    def payload(self, **overrides):
        data = {
            'type': 'EXPENSE',
            'reference_number': 'DV-2026-0001',
            'date': '2026-02-01',
            'amount': 15000,
            'description': 'Purchase of office supplies',
            'fiscal_year': self.fiscal_year.pk,
        }
        data.update(overrides)
        return data

    def test_create_without_permission(self):
        self.client.force_login(self.treasurer)
        response = self.send('post', reverse('finance:transaction_list'), self.payload())
        self.assertEqual(response.status_code, 403)

    def test_limit_exceeded(self):
        FinancialPermission.objects.create(
            user=self.treasurer, can_create_transaction=True, transaction_amount_limit=Decimal('10000')
        )
        self.client.force_login(self.treasurer)
        response = self.send('post', reverse('finance:transaction_list'), self.payload())
        self.assertEqual(response.status_code, 403)
        self.assertIn('Transaction amount exceeds your limit', response.json()['error'])

    def test_create_list_and_duplicate(self):
        self.client.force_login(self.captain)
        url = reverse('finance:transaction_list')
        response = self.send('post', url, self.payload())
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.json()['status'], 'DRAFT')

        self.assertEqual(self.send('post', url, self.payload()).status_code, 409)

        response = self.client.get(url, {'type': 'EXPENSE', 'date_from': '2026-01-15'})
        self.assertEqual(response.json()['meta']['total'], 1)
        response = self.client.get(url, {'date_to': '2026-01-15'})
        self.assertEqual(response.json()['meta']['total'], 0)

    def test_malformed_filters(self):
        self.client.force_login(self.captain)
        url = reverse('finance:transaction_list')
        response = self.client.get(url, {'fiscal_year': 'abc'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_VALIDATION')
        self.assertEqual(self.client.get(url, {'date_from': 'bad'}).status_code, 400)
        self.assertEqual(
            self.client.get(reverse('finance:budget_list'), {'category': 'x'}).status_code, 400
        )

    def test_budget_must_match_fiscal_year(self):
        other_year = FiscalYear.objects.create(
            year='2025-2026', start_date=date(2025, 1, 1), end_date=date(2025, 12, 31)
        )
        budget = Budget.objects.create(fiscal_year=other_year, category=self.category, amount=Decimal('1000'))
        self.client.force_login(self.captain)
        response = self.send('post', reverse('finance:transaction_list'), self.payload(budget=budget.pk))
        self.assertEqual(response.status_code, 400)
        self.assertIn('budget', response.json()['details'])

    def test_status_endpoint(self):
        self.client.force_login(self.captain)
        txn_id = self.send('post', reverse('finance:transaction_list'), self.payload()).json()['id']
        url = reverse('finance:transaction_status', args=[txn_id])

        response = self.send('post', url, {'status': 'APPROVED'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['approved_by'], self.captain.email)

        response = self.send('post', url, {'status': 'DRAFT'})
        self.assertEqual(response.status_code, 400)


class FinancialPermissionApiTests(FinanceApiTestCase):

    def test_admin_grants_permissions(self):
        url = reverse('finance:permissions', args=[self.treasurer.pk])

        self.client.force_login(self.treasurer)
        self.assertEqual(self.client.get(url).status_code, 403)

        self.client.force_login(self.admin)
        self.assertFalse(self.client.get(url).json()['can_create_transaction'])

        response = self.send('put', url, {'can_create_transaction': True, 'transaction_amount_limit': '20000'})
        self.assertEqual(response.status_code, 200, response.content)
        data = response.json()
        self.assertTrue(data['can_create_transaction'])
        self.assertFalse(data['can_approve_transaction'])
        self.assertEqual(data['transaction_amount_limit'], '20000.00')

    def test_captain_is_unrestricted(self):
        self.client.force_login(self.admin)
        data = self.client.get(reverse('finance:permissions', args=[self.captain.pk])).json()
        self.assertTrue(data['unrestricted'])
        self.assertIsNone(data['transaction_amount_limit'])
