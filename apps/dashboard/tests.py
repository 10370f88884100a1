"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for dashboard services and views.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, Client
from django.urls import reverse

from apps.core.models import BarangayInfo
from apps.core.utils import today
from apps.dashboard.services import DashboardService
from apps.finance.models import (
    Budget, BudgetCategory, FiscalYear, Transaction, TransactionStatus, TransactionType,
)
from apps.residents.models import Household, Resident


User = get_user_model()


class DashboardTestCase(TestCase):

    def setUp(self):
        cache.clear()
        self.client = Client()
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph', password='testpass123', first_name='Sofia', role='SECRETARY'
        )
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph', password='testpass123', first_name='Tomas', role='TREASURER'
        )
        household = Household.objects.create(
            house_no='7', street='Mabini St', barangay='San Isidro', city='Tanauan', province='Batangas'
        )
        Resident.objects.create(
            first_name='Maria', last_name='Santos', birth_date=date(1985, 3, 2), gender='FEMALE',
            civil_status='MARRIED', address='7 Mabini St', household=household, voter_in_barangay=True
        )
        Resident.objects.create(
            first_name='Jose', last_name='Santos', birth_date=today() - relativedelta(years=70),
            gender='MALE', civil_status='WIDOWED', address='7 Mabini St', household=household
        )

    def tearDown(self):
        cache.clear()


class DashboardServiceTests(DashboardTestCase):

    def test_record_counts(self):
        counts = DashboardService.get_record_counts()
        self.assertEqual(counts['residents'], 2)
        self.assertEqual(counts['households'], 1)
        self.assertEqual(counts['voters'], 1)
        self.assertEqual(counts['seniors'], 1)
        self.assertEqual(counts['certificates']['PENDING'], 0)
        self.assertEqual(counts['open_blotter_cases'], 0)

    def test_cache_dropped_on_save(self):
        self.assertEqual(DashboardService.get_stats()['residents'], 2)
        Resident.objects.create(
            first_name='Ana', last_name='Cruz', birth_date=date(2001, 5, 5), gender='FEMALE',
            civil_status='SINGLE', address='Purok 1'
        )
        self.assertEqual(DashboardService.get_stats()['residents'], 3)

    def test_finance_summary(self):
        fiscal_year = FiscalYear.objects.create(
            year='2026-2027', start_date=date(2026, 1, 1), end_date=date(2026, 12, 31), is_active=True
        )
        category = BudgetCategory.objects.create(code='PS', name='Personal Services')
        budget = Budget.objects.create(fiscal_year=fiscal_year, category=category, amount=Decimal('50000.00'))
        Transaction.objects.create(
            type=TransactionType.REVENUE, reference_number='OR-1', date=date(2026, 2, 1),
            amount=Decimal('1200.00'), description='Clearance fees', fiscal_year=fiscal_year,
            status=TransactionStatus.APPROVED
        )
        Transaction.objects.create(
            type=TransactionType.EXPENSE, reference_number='DV-1', date=date(2026, 2, 2),
            amount=Decimal('5000.00'), description='Honoraria', fiscal_year=fiscal_year,
            budget=budget, status=TransactionStatus.APPROVED
        )
        Transaction.objects.create(
            type=TransactionType.EXPENSE, reference_number='DV-2', date=date(2026, 2, 3),
            amount=Decimal('800.00'), description='Supplies', fiscal_year=fiscal_year,
            status=TransactionStatus.PENDING
        )

        finance = DashboardService.get_finance_summary(fiscal_year)
        self.assertEqual(finance['total_budget'], '50000.00')
        self.assertEqual(finance['allocated_budget'], '5000.00')
        self.assertEqual(finance['total_revenue'], '1200.00')
        self.assertEqual(finance['total_expense'], '5000.00')
        self.assertEqual(finance['pending_transactions'], 1)


class DashboardViewTests(DashboardTestCase):

    def test_stats_requires_login(self):
        self.assertEqual(self.client.get(reverse('dashboard_stats')).status_code, 401)

    def test_secretary_gets_no_finance(self):
        self.client.force_login(self.secretary)
        data = self.client.get(reverse('dashboard_stats')).json()
        self.assertEqual(data['residents'], 2)
        self.assertNotIn('finance', data)

    def test_treasurer_gets_finance(self):
        self.client.force_login(self.treasurer)
        data = self.client.get(reverse('dashboard_stats')).json()
        self.assertIn('finance', data)
        self.assertIsNone(data['finance'])

    def test_home_page(self):
        response = self.client.get(reverse('dashboard:home'))
        self.assertEqual(response.status_code, 302)

        self.client.force_login(self.secretary)
        response = self.client.get(reverse('dashboard:home'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Registered Voters')
        self.assertNotContains(response, 'Pending Transactions')

    def test_barangay_profile_in_templates(self):
        info = BarangayInfo.load()
        info.name = 'San Isidro'
        info.save()

        self.assertContains(self.client.get(reverse('login')), 'Barangay San Isidro')

        self.client.force_login(self.secretary)
        response = self.client.get(reverse('dashboard:home'))
        self.assertContains(response, '<h1>Barangay San Isidro</h1>', html=True)
