"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for the AIP, resident, household and disaster
             relief reports.
-------------------------------------------------------------------------
"""
import csv
import io
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.aip.models import AIPExpense, AIPProject, AnnualInvestmentProgram, ProjectStatus
from apps.core.utils import today
from apps.finance.models import BudgetCategory, FinancialPermission, FiscalYear
from apps.relief.models import ReliefRecord
from apps.reporting.services import aip_report_data, load_aip_for_report
from apps.residents.models import Household, Resident


User = get_user_model()


def read_csv(response):
    return list(csv.reader(io.StringIO(response.content.decode('utf-8'))))


class AIPReportTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.captain = User.objects.create_user(
            email='captain@barangay.gov.ph', password='testpass123', first_name='Carlos', role='CAPTAIN'
        )
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph', password='testpass123', first_name='Tomas', role='TREASURER'
        )
        self.fiscal_year = FiscalYear.objects.create(
            year='2026-2027', start_date=date(2026, 1, 1), end_date=date(2026, 12, 31), is_active=True
        )
        self.aip = AnnualInvestmentProgram.objects.create(
            fiscal_year=self.fiscal_year, title='AIP 2026', total_amount=Decimal('200000.00'),
            created_by=self.captain
        )
        self.road = AIPProject.objects.create(
            aip=self.aip, project_code='INF-001', title='Road Concreting', description='Purok 3 road',
            sector='Infrastructure', start_date=date(2026, 2, 1), end_date=date(2026, 8, 31),
            total_cost=Decimal('120000.00'), status=ProjectStatus.ONGOING
        )
        self.clinic = AIPProject.objects.create(
            aip=self.aip, project_code='HLT-001', title='Clinic Supplies', description='Medicines',
            sector='Health', start_date=date(2026, 3, 1), end_date=date(2026, 5, 31),
            total_cost=Decimal('40000.00')
        )
        AIPExpense.objects.create(
            project=self.road, amount=Decimal('30000.00'), description='Cement', date=date(2026, 3, 10)
        )
        AIPExpense.objects.create(
            project=self.road, amount=Decimal('10000.00'), description='Gravel', date=date(2026, 3, 20)
        )

    def test_report_data(self):
        report = aip_report_data(load_aip_for_report(self.aip.pk))
        summary = report['summary']
        self.assertEqual(summary['project_count'], 2)
        self.assertEqual(summary['expenditure_amount'], '40000.00')
        self.assertEqual(summary['ongoing_projects'], 1)
        self.assertEqual(summary['planned_projects'], 1)
        self.assertEqual(
            report['projects_by_status'],
            [{'status': 'PLANNED', 'count': 1}, {'status': 'ONGOING', 'count': 1}]
        )
        sectors = {row['sector']: row for row in report['projects_by_sector']}
        self.assertEqual(sectors['Infrastructure']['expenditure'], '40000.00')
        self.assertEqual(sectors['Health']['budget'], '40000.00')

        # No project carries a budget category
        self.assertEqual(
            report['budget_utilization'],
            [{'category': 'Total', 'allocated': '200000.00', 'utilized': '40000.00'}]
        )
        timeline = report['expenditure_timeline']
        self.assertEqual(len(timeline), 12)
        self.assertEqual(timeline[2], {'date': 'Mar 2026', 'amount': '40000.00'})

    def test_utilization_by_category(self):
        category = BudgetCategory.objects.create(code='INFRA', name='Infrastructure Fund')
        AIPProject.objects.filter(pk=self.road.pk).update(budget_category=category)
        report = aip_report_data(load_aip_for_report(self.aip.pk))
        self.assertEqual(
            report['budget_utilization'],
            [{'category': 'Infrastructure Fund', 'allocated': '120000.00', 'utilized': '40000.00'}]
        )

    def test_json_endpoint(self):
        self.client.force_login(self.captain)
        response = self.client.get(reverse('aip:aip_report', args=[self.aip.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['summary']['title'], 'AIP 2026')
        self.assertEqual(self.client.get(reverse('aip:aip_report', args=[9999])).status_code, 404)

    def test_report_needs_view_permission(self):
        self.client.force_login(self.treasurer)
        self.assertEqual(self.client.get(reverse('aip:aip_report', args=[self.aip.pk])).status_code, 403)
        FinancialPermission.objects.create(user=self.treasurer, can_view_reports=True)
        self.assertEqual(self.client.get(reverse('aip:aip_report', args=[self.aip.pk])).status_code, 200)

    def test_csv_sections(self):
        self.client.force_login(self.captain)
        response = self.client.get(reverse('aip:aip_report_csv', args=[self.aip.pk]))
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn('aip-report-2026-2027.csv', response['Content-Disposition'])

        rows = read_csv(response)
        first_cells = [row[0] for row in rows if row]
        for heading in (
            'ANNUAL INVESTMENT PROGRAM REPORT', '1. AIP SUMMARY', 'PROJECT STATUS OVERVIEW',
            'BUDGET UTILIZATION', '2. PROJECTS OVERVIEW', 'BUDGET ALLOCATION BY SECTOR',
            '3. PROJECT DETAILS', 'EXPENSES',
        ):
            self.assertIn(heading, first_cells)
        self.assertIn(['Utilization Rate', '20%'], rows)
        self.assertIn(['Created By', 'Carlos'], rows)

    @patch('apps.core.pdf.html_to_pdf', return_value=b'%PDF-1.4 test')
    def test_pdf(self, mock_pdf):
        self.client.force_login(self.captain)
        response = self.client.get(reverse('aip:aip_report_pdf', args=[self.aip.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('aip-report-2026-2027.pdf', response['Content-Disposition'])
        html = mock_pdf.call_args[0][0]
        self.assertIn('ANNUAL INVESTMENT PROGRAM REPORT', html)
        self.assertIn('Road Concreting', html)


class RecordReportTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph', password='testpass123', first_name='Sofia', role='SECRETARY'
        )
        self.household = Household.objects.create(
            house_no='12', street='Rizal St', barangay='San Isidro', city='Tanauan', province='Batangas'
        )
        self.maria = Resident.objects.create(
            first_name='Maria', last_name='Santos', birth_date=date(1985, 3, 2), gender='FEMALE',
            civil_status='MARRIED', address='12 Rizal St', household=self.household
        )
        self.jose = Resident.objects.create(
            first_name='Jose', last_name='Reyes', birth_date=date(1950, 7, 1), gender='MALE',
            civil_status='WIDOWED', address='Purok 5'
        )
        self.client.force_login(self.secretary)

    def test_resident_csv(self):
        response = self.client.get(reverse('reporting:residents'), {'format': 'csv'})
        self.assertIn(f'residents-{today().isoformat()}.csv', response['Content-Disposition'])
        rows = read_csv(response)
        self.assertEqual(rows[0][:2], ['Last Name', 'First Name'])
        self.assertEqual([row[0] for row in rows[1:]], ['Reyes', 'Santos'])
        self.assertEqual(rows[2][-1], 'San Isidro')

    def test_resident_filter_matches_household(self):
        response = self.client.get(reverse('reporting:residents'), {'filter': 'rizal'})
        residents = response.json()['residents']
        self.assertEqual(len(residents), 1)
        self.assertEqual(residents[0]['first_name'], 'Maria')

    def test_household_report(self):
        data = self.client.get(reverse('reporting:households')).json()
        self.assertEqual(data['households'][0]['total_residents'], 1)

        rows = read_csv(self.client.get(reverse('reporting:households'), {'format': 'csv'}))
        self.assertEqual(rows[1][6], '1')
        self.assertEqual(rows[1][7], 'No')

    def test_relief_report_requires_records(self):
        response = self.client.get(reverse('reporting:disaster_relief'))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'No relief records found')

    def test_relief_summary_and_detailed(self):
        ReliefRecord.objects.create(resident=self.maria, type='Food Pack', amount=Decimal('500.00'))
        url = reverse('reporting:disaster_relief')

        response = self.client.get(url, {'format': 'csv'})
        self.assertIn('disaster-relief-summary-', response['Content-Disposition'])
        rows = read_csv(response)
        self.assertEqual(rows[0][4], 'Resident Name')
        self.assertEqual(rows[1][4], 'Maria Santos')
        self.assertEqual(rows[1][5], '12')

        response = self.client.get(url, {'format': 'csv', 'relief_type': 'detailed'})
        self.assertIn('disaster-relief-detailed-', response['Content-Disposition'])
        rows = read_csv(response)
        self.assertEqual(len(rows[0]), 18)
        self.assertEqual(rows[1][14], 'Tanauan')
