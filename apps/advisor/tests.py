"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for the AIP advisor rules and insights.
-------------------------------------------------------------------------
"""
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.advisor import services
from apps.aip.models import (
    AIPExpense, AIPMilestone, AIPProject, AnnualInvestmentProgram, MilestoneStatus, ProjectStatus,
)
from apps.finance.models import FiscalYear


User = get_user_model()


class AdvisorTestCase(TestCase):

    def setUp(self):
        self.client = Client()
        self.captain = User.objects.create_user(
            email='captain@barangay.gov.ph', password='testpass123', first_name='Carlos', role='CAPTAIN'
        )
        self.fiscal_year = FiscalYear.objects.create(
            year='2026-2027', start_date=date(2026, 1, 1), end_date=date(2026, 12, 31), is_active=True
        )
        self.aip = AnnualInvestmentProgram.objects.create(
            fiscal_year=self.fiscal_year, title='AIP 2026', total_amount=Decimal('100000.00')
        )
        self.today = date(2026, 6, 1)

    def add_project(self, code, sector='Health', cost='10000.00', status=ProjectStatus.PLANNED,
                    start=date(2026, 1, 1), end=date(2026, 12, 31), progress=0):
        return AIPProject.objects.create(
            aip=self.aip, project_code=code, title=f'Project {code}', description='Test project',
            sector=sector, start_date=start, end_date=end, total_cost=Decimal(cost),
            status=status, progress=progress
        )

    def messages(self, items):
        return [item['message'] for item in items]


class RecommendationTests(AdvisorTestCase):

    def test_general_suggestions_without_aip(self):
        result = services.get_recommendations()
        self.assertEqual(result['source'], 'rule-based-v1')
        self.assertEqual(set(result['recommendations']), {'budget', 'project', 'risk'})
        for items in result['recommendations'].values():
            self.assertEqual(len(items), 3)
            self.assertTrue(all(item['type'] == 'suggestion' for item in items))

    def test_single_category_and_unknown_type(self):
        self.assertEqual(list(services.get_recommendations(kind='risk')['recommendations']), ['risk'])
        self.assertEqual(services.get_recommendations(kind='weather')['recommendations'], {})

    def test_unknown_aip(self):
        items = services.category_recommendations('budget', aip_id='9999')
        self.assertEqual(items, [{'message': 'No AIP found with the provided ID', 'type': 'warning', 'data': {}}])
        items = services.category_recommendations('budget', aip_id='abc')
        self.assertEqual(items[0]['type'], 'warning')

    def test_low_utilization_is_critical(self):
        self.add_project('P-1')
        items = services.budget_recommendations(self.aip)
        self.assertEqual(items[0]['type'], 'critical')
        self.assertEqual(items[0]['data'], {'utilization_rate': '0.00%'})

    def test_high_utilization_is_warning(self):
        project = self.add_project('P-1', cost='95000.00', status=ProjectStatus.ONGOING)
        AIPExpense.objects.create(
            project=project, amount=Decimal('95000.00'), description='Works', date=date(2026, 3, 1)
        )
        items = services.budget_recommendations(self.aip)
        self.assertEqual(items[0]['type'], 'warning')
        self.assertEqual(items[0]['data']['utilization_rate'], '95.00%')

    def test_sector_concentration(self):
        self.add_project('P-1', sector='Infrastructure', cost='30000.00')
        self.add_project('P-2', sector='Health', cost='10000.00')
        items = [item for item in services.budget_recommendations(self.aip) if item['type'] == 'suggestion']
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]['data'], {'sector': 'Infrastructure', 'percentage': '75.00%'})
        self.assertIn('Infrastructure sector accounts for 75.00%', items[0]['message'])

    def test_project_rules(self):
        self.add_project('P-1', status=ProjectStatus.DELAYED)
        near = self.add_project('P-2', status=ProjectStatus.ONGOING, end=self.today + timedelta(days=10))
        AIPMilestone.objects.create(project=near, title='Start', due_date=date(2026, 2, 1))
        self.add_project('P-3', status=ProjectStatus.COMPLETED, end=self.today + timedelta(days=5))

        messages = self.messages(services.project_recommendations(self.aip, on_date=self.today))
        self.assertEqual(messages, [
            "1 project(s) are currently delayed. Consider reviewing these projects to identify common bottlenecks.",
            "1 project(s) don't have defined milestones. Add milestones to better track progress.",
            "1 project(s) are nearing their deadlines (within 30 days). Ensure they are on track for completion.",
        ])

    def test_risk_rules(self):
        self.add_project('P-1', cost='30000.00')
        for index in range(2, 7):
            self.add_project(f'P-{index}', start=date(2026, 3, 1), end=date(2026, 4, 30))

        items = services.risk_recommendations(self.aip)
        self.assertEqual(items[0]['type'], 'warning')
        self.assertTrue(items[0]['message'].startswith('1 project(s) represent more than 25%'))
        self.assertEqual(items[1]['data'], {'count': 6, 'month': 3})

    def test_month_counts_wrap_year_end(self):
        project = self.add_project('P-1', start=date(2026, 11, 15), end=date(2027, 2, 10))
        counts = services.active_month_counts([project])
        self.assertEqual(counts, [1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 1, 1])

    def test_nothing_fired_is_info(self):
        items = services.category_recommendations('risk', aip_id=self.aip.pk)
        self.assertEqual(items, [{'message': 'No risk recommendations at this time', 'type': 'info', 'data': {}}])

    def test_failing_rule_returns_error_item(self):
        with patch.dict(services.RULES, {'project': lambda aip: 1 / 0}):
            items = services.category_recommendations('project', aip_id=self.aip.pk)
        self.assertEqual(items[0]['type'], 'error')
        self.assertEqual(items[0]['message'], 'Unable to generate project recommendations')

    def test_endpoint(self):
        self.assertEqual(self.client.get(reverse('advisor:recommendations')).status_code, 401)
        self.client.force_login(self.captain)
        response = self.client.get(reverse('advisor:recommendations'), {'aip_id': self.aip.pk, 'type': 'budget'})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertIn('timestamp', data)
        self.assertEqual(data['recommendations']['budget'][0]['type'], 'critical')


class InsightTests(AdvisorTestCase):

    def test_project_risk_weights(self):
        behind = self.add_project('P-1', start=date(2026, 1, 1), end=date(2026, 6, 21), progress=0)
        risk = services.project_risk(behind, self.today)
        # 151 of 171 days elapsed: expected 88, 20 days left
        self.assertEqual(risk['days_remaining'], 20)
        self.assertAlmostEqual(risk['risk'], 0.904)

        on_track = self.add_project('P-2', start=date(2026, 1, 1), end=date(2027, 12, 31), progress=90)
        self.assertEqual(services.project_risk(on_track, self.today)['risk'], 0.0)

        overdue = self.add_project('P-3', start=date(2025, 1, 1), end=date(2025, 12, 31))
        self.assertEqual(services.project_risk(overdue, self.today)['risk'], 1.0)

    def test_generate_insights(self):
        ongoing = self.add_project('P-1', sector='Health', cost='30000.00', status=ProjectStatus.ONGOING)
        self.add_project('P-2', sector='Education', cost='10000.00')
        AIPExpense.objects.create(
            project=ongoing, amount=Decimal('15000.00'), description='Supplies', date=date(2026, 2, 10)
        )
        AIPMilestone.objects.create(
            project=ongoing, title='Phase 1', due_date=date(2026, 3, 1), status=MilestoneStatus.COMPLETED
        )
        AIPMilestone.objects.create(project=ongoing, title='Phase 2', due_date=date(2026, 9, 1))

        insights = {item['id'].rsplit('-', 1)[0]: item for item in services.generate_aip_insights(self.aip, self.today)}

        allocation = insights['budget-allocation']['data']
        self.assertEqual([(row['name'], row['value']) for row in allocation], [('Health', 75), ('Education', 25)])
        self.assertEqual(
            insights['project-status']['data'],
            [{'name': 'Ongoing', 'value': 1}, {'name': 'Planned', 'value': 1}]
        )
        self.assertEqual(len(insights['risk-assessment']['data']), 2)
        self.assertEqual(insights['expense-trend']['data']['historical'], [{'month': 'Feb', 'expenditure': '15000.00'}])
        self.assertEqual(len(insights['expense-trend']['data']['projected']), 11)

        efficiency = {row['subject']: row['value'] for row in insights['implementation-efficiency']['data']}
        self.assertEqual(efficiency['Budget Utilization'], 50)
        self.assertEqual(efficiency['Milestone Completion'], 50)

    def test_insights_endpoint(self):
        self.client.force_login(self.captain)
        response = self.client.get(reverse('aip:aip_insights', args=[self.aip.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['insights']), 5)
        self.assertEqual(self.client.get(reverse('aip:aip_insights', args=[9999])).status_code, 404)
