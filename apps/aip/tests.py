"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for the AIP workflow, projects, milestones and
             expenses.
-------------------------------------------------------------------------
"""
import json
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.aip.models import (
    AIPExpense, AIPMilestone, AIPProject, AIPStatus, AnnualInvestmentProgram, MilestoneStatus,
    ProjectStatus,
)
from apps.aip.workflows import can_transition, get_valid_transitions
from apps.finance.models import FinancialPermission, FiscalYear, Transaction, TransactionType


User = get_user_model()


class AIPTestCase(TestCase):

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
        self.fiscal_year = FiscalYear.objects.create(
            year='2026-2027', start_date=date(2026, 1, 1), end_date=date(2026, 12, 31), is_active=True
        )
        self.aip = AnnualInvestmentProgram.objects.create(
            fiscal_year=self.fiscal_year, title='AIP 2026', total_amount=Decimal('500000.00')
        )
        self.client.force_login(self.captain)

    def send(self, method, url, payload):
        return getattr(self.client, method)(url, data=json.dumps(payload), content_type='application/json')

    def set_status(self, status):
        AnnualInvestmentProgram.objects.filter(pk=self.aip.pk).update(status=status)
        self.aip.refresh_from_db()

    def add_project(self, code='INF-001', status=ProjectStatus.PLANNED):
        return AIPProject.objects.create(
            aip=self.aip, project_code=code, title='Road Concreting', description='Purok 3 road',
            sector='Infrastructure', start_date=date(2026, 2, 1), end_date=date(2026, 8, 31),
            total_cost=Decimal('150000.00'), status=status
        )

    def project_payload(self, **overrides):
        payload = {
            'project_code': 'HLT-001', 'title': 'Health Center Repair', 'description': 'Roof and clinic',
            'sector': 'Health', 'start_date': '2026-03-01', 'end_date': '2026-09-30',
            'total_cost': '80000.00',
        }
        payload.update(overrides)
        return payload


class AIPWorkflowTests(AIPTestCase):

    def test_transition_table(self):
        self.assertEqual(get_valid_transitions(AIPStatus.DRAFT), [AIPStatus.SUBMITTED])
        self.assertTrue(can_transition(AIPStatus.SUBMITTED, AIPStatus.DRAFT))
        self.assertTrue(can_transition(AIPStatus.REJECTED, AIPStatus.DRAFT))
        self.assertFalse(can_transition(AIPStatus.DRAFT, AIPStatus.APPROVED))
        self.assertEqual(get_valid_transitions(AIPStatus.COMPLETED), [])

    def test_secretary_forbidden(self):
        self.client.force_login(self.secretary)
        self.assertEqual(self.client.get(reverse('aip:aip_list')).status_code, 403)

    def test_malformed_fiscal_year_filter(self):
        response = self.client.get(reverse('aip:aip_list'), {'fiscal_year': 'abc'})
        self.assertEqual(response.status_code, 400)

    def test_create_starts_in_draft(self):
        response = self.send('post', reverse('aip:aip_list'), {
            'fiscal_year': self.fiscal_year.pk, 'title': 'Supplemental AIP', 'total_amount': '75000.00',
        })
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.json()['status'], 'DRAFT')
        self.assertEqual(response.json()['created_by']['email'], self.captain.email)

    def test_create_rejects_zero_amount(self):
        response = self.send('post', reverse('aip:aip_list'), {
            'fiscal_year': self.fiscal_year.pk, 'title': 'Empty', 'total_amount': '0',
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn('total_amount', response.json()['details'])

    def test_invalid_transition(self):
        response = self.send('post', reverse('aip:aip_status', args=[self.aip.pk]), {'status': 'APPROVED'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Invalid status transition from DRAFT to APPROVED')

    def test_submit_and_approve_records_approver(self):
        url = reverse('aip:aip_status', args=[self.aip.pk])
        self.assertEqual(self.send('post', url, {'status': 'SUBMITTED'}).status_code, 200)
        response = self.send('post', url, {'status': 'APPROVED'})
        self.assertEqual(response.status_code, 200)
        self.aip.refresh_from_db()
        self.assertEqual(self.aip.status, AIPStatus.APPROVED)
        self.assertEqual(self.aip.approved_by, self.captain)
        self.assertIsNotNone(self.aip.approved_date)

    def test_approval_needs_permission(self):
        self.set_status(AIPStatus.SUBMITTED)
        self.client.force_login(self.treasurer)
        url = reverse('aip:aip_status', args=[self.aip.pk])
        self.assertEqual(self.send('post', url, {'status': 'APPROVED'}).status_code, 403)

        FinancialPermission.objects.create(user=self.treasurer, can_approve_budget=True)
        self.assertEqual(self.send('post', url, {'status': 'APPROVED'}).status_code, 200)

    def test_edit_only_in_draft(self):
        url = reverse('aip:aip_detail', args=[self.aip.pk])
        response = self.send('put', url, {'title': 'AIP 2026 (Revised)'})
        self.assertEqual(response.json()['title'], 'AIP 2026 (Revised)')

        self.set_status(AIPStatus.SUBMITTED)
        response = self.send('put', url, {'title': 'Late change'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Cannot update AIP that is not in DRAFT status')

        # A bare status change is still allowed
        response = self.send('put', url, {'status': 'REJECTED'})
        self.assertEqual(response.json()['status'], 'REJECTED')

    def test_delete_rules(self):
        url = reverse('aip:aip_detail', args=[self.aip.pk])
        self.client.force_login(self.treasurer)
        self.assertEqual(self.client.delete(url).status_code, 403)

        self.client.force_login(self.captain)
        self.set_status(AIPStatus.APPROVED)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Only DRAFT or REJECTED AIPs can be deleted')

        self.set_status(AIPStatus.REJECTED)
        project = self.add_project()
        txn = Transaction.objects.create(
            type=TransactionType.EXPENSE, reference_number='DV-0001', date=date(2026, 3, 1),
            amount=Decimal('1000.00'), description='Cement', fiscal_year=self.fiscal_year
        )
        AIPExpense.objects.create(
            project=project, amount=Decimal('1000.00'), description='Cement', date=date(2026, 3, 1), transaction=txn
        )
        self.assertEqual(self.client.delete(url).status_code, 400)

        AIPExpense.objects.update(transaction=None)
        self.assertEqual(self.client.delete(url).json(), {'success': True})
        self.assertFalse(AIPProject.objects.exists())

    def test_detail_includes_projects(self):
        self.add_project()
        response = self.client.get(reverse('aip:aip_detail', args=[self.aip.pk]))
        data = response.json()
        self.assertEqual(data['project_count'], 1)
        self.assertEqual(data['total_expenditure'], '0.00')
        self.assertEqual(data['projects'][0]['project_code'], 'INF-001')


class AIPProjectTests(AIPTestCase):

    def test_create_defaults(self):
        response = self.send('post', reverse('aip:project_list', args=[self.aip.pk]), self.project_payload())
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.json()['status'], 'PLANNED')
        self.assertEqual(response.json()['progress'], 0)

    def test_duplicate_code_conflicts(self):
        self.add_project(code='HLT-001')
        response = self.send('post', reverse('aip:project_list', args=[self.aip.pk]), self.project_payload())
        self.assertEqual(response.status_code, 409)

    def test_end_date_must_follow_start(self):
        response = self.send(
            'post', reverse('aip:project_list', args=[self.aip.pk]),
            self.project_payload(start_date='2026-09-30', end_date='2026-03-01')
        )
        self.assertEqual(response.status_code, 400)

    def test_cannot_add_after_approval(self):
        self.set_status(AIPStatus.APPROVED)
        response = self.send('post', reverse('aip:project_list', args=[self.aip.pk]), self.project_payload())
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Cannot add projects to AIP in current status')

    def test_edit_guard(self):
        project = self.add_project()
        url = reverse('aip:project_detail', args=[project.pk])

        self.set_status(AIPStatus.APPROVED)
        self.assertEqual(self.send('patch', url, {'location': 'Purok 3'}).status_code, 200)

        self.set_status(AIPStatus.IMPLEMENTED)
        self.assertEqual(self.send('patch', url, {'location': 'Purok 4'}).status_code, 400)
        self.assertEqual(self.client.delete(url).status_code, 400)


class AIPMilestoneTests(AIPTestCase):

    def test_progress_follows_milestones(self):
        project = self.add_project(status=ProjectStatus.ONGOING)
        url = reverse('aip:milestone_list', args=[project.pk])
        first = self.send('post', url, {'title': 'Survey', 'due_date': '2026-03-01'}).json()
        self.send('post', url, {'title': 'Pouring', 'due_date': '2026-05-01'})
        self.send('post', url, {'title': 'Turnover', 'due_date': '2026-08-01'})

        response = self.send('patch', reverse('aip:milestone_detail', args=[first['id']]), {'status': 'COMPLETED'})
        self.assertIsNotNone(response.json()['completed_at'])
        project.refresh_from_db()
        self.assertEqual(project.progress, 33)

        AIPMilestone.objects.filter(project=project).exclude(pk=first['id']).update(
            status=MilestoneStatus.COMPLETED
        )
        response = self.send('patch', reverse('aip:milestone_detail', args=[first['id']]), {'status': 'PENDING'})
        self.assertIsNone(response.json()['completed_at'])
        project.refresh_from_db()
        self.assertEqual(project.progress, 67)

    def test_all_complete_finishes_ongoing_project(self):
        project = self.add_project(status=ProjectStatus.ONGOING)
        milestone = AIPMilestone.objects.create(project=project, title='Only step', due_date=date(2026, 4, 1))
        self.send('patch', reverse('aip:milestone_detail', args=[milestone.pk]), {'status': 'COMPLETED'})
        project.refresh_from_db()
        self.assertEqual(project.progress, 100)
        self.assertEqual(project.status, ProjectStatus.COMPLETED)

    def test_delete_recalculates(self):
        project = self.add_project()
        done = AIPMilestone.objects.create(
            project=project, title='Done', due_date=date(2026, 3, 1), status=MilestoneStatus.COMPLETED
        )
        pending = AIPMilestone.objects.create(project=project, title='Pending', due_date=date(2026, 4, 1))
        self.client.delete(reverse('aip:milestone_detail', args=[pending.pk]))
        project.refresh_from_db()
        self.assertEqual(project.progress, 100)
        self.assertTrue(AIPMilestone.objects.filter(pk=done.pk).exists())

    def test_no_milestone_delete_once_implemented(self):
        project = self.add_project()
        milestone = AIPMilestone.objects.create(project=project, title='Step', due_date=date(2026, 4, 1))
        self.set_status(AIPStatus.IMPLEMENTED)
        self.assertEqual(self.client.delete(reverse('aip:milestone_detail', args=[milestone.pk])).status_code, 400)
        self.assertEqual(
            self.send('patch', reverse('aip:milestone_detail', args=[milestone.pk]), {'title': 'Renamed'}).status_code,
            200
        )


class AIPExpenseTests(AIPTestCase):

    def test_first_expense_starts_project(self):
        project = self.add_project()
        response = self.send('post', reverse('aip:expense_list', args=[project.pk]), {
            'amount': '25000.00', 'description': 'Gravel', 'date': '2026-03-05', 'reference': 'OR-118',
        })
        self.assertEqual(response.status_code, 201, response.content)
        project.refresh_from_db()
        self.assertEqual(project.status, ProjectStatus.ONGOING)

        listing = self.client.get(reverse('aip:expense_list', args=[project.pk])).json()
        self.assertEqual(listing['total'], '25000.00')

    def test_transaction_must_be_expense(self):
        project = self.add_project()
        revenue = Transaction.objects.create(
            type=TransactionType.REVENUE, reference_number='OR-0001', date=date(2026, 3, 1),
            amount=Decimal('500.00'), description='Clearance fees', fiscal_year=self.fiscal_year
        )
        response = self.send('post', reverse('aip:expense_list', args=[project.pk]), {
            'amount': '500.00', 'description': 'Misc', 'date': '2026-03-05', 'transaction': revenue.pk,
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Transaction must be an expense type')

    def test_closed_project_rejects_expenses(self):
        project = self.add_project(status=ProjectStatus.COMPLETED)
        response = self.send('post', reverse('aip:expense_list', args=[project.pk]), {
            'amount': '100.00', 'description': 'Late bill', 'date': '2026-09-05',
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Cannot add expenses to a completed or cancelled project')


class AIPAttachmentTests(AIPTestCase):

    def test_attach_to_aip_and_project(self):
        project = self.add_project()
        payload = {
            'file_name': 'plan.pdf', 'file_url': 'https://files.example.com/plan.pdf',
            'file_type': 'application/pdf', 'file_size': 2048,
        }
        self.assertEqual(self.send('post', reverse('aip:aip_attachments', args=[self.aip.pk]), payload).status_code, 201)
        response = self.send('post', reverse('aip:project_attachments', args=[project.pk]), payload)
        self.assertEqual(response.status_code, 201)

        self.assertEqual(len(self.client.get(reverse('aip:aip_attachments', args=[self.aip.pk])).json()['attachments']), 1)
        self.assertEqual(
            self.client.delete(reverse('aip:attachment_detail', args=[response.json()['id']])).status_code, 200
        )

    def test_file_size_must_be_positive(self):
        response = self.send('post', reverse('aip:aip_attachments', args=[self.aip.pk]), {
            'file_name': 'empty.pdf', 'file_url': 'https://files.example.com/empty.pdf',
            'file_type': 'application/pdf', 'file_size': 0,
        })
        self.assertEqual(response.status_code, 400)
