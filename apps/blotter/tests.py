"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the blotter module - case numbering, filing,
             status changes, filing fee, CFA and process flow.
-------------------------------------------------------------------------
"""
import json
from datetime import date, timedelta
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.core.exceptions import InvalidStateException, RecordValidationException
from apps.core.models import Officials
from apps.core.utils import today
from apps.blotter.models import (
    BlotterCase, BlotterCaseStatus, BlotterParty, BlotterStatusUpdate, PartyType,
)
from apps.blotter.services import (
    case_summary, create_case, issue_cfa, mark_filing_fee_paid, summarize_description,
    update_status,
)
from apps.blotter.workflows import get_process_flow


User = get_user_model()


class BlotterTestMixin:
    """Shared fixtures for blotter tests."""

    def create_users(self):
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph',
            password='testpass123',
            first_name='Sofia',
            role='SECRETARY'
        )
        self.captain = User.objects.create_user(
            email='captain@barangay.gov.ph',
            password='testpass123',
            first_name='Carlos',
            role='CAPTAIN'
        )

    def make_case(self, **overrides):
        data = {
            'incident_date': date(2026, 3, 1),
            'incident_location': 'Purok 3 basketball court',
            'incident_type': 'Noise Complaint',
            'incident_description': 'Loud karaoke past midnight. Neighbors complained.',
        }
        data.update(overrides)
        parties = [
            BlotterParty(party_type=PartyType.COMPLAINANT, first_name='Maria', last_name='Santos',
                         address='Purok 3'),
            BlotterParty(party_type=PartyType.RESPONDENT, first_name='Jose', last_name='Rizal',
                         address='Purok 4'),
        ]
        return create_case(BlotterCase(**data), parties, user=self.secretary)


class CaseFilingTests(BlotterTestMixin, TestCase):

    def setUp(self):
        self.create_users()

    def test_case_number_sequence(self):
        year = today().year
        first = self.make_case()
        second = self.make_case()
        self.assertEqual(first.case_number, f"BLT-{year}-0001")
        self.assertEqual(second.case_number, f"BLT-{year}-0002")

    def test_case_number_past_four_digits(self):
        year = today().year
        first = self.make_case()
        second = self.make_case()
        BlotterCase.objects.filter(pk=first.pk).update(case_number=f"BLT-{year}-9999")
        BlotterCase.objects.filter(pk=second.pk).update(case_number=f"BLT-{year}-10000")
        self.assertEqual(self.make_case().case_number, f"BLT-{year}-10001")

    def test_initial_status_update(self):
        case = self.make_case()
        self.assertEqual(case.status, BlotterCaseStatus.FILED)
        update = case.status_updates.get()
        self.assertEqual(update.notes, f"Case {case.case_number} filed and registered.")
        self.assertEqual(update.updated_by, self.secretary)

    def test_requires_complainant_and_respondent(self):
        case = BlotterCase(
            incident_date=date(2026, 3, 1),
            incident_location='Market',
            incident_type='Theft',
            incident_description='Stolen goods.'
        )
        parties = [BlotterParty(party_type=PartyType.COMPLAINANT, first_name='A', last_name='B')]
        with self.assertRaises(RecordValidationException):
            create_case(case, parties, user=self.secretary)
        self.assertFalse(BlotterCase.objects.exists())


class StatusTests(BlotterTestMixin, TestCase):

    def setUp(self):
        self.create_users()
        self.case = self.make_case()

    def test_invalid_status(self):
        with self.assertRaisesMessage(RecordValidationException, "Invalid status provided"):
            update_status(self.case, 'ARCHIVED', user=self.secretary)

    def test_default_note_and_fields(self):
        update_status(
            self.case, BlotterCaseStatus.MEDIATION, user=self.secretary,
            fields={'mediation_start_date': date(2026, 3, 5), 'case_number': 'HACKED'}
        )
        self.case.refresh_from_db()
        self.assertEqual(self.case.mediation_start_date, date(2026, 3, 5))
        self.assertNotEqual(self.case.case_number, 'HACKED')
        self.assertEqual(self.case.status_updates.last().notes, "Case status updated to MEDIATION")

    def test_filing_fee_dockets_filed_case(self):
        mark_filing_fee_paid(self.case, user=self.secretary)
        self.case.refresh_from_db()
        self.assertTrue(self.case.filing_fee_paid)
        self.assertEqual(self.case.status, BlotterCaseStatus.DOCKETED)
        self.assertEqual(self.case.docket_date, today())
        self.assertEqual(
            self.case.status_updates.last().notes,
            "Filing fee has been paid. Case is now docketed."
        )

    def test_filing_fee_keeps_later_status(self):
        update_status(self.case, BlotterCaseStatus.SUMMONED, user=self.secretary)
        mark_filing_fee_paid(self.case, user=self.secretary)
        self.case.refresh_from_db()
        self.assertEqual(self.case.status, BlotterCaseStatus.SUMMONED)
        last = self.case.status_updates.last()
        self.assertEqual(last.status, BlotterCaseStatus.SUMMONED)
        self.assertEqual(last.notes, "Filing fee has been marked as paid. Case status remains unchanged.")

    def test_cfa_requires_extended(self):
        with self.assertRaises(InvalidStateException):
            issue_cfa(self.case, user=self.captain)

    def test_cfa_certifies_then_reissues(self):
        update_status(self.case, BlotterCaseStatus.EXTENDED, user=self.secretary)
        issue_cfa(self.case, user=self.captain)
        self.case.refresh_from_db()
        self.assertEqual(self.case.status, BlotterCaseStatus.CERTIFIED)
        self.assertEqual(self.case.certification_date, today())
        count = BlotterStatusUpdate.objects.filter(case=self.case).count()

        issue_cfa(self.case, user=self.captain)
        self.assertEqual(BlotterStatusUpdate.objects.filter(case=self.case).count(), count)


class SummaryAndFlowTests(BlotterTestMixin, TestCase):

    def setUp(self):
        self.create_users()

    def test_summarize_description(self):
        self.assertEqual(summarize_description('First. Second.'), 'First')
        self.assertEqual(summarize_description('x' * 200), 'x' * 150 + '...')

    def test_case_summary(self):
        case = self.make_case()
        paragraphs = case_summary(case)
        self.assertEqual(len(paragraphs), 3)
        self.assertIn('noise complaint incident that occurred on March 1, 2026', paragraphs[0])
        self.assertIn('The complainant, Maria Santos', paragraphs[0])
        self.assertIn('an unspecified time', paragraphs[0])
        self.assertIn('Republic Act No. 7160', paragraphs[2])

    def test_process_flow_for_filed_case(self):
        flow = get_process_flow(self.make_case())
        self.assertEqual(flow['current_step'], 1)
        self.assertEqual(len(flow['steps']), 9)
        self.assertTrue(flow['steps'][0]['current'])
        self.assertFalse(flow['steps'][0]['completed'])

    def test_process_flow_resolved_at_mediation(self):
        case = self.make_case()
        update_status(case, BlotterCaseStatus.RESOLVED, user=self.secretary)
        steps = get_process_flow(case)['steps']
        self.assertTrue(steps[3]['completed'])
        self.assertTrue(steps[4]['skipped'])
        self.assertTrue(steps[6]['skipped'])
        self.assertTrue(steps[8]['completed'])

    def test_legacy_statuses_map_to_steps(self):
        case = self.make_case()
        update_status(case, BlotterCaseStatus.ONGOING, user=self.secretary)
        self.assertEqual(get_process_flow(case)['current_step'], 4)


class BlotterApiTests(BlotterTestMixin, TestCase):

    def setUp(self):
        self.client = Client()
        self.create_users()
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph',
            password='testpass123',
            first_name='Tomas',
            role='TREASURER'
        )

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')

    def test_create_case(self):
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('blotter:case_list'), {
            'incident_date': '2026-03-01',
            'incident_time': '22:30',
            'incident_location': 'Purok 1',
            'incident_type': 'Trespassing',
            'incident_description': 'Entered the property without permission.',
            'parties': [
                {'party_type': 'COMPLAINANT', 'first_name': 'Ana', 'last_name': 'Cruz'},
                {'party_type': 'RESPONDENT', 'first_name': 'Ben', 'last_name': 'Reyes'},
            ],
        })
        self.assertEqual(response.status_code, 201, response.content)
        data = response.json()
        self.assertEqual(data['status'], 'FILED')
        self.assertEqual(data['priority'], 'MEDIUM')
        self.assertEqual(data['filing_fee'], '100.00')
        self.assertEqual(len(data['parties']), 2)

    def test_create_without_respondent(self):
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('blotter:case_list'), {
            'incident_date': '2026-03-01',
            'incident_location': 'Purok 1',
            'incident_type': 'Trespassing',
            'incident_description': 'Entered the property.',
            'parties': [{'party_type': 'COMPLAINANT', 'first_name': 'Ana', 'last_name': 'Cruz'}],
        })
        self.assertEqual(response.status_code, 400)

    def test_create_rejects_future_incident(self):
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('blotter:case_list'), {
            'incident_date': (today() + timedelta(days=3)).isoformat(),
            'incident_location': 'Purok 1',
            'incident_type': 'Trespassing',
            'incident_description': 'Entered the property.',
            'parties': [],
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn('incident_date', response.json()['details'])

    def test_list_filters_and_pagination(self):
        self.make_case()
        self.make_case(incident_type='Theft', incident_location='Public market')
        self.client.force_login(self.treasurer)

        response = self.client.get(reverse('blotter:case_list'), {'search': 'market', 'limit': 1})
        data = response.json()
        self.assertEqual(len(data['data']), 1)
        self.assertEqual(data['data'][0]['incident_type'], 'Theft')
        self.assertEqual(data['pagination'], {
            'total_pages': 1, 'total_items': 1, 'current_page': 1, 'items_per_page': 1,
        })

    def test_status_endpoint(self):
        case = self.make_case()
        self.client.force_login(self.secretary)
        url = reverse('blotter:case_status', args=[case.pk])

        response = self.post_json(url, {'status': 'BOGUS'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Invalid status provided')

        response = self.post_json(url, {
            'status': 'SUMMONED',
            'summon_date': '2026-03-04',
            'remarks': 'Summons served by the tanod.',
        })
        self.assertEqual(response.status_code, 200, response.content)
        data = response.json()
        self.assertEqual(data['summon_date'], '2026-03-04')
        self.assertEqual(data['status_updates'][-1]['notes'], 'Summons served by the tanod.')

    def test_treasurer_cannot_change_status(self):
        case = self.make_case()
        self.client.force_login(self.treasurer)
        response = self.post_json(reverse('blotter:case_status', args=[case.pk]), {'status': 'DOCKETED'})
        self.assertEqual(response.status_code, 403)

    def test_filing_fee_endpoint(self):
        case = self.make_case()
        self.client.force_login(self.secretary)
        response = self.client.post(reverse('blotter:filing_fee', args=[case.pk]))
        self.assertEqual(response.json()['status'], 'DOCKETED')

    @patch('apps.core.pdf.html_to_pdf', return_value=b'%PDF-1.4 test')
    def test_cfa_document(self, mock_pdf):
        officials = Officials.load()
        officials.punong_barangay = 'Hon. Pedro Reyes'
        officials.save()
        case = self.make_case()
        self.client.force_login(self.captain)
        url = reverse('blotter:certificate', args=[case.pk])

        self.assertEqual(self.client.post(url).status_code, 400)

        update_status(case, BlotterCaseStatus.EXTENDED, user=self.secretary)
        response = self.client.post(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn(f"{case.case_number}-certification.pdf", response['Content-Disposition'])
        html = mock_pdf.call_args[0][0]
        self.assertIn('CERTIFICATION TO FILE ACTION', html)
        self.assertIn('OFFICE OF THE LUPONG TAGAPAMAYAPA', html)
        self.assertIn('HON. PEDRO REYES', html)
        self.assertIn('MARIA SANTOS', html)
        self.assertIn('five (5) days', html)

    @patch('apps.core.pdf.html_to_pdf', return_value=b'%PDF-1.4 test')
    def test_case_report(self, mock_pdf):
        case = self.make_case()
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('blotter:report', args=[case.pk]))
        self.assertEqual(response.status_code, 200)
        html = mock_pdf.call_args[0][0]
        self.assertIn('OFFICIAL BLOTTER REPORT', html)
        self.assertIn('FACTS OF THE CASE', html)

    def test_hearings(self):
        case = self.make_case()
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('blotter:hearing_list', args=[case.pk]), {
            'date': '2026-03-10',
            'time': '09:00',
            'location': 'Barangay Hall',
        })
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.json()['status'], 'SCHEDULED')

        response = self.client.patch(
            reverse('blotter:hearing_detail', args=[response.json()['id']]),
            data=json.dumps({'status': 'COMPLETED', 'minutes': 'Parties agreed to a second session.'}),
            content_type='application/json'
        )
        self.assertEqual(response.json()['status'], 'COMPLETED')
        self.assertEqual(response.json()['location'], 'Barangay Hall')

    def test_add_party(self):
        case = self.make_case()
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('blotter:party_list', args=[case.pk]), {
            'party_type': 'WITNESS', 'first_name': 'Liza', 'last_name': 'Soberano',
        })
        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(case.parties.count(), 3)

    def test_process_flow_endpoint(self):
        case = self.make_case()
        self.client.force_login(self.treasurer)
        response = self.client.get(reverse('blotter:process_flow', args=[case.pk]))
        self.assertEqual(response.json()['steps'][6]['label'], 'Certification to File Action')

    def test_only_captain_deletes(self):
        case = self.make_case()
        url = reverse('blotter:case_detail', args=[case.pk])
        self.client.force_login(self.secretary)
        self.assertEqual(self.client.delete(url).status_code, 403)
        self.client.force_login(self.captain)
        self.assertEqual(self.client.delete(url).status_code, 200)
