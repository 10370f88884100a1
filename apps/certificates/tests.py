"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the certificates module - control numbers,
             workflow, templates, PDF and verification.
-------------------------------------------------------------------------
"""
import json
from datetime import date
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, Client, override_settings
from django.urls import reverse

from apps.core.exceptions import WorkflowTransitionException
from apps.core.models import Officials
from apps.core.utils import today
from apps.certificates.models import (
    Certificate, CertificateStatus, CertificateTemplate, CertificateType,
)
from apps.certificates.services import (
    build_certificate_context, create_certificate, fill_placeholders, generate_control_number,
)
from apps.certificates.workflows import perform_transition
from apps.residents.models import Resident


User = get_user_model()


class CertificateTestMixin:
    """Shared fixtures for certificate tests."""

    def create_fixtures(self):
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
        self.resident = Resident.objects.create(
            first_name='Juan',
            last_name='Dela Cruz',
            birth_date=date(1990, 1, 15),
            gender='MALE',
            civil_status='SINGLE',
            address='Purok 2, San Isidro'
        )
        officials = Officials.load()
        officials.punong_barangay = 'Hon. Pedro Reyes'
        officials.save()

    def make_certificate(self, **overrides):
        data = {
            'certificate_type': CertificateType.CLEARANCE,
            'purpose': 'Employment',
            'resident': self.resident,
        }
        data.update(overrides)
        return create_certificate(Certificate(**data), user=self.secretary)


class ControlNumberTests(CertificateTestMixin, TestCase):

    def setUp(self):
        self.create_fixtures()

    def test_sequence_per_year(self):
        year = today().year
        first = self.make_certificate()
        second = self.make_certificate()
        self.assertEqual(first.control_number, f"CN-{year}-00001")
        self.assertEqual(second.control_number, f"CN-{year}-00002")
        self.assertEqual(generate_control_number(year + 1), f"CN-{year + 1}-00001")

    def test_sequence_past_five_digits(self):
        year = today().year
        first = self.make_certificate()
        second = self.make_certificate()
        Certificate.objects.filter(pk=first.pk).update(control_number=f"CN-{year}-99999")
        Certificate.objects.filter(pk=second.pk).update(control_number=f"CN-{year}-100000")
        self.assertEqual(generate_control_number(year), f"CN-{year}-100001")

    def test_defaults_on_create(self):
        certificate = self.make_certificate()
        self.assertEqual(certificate.status, CertificateStatus.PENDING)
        self.assertEqual(certificate.official, 'Hon. Pedro Reyes')
        self.assertEqual(certificate.created_by, self.secretary)


class CertificateWorkflowTests(CertificateTestMixin, TestCase):

    def setUp(self):
        self.create_fixtures()
        self.certificate = self.make_certificate()

    def test_release_sets_issued_date(self):
        perform_transition(self.certificate, CertificateStatus.APPROVED, self.captain)
        perform_transition(self.certificate, CertificateStatus.RELEASED, self.captain)
        self.certificate.refresh_from_db()
        self.assertEqual(self.certificate.status, CertificateStatus.RELEASED)
        self.assertEqual(self.certificate.issued_date, today())

    def test_pending_cannot_be_released(self):
        with self.assertRaises(WorkflowTransitionException):
            perform_transition(self.certificate, CertificateStatus.RELEASED, self.captain)

    def test_terminal_states(self):
        perform_transition(self.certificate, CertificateStatus.REJECTED, self.captain)
        with self.assertRaises(WorkflowTransitionException):
            perform_transition(self.certificate, CertificateStatus.APPROVED, self.captain)

    def test_unknown_status(self):
        with self.assertRaises(WorkflowTransitionException):
            perform_transition(self.certificate, 'ARCHIVED', self.captain)


class CertificateTemplateTests(CertificateTestMixin, TestCase):

    def setUp(self):
        self.create_fixtures()

    def test_single_default_per_type(self):
        first = CertificateTemplate.objects.create(
            certificate_type=CertificateType.RESIDENCY, name='Old', content='x', is_default=True
        )
        second = CertificateTemplate.objects.create(
            certificate_type=CertificateType.RESIDENCY, name='New', content='y', is_default=True
        )
        other_type = CertificateTemplate.objects.create(
            certificate_type=CertificateType.INDIGENCY, name='Ind', content='z', is_default=True
        )
        first.refresh_from_db()
        self.assertFalse(first.is_default)
        self.assertTrue(second.is_default)
        other_type.refresh_from_db()
        self.assertTrue(other_type.is_default)

    def test_placeholders_are_escaped(self):
        self.assertEqual(
            fill_placeholders('[BUSINESS_NAME] / [PURPOSE]', {
                '[BUSINESS_NAME]': 'Aling <Nena> Store',
                '[PURPOSE]': 'Loan',
            }),
            'Aling &lt;Nena&gt; Store / Loan'
        )

    def test_context_uses_default_template(self):
        CertificateTemplate.objects.create(
            certificate_type=CertificateType.CLEARANCE,
            name='Clearance',
            content='[RESIDENT_NAME] is cleared for [PURPOSE].',
            is_default=True
        )
        certificate = self.make_certificate()
        context = build_certificate_context(certificate)
        self.assertEqual(str(context['body']), 'Juan Dela Cruz is cleared for Employment.')
        self.assertEqual(context['title'], 'BARANGAY CLEARANCE')

    @override_settings(APP_URL='https://bms.example.ph/')
    def test_context_builtin_body_and_verification_url(self):
        certificate = self.make_certificate(purpose='')
        context = build_certificate_context(certificate)
        self.assertIn('NO DEROGATORY RECORD', str(context['body']))
        self.assertIn('whatever legal purpose it may serve', str(context['body']))
        self.assertEqual(
            context['verification_url'],
            f"https://bms.example.ph/verify/{certificate.control_number}/"
        )


class CertificateApiTests(CertificateTestMixin, TestCase):

    def setUp(self):
        self.client = Client()
        self.create_fixtures()
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph',
            password='testpass123',
            first_name='Tomas',
            role='TREASURER'
        )

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')

    def test_create_and_filter(self):
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('certificates:certificate_list'), {
            'certificate_type': 'RESIDENCY',
            'purpose': 'School requirement',
            'resident': self.resident.pk,
        })
        self.assertEqual(response.status_code, 201, response.content)
        control_number = response.json()['control_number']

        response = self.client.get(reverse('certificates:certificate_list'), {
            'control_number': control_number
        })
        self.assertEqual(len(response.json()['certificates']), 1)

        response = self.client.get(reverse('certificates:certificate_list'), {'status': 'RELEASED'})
        self.assertEqual(response.json()['certificates'], [])

    def test_malformed_resident_filter(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('certificates:certificate_list'), {'resident': 'abc'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error_code'], 'ERR_VALIDATION')

    def test_business_permit_requires_business_fields(self):
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('certificates:certificate_list'), {
            'certificate_type': 'BUSINESS_PERMIT',
            'resident': self.resident.pk,
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn('business_name', response.json()['details'])

    def test_status_endpoint(self):
        certificate = self.make_certificate()
        self.client.force_login(self.captain)
        url = reverse('certificates:certificate_status', args=[certificate.pk])

        response = self.post_json(url, {'status': 'RELEASED'})
        self.assertEqual(response.status_code, 400)

        response = self.post_json(url, {'status': 'APPROVED'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'APPROVED')

    def test_treasurer_cannot_update(self):
        certificate = self.make_certificate()
        self.client.force_login(self.treasurer)
        response = self.post_json(
            reverse('certificates:certificate_status', args=[certificate.pk]),
            {'status': 'APPROVED'}
        )
        self.assertEqual(response.status_code, 403)

    def test_only_captain_deletes(self):
        certificate = self.make_certificate()
        url = reverse('certificates:certificate_detail', args=[certificate.pk])

        self.client.force_login(self.secretary)
        self.assertEqual(self.client.delete(url).status_code, 403)

        self.client.force_login(self.captain)
        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertFalse(Certificate.objects.filter(pk=certificate.pk).exists())

    def test_patch_only_while_pending(self):
        certificate = self.make_certificate()
        perform_transition(certificate, CertificateStatus.APPROVED, self.captain)
        self.client.force_login(self.secretary)
        response = self.client.patch(
            reverse('certificates:certificate_detail', args=[certificate.pk]),
            data=json.dumps({'purpose': 'Travel'}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 400)

    def test_verify_is_public(self):
        certificate = self.make_certificate()
        response = self.client.get(reverse('certificate_verify', args=[certificate.control_number]))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertFalse(data['valid'])
        self.assertEqual(data['resident_name'], 'Juan Dela Cruz')

        perform_transition(certificate, CertificateStatus.APPROVED, self.captain)
        response = self.client.get(reverse('certificate_verify', args=[certificate.control_number]))
        self.assertTrue(response.json()['valid'])

        response = self.client.get(reverse('certificate_verify', args=['CN-1999-00001']))
        self.assertEqual(response.status_code, 404)

    @patch('apps.core.pdf.html_to_pdf', return_value=b'%PDF-1.4 test')
    def test_pdf(self, mock_pdf):
        certificate = self.make_certificate()
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('certificates:certificate_pdf', args=[certificate.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        html = mock_pdf.call_args[0][0]
        self.assertIn(certificate.control_number, html)
        self.assertIn('/verify/', html)

    def test_template_crud(self):
        self.client.force_login(self.secretary)
        response = self.post_json(reverse('certificates:template_list'), {
            'certificate_type': 'INDIGENCY',
            'name': 'Indigency v2',
            'content': '[RESIDENT_NAME] is indigent.',
            'is_default': True,
        })
        self.assertEqual(response.status_code, 201, response.content)
        template_id = response.json()['id']

        response = self.client.put(
            reverse('certificates:template_detail', args=[template_id]),
            data=json.dumps({'name': 'Indigency v3'}),
            content_type='application/json'
        )
        self.assertEqual(response.json()['name'], 'Indigency v3')
        self.assertTrue(response.json()['is_default'])
