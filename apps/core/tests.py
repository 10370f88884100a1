"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the core module - notification service,
             barangay settings, officials roster and shared helpers.
-------------------------------------------------------------------------
"""
import json
from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.blotter.models import BlotterCase, BlotterCaseStatus
from apps.certificates.models import Certificate, CertificateStatus, CertificateType
from apps.core.models import BarangayInfo, CouncilMember, Officials
from apps.core.services import NotificationService
from apps.core.templatetags.custom_filters import currency, percent
from apps.core.utils import calculate_age, format_currency, money, paginate, percentage
from apps.residents.models import Resident


User = get_user_model()


class HelperTests(TestCase):

    def test_calculate_age(self):
        self.assertEqual(calculate_age(date(2000, 6, 15), date(2026, 6, 14)), 25)
        self.assertEqual(calculate_age(date(2000, 6, 15), date(2026, 6, 15)), 26)
        self.assertIsNone(calculate_age(None))

    def test_format_currency(self):
        self.assertEqual(format_currency(Decimal('1234567.891')), '₱1,234,567.89')
        self.assertEqual(format_currency(None), '₱0.00')
        self.assertEqual(format_currency(-50), '-₱50.00')

    def test_template_filters(self):
        self.assertEqual(currency('2500'), '₱2,500.00')
        self.assertEqual(currency('n/a'), 'n/a')
        self.assertEqual(percent(45.5), '45.50%')

    def test_money_keeps_centavos(self):
        self.assertEqual(str(money(Decimal('25000'))), '25000.00')
        self.assertEqual(str(money(None)), '0.00')
        self.assertEqual(str(money(Decimal('10.005'))), '10.01')

    def test_percentage_of_zero(self):
        self.assertEqual(percentage(10, 0), 0.0)
        self.assertEqual(percentage(25, 200), 12.5)

    def test_paginate_caps_limit(self):
        for index in range(3):
            CouncilMember.objects.create(name=f"Kagawad {index}", order=index)
        items, meta = paginate(CouncilMember.objects.all(), page=2, limit=2)
        self.assertEqual(len(items), 1)
        self.assertEqual(meta, {'total': 3, 'page': 2, 'limit': 2, 'pages': 2})

        _, meta = paginate(CouncilMember.objects.all(), page='x', limit=5000)
        self.assertEqual(meta['limit'], 100)
        self.assertEqual(meta['page'], 1)


class NotificationServiceTests(TestCase):
    """Tests for NotificationService class."""

    def setUp(self):
        self.resident = Resident.objects.create(
            first_name='Juan',
            last_name='Dela Cruz',
            birth_date=date(1990, 1, 15),
            gender='MALE',
            civil_status='SINGLE',
            address='Purok 1'
        )

    def make_certificate(self, number, status):
        return Certificate.objects.create(
            control_number=f"CN-2026-{number:05d}",
            certificate_type=CertificateType.RESIDENCY,
            resident=self.resident,
            status=status
        )

    def make_case(self, number, status, days_ago=0):
        return BlotterCase.objects.create(
            case_number=f"BLT-2026-{number:04d}",
            report_date=timezone.now() - timedelta(days=days_ago),
            incident_date=date(2026, 1, 1),
            incident_location='Plaza',
            incident_type='Dispute',
            incident_description='Argument over parking.',
            status=status
        )

    def test_summary_counts(self):
        self.make_certificate(1, CertificateStatus.PENDING)
        self.make_certificate(2, CertificateStatus.PENDING)
        self.make_certificate(3, CertificateStatus.APPROVED)
        self.make_certificate(4, CertificateStatus.RELEASED)
        self.make_case(1, BlotterCaseStatus.FILED)
        self.make_case(2, BlotterCaseStatus.ONGOING, days_ago=2)
        self.make_case(3, BlotterCaseStatus.RESOLVED)
        self.make_case(4, BlotterCaseStatus.FILED, days_ago=30)

        summary = NotificationService.get_summary()
        self.assertEqual(summary['pending_certificates'], 2)
        self.assertEqual(summary['approved_certificates'], 1)
        self.assertEqual(summary['new_blotter_cases'], 2)
        self.assertEqual(summary['new_residents'], 1)
        self.assertEqual(summary['total'], 6)

    def test_old_residents_not_counted(self):
        Resident.objects.filter(pk=self.resident.pk).update(
            created_at=timezone.now() - timedelta(days=8)
        )
        self.assertEqual(NotificationService.get_summary()['new_residents'], 0)


class SettingsApiTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph',
            password='testpass123',
            first_name='Sofia',
            role='SECRETARY'
        )
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph',
            password='testpass123',
            first_name='Tomas',
            role='TREASURER'
        )

    def test_anonymous_is_unauthorized(self):
        response = self.client.get(reverse('core:barangay_info'))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'error': 'Unauthorized'})

    def test_barangay_info_partial_update(self):
        self.client.force_login(self.secretary)
        response = self.client.put(
            reverse('core:barangay_info'),
            data=json.dumps({'name': 'San Isidro', 'city': 'Quezon City'}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.json()['name'], 'San Isidro')
        self.assertEqual(response.json()['province'], 'Province')
        self.assertEqual(BarangayInfo.objects.count(), 1)

    def test_malformed_json(self):
        self.client.force_login(self.secretary)
        response = self.client.put(
            reverse('core:barangay_info'), data='{not json', content_type='application/json'
        )
        self.assertEqual(response.status_code, 400)

    def test_treasurer_reads_but_cannot_edit(self):
        self.client.force_login(self.treasurer)
        self.assertEqual(self.client.get(reverse('core:officials_settings')).status_code, 200)
        response = self.client.put(
            reverse('core:officials_settings'),
            data=json.dumps({'punong_barangay': 'X'}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 403)

    def test_council_member_crud(self):
        self.client.force_login(self.secretary)
        response = self.client.post(
            reverse('core:council_member_list'),
            data=json.dumps({'name': '  Kag. Ana Lim ', 'position': 'Kagawad', 'order': 2}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 201, response.content)
        member = response.json()
        self.assertTrue(member['is_active'])
        self.assertEqual(member['name'], 'Kag. Ana Lim')

        url = reverse('core:council_member_detail', args=[member['id']])
        response = self.client.put(
            url, data=json.dumps({'is_active': False}), content_type='application/json'
        )
        self.assertFalse(response.json()['is_active'])
        self.assertEqual(response.json()['position'], 'Kagawad')

        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertFalse(CouncilMember.objects.exists())

    def test_officials_roster(self):
        officials = Officials.load()
        officials.punong_barangay = 'Hon. Pedro Reyes'
        officials.secretary = 'Sofia Cruz'
        officials.save()
        CouncilMember.objects.create(name='Kag. B', order=2)
        CouncilMember.objects.create(name='Kag. A', order=1, position='Kagawad')
        CouncilMember.objects.create(name='Kag. Retired', order=0, is_active=False)

        self.client.force_login(self.treasurer)
        roster = self.client.get(reverse('core:officials_list')).json()['officials']
        self.assertEqual(
            [(entry['name'], entry['position']) for entry in roster],
            [
                ('Hon. Pedro Reyes', 'Punong Barangay'),
                ('Sofia Cruz', 'Secretary'),
                ('Kag. A', 'Kagawad'),
                ('Kag. B', 'Council Member'),
            ]
        )

    def test_notifications_endpoint(self):
        self.client.force_login(self.treasurer)
        response = self.client.get(reverse('core:notifications'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['total'], 0)
