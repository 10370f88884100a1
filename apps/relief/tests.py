"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for the relief API.
-------------------------------------------------------------------------
"""
import json
from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.relief.models import ReliefRecord, ReliefStatus
from apps.residents.models import Resident


User = get_user_model()


class ReliefApiTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph', password='testpass123', first_name='Sofia', role='SECRETARY'
        )
        self.treasurer = User.objects.create_user(
            email='treasurer@barangay.gov.ph', password='testpass123', first_name='Tomas', role='TREASURER'
        )
        self.resident = Resident.objects.create(
            first_name='Maria', last_name='Santos', birth_date=date(1985, 3, 2),
            gender='FEMALE', civil_status='MARRIED', address='Purok 2'
        )

    def post(self, payload):
        return self.client.post(
            reverse('relief:record_list'), data=json.dumps(payload), content_type='application/json'
        )

    def test_anonymous_rejected(self):
        self.assertEqual(self.client.get(reverse('relief:record_list')).status_code, 401)

    def test_create_defaults(self):
        self.client.force_login(self.secretary)
        response = self.post({'resident': self.resident.pk, 'type': 'Food Pack'})
        self.assertEqual(response.status_code, 201, response.content)
        data = response.json()
        self.assertEqual(data['status'], 'PENDING')
        self.assertEqual(data['amount'], '0.00')
        self.assertEqual(data['resident_name'], 'Maria Santos')
        self.assertEqual(data['created_by'], self.secretary.email)

    def test_create_requires_resident_and_type(self):
        self.client.force_login(self.secretary)
        response = self.post({'amount': '500'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('resident', response.json()['details'])
        self.assertIn('type', response.json()['details'])

    def test_treasurer_reads_but_cannot_write(self):
        self.client.force_login(self.treasurer)
        self.assertEqual(self.client.get(reverse('relief:record_list')).status_code, 200)
        self.assertEqual(self.post({'resident': self.resident.pk, 'type': 'Food Pack'}).status_code, 403)

    def test_patch_and_delete(self):
        record = ReliefRecord.objects.create(resident=self.resident, type='Financial Aid', amount=1500)
        self.client.force_login(self.secretary)
        url = reverse('relief:record_detail', args=[record.pk])

        response = self.client.patch(url, data=json.dumps({'status': 'DISTRIBUTED'}), content_type='application/json')
        self.assertEqual(response.status_code, 200)
        record.refresh_from_db()
        self.assertEqual(record.status, ReliefStatus.DISTRIBUTED)
        self.assertEqual(record.type, 'Financial Aid')

        self.assertEqual(self.client.delete(url).status_code, 200)
        self.assertFalse(ReliefRecord.objects.exists())

    def test_filter_by_status(self):
        ReliefRecord.objects.create(resident=self.resident, type='Food Pack', status=ReliefStatus.APPROVED)
        ReliefRecord.objects.create(resident=self.resident, type='Clothing')
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('relief:record_list'), {'status': 'APPROVED'})
        self.assertEqual(response.json()['meta']['total'], 1)
