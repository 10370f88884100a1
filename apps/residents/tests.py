"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the residents module - services and views.
-------------------------------------------------------------------------
"""
import csv
import io
import json
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse
from openpyxl import load_workbook

from apps.core.exceptions import RecordValidationException
from apps.core.utils import today
from apps.residents.forms import ResidentForm
from apps.residents.models import Household, HouseholdStatistics, Resident
from apps.residents.services import (
    add_resident_to_household, age_group_filter, create_household,
    recompute_household_statistics, split_address,
)


User = get_user_model()


def make_resident(**overrides) -> Resident:
    """Create a resident with sensible defaults."""
    data = {
        'first_name': 'Juan',
        'last_name': 'Dela Cruz',
        'birth_date': date(1990, 5, 1),
        'gender': 'MALE',
        'civil_status': 'SINGLE',
        'address': 'Purok 1',
    }
    data.update(overrides)
    return Resident.objects.create(**data)


class SplitAddressTests(TestCase):
    """Tests for comma-separated address splitting."""

    def test_full_address(self):
        parts = split_address("12, Rizal St., San Isidro, Quezon City, Metro Manila, 1100")
        self.assertEqual(parts['house_no'], '12')
        self.assertEqual(parts['street'], 'Rizal St.')
        self.assertEqual(parts['barangay'], 'San Isidro')
        self.assertEqual(parts['city'], 'Quezon City')
        self.assertEqual(parts['province'], 'Metro Manila')
        self.assertEqual(parts['zip_code'], '1100')

    def test_missing_parts_use_defaults(self):
        parts = split_address("Blk 5")
        self.assertEqual(parts, {
            'house_no': 'Blk 5',
            'street': 'N/A',
            'barangay': 'Barangay',
            'city': 'City',
            'province': 'Province',
            'zip_code': '0000',
        })

    def test_blank_segments_use_defaults(self):
        parts = split_address("7, , Poblacion")
        self.assertEqual(parts['street'], 'N/A')
        self.assertEqual(parts['barangay'], 'Poblacion')


class AgeGroupFilterTests(TestCase):
    """Tests for age bracket filtering."""

    def setUp(self):
        now = today()
        self.child = make_resident(first_name='Child', birth_date=now - relativedelta(years=5))
        self.young = make_resident(first_name='Young', birth_date=now - relativedelta(years=20))
        self.adult = make_resident(first_name='Adult', birth_date=now - relativedelta(years=45))
        self.senior = make_resident(first_name='Senior', birth_date=now - relativedelta(years=70))

    def names(self, group):
        return set(Resident.objects.filter(age_group_filter(group)).values_list('first_name', flat=True))

    def test_brackets(self):
        self.assertEqual(self.names('child'), {'Child'})
        self.assertEqual(self.names('young-adult'), {'Young'})
        self.assertEqual(self.names('adult'), {'Adult'})
        self.assertEqual(self.names('senior'), {'Senior'})

    def test_unknown_group_matches_all(self):
        self.assertEqual(len(self.names('unknown')), 4)


class ResidentFormTests(TestCase):
    """Tests for resident validation rules."""

    def base_data(self, **overrides):
        data = {
            'first_name': 'Maria',
            'last_name': 'Santos',
            'birth_date': '1985-02-14',
            'gender': 'FEMALE',
            'civil_status': 'MARRIED',
            'address': 'Purok 3',
        }
        data.update(overrides)
        return data

    def test_valid_minimal(self):
        form = ResidentForm(data=self.base_data())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['nationality'], 'Filipino')

    def test_employed_requires_occupation(self):
        form = ResidentForm(data=self.base_data(employment_status='EMPLOYED'))
        self.assertFalse(form.is_valid())
        self.assertIn('occupation', form.errors)

    def test_identity_type_requires_number(self):
        form = ResidentForm(data=self.base_data(identity_type='PhilSys'))
        self.assertFalse(form.is_valid())
        self.assertIn('identity_number', form.errors)

    def test_future_birth_date_rejected(self):
        future = (today() + timedelta(days=3)).isoformat()
        form = ResidentForm(data=self.base_data(birth_date=future))
        self.assertFalse(form.is_valid())
        self.assertIn('birth_date', form.errors)


class HouseholdServiceTests(TestCase):
    """Tests for household creation, membership and statistics."""

    def setUp(self):
        now = today()
        self.head = make_resident(first_name='Pedro', occupation='Farmer', voter_in_barangay=True)
        self.child = make_resident(first_name='Ana', birth_date=now - relativedelta(years=10))
        self.lola = make_resident(first_name='Rosa', birth_date=now - relativedelta(years=72),
                                  voter_in_barangay=True)

    def test_create_from_address_assigns_residents(self):
        household = create_household({
            'address': '101, Mabini St., San Roque',
            'resident_ids': [self.head.pk, self.child.pk],
            'head_of_household': self.head.pk,
        })
        self.assertEqual(household.house_no, '101')
        self.assertEqual(household.city, 'City')
        self.assertEqual(household.residents.count(), 2)
        self.head.refresh_from_db()
        self.assertTrue(self.head.is_head_of_household)
        self.assertEqual(household.history[0]['action'], 'CREATED')

        stats = HouseholdStatistics.objects.get(household=household)
        self.assertEqual(stats.total_residents, 2)
        self.assertEqual(stats.minor_count, 1)
        self.assertEqual(stats.employed_count, 1)
        self.assertEqual(stats.voter_count, 1)

    def test_add_existing_member_rejected(self):
        household = create_household({'address': '5, Luna St.', 'resident_ids': [self.head.pk]})
        self.head.refresh_from_db()
        with self.assertRaises(RecordValidationException):
            add_resident_to_household(household, self.head)

    def test_new_head_unsets_previous(self):
        household = create_household({
            'address': '5, Luna St.',
            'resident_ids': [self.head.pk],
            'head_of_household': self.head.pk,
        })
        add_resident_to_household(household, self.lola, is_head=True)
        self.head.refresh_from_db()
        self.lola.refresh_from_db()
        self.assertFalse(self.head.is_head_of_household)
        self.assertTrue(self.lola.is_head_of_household)

        stats = recompute_household_statistics(household)
        self.assertEqual(stats.senior_count, 1)
        self.assertEqual(stats.total_residents, 2)


class ResidentViewTests(TestCase):
    """Tests for resident API endpoints."""

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
        self.resident = make_resident(first_name='Jose', last_name='Rizal', voter_in_barangay=True)
        make_resident(first_name='Gabriela', last_name='Silang', gender='FEMALE')

    def test_anonymous_gets_401(self):
        response = self.client.get(reverse('residents:resident_list'))
        self.assertEqual(response.status_code, 401)

    def test_list_with_filters_and_count(self):
        self.client.force_login(self.treasurer)
        response = self.client.get(reverse('residents:resident_list'), {
            'gender': 'FEMALE', 'with_count': 'true'
        })
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(len(data['residents']), 1)
        self.assertEqual(data['residents'][0]['first_name'], 'Gabriela')
        self.assertEqual(data['meta']['total'], 1)

    def test_search_by_name(self):
        self.client.force_login(self.treasurer)
        response = self.client.get(reverse('residents:resident_list'), {'search': 'riz'})
        self.assertEqual([r['last_name'] for r in response.json()['residents']], ['Rizal'])

    def test_treasurer_cannot_create(self):
        self.client.force_login(self.treasurer)
        response = self.client.post(
            reverse('residents:resident_list'),
            data=json.dumps({'first_name': 'X'}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 403)

    def test_secretary_creates_resident(self):
        self.client.force_login(self.secretary)
        response = self.client.post(
            reverse('residents:resident_list'),
            data=json.dumps({
                'first_name': 'Andres',
                'last_name': 'Bonifacio',
                'birth_date': '1963-11-30',
                'gender': 'MALE',
                'civil_status': 'MARRIED',
                'address': 'Tondo',
                'employment_status': 'EMPLOYED',
                'occupation': 'Clerk',
                'sectors': ['SENIOR_CITIZEN'],
            }),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 201, response.content)
        created = Resident.objects.get(last_name='Bonifacio')
        self.assertEqual(created.created_by, self.secretary)
        self.assertEqual(created.sectors, ['SENIOR_CITIZEN'])
        self.assertEqual(created.nationality, 'Filipino')

    def test_create_validation_error(self):
        self.client.force_login(self.secretary)
        response = self.client.post(
            reverse('residents:resident_list'),
            data=json.dumps({
                'first_name': 'Andres',
                'last_name': 'Bonifacio',
                'birth_date': '1963-11-30',
                'gender': 'MALE',
                'civil_status': 'MARRIED',
                'address': 'Tondo',
                'employment_status': 'EMPLOYED',
            }),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('occupation', response.json()['details'])

    def test_partial_update(self):
        self.client.force_login(self.secretary)
        response = self.client.patch(
            reverse('residents:resident_detail', args=[self.resident.pk]),
            data=json.dumps({'contact_no': '09171234567'}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 200, response.content)
        self.resident.refresh_from_db()
        self.assertEqual(self.resident.contact_no, '09171234567')
        self.assertEqual(self.resident.first_name, 'Jose')

    def test_search_requires_query(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('residents:resident_search'))
        self.assertEqual(response.status_code, 400)

    def test_residency_duration(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('residents:residency_duration', args=[self.resident.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['months'], 0)

    def test_csv_export(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('residents:resident_export'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn(f'residents-data-{today().isoformat()}.csv', response['Content-Disposition'])
        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(rows[0][0], 'ID')
        self.assertEqual(len(rows), 3)

    def test_xlsx_export(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('residents:resident_export_xlsx'))
        self.assertEqual(response.status_code, 200)
        self.assertIn(f'residents-data-{today().isoformat()}.xlsx', response['Content-Disposition'])

        ws = load_workbook(io.BytesIO(response.content)).active
        self.assertEqual(ws.title, 'Residents')
        header = [cell.value for cell in ws[1]]
        self.assertEqual(header[:4], ['ID', 'First Name', 'Middle Name', 'Last Name'])
        self.assertEqual(ws.max_row, 3)
        first = [cell.value for cell in ws[2]]
        self.assertEqual(first[0], self.resident.pk)
        self.assertEqual(first[1], 'Jose')
        self.assertEqual(first[3], 'Rizal')
        self.assertEqual(first[11], 'Yes')

    def test_delete_recomputes_household(self):
        household = Household.objects.create(
            house_no='1', street='A', barangay='B', city='C', province='D'
        )
        self.resident.household = household
        self.resident.save()
        recompute_household_statistics(household)

        self.client.force_login(self.secretary)
        response = self.client.delete(reverse('residents:resident_detail', args=[self.resident.pk]))
        self.assertEqual(response.status_code, 200)
        household.statistics.refresh_from_db()
        self.assertEqual(household.statistics.total_residents, 0)


class HouseholdViewTests(TestCase):
    """Tests for household API endpoints."""

    def setUp(self):
        self.client = Client()
        self.captain = User.objects.create_user(
            email='captain@barangay.gov.ph',
            password='testpass123',
            first_name='Carlos',
            role='CAPTAIN'
        )
        self.client.force_login(self.captain)
        self.resident = make_resident()
        self.other = make_resident(first_name='Lito', last_name='Abad')

    def create(self, payload):
        return self.client.post(
            reverse('residents:household_list'),
            data=json.dumps(payload),
            content_type='application/json'
        )

    def test_create_requires_address(self):
        response = self.create({'notes': 'no address'})
        self.assertEqual(response.status_code, 400)

    def test_create_and_list_members_head_first(self):
        response = self.create({
            'address': '9, Bonifacio St., San Jose',
            'resident_ids': [self.resident.pk, self.other.pk],
            'head_of_household': self.resident.pk,
        })
        self.assertEqual(response.status_code, 201, response.content)
        household_id = response.json()['household']['id']

        detail = self.client.get(reverse('residents:household_detail', args=[household_id])).json()
        self.assertEqual(detail['residents'][0]['id'], self.resident.pk)
        self.assertEqual(detail['statistics']['total_residents'], 2)

    def test_add_member_twice_returns_400(self):
        household = create_household({'address': '3, Mabini', 'resident_ids': [self.resident.pk]})
        url = reverse('residents:household_residents', args=[household.pk])
        response = self.client.post(
            url, data=json.dumps({'resident_id': self.resident.pk}), content_type='application/json'
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            url,
            data=json.dumps({'resident_id': self.other.pk, 'is_head_of_household': True}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 201)
        self.other.refresh_from_db()
        self.assertTrue(self.other.is_head_of_household)

    def test_remove_member_and_history(self):
        household = create_household({'address': '3, Mabini', 'resident_ids': [self.resident.pk]})
        response = self.client.delete(
            reverse('residents:household_member', args=[household.pk, self.resident.pk])
        )
        self.assertEqual(response.status_code, 200)
        self.resident.refresh_from_db()
        self.assertIsNone(self.resident.household)

        history = self.client.get(reverse('residents:household_history', args=[household.pk])).json()
        self.assertEqual(history['history'][-1]['action'], 'RESIDENT_REMOVED')

    def test_update_appends_history(self):
        household = create_household({'address': '3, Mabini'})
        response = self.client.patch(
            reverse('residents:household_detail', args=[household.pk]),
            data=json.dumps({'notes': 'Near the chapel'}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, 200, response.content)
        household.refresh_from_db()
        self.assertEqual(household.notes, 'Near the chapel')
        self.assertEqual(household.history[-1]['action'], 'UPDATED')


class GlobalSearchTests(TestCase):
    """Tests for the combined resident and household search."""

    def setUp(self):
        self.client = Client()
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph',
            password='testpass123',
            first_name='Sofia',
            role='SECRETARY'
        )
        now = today()
        self.san_roque = Household.objects.create(
            house_no='8', street='Mabini St', barangay='San Roque', city='Tanauan', province='Batangas'
        )
        self.poblacion = Household.objects.create(
            house_no='21', street='Luna St', barangay='Poblacion', city='Tanauan', province='Batangas'
        )
        make_resident(first_name='Pedro', last_name='Reyes', household=self.san_roque,
                      birth_date=now - relativedelta(years=40))
        make_resident(first_name='Ana', last_name='Reyes', gender='FEMALE', household=self.san_roque,
                      birth_date=now - relativedelta(years=10))
        make_resident(first_name='Rosa', last_name='Luna', gender='FEMALE', civil_status='WIDOWED',
                      household=self.poblacion, birth_date=now - relativedelta(years=72))
        self.client.force_login(self.secretary)

    def search(self, **params):
        response = self.client.get(reverse('residents:global_search'), params)
        self.assertEqual(response.status_code, 200, response.content)
        return response.json()

    def test_query_matches_residents_and_households(self):
        data = self.search(query='luna')
        self.assertEqual([r['first_name'] for r in data['residents']], ['Rosa'])
        self.assertEqual([h['id'] for h in data['households']], [self.poblacion.pk])
        self.assertEqual(data['households'][0]['resident_count'], 1)
        self.assertEqual(data['pagination']['total_residents'], 1)
        self.assertEqual(data['pagination']['total_pages'], 1)

    def test_barangay_gender_and_civil_status(self):
        data = self.search(barangay='San Roque', gender='FEMALE')
        self.assertEqual([r['first_name'] for r in data['residents']], ['Ana'])
        self.assertEqual(data['residents'][0]['household']['barangay'], 'San Roque')

        data = self.search(civil_status='WIDOWED')
        self.assertEqual([r['first_name'] for r in data['residents']], ['Rosa'])

    def test_age_range(self):
        data = self.search(age_range='18-60')
        self.assertEqual([r['first_name'] for r in data['residents']], ['Pedro'])
        data = self.search(age_range='60-')
        self.assertEqual([r['first_name'] for r in data['residents']], ['Rosa'])

    def test_household_size(self):
        data = self.search(household_size='2-5')
        self.assertEqual([h['id'] for h in data['households']], [self.san_roque.pk])

    def test_invalid_range_rejected(self):
        response = self.client.get(reverse('residents:global_search'), {'age_range': 'old-older'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('Invalid age range', response.json()['error'])

    def test_requires_login(self):
        self.client.logout()
        self.assertEqual(self.client.get(reverse('residents:global_search')).status_code, 401)
