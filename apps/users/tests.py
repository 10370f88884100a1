"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the users module - roles, registration
             and profile endpoints.
-------------------------------------------------------------------------
"""
import json
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, Client
from django.urls import reverse

from apps.users.models import Role, RoleCode
from apps.users.permissions import FINANCE_ROLES, has_role


User = get_user_model()


class CustomUserTests(TestCase):
    """Tests for the user model and manager."""

    def test_create_user_assigns_role(self):
        user = User.objects.create_user(
            email='Treasurer@Barangay.gov.ph',
            password='testpass123',
            first_name='Teresa',
            last_name='Cruz',
            role=RoleCode.TREASURER
        )
        self.assertEqual(user.email, 'Treasurer@barangay.gov.ph')
        self.assertTrue(user.check_password('testpass123'))
        self.assertEqual(user.get_role_codes(), ['TREASURER'])
        self.assertTrue(user.has_any_role(FINANCE_ROLES))
        self.assertFalse(user.is_captain())

    def test_role_links_django_group(self):
        role = Role.get_or_create_system_role(RoleCode.CAPTAIN)
        self.assertEqual(role.group.name, role.name)
        self.assertTrue(role.is_system_role)
        self.assertEqual(Role.get_or_create_system_role(RoleCode.CAPTAIN), role)

    def test_superuser_passes_every_role_check(self):
        admin = User.objects.create_superuser(
            email='admin@barangay.gov.ph',
            password='testpass123',
            first_name='Admin'
        )
        self.assertTrue(admin.is_super_admin())
        self.assertTrue(has_role(admin, [RoleCode.TREASURER]))

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='x', first_name='No')


class SeedRolesCommandTests(TestCase):

    def test_seed_is_idempotent(self):
        call_command('seed_roles', stdout=StringIO())
        call_command('seed_roles', stdout=StringIO())
        self.assertEqual(Role.objects.count(), len(RoleCode.choices))
        self.assertTrue(Role.objects.filter(code='SECRETARY', is_system_role=True).exists())


class UserApiTests(TestCase):
    """Tests for registration and profile endpoints."""

    def setUp(self):
        self.client = Client()
        self.admin = User.objects.create_user(
            email='admin@barangay.gov.ph',
            password='testpass123',
            first_name='Ana',
            role=RoleCode.ADMIN
        )
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph',
            password='testpass123',
            first_name='Sofia',
            role=RoleCode.SECRETARY
        )

    def register(self, payload):
        return self.client.post(
            reverse('users:register'),
            data=json.dumps(payload),
            content_type='application/json'
        )

    def test_admin_registers_user(self):
        self.client.force_login(self.admin)
        response = self.register({
            'name': 'Maria Clara Santos',
            'email': 'treasurer@barangay.gov.ph',
            'password': 'strongpass1',
            'role': 'TREASURER',
        })
        self.assertEqual(response.status_code, 201, response.content)
        user = User.objects.get(email='treasurer@barangay.gov.ph')
        self.assertEqual(user.first_name, 'Maria Clara')
        self.assertEqual(user.last_name, 'Santos')
        self.assertEqual(response.json()['user']['roles'], ['TREASURER'])

    def test_missing_fields_rejected(self):
        self.client.force_login(self.admin)
        response = self.register({'email': 'x@barangay.gov.ph'})
        self.assertEqual(response.status_code, 400)
        details = response.json()['details']
        self.assertIn('name', details)
        self.assertIn('password', details)
        self.assertIn('role', details)

    def test_existing_email_rejected(self):
        self.client.force_login(self.admin)
        response = self.register({
            'name': 'Someone Else',
            'email': 'secretary@barangay.gov.ph',
            'password': 'strongpass1',
            'role': 'SECRETARY',
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn('email', response.json()['details'])

    def test_non_admin_forbidden(self):
        self.client.force_login(self.secretary)
        response = self.register({
            'name': 'Someone Else',
            'email': 'new@barangay.gov.ph',
            'password': 'strongpass1',
            'role': 'SECRETARY',
        })
        self.assertEqual(response.status_code, 403)

    def test_me(self):
        response = self.client.get(reverse('users:me'))
        self.assertEqual(response.status_code, 401)

        self.client.force_login(self.secretary)
        data = self.client.get(reverse('users:me')).json()
        self.assertEqual(data['email'], 'secretary@barangay.gov.ph')
        self.assertEqual(data['roles'], ['SECRETARY'])


class UserManagementApiTests(TestCase):
    """Tests for listing, updating and deleting staff accounts."""

    def setUp(self):
        self.client = Client()
        self.super_admin = User.objects.create_user(
            email='superadmin@barangay.gov.ph', password='testpass123', first_name='Sam',
            role=RoleCode.SUPER_ADMIN
        )
        self.other_super_admin = User.objects.create_user(
            email='root@barangay.gov.ph', password='testpass123', first_name='Rita',
            role=RoleCode.SUPER_ADMIN
        )
        self.captain = User.objects.create_user(
            email='captain@barangay.gov.ph', password='testpass123', first_name='Carlos',
            role=RoleCode.CAPTAIN
        )
        self.secretary = User.objects.create_user(
            email='secretary@barangay.gov.ph', password='testpass123', first_name='Sofia',
            last_name='Ramos', role=RoleCode.SECRETARY
        )

    def update(self, user, payload):
        return self.client.patch(
            reverse('users:user_detail', args=[user.pk]),
            data=json.dumps(payload),
            content_type='application/json'
        )

    def test_list_with_filters(self):
        self.client.force_login(self.super_admin)
        data = self.client.get(reverse('users:register'), {'role': 'SUPER_ADMIN'}).json()
        self.assertEqual(data['meta']['total'], 2)

        data = self.client.get(reverse('users:register'), {'search': 'ramos'}).json()
        self.assertEqual([user['email'] for user in data['users']], ['secretary@barangay.gov.ph'])

    def test_update_role_and_status(self):
        self.client.force_login(self.super_admin)
        response = self.update(self.secretary, {'role': 'TREASURER', 'status': 'INACTIVE'})
        self.assertEqual(response.status_code, 200, response.content)
        self.secretary.refresh_from_db()
        self.assertEqual(self.secretary.get_role_codes(), ['TREASURER'])
        self.assertFalse(self.secretary.is_active)
        self.assertEqual(self.secretary.last_name, 'Ramos')

    def test_update_rejects_taken_email(self):
        self.client.force_login(self.super_admin)
        response = self.update(self.secretary, {'email': 'captain@barangay.gov.ph'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('email', response.json()['details'])

    def test_cannot_demote_or_deactivate_self(self):
        self.client.force_login(self.super_admin)
        response = self.update(self.super_admin, {'role': 'SECRETARY'})
        self.assertEqual(response.status_code, 400)
        response = self.update(self.super_admin, {'status': 'INACTIVE'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.super_admin.get_role_codes(), ['SUPER_ADMIN'])

        response = self.update(self.super_admin, {'name': 'Samuel Cruz'})
        self.assertEqual(response.status_code, 200)

    def test_only_super_admin_updates(self):
        self.client.force_login(self.captain)
        response = self.update(self.secretary, {'role': 'TREASURER'})
        self.assertEqual(response.status_code, 403)

    def test_delete_rules(self):
        self.client.force_login(self.captain)
        url = reverse('users:user_detail', args=[self.captain.pk])
        self.assertEqual(self.client.delete(url).status_code, 400)

        response = self.client.delete(reverse('users:user_detail', args=[self.super_admin.pk]))
        self.assertEqual(response.status_code, 403)
        self.assertTrue(User.objects.filter(pk=self.super_admin.pk).exists())

        response = self.client.delete(reverse('users:user_detail', args=[self.secretary.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(User.objects.filter(pk=self.secretary.pk).exists())

    def test_super_admin_deletes_super_admin(self):
        self.client.force_login(self.super_admin)
        response = self.client.delete(reverse('users:user_detail', args=[self.other_super_admin.pk]))
        self.assertEqual(response.status_code, 200)
