"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Management command to seed standard system roles.
-------------------------------------------------------------------------
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.users.models import Role, RoleCode


# Standard role definitions
STANDARD_ROLES = [
    {
        'code': RoleCode.SUPER_ADMIN,
        'description': 'Full System Access. Manages users, barangay settings and every module.',
    },
    {
        'code': RoleCode.ADMIN,
        'description': 'System Administrator. Registers user accounts and maintains barangay settings.',
    },
    {
        'code': RoleCode.CAPTAIN,
        'description': 'Punong Barangay. APPROVER for certificates, AIP and transactions. Signs the CFA.',
    },
    {
        'code': RoleCode.SECRETARY,
        'description': 'Barangay Secretary. MAKER for resident records, certificates and blotter cases.',
    },
    {
        'code': RoleCode.TREASURER,
        'description': 'Barangay Treasurer. MAKER for budgets, transactions and the AIP.',
    },
]


class Command(BaseCommand):
    help = 'Seeds standard system roles into the database'

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding system roles...')

        created_count = 0
        updated_count = 0

        for role_data in STANDARD_ROLES:
            code = role_data['code']
            name = str(RoleCode(code).label)

            role = Role.get_by_code(code)

            if role:
                role.name = name
                role.description = role_data['description']
                role.is_system_role = True
                role.save()
                updated_count += 1
                self.stdout.write(f'  Updated: {role.name}')
            else:
                role = Role.objects.create(
                    code=code,
                    name=name,
                    description=role_data['description'],
                    is_system_role=True,
                )
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'  Created: {role.name}'))

        self.stdout.write(
            self.style.SUCCESS(
                f'\nDone! Created: {created_count}, Updated: {updated_count}'
            )
        )
