"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Certificates app configuration.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class CertificatesConfig(AppConfig):
    """Configuration for the certificates application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.certificates'
    verbose_name = 'Certificates'
