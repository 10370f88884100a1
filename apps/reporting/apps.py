"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Reporting app configuration.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class ReportingConfig(AppConfig):
    """Configuration for the reporting application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.reporting'
    verbose_name = 'Reports'
