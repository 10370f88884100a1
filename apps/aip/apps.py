"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: AIP app configuration.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class AipConfig(AppConfig):
    """Configuration for the Annual Investment Program application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.aip'
    verbose_name = 'Annual Investment Program'
