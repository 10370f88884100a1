"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Advisor app configuration.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class AdvisorConfig(AppConfig):
    """Configuration for the AIP advisor application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.advisor'
    verbose_name = 'AIP Advisor'
