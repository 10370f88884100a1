"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Blotter app configuration.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class BlotterConfig(AppConfig):
    """Configuration for the blotter application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.blotter'
    verbose_name = 'Blotter and Dispute Resolution'
