"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Relief app configuration.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class ReliefConfig(AppConfig):
    """Configuration for the disaster relief application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.relief'
    verbose_name = 'Disaster Relief'
