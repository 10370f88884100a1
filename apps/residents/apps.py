"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Residents app configuration.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class ResidentsConfig(AppConfig):
    """Configuration for the residents application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.residents'
    verbose_name = 'Residents & Households'
