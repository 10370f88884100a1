"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Signal handlers that drop cached dashboard stats when the
             underlying records change.
-------------------------------------------------------------------------
"""
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.dashboard.services import invalidate_finance_stats, invalidate_record_stats


@receiver([post_save, post_delete], sender='residents.Resident')
@receiver([post_save, post_delete], sender='residents.Household')
@receiver([post_save, post_delete], sender='certificates.Certificate')
@receiver([post_save, post_delete], sender='blotter.BlotterCase')
def invalidate_record_cache(sender, instance, **kwargs) -> None:
    invalidate_record_stats()


@receiver([post_save, post_delete], sender='finance.Transaction')
@receiver([post_save, post_delete], sender='finance.Budget')
def invalidate_finance_cache(sender, instance, **kwargs) -> None:
    """Invalidate the finance figures of the record's fiscal year."""
    invalidate_finance_stats(instance.fiscal_year_id)
