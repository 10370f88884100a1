"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Core services for notification counts and other
             shared business logic.
-------------------------------------------------------------------------
"""
from datetime import timedelta
from typing import Dict

from django.conf import settings
from django.utils import timezone


class NotificationService:
    """
    Service class for the notification badge.

    Notifications are derived from live records rather than stored:
    certificates awaiting action, newly reported blotter cases and newly
    registered residents.
    """

    @staticmethod
    def recent_cutoff():
        """Start of the 'recent' window (BMS_RECENT_DAYS back from now)."""
        return timezone.now() - timedelta(days=settings.BMS_RECENT_DAYS)

    @staticmethod
    def get_summary() -> Dict[str, int]:
        """
        Count items that need the staff's attention.

        Returns:
            Dictionary with pending_certificates, new_blotter_cases,
            new_residents, approved_certificates and total.

        Example:
            >>> NotificationService.get_summary()
            {'pending_certificates': 3, 'new_blotter_cases': 1,
             'new_residents': 0, 'approved_certificates': 2, 'total': 6}
        """
        from apps.blotter.models import ACTIVE_CASE_STATUSES, BlotterCase
        from apps.certificates.models import Certificate, CertificateStatus
        from apps.residents.models import Resident

        cutoff = NotificationService.recent_cutoff()

        summary = {
            'pending_certificates': Certificate.objects.filter(
                status=CertificateStatus.PENDING
            ).count(),
            'new_blotter_cases': BlotterCase.objects.filter(
                report_date__gte=cutoff,
                status__in=ACTIVE_CASE_STATUSES
            ).count(),
            'new_residents': Resident.objects.filter(created_at__gte=cutoff).count(),
            'approved_certificates': Certificate.objects.filter(
                status=CertificateStatus.APPROVED
            ).count(),
        }
        summary['total'] = sum(summary.values())
        return summary
