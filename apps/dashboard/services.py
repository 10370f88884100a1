"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Dashboard service layer. Aggregates record counts and the
             active fiscal year's finance totals.
-------------------------------------------------------------------------
"""
from typing import Any, Dict, Optional

from dateutil.relativedelta import relativedelta
from django.core.cache import cache
from django.db.models import Count, Sum

from apps.blotter.models import ACTIVE_CASE_STATUSES, BlotterCase
from apps.certificates.models import Certificate, CertificateStatus
from apps.core.utils import money, today
from apps.finance.models import FiscalYear, Transaction, TransactionStatus, TransactionType
from apps.finance.services import budget_summary
from apps.residents.models import Household, Resident

SENIOR_AGE = 60

RECORDS_CACHE_KEY = 'dashboard_stats_records'
FINANCE_CACHE_KEY = 'dashboard_stats_finance_{fiscal_year_id}'
CACHE_TIMEOUT = 900


class DashboardService:
    """Aggregations behind the dashboard stats endpoint."""

    @staticmethod
    def get_record_counts() -> Dict[str, Any]:
        """
        Counts of the registry records.

        Returns:
            Dictionary containing residents, households, voters, seniors,
            certificates (per status) and open_blotter_cases.
        """
        senior_cutoff = today() - relativedelta(years=SENIOR_AGE)

        certificates = {status: 0 for status in CertificateStatus.values}
        for row in Certificate.objects.values('status').annotate(total=Count('id')):
            certificates[row['status']] = row['total']

        return {
            'residents': Resident.objects.count(),
            'households': Household.objects.count(),
            'voters': Resident.objects.filter(voter_in_barangay=True).count(),
            'seniors': Resident.objects.filter(birth_date__lte=senior_cutoff).count(),
            'certificates': certificates,
            'open_blotter_cases': BlotterCase.objects.filter(status__in=ACTIVE_CASE_STATUSES).count(),
        }

    @staticmethod
    def get_finance_summary(fiscal_year: FiscalYear) -> Dict[str, Any]:
        """Budget position plus approved revenue/expense totals of a fiscal year."""
        transactions = Transaction.objects.filter(fiscal_year=fiscal_year)
        approved = dict(
            transactions.filter(status=TransactionStatus.APPROVED)
            .values_list('type')
            .annotate(total=Sum('amount'))
        )
        summary = budget_summary(fiscal_year)
        return {
            'fiscal_year': fiscal_year.to_dict(),
            'total_budget': summary['total_budget'],
            'allocated_budget': summary['allocated_budget'],
            'remaining_budget': summary['remaining_budget'],
            'allocation_percentage': summary['allocation_percentage'],
            'total_revenue': str(money(approved.get(TransactionType.REVENUE))),
            'total_expense': str(money(approved.get(TransactionType.EXPENSE))),
            'pending_transactions': transactions.filter(status=TransactionStatus.PENDING).count(),
        }

    @classmethod
    def get_stats(cls, include_finance: bool = False) -> Dict[str, Any]:
        """
        Dashboard payload, cached for 15 minutes.

        Args:
            include_finance: Add the active fiscal year's figures. None
                when no fiscal year is active.
        """
        stats = cache.get(RECORDS_CACHE_KEY)
        if stats is None:
            stats = cls.get_record_counts()
            cache.set(RECORDS_CACHE_KEY, stats, CACHE_TIMEOUT)
        stats = dict(stats)

        if include_finance:
            stats['finance'] = cls.get_cached_finance(FiscalYear.get_active())
        return stats

    @classmethod
    def get_cached_finance(cls, fiscal_year: Optional[FiscalYear]) -> Optional[Dict[str, Any]]:
        if fiscal_year is None:
            return None
        cache_key = FINANCE_CACHE_KEY.format(fiscal_year_id=fiscal_year.pk)
        finance = cache.get(cache_key)
        if finance is None:
            finance = cls.get_finance_summary(fiscal_year)
            cache.set(cache_key, finance, CACHE_TIMEOUT)
        return finance


def invalidate_record_stats() -> None:
    cache.delete(RECORDS_CACHE_KEY)


def invalidate_finance_stats(fiscal_year_id) -> None:
    cache.delete(FINANCE_CACHE_KEY.format(fiscal_year_id=fiscal_year_id))
