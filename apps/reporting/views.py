"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Report views: AIP report (JSON, CSV, PDF) and resident,
             household and disaster relief exports.
-------------------------------------------------------------------------
"""
from django.http import Http404, JsonResponse

from apps.aip.models import AnnualInvestmentProgram
from apps.core.api import ApiView
from apps.core.utils import csv_response, today
from apps.finance.services import require_financial_permission
from apps.relief.models import ReliefRecord
from apps.reporting.services import (
    aip_report_data, aip_report_rows, annotate_resident_count, filter_households,
    filter_residents, generate_aip_report_pdf, household_report_rows, load_aip_for_report,
    relief_report_rows, resident_report_rows,
)
from apps.residents.models import Household, Resident
from apps.users.permissions import FINANCE_ROLES


# =====================================================================
# AIP REPORTS
# =====================================================================

class AIPReportMixin:
    """AIP reports need a finance role and the can_view_reports permission."""
    required_roles = FINANCE_ROLES

    def get_aip(self, pk) -> AnnualInvestmentProgram:
        require_financial_permission(self.request.user, 'can_view_reports', "view AIP reports")
        try:
            return load_aip_for_report(pk)
        except AnnualInvestmentProgram.DoesNotExist:
            raise Http404("AIP not found")


class AIPReportView(AIPReportMixin, ApiView):

    def get(self, request, pk):
        return JsonResponse(aip_report_data(self.get_aip(pk)))


class AIPReportCSVView(AIPReportMixin, ApiView):

    def get(self, request, pk):
        aip = self.get_aip(pk)
        return csv_response(f"aip-report-{aip.fiscal_year.year}.csv", aip_report_rows(aip))

    post = get


class AIPReportPDFView(AIPReportMixin, ApiView):

    def get(self, request, pk):
        return generate_aip_report_pdf(self.get_aip(pk), request=request)


# =====================================================================
# RESIDENT, HOUSEHOLD AND RELIEF REPORTS
# =====================================================================

class ResidentReportView(ApiView):
    """GET ?format=csv&filter=: residents report (JSON by default)."""

    def get(self, request):
        residents = filter_residents(
            Resident.objects.select_related('household').order_by('last_name', 'first_name'),
            (request.GET.get('filter') or '').strip()
        )
        if request.GET.get('format') == 'csv':
            return csv_response(f"residents-{today().isoformat()}.csv", resident_report_rows(residents))
        return JsonResponse({'residents': [resident.to_dict() for resident in residents]})


class HouseholdReportView(ApiView):
    """GET ?format=csv&filter=: households report (JSON by default)."""

    def get(self, request):
        households = annotate_resident_count(filter_households(
            Household.objects.order_by('-created_at'),
            (request.GET.get('filter') or '').strip()
        ))
        if request.GET.get('format') == 'csv':
            return csv_response(f"households-{today().isoformat()}.csv", household_report_rows(households))

        data = []
        for household in households:
            item = household.to_dict()
            item['total_residents'] = household.resident_count
            data.append(item)
        return JsonResponse({'households': data})


class DisasterReliefReportView(ApiView):
    """GET ?format=csv&relief_type=summary|detailed: relief records report."""

    def get(self, request):
        records = ReliefRecord.objects.select_related('resident__household', 'created_by')
        if not records.exists():
            raise Http404("No relief records found")

        if request.GET.get('format') == 'csv':
            relief_type = request.GET.get('relief_type') or 'summary'
            detailed = relief_type != 'summary'
            label = 'detailed' if detailed else 'summary'
            return csv_response(
                f"disaster-relief-{label}-{today().isoformat()}.csv",
                relief_report_rows(records, detailed=detailed)
            )
        return JsonResponse({'records': [record.to_dict() for record in records]})
