"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Advisor endpoints: recommendations and AIP insights.
-------------------------------------------------------------------------
"""
from django.http import Http404, JsonResponse

from apps.advisor.services import generate_aip_insights, get_recommendations
from apps.aip.models import AnnualInvestmentProgram
from apps.core.api import ApiView
from apps.users.permissions import AIP_INSIGHT_ROLES


class AdvisorView(ApiView):
    """GET ?aip_id=&type=budget|project|risk|all: rule-based recommendations."""

    def get(self, request):
        return JsonResponse(get_recommendations(
            aip_id=request.GET.get('aip_id'),
            kind=request.GET.get('type') or 'all'
        ))


class AIPInsightsView(ApiView):
    required_roles = AIP_INSIGHT_ROLES

    def get(self, request, pk):
        aip = AnnualInvestmentProgram.objects.select_related('fiscal_year').filter(pk=pk).first()
        if aip is None:
            raise Http404("AIP not found")
        return JsonResponse({'insights': generate_aip_insights(aip)})
