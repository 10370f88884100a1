"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Dashboard views: the stats API and the landing page.
-------------------------------------------------------------------------
"""
from typing import Any, Dict

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import JsonResponse
from django.views.generic import TemplateView

from apps.core.api import ApiView
from apps.dashboard.services import DashboardService
from apps.users.permissions import FINANCE_ROLES, has_role


class DashboardStatsView(ApiView):
    """
    GET: record totals for any signed-in user.

    Finance roles also receive the active fiscal year's budget and
    transaction totals under 'finance'.
    """

    def get(self, request):
        stats = DashboardService.get_stats(include_finance=has_role(request.user, FINANCE_ROLES))
        return JsonResponse(stats)


class DashboardHomeView(LoginRequiredMixin, TemplateView):
    template_name = 'dashboard/index.html'

    def get_context_data(self, **kwargs) -> Dict[str, Any]:
        context = super().get_context_data(**kwargs)
        show_finance = has_role(self.request.user, FINANCE_ROLES)
        context['stats'] = DashboardService.get_stats(include_finance=show_finance)
        context['show_finance'] = show_finance
        return context
