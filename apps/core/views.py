"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Core views for the barangay profile, officials roster,
             council members and the notification summary.
-------------------------------------------------------------------------
"""
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from apps.core.api import ApiView, validate_form
from apps.core.forms import BarangayInfoForm, CouncilMemberForm, OfficialsForm
from apps.core.models import BarangayInfo, CouncilMember, Officials
from apps.core.services import NotificationService
from apps.core.utils import merge_instance_data
from apps.users.permissions import SETTINGS_ROLES

logger = logging.getLogger(__name__)


# =====================================================================
# SETTINGS VIEWS
# =====================================================================

class BarangayInfoView(ApiView):
    """GET/PUT the barangay profile printed on documents."""
    write_roles = SETTINGS_ROLES

    def get(self, request):
        return JsonResponse(BarangayInfo.load().to_dict())

    def put(self, request):
        info = BarangayInfo.load()
        form = BarangayInfoForm(
            data=merge_instance_data(info, self.get_json(), BarangayInfoForm.Meta.fields),
            instance=info
        )
        validate_form(form)
        info = form.save()
        logger.info("Barangay profile updated by %s", request.user.email)
        return JsonResponse(info.to_dict())

    patch = put


class OfficialsView(ApiView):
    """GET/PUT the names of the signing officials."""
    write_roles = SETTINGS_ROLES

    def get(self, request):
        return JsonResponse(Officials.load().to_dict())

    def put(self, request):
        officials = Officials.load()
        form = OfficialsForm(
            data=merge_instance_data(officials, self.get_json(), OfficialsForm.Meta.fields),
            instance=officials
        )
        validate_form(form)
        officials = form.save()
        return JsonResponse(officials.to_dict())

    patch = put


class CouncilMemberListCreateView(ApiView):
    write_roles = SETTINGS_ROLES

    def get(self, request):
        members = CouncilMember.objects.all()
        return JsonResponse({'council_members': [member.to_dict() for member in members]})

    def post(self, request):
        data = self.get_json()
        data.setdefault('is_active', True)
        form = CouncilMemberForm(data=data)
        validate_form(form)
        member = form.save()
        return JsonResponse(member.to_dict(), status=201)


class CouncilMemberDetailView(ApiView):
    write_roles = SETTINGS_ROLES

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(CouncilMember, pk=pk).to_dict())

    def put(self, request, pk):
        member = get_object_or_404(CouncilMember, pk=pk)
        form = CouncilMemberForm(
            data=merge_instance_data(member, self.get_json(), CouncilMemberForm.Meta.fields),
            instance=member
        )
        validate_form(form)
        member = form.save()
        return JsonResponse(member.to_dict())

    patch = put

    def delete(self, request, pk):
        member = get_object_or_404(CouncilMember, pk=pk)
        member.delete()
        return JsonResponse({'message': 'Council member deleted successfully'})


class OfficialsListView(ApiView):
    """Flattened roster of officials followed by active council members."""

    def get(self, request):
        return JsonResponse({'officials': Officials.load().as_list()})


# =====================================================================
# NOTIFICATION VIEWS
# =====================================================================

class NotificationSummaryView(ApiView):
    """Counts behind the navbar notification badge."""

    def get(self, request):
        return JsonResponse(NotificationService.get_summary())
