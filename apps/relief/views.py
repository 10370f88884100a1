"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for relief records.
-------------------------------------------------------------------------
"""
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from apps.core.api import ApiView, validate_form
from apps.core.utils import merge_instance_data, paginate
from apps.relief.forms import ReliefRecordForm
from apps.relief.models import ReliefRecord
from apps.users.permissions import RECORD_MANAGER_ROLES

logger = logging.getLogger(__name__)


class ReliefRecordListCreateView(ApiView):
    """GET: relief records filtered by status, type and resident. POST: new record."""
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request):
        queryset = ReliefRecord.objects.select_related('resident', 'created_by')
        params = request.GET
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('type'):
            queryset = queryset.filter(type__iexact=params['type'])
        if params.get('resident'):
            queryset = queryset.filter(resident_id=params['resident'])

        records, meta = paginate(queryset, params.get('page'), params.get('limit'))
        return JsonResponse({'records': [record.to_dict() for record in records], 'meta': meta})

    def post(self, request):
        form = ReliefRecordForm(data=self.get_json())
        validate_form(form)
        record = form.save(commit=False)
        record.save_with_user(request.user)
        logger.info("Relief record %s created for resident %s", record.pk, record.resident_id)
        return JsonResponse(record.to_dict(), status=201)


class ReliefRecordDetailView(ApiView):
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(ReliefRecord, pk=pk).to_dict())

    def patch(self, request, pk):
        record = get_object_or_404(ReliefRecord, pk=pk)
        form = ReliefRecordForm(
            data=merge_instance_data(record, self.get_json(), ReliefRecordForm.Meta.fields),
            instance=record
        )
        validate_form(form)
        record = form.save(commit=False)
        record.save_with_user(request.user)
        return JsonResponse(record.to_dict())

    put = patch

    def delete(self, request, pk):
        record = get_object_or_404(ReliefRecord, pk=pk)
        record.delete()
        return JsonResponse({'message': 'Relief record deleted successfully'})
