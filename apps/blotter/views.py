"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for blotter cases: filing, status changes,
             filing fee, CFA issuance, hearings and case reports.
-------------------------------------------------------------------------
"""
import logging

from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from apps.core.api import ApiView, form_errors, validate_form
from apps.core.exceptions import RecordValidationException
from apps.core.utils import merge_instance_data, paginate
from apps.blotter.forms import (
    BlotterAttachmentForm, BlotterCaseForm, BlotterHearingForm, BlotterPartyForm,
    StatusUpdateForm,
)
from apps.blotter.models import BlotterCase, BlotterHearing
from apps.blotter.services import (
    create_case, generate_case_report_pdf, generate_cfa_pdf, issue_cfa,
    mark_filing_fee_paid, update_status,
)
from apps.blotter.workflows import get_process_flow
from apps.users.permissions import BLOTTER_DELETE_ROLES, RECORD_MANAGER_ROLES

logger = logging.getLogger(__name__)


def case_queryset():
    return BlotterCase.objects.prefetch_related('parties')


class BlotterCaseListCreateView(ApiView):
    """
    GET: cases filtered by status, priority and a search over the case
    number, incident type and location. POST: file a complaint with its
    parties.
    """
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request):
        queryset = case_queryset()
        params = request.GET
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('priority'):
            queryset = queryset.filter(priority=params['priority'])
        search = (params.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(case_number__icontains=search) |
                Q(incident_type__icontains=search) |
                Q(incident_location__icontains=search)
            )

        cases, meta = paginate(queryset, params.get('page'), params.get('limit'))
        return JsonResponse({
            'data': [case.to_dict() for case in cases],
            'pagination': {
                'total_pages': meta['pages'],
                'total_items': meta['total'],
                'current_page': meta['page'],
                'items_per_page': meta['limit'],
            },
        })

    def post(self, request):
        data = self.get_json()
        party_data = data.pop('parties', None) or []
        if not isinstance(party_data, list):
            raise RecordValidationException("Parties must be a list.")

        form = BlotterCaseForm(data=data)
        validate_form(form)

        parties, errors = [], {}
        for index, item in enumerate(party_data):
            party_form = BlotterPartyForm(data=item)
            if party_form.is_valid():
                parties.append(party_form.save(commit=False))
            else:
                errors[str(index)] = form_errors(party_form)
        if errors:
            raise RecordValidationException("Validation failed.", details={'parties': errors})

        case = create_case(form.save(commit=False), parties, user=request.user)
        return JsonResponse(case.to_dict(detail=True), status=201)


class BlotterCaseDetailView(ApiView):
    """GET/PATCH/DELETE a case. Status changes go through status/."""
    write_roles = RECORD_MANAGER_ROLES
    delete_roles = BLOTTER_DELETE_ROLES

    def get(self, request, pk):
        case = get_object_or_404(case_queryset(), pk=pk)
        return JsonResponse(case.to_dict(detail=True))

    def patch(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        data = self.get_json()
        data.pop('status', None)
        form = BlotterCaseForm(
            data=merge_instance_data(case, data, BlotterCaseForm.Meta.fields),
            instance=case
        )
        validate_form(form)
        case = form.save(commit=False)
        case.save_with_user(request.user)
        return JsonResponse(case.to_dict(detail=True))

    put = patch

    def delete(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        case_number = case.case_number
        case.delete()
        logger.warning("Blotter case %s deleted by %s", case_number, request.user.email)
        return JsonResponse({'message': 'Blotter case deleted successfully'})


class BlotterStatusView(ApiView):
    """POST {status, remarks, ...dates}: record a status change."""
    write_roles = RECORD_MANAGER_ROLES

    def post(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        form = StatusUpdateForm(data=self.get_json())
        validate_form(form)
        case = update_status(
            case,
            form.cleaned_data['status'],
            user=request.user,
            remarks=form.cleaned_data['remarks'],
            fields=form.submitted_fields()
        )
        return JsonResponse(case.to_dict(detail=True))


class BlotterFilingFeeView(ApiView):
    write_roles = RECORD_MANAGER_ROLES

    def post(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        case = mark_filing_fee_paid(case, user=request.user)
        return JsonResponse(case.to_dict(detail=True))


class BlotterCertificateView(ApiView):
    """POST: issue (or re-issue) the Certification to File Action PDF."""
    write_roles = RECORD_MANAGER_ROLES

    def post(self, request, pk):
        case = get_object_or_404(case_queryset(), pk=pk)
        case = issue_cfa(case, user=request.user)
        return generate_cfa_pdf(case, request=request)


class BlotterProcessFlowView(ApiView):

    def get(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        return JsonResponse(get_process_flow(case))


class BlotterPartyCreateView(ApiView):
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        return JsonResponse({'parties': [party.to_dict() for party in case.parties.all()]})

    def post(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        form = BlotterPartyForm(data=self.get_json())
        validate_form(form)
        party = form.save(commit=False)
        party.case = case
        if party.resident_id:
            party.is_resident = True
        party.save()
        return JsonResponse(party.to_dict(), status=201)


class BlotterHearingListCreateView(ApiView):
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        return JsonResponse({'hearings': [hearing.to_dict() for hearing in case.hearings.all()]})

    def post(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        form = BlotterHearingForm(data=self.get_json())
        validate_form(form)
        hearing = form.save(commit=False)
        hearing.case = case
        hearing.save()
        logger.info("Hearing scheduled for %s on %s", case.case_number, hearing.date)
        return JsonResponse(hearing.to_dict(), status=201)


class BlotterHearingDetailView(ApiView):
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(BlotterHearing, pk=pk).to_dict())

    def patch(self, request, pk):
        hearing = get_object_or_404(BlotterHearing, pk=pk)
        form = BlotterHearingForm(
            data=merge_instance_data(hearing, self.get_json(), BlotterHearingForm.Meta.fields),
            instance=hearing
        )
        validate_form(form)
        hearing = form.save()
        return JsonResponse(hearing.to_dict())

    put = patch


class BlotterAttachmentView(ApiView):
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        return JsonResponse({
            'attachments': [attachment.to_dict() for attachment in case.attachments.all()]
        })

    def post(self, request, pk):
        case = get_object_or_404(BlotterCase, pk=pk)
        form = BlotterAttachmentForm(data=self.get_json())
        validate_form(form)
        attachment = form.save(commit=False)
        attachment.case = case
        attachment.save()
        return JsonResponse(attachment.to_dict(), status=201)


class BlotterReportView(ApiView):
    """Official blotter report PDF."""

    def get(self, request, pk):
        case = get_object_or_404(case_queryset(), pk=pk)
        return generate_case_report_pdf(case, request=request)
