"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for residents and households, including
             CSV and Excel masterlist exports.
-------------------------------------------------------------------------
"""
import logging
import math

from django.conf import settings
from django.db import transaction
from django.db.models import ProtectedError, Q
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from apps.core.api import ApiView, validate_form
from apps.core.exceptions import InvalidStateException, RecordValidationException
from apps.core.utils import csv_response, iso, merge_instance_data, paginate, parse_bool, today
from apps.residents.forms import HouseholdCreateForm, HouseholdForm, ResidentForm
from apps.residents.models import Household, Resident
from apps.residents.services import (
    add_resident_to_household, append_history, create_household, filter_residents,
    recompute_household_statistics, refresh_households, remove_resident_from_household,
    global_search, residency_duration, set_head_of_household, mark_as_head,
)
from apps.users.permissions import RECORD_MANAGER_ROLES

logger = logging.getLogger(__name__)

EXPORT_HEADERS = [
    'ID', 'First Name', 'Middle Name', 'Last Name', 'Extension', 'Birth Date',
    'Gender', 'Civil Status', 'Contact No', 'Email', 'Occupation', 'Voter',
    'House No', 'Street', 'Barangay', 'City', 'Province',
]


def export_row(resident: Resident) -> list:
    household = resident.household
    return [
        resident.pk,
        resident.first_name,
        resident.middle_name,
        resident.last_name,
        resident.extension_name,
        resident.birth_date.isoformat(),
        resident.gender,
        resident.civil_status,
        resident.contact_no,
        resident.email,
        resident.occupation,
        'Yes' if resident.voter_in_barangay else 'No',
        household.house_no if household else '',
        household.street if household else '',
        household.barangay if household else '',
        household.city if household else '',
        household.province if household else '',
    ]


# =====================================================================
# RESIDENT VIEWS
# =====================================================================

class ResidentListCreateView(ApiView):
    """
    GET: paginated resident list with search/gender/civil status/voter/
    age group filters. POST: register a resident.
    """
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request):
        queryset = filter_residents(Resident.objects.select_related('household'), request.GET)
        residents, meta = paginate(queryset, request.GET.get('page'), request.GET.get('limit'))
        payload = {'residents': [resident.to_dict() for resident in residents]}
        if parse_bool(request.GET.get('with_count')):
            payload['meta'] = meta
        return JsonResponse(payload)

    @transaction.atomic
    def post(self, request):
        data = self.get_json()
        form = ResidentForm(data=data)
        validate_form(form)
        resident = form.save(commit=False)
        if parse_bool(data.get('is_head_of_household')) and resident.household_id:
            mark_as_head(resident.household, resident)
        resident.save_with_user(request.user)
        refresh_households([resident.household])
        logger.info("Resident %s registered by %s", resident.pk, request.user.email)
        return JsonResponse(resident.to_dict(), status=201)


class ResidentDetailView(ApiView):
    """GET/PATCH/PUT/DELETE a single resident."""
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        resident = get_object_or_404(Resident.objects.select_related('household'), pk=pk)
        data = resident.to_dict()
        data['household'] = resident.household.to_dict() if resident.household else None
        return JsonResponse(data)

    @transaction.atomic
    def patch(self, request, pk):
        resident = get_object_or_404(Resident, pk=pk)
        previous_household = resident.household
        data = self.get_json()
        form = ResidentForm(
            data=merge_instance_data(resident, data, ResidentForm.Meta.fields),
            instance=resident
        )
        validate_form(form)
        resident = form.save(commit=False)
        if resident.household_id != getattr(previous_household, 'pk', None):
            resident.is_head_of_household = False
        if 'is_head_of_household' in data and resident.household_id:
            if parse_bool(data.get('is_head_of_household')):
                mark_as_head(resident.household, resident)
            else:
                resident.is_head_of_household = False
        resident.save_with_user(request.user)
        refresh_households([previous_household, resident.household])
        return JsonResponse(resident.to_dict())

    put = patch

    @transaction.atomic
    def delete(self, request, pk):
        resident = get_object_or_404(Resident, pk=pk)
        household = resident.household
        try:
            resident.delete()
        except ProtectedError:
            raise InvalidStateException(
                "Resident has certificates, cases or relief records and cannot be deleted."
            )
        if household is not None:
            recompute_household_statistics(household)
        logger.info("Resident %s deleted by %s", pk, request.user.email)
        return JsonResponse({'message': 'Resident deleted successfully'})


class ResidentSearchView(ApiView):
    """Quick lookup by name or contact number (top 10)."""

    def get(self, request):
        query = (request.GET.get('query') or '').strip()
        if not query:
            raise RecordValidationException("Search query is required.")
        residents = Resident.objects.filter(
            Q(first_name__icontains=query) |
            Q(last_name__icontains=query) |
            Q(middle_name__icontains=query) |
            Q(contact_no__icontains=query)
        ).order_by('last_name', 'first_name')[:10]
        return JsonResponse({'residents': [resident.to_summary() for resident in residents]})


class GlobalSearchView(ApiView):
    """
    Combined resident and household search with barangay, gender, civil
    status, age range and household size filters. Both lists share the
    same page number.
    """

    def get(self, request):
        residents, households = global_search(request.GET)
        try:
            page = max(1, int(request.GET.get('page') or 1))
        except ValueError:
            page = 1
        size = settings.BMS_DEFAULT_PAGE_SIZE
        offset = (page - 1) * size
        total_residents = residents.count()
        total_households = households.count()
        resident_page = residents[offset:offset + size]
        household_page = households[offset:offset + size]

        household_items = []
        for household in household_page:
            data = household.to_dict(include_residents=True)
            data['resident_count'] = household.resident_count
            household_items.append(data)

        resident_items = []
        for resident in resident_page:
            data = resident.to_dict()
            data['household'] = resident.household.to_dict() if resident.household else None
            resident_items.append(data)

        return JsonResponse({
            'residents': resident_items,
            'households': household_items,
            'pagination': {
                'total_residents': total_residents,
                'total_households': total_households,
                'page_size': size,
                'current_page': page,
                'total_pages': math.ceil(max(total_residents, total_households) / size),
            },
        })


class ResidencyDurationView(ApiView):
    """Months since the resident was registered."""

    def get(self, request, pk):
        resident = get_object_or_404(Resident, pk=pk)
        duration = residency_duration(resident)
        return JsonResponse({
            'resident_id': resident.pk,
            'registered_at': iso(resident.created_at),
            **duration,
        })


class ResidentExportView(ApiView):
    """CSV masterlist of residents (accepts the same filters as the list)."""

    def get(self, request):
        queryset = filter_residents(Resident.objects.select_related('household'), request.GET)
        rows = [EXPORT_HEADERS] + [export_row(resident) for resident in queryset]
        return csv_response(f"residents-data-{today().isoformat()}.csv", rows)


class ResidentExcelExportView(ApiView):
    """Excel masterlist of residents."""

    def get(self, request):
        queryset = filter_residents(Resident.objects.select_related('household'), request.GET)

        wb = Workbook()
        ws = wb.active
        ws.title = "Residents"

        header_fill = PatternFill(start_color='1F4E79', end_color='1F4E79', fill_type='solid')
        header_font = Font(bold=True, color='FFFFFF')

        for col_num, header in enumerate(EXPORT_HEADERS, 1):
            cell = ws.cell(row=1, column=col_num)
            cell.value = header
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal='center', vertical='center')

        for row_num, resident in enumerate(queryset, 2):
            for col_num, value in enumerate(export_row(resident), 1):
                ws.cell(row=row_num, column=col_num).value = value

        for col_num in range(1, len(EXPORT_HEADERS) + 1):
            ws.column_dimensions[get_column_letter(col_num)].width = 16

        response = HttpResponse(
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        response['Content-Disposition'] = f'attachment; filename="residents-data-{today().isoformat()}.xlsx"'
        wb.save(response)
        return response


# =====================================================================
# HOUSEHOLD VIEWS
# =====================================================================

class HouseholdListCreateView(ApiView):
    """GET: search households. POST: register a household."""
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request):
        queryset = Household.objects.select_related('statistics')
        search = (request.GET.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(house_no__icontains=search) |
                Q(street__icontains=search) |
                Q(barangay__icontains=search)
            )
        if request.GET.get('status'):
            queryset = queryset.filter(status=request.GET['status'])
        households, meta = paginate(queryset, request.GET.get('page'), request.GET.get('limit'))
        items = []
        for household in households:
            data = household.to_dict()
            stats = getattr(household, 'statistics', None)
            data['total_residents'] = stats.total_residents if stats else household.residents.count()
            items.append(data)
        return JsonResponse({'households': items, 'meta': meta})

    def post(self, request):
        form = HouseholdCreateForm(data=self.get_json())
        cleaned = validate_form(form)
        household = create_household(cleaned, user=request.user)
        return JsonResponse(
            {
                'message': 'Household created successfully',
                'household': household.to_dict(include_residents=True),
            },
            status=201
        )


class HouseholdDetailView(ApiView):
    """GET/PATCH/PUT/DELETE a household."""
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        household = get_object_or_404(Household, pk=pk)
        data = household.to_dict(include_residents=True)
        data['statistics'] = recompute_household_statistics(household).to_dict()
        return JsonResponse(data)

    @transaction.atomic
    def patch(self, request, pk):
        household = get_object_or_404(Household, pk=pk)
        form = HouseholdForm(
            data=merge_instance_data(household, self.get_json(), HouseholdForm.Meta.fields),
            instance=household
        )
        validate_form(form)
        household = form.save(commit=False)
        if form.changed_data:
            append_history(household, 'UPDATED', f"Updated: {', '.join(form.changed_data)}", request.user)
        household.save_with_user(request.user)
        return JsonResponse(household.to_dict(include_residents=True))

    put = patch

    @transaction.atomic
    def delete(self, request, pk):
        household = get_object_or_404(Household, pk=pk)
        household.residents.update(household=None, is_head_of_household=False)
        household.delete()
        logger.info("Household %s deleted by %s", pk, request.user.email)
        return JsonResponse({'message': 'Household deleted successfully'})


class HouseholdResidentsView(ApiView):
    """GET: members (head first). POST: add a resident to the household."""
    write_roles = RECORD_MANAGER_ROLES

    def get(self, request, pk):
        household = get_object_or_404(Household, pk=pk)
        residents = household.residents.order_by('-is_head_of_household', 'last_name', 'first_name')
        return JsonResponse({'residents': [resident.to_summary() for resident in residents]})

    def post(self, request, pk):
        household = get_object_or_404(Household, pk=pk)
        data = self.get_json()
        if not data.get('resident_id'):
            raise RecordValidationException("Resident ID is required.")
        resident = get_object_or_404(Resident, pk=data['resident_id'])
        resident = add_resident_to_household(
            household, resident,
            is_head=bool(parse_bool(data.get('is_head_of_household'))),
            user=request.user
        )
        return JsonResponse(
            {
                'message': 'Resident successfully added to household',
                'resident': resident.to_summary(),
            },
            status=201
        )


class HouseholdMemberView(ApiView):
    """PATCH: set/unset head of household. DELETE: remove the member."""
    write_roles = RECORD_MANAGER_ROLES

    def patch(self, request, pk, resident_pk):
        household = get_object_or_404(Household, pk=pk)
        resident = get_object_or_404(Resident, pk=resident_pk)
        data = self.get_json()
        is_head = parse_bool(data.get('is_head_of_household'))
        resident = set_head_of_household(
            household, resident, is_head=True if is_head is None else is_head, user=request.user
        )
        return JsonResponse({'resident': resident.to_summary()})

    def delete(self, request, pk, resident_pk):
        household = get_object_or_404(Household, pk=pk)
        resident = get_object_or_404(Resident, pk=resident_pk)
        remove_resident_from_household(household, resident, user=request.user)
        return JsonResponse({'message': 'Resident removed from household'})


class HouseholdStatisticsView(ApiView):
    """Recompute and return household statistics."""

    def get(self, request, pk):
        household = get_object_or_404(Household, pk=pk)
        return JsonResponse(recompute_household_statistics(household).to_dict())


class HouseholdHistoryView(ApiView):

    def get(self, request, pk):
        household = get_object_or_404(Household, pk=pk)
        return JsonResponse({'history': household.history or []})
