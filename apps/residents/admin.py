"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin for the residents module.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.residents.models import Household, HouseholdStatistics, Resident


class ResidentInline(admin.TabularInline):
    """Inline admin for household members."""
    model = Resident
    extra = 0
    fields = ('first_name', 'last_name', 'birth_date', 'gender', 'is_head_of_household')
    show_change_link = True


class HouseholdStatisticsInline(admin.StackedInline):
    """Read-only household statistics."""
    model = HouseholdStatistics
    can_delete = False
    readonly_fields = (
        'total_residents', 'voter_count', 'senior_count',
        'minor_count', 'employed_count', 'last_updated',
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Household)
class HouseholdAdmin(admin.ModelAdmin):
    """Admin for Household model."""

    list_display = ('house_no', 'street', 'barangay', 'type', 'status', 'resident_count', 'created_at')
    list_filter = ('type', 'status', 'barangay')
    search_fields = ('house_no', 'street', 'barangay')
    readonly_fields = ('public_id', 'history', 'created_at', 'updated_at', 'created_by', 'updated_by')
    inlines = [HouseholdStatisticsInline, ResidentInline]

    fieldsets = (
        (_('Address'), {
            'fields': ('house_no', 'street', 'barangay', 'city', 'province', 'zip_code')
        }),
        (_('Location'), {
            'fields': ('latitude', 'longitude')
        }),
        (_('Classification'), {
            'fields': ('type', 'status', 'notes', 'merged_from')
        }),
        (_('Audit'), {
            'fields': ('public_id', 'history', 'created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )

    def resident_count(self, obj):
        """Return number of residents in the household."""
        return obj.residents.count()
    resident_count.short_description = _('Residents')


@admin.register(Resident)
class ResidentAdmin(admin.ModelAdmin):
    """Admin for Resident model."""

    list_display = ('last_name', 'first_name', 'gender', 'birth_date', 'civil_status', 'voter_in_barangay', 'household')
    list_filter = ('gender', 'civil_status', 'employment_status', 'voter_in_barangay')
    search_fields = ('first_name', 'last_name', 'middle_name', 'alias', 'contact_no', 'address')
    ordering = ('last_name', 'first_name')
    raw_id_fields = ('household',)
    readonly_fields = ('public_id', 'created_at', 'updated_at', 'created_by', 'updated_by')

    fieldsets = (
        (_('Name'), {
            'fields': ('first_name', 'middle_name', 'last_name', 'extension_name', 'alias')
        }),
        (_('Personal Information'), {
            'fields': ('birth_date', 'gender', 'civil_status', 'nationality', 'religion',
                       'ethnic_group', 'blood_type', 'educational_attainment')
        }),
        (_('Contact'), {
            'fields': ('contact_no', 'email', 'address')
        }),
        (_('Employment'), {
            'fields': ('employment_status', 'occupation', 'unemployment_reason')
        }),
        (_('Parents'), {
            'fields': ('father_name', 'father_middle_name', 'father_last_name',
                       'mother_first_name', 'mother_middle_name', 'mother_maiden_name'),
            'classes': ('collapse',),
        }),
        (_('Civic'), {
            'fields': ('voter_in_barangay', 'sectors', 'identity_type', 'identity_number', 'user_photo')
        }),
        (_('Household'), {
            'fields': ('household', 'is_head_of_household')
        }),
        (_('Audit'), {
            'fields': ('public_id', 'created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )
