"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for blotter models.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.blotter.models import (
    BlotterAttachment, BlotterCase, BlotterHearing, BlotterParty, BlotterStatusUpdate,
)


class BlotterPartyInline(admin.TabularInline):
    model = BlotterParty
    extra = 0
    fields = ['party_type', 'first_name', 'middle_name', 'last_name', 'address', 'contact_number', 'resident']
    raw_id_fields = ['resident']


class BlotterHearingInline(admin.TabularInline):
    model = BlotterHearing
    extra = 0
    fields = ['date', 'time', 'location', 'status', 'notes']


class BlotterStatusUpdateInline(admin.TabularInline):
    model = BlotterStatusUpdate
    extra = 0
    fields = ['status', 'notes', 'updated_by', 'created_at']
    readonly_fields = ['status', 'notes', 'updated_by', 'created_at']
    can_delete = False


@admin.register(BlotterCase)
class BlotterCaseAdmin(admin.ModelAdmin):
    """Admin configuration for BlotterCase model."""

    list_display = ['case_number', 'incident_type', 'incident_date', 'status', 'priority', 'filing_fee_paid']
    list_filter = ['status', 'priority', 'filing_fee_paid']
    search_fields = ['case_number', 'incident_type', 'incident_location']
    readonly_fields = ['case_number', 'created_by', 'updated_by', 'created_at', 'updated_at']
    date_hierarchy = 'report_date'
    inlines = [BlotterPartyInline, BlotterHearingInline, BlotterStatusUpdateInline]

    fieldsets = (
        ('Case', {
            'fields': ('case_number', 'report_date', 'status', 'priority', 'entertained_by')
        }),
        ('Incident', {
            'fields': (
                'incident_date', 'incident_time', 'incident_location',
                'incident_type', 'incident_description',
            )
        }),
        ('Filing Fee', {
            'fields': ('filing_fee', 'filing_fee_paid')
        }),
        ('Process Dates', {
            'fields': (
                'docket_date', 'summon_date',
                ('mediation_start_date', 'mediation_end_date'),
                ('conciliation_start_date', 'conciliation_end_date'),
                'extension_date', 'certification_date',
            ),
            'classes': ('collapse',)
        }),
        ('Outcome', {
            'fields': ('resolution_method', 'escalated_to')
        }),
        ('Audit', {
            'fields': ('created_by', 'updated_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(BlotterAttachment)
class BlotterAttachmentAdmin(admin.ModelAdmin):
    list_display = ['file_name', 'case', 'file_type', 'file_size', 'created_at']
    search_fields = ['file_name', 'case__case_number']
