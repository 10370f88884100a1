"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for relief records.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.relief.models import ReliefRecord


@admin.register(ReliefRecord)
class ReliefRecordAdmin(admin.ModelAdmin):
    list_display = ['resident', 'type', 'amount', 'status', 'created_at']
    list_filter = ['status', 'type']
    search_fields = ['resident__first_name', 'resident__last_name', 'type']
    raw_id_fields = ['resident']
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']
