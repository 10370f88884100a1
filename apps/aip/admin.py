"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for AIP models.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.aip.models import (
    AIPAttachment, AIPExpense, AIPMilestone, AIPProject, AnnualInvestmentProgram,
)


class AIPProjectInline(admin.TabularInline):
    model = AIPProject
    extra = 0
    fields = ['project_code', 'title', 'sector', 'total_cost', 'status', 'progress']
    show_change_link = True


class AIPMilestoneInline(admin.TabularInline):
    model = AIPMilestone
    extra = 0
    fields = ['title', 'due_date', 'status', 'completed_at']
    readonly_fields = ['completed_at']


class AIPExpenseInline(admin.TabularInline):
    model = AIPExpense
    extra = 0
    fields = ['date', 'amount', 'description', 'reference', 'transaction']
    raw_id_fields = ['transaction']


@admin.register(AnnualInvestmentProgram)
class AnnualInvestmentProgramAdmin(admin.ModelAdmin):
    """Admin configuration for AnnualInvestmentProgram model."""

    list_display = ['title', 'fiscal_year', 'total_amount', 'status', 'approved_by', 'approved_date']
    list_filter = ['status', 'fiscal_year']
    search_fields = ['title', 'description']
    readonly_fields = ['approved_by', 'approved_date', 'created_by', 'updated_by', 'created_at', 'updated_at']
    inlines = [AIPProjectInline]


@admin.register(AIPProject)
class AIPProjectAdmin(admin.ModelAdmin):
    list_display = ['project_code', 'title', 'aip', 'sector', 'total_cost', 'status', 'progress']
    list_filter = ['status', 'sector']
    search_fields = ['project_code', 'title', 'location']
    inlines = [AIPMilestoneInline, AIPExpenseInline]


@admin.register(AIPAttachment)
class AIPAttachmentAdmin(admin.ModelAdmin):
    list_display = ['file_name', 'aip', 'project', 'file_type', 'file_size', 'uploaded_by', 'created_at']
    search_fields = ['file_name']
