"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for finance models.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.finance.models import (
    Budget, BudgetCategory, FinancialPermission, FiscalYear, Supplier, Transaction,
)


@admin.register(FiscalYear)
class FiscalYearAdmin(admin.ModelAdmin):
    """Admin configuration for FiscalYear model."""

    list_display = ['year', 'start_date', 'end_date', 'is_active']
    list_filter = ['is_active']
    search_fields = ['year']
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']


@admin.register(BudgetCategory)
class BudgetCategoryAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'parent']
    search_fields = ['code', 'name']
    raw_id_fields = ['parent']


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    list_display = ['category', 'fiscal_year', 'amount']
    list_filter = ['fiscal_year']
    search_fields = ['category__code', 'category__name']
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'phone', 'tax_id', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'contact_person', 'tax_id']


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin configuration for Transaction model."""

    list_display = ['reference_number', 'type', 'date', 'amount', 'status', 'fiscal_year']
    list_filter = ['type', 'status', 'fiscal_year']
    search_fields = ['reference_number', 'description']
    readonly_fields = ['created_by', 'updated_by', 'approved_by', 'created_at', 'updated_at']
    raw_id_fields = ['budget', 'supplier', 'resident', 'household']
    date_hierarchy = 'date'


@admin.register(FinancialPermission)
class FinancialPermissionAdmin(admin.ModelAdmin):
    list_display = [
        'user', 'can_create_budget', 'can_approve_budget', 'can_create_transaction',
        'can_approve_transaction', 'can_view_reports', 'transaction_amount_limit',
    ]
    search_fields = ['user__email', 'user__first_name', 'user__last_name']
    raw_id_fields = ['user']
