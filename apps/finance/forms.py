"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for fiscal years, budgets, suppliers, transactions and
             financial permissions.
-------------------------------------------------------------------------
"""
from typing import Any, Dict

from django import forms
from django.utils.translation import gettext_lazy as _

from apps.finance.models import (
    Budget, BudgetCategory, FinancialPermission, FiscalYear, Supplier, Transaction,
    TransactionStatus,
)


class FiscalYearForm(forms.ModelForm):
    """Form for creating/editing fiscal years."""

    class Meta:
        model = FiscalYear
        fields = ['year', 'start_date', 'end_date', 'is_active']


class BudgetCategoryForm(forms.ModelForm):

    class Meta:
        model = BudgetCategory
        fields = ['code', 'name', 'description', 'parent']

    def clean_code(self):
        return (self.cleaned_data.get('code') or '').strip().upper()


class BudgetForm(forms.ModelForm):

    class Meta:
        model = Budget
        fields = ['fiscal_year', 'category', 'amount', 'description']


class SupplierForm(forms.ModelForm):

    class Meta:
        model = Supplier
        fields = ['name', 'contact_person', 'phone', 'email', 'address', 'tax_id', 'is_active']

    def clean_name(self):
        return (self.cleaned_data.get('name') or '').strip()


class TransactionForm(forms.ModelForm):
    """
    Form for recording a transaction.

    A linked budget must belong to the transaction's fiscal year.
    """

    class Meta:
        model = Transaction
        fields = [
            'type', 'reference_number', 'date', 'amount', 'description', 'fiscal_year',
            'budget', 'supplier', 'resident', 'household', 'status',
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False

    def clean_status(self):
        return self.cleaned_data.get('status') or TransactionStatus.DRAFT

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        budget = cleaned_data.get('budget')
        fiscal_year = cleaned_data.get('fiscal_year')
        if budget and fiscal_year and budget.fiscal_year_id != fiscal_year.pk:
            self.add_error('budget', _('Budget does not belong to the selected fiscal year.'))
        return cleaned_data


class FinancialPermissionForm(forms.ModelForm):

    class Meta:
        model = FinancialPermission
        fields = [
            'can_create_budget', 'can_approve_budget', 'can_create_transaction',
            'can_approve_transaction', 'can_view_reports', 'transaction_amount_limit',
        ]
