"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL routing for finance app.
-------------------------------------------------------------------------
"""
from django.urls import path
from apps.finance.views import (
    FiscalYearListCreateView,
    FiscalYearDetailView,
    ActiveFiscalYearView,
    BudgetCategoryListCreateView,
    BudgetCategoryDetailView,
    BudgetListCreateView,
    BudgetDetailView,
    BudgetSummaryView,
    SupplierListCreateView,
    SupplierDetailView,
    TransactionListCreateView,
    TransactionDetailView,
    TransactionStatusView,
    FinancialPermissionView,
)

app_name = 'finance'

urlpatterns = [
    # Fiscal years
    path('fiscal-years/', FiscalYearListCreateView.as_view(), name='fiscal_year_list'),
    path('fiscal-years/active/', ActiveFiscalYearView.as_view(), name='fiscal_year_active'),
    path('fiscal-years/<int:pk>/', FiscalYearDetailView.as_view(), name='fiscal_year_detail'),

    # Budget categories and budgets
    path('budget-categories/', BudgetCategoryListCreateView.as_view(), name='category_list'),
    path('budget-categories/<int:pk>/', BudgetCategoryDetailView.as_view(), name='category_detail'),
    path('budgets/', BudgetListCreateView.as_view(), name='budget_list'),
    path('budgets/summary/', BudgetSummaryView.as_view(), name='budget_summary'),
    path('budgets/<int:pk>/', BudgetDetailView.as_view(), name='budget_detail'),

    # Suppliers
    path('suppliers/', SupplierListCreateView.as_view(), name='supplier_list'),
    path('suppliers/<int:pk>/', SupplierDetailView.as_view(), name='supplier_detail'),

    # Transactions
    path('transactions/', TransactionListCreateView.as_view(), name='transaction_list'),
    path('transactions/<int:pk>/', TransactionDetailView.as_view(), name='transaction_detail'),
    path('transactions/<int:pk>/status/', TransactionStatusView.as_view(), name='transaction_status'),

    # Financial permissions
    path('permissions/<int:user_id>/', FinancialPermissionView.as_view(), name='permissions'),
]
