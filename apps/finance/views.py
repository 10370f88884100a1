"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for fiscal years, budget categories,
             budgets, suppliers, transactions and financial permissions.
-------------------------------------------------------------------------
"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import ProtectedError, Q
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404

from apps.core.api import ApiView, validate_form
from apps.core.exceptions import InvalidStateException, RecordValidationException
from apps.core.utils import merge_instance_data, paginate
from apps.finance.forms import (
    BudgetCategoryForm, BudgetForm, FinancialPermissionForm, FiscalYearForm, SupplierForm,
    TransactionForm,
)
from apps.finance.models import (
    Budget, BudgetCategory, FinancialPermission, FiscalYear, Supplier, Transaction,
)
from apps.finance.services import (
    budget_summary, change_transaction_status, ensure_unique, permissions_payload,
    record_transaction, require_financial_permission,
)
from apps.users.permissions import FINANCE_ROLES, USER_ADMIN_ROLES

logger = logging.getLogger(__name__)

User = get_user_model()


def delete_protected(instance, message: str) -> None:
    """Delete instance or raise InvalidStateException while referenced."""
    try:
        instance.delete()
    except ProtectedError:
        raise InvalidStateException(message)


class FinanceApiView(ApiView):
    """Finance endpoints are limited to the treasurer, captain and super admin."""
    required_roles = FINANCE_ROLES


# =====================================================================
# FISCAL YEAR VIEWS
# =====================================================================

class FiscalYearListCreateView(FinanceApiView):

    def get(self, request):
        return JsonResponse({
            'fiscal_years': [fiscal_year.to_dict() for fiscal_year in FiscalYear.objects.all()]
        })

    def post(self, request):
        form = FiscalYearForm(data=self.get_json())
        validate_form(form)
        fiscal_year = form.save(commit=False)
        fiscal_year.save_with_user(request.user)
        logger.info("Fiscal year %s created by %s", fiscal_year.year, request.user.email)
        return JsonResponse(fiscal_year.to_dict(), status=201)


class FiscalYearDetailView(FinanceApiView):

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(FiscalYear, pk=pk).to_dict())

    def put(self, request, pk):
        fiscal_year = get_object_or_404(FiscalYear, pk=pk)
        form = FiscalYearForm(
            data=merge_instance_data(fiscal_year, self.get_json(), FiscalYearForm.Meta.fields),
            instance=fiscal_year
        )
        validate_form(form)
        fiscal_year = form.save(commit=False)
        fiscal_year.save_with_user(request.user)
        return JsonResponse(fiscal_year.to_dict())

    patch = put

    def delete(self, request, pk):
        fiscal_year = get_object_or_404(FiscalYear, pk=pk)
        delete_protected(
            fiscal_year, "Fiscal year has budgets, transactions or AIPs and cannot be deleted."
        )
        return JsonResponse({'message': 'Fiscal year deleted successfully'})


class ActiveFiscalYearView(FinanceApiView):

    def get(self, request):
        fiscal_year = FiscalYear.get_active()
        if fiscal_year is None:
            raise Http404("No active fiscal year found")
        return JsonResponse(fiscal_year.to_dict())


# =====================================================================
# BUDGET CATEGORY VIEWS
# =====================================================================

class BudgetCategoryListCreateView(FinanceApiView):

    def get(self, request):
        queryset = BudgetCategory.objects.all()
        if request.GET.get('parent'):
            queryset = queryset.filter(parent_id=request.GET['parent'])
        return JsonResponse({'categories': [category.to_dict() for category in queryset]})

    def post(self, request):
        form = BudgetCategoryForm(data=self.get_json())
        validate_form(form)
        category = form.save()
        return JsonResponse(category.to_dict(), status=201)


class BudgetCategoryDetailView(FinanceApiView):

    def get(self, request, pk):
        category = get_object_or_404(BudgetCategory, pk=pk)
        data = category.to_dict()
        data['children'] = [child.to_dict() for child in category.children.all()]
        return JsonResponse(data)

    def put(self, request, pk):
        category = get_object_or_404(BudgetCategory, pk=pk)
        form = BudgetCategoryForm(
            data=merge_instance_data(category, self.get_json(), BudgetCategoryForm.Meta.fields),
            instance=category
        )
        validate_form(form)
        category = form.save()
        return JsonResponse(category.to_dict())

    patch = put

    def delete(self, request, pk):
        category = get_object_or_404(BudgetCategory, pk=pk)
        if category.children.exists() or category.budgets.exists():
            raise InvalidStateException(
                "Category has sub-categories or budgets and cannot be deleted."
            )
        delete_protected(category, "Category is in use and cannot be deleted.")
        return JsonResponse({'message': 'Budget category deleted successfully'})


# =====================================================================
# BUDGET VIEWS
# =====================================================================

class BudgetListCreateView(FinanceApiView):

    def get(self, request):
        queryset = Budget.objects.select_related('fiscal_year', 'category')
        if request.GET.get('fiscal_year'):
            queryset = queryset.filter(fiscal_year_id=request.GET['fiscal_year'])
        if request.GET.get('category'):
            queryset = queryset.filter(category_id=request.GET['category'])
        return JsonResponse({'budgets': [budget.to_dict() for budget in queryset]})

    def post(self, request):
        require_financial_permission(request.user, 'can_create_budget', "create budgets")
        data = self.get_json()
        ensure_unique(
            Budget.objects.filter(
                fiscal_year_id=data.get('fiscal_year'), category_id=data.get('category')
            ),
            "A budget for this category already exists in the fiscal year.",
            fiscal_year=data.get('fiscal_year'),
            category=data.get('category')
        )
        form = BudgetForm(data=data)
        validate_form(form)
        budget = form.save(commit=False)
        budget.save_with_user(request.user)
        return JsonResponse(budget.to_dict(), status=201)


class BudgetDetailView(FinanceApiView):

    def get(self, request, pk):
        budget = get_object_or_404(Budget.objects.select_related('fiscal_year', 'category'), pk=pk)
        return JsonResponse(budget.to_dict())

    def put(self, request, pk):
        require_financial_permission(request.user, 'can_create_budget', "edit budgets")
        budget = get_object_or_404(Budget, pk=pk)
        data = merge_instance_data(budget, self.get_json(), BudgetForm.Meta.fields)
        ensure_unique(
            Budget.objects.filter(
                fiscal_year_id=data.get('fiscal_year'), category_id=data.get('category')
            ).exclude(pk=budget.pk),
            "A budget for this category already exists in the fiscal year."
        )
        form = BudgetForm(data=data, instance=budget)
        validate_form(form)
        budget = form.save(commit=False)
        budget.save_with_user(request.user)
        return JsonResponse(budget.to_dict())

    patch = put

    def delete(self, request, pk):
        require_financial_permission(request.user, 'can_create_budget', "delete budgets")
        budget = get_object_or_404(Budget, pk=pk)
        delete_protected(budget, "Budget has transactions and cannot be deleted.")
        return JsonResponse({'message': 'Budget deleted successfully'})


class BudgetSummaryView(FinanceApiView):
    """GET ?fiscal_year=<id>: budget, allocation and spending totals."""

    def get(self, request):
        require_financial_permission(request.user, 'can_view_reports', "view budget reports")
        if not request.GET.get('fiscal_year'):
            raise RecordValidationException("Fiscal year ID is required")
        fiscal_year = get_object_or_404(FiscalYear, pk=request.GET['fiscal_year'])
        return JsonResponse(budget_summary(fiscal_year))


# =====================================================================
# SUPPLIER VIEWS
# =====================================================================

class SupplierListCreateView(FinanceApiView):

    def get(self, request):
        queryset = Supplier.objects.all()
        search = (request.GET.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(contact_person__icontains=search)
            )
        suppliers, meta = paginate(queryset, request.GET.get('page'), request.GET.get('limit'))
        return JsonResponse({
            'suppliers': [supplier.to_dict() for supplier in suppliers],
            'meta': meta,
        })

    def post(self, request):
        data = self.get_json()
        data.setdefault('is_active', True)
        ensure_unique(
            Supplier.objects.filter(name__iexact=(data.get('name') or '').strip()),
            "A supplier with this name already exists."
        )
        form = SupplierForm(data=data)
        validate_form(form)
        supplier = form.save()
        return JsonResponse(supplier.to_dict(), status=201)


class SupplierDetailView(FinanceApiView):

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(Supplier, pk=pk).to_dict())

    def put(self, request, pk):
        supplier = get_object_or_404(Supplier, pk=pk)
        data = merge_instance_data(supplier, self.get_json(), SupplierForm.Meta.fields)
        ensure_unique(
            Supplier.objects.filter(name__iexact=(data.get('name') or '').strip()).exclude(pk=supplier.pk),
            "A supplier with this name already exists."
        )
        form = SupplierForm(data=data, instance=supplier)
        validate_form(form)
        supplier = form.save()
        return JsonResponse(supplier.to_dict())

    patch = put

    def delete(self, request, pk):
        supplier = get_object_or_404(Supplier, pk=pk)
        supplier.delete()
        return JsonResponse({'message': 'Supplier deleted successfully'})


# =====================================================================
# TRANSACTION VIEWS
# =====================================================================

class TransactionListCreateView(FinanceApiView):
    """
    GET: transactions filtered by type, status, fiscal year and date
    range. POST: record a transaction (financial permission and amount
    limit apply).
    """

    def get(self, request):
        queryset = Transaction.objects.select_related('supplier', 'created_by', 'approved_by')
        params = request.GET
        if params.get('type'):
            queryset = queryset.filter(type=params['type'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('fiscal_year'):
            queryset = queryset.filter(fiscal_year_id=params['fiscal_year'])
        if params.get('date_from'):
            queryset = queryset.filter(date__gte=params['date_from'])
        if params.get('date_to'):
            queryset = queryset.filter(date__lte=params['date_to'])

        transactions, meta = paginate(queryset, params.get('page'), params.get('limit'))
        return JsonResponse({
            'transactions': [txn.to_dict() for txn in transactions],
            'meta': meta,
        })

    def post(self, request):
        data = self.get_json()
        ensure_unique(
            Transaction.objects.filter(reference_number=data.get('reference_number')),
            "Transaction with this reference number already exists",
            reference_number=data.get('reference_number')
        )
        form = TransactionForm(data=data)
        validate_form(form)
        txn = record_transaction(form.save(commit=False), request.user)
        return JsonResponse(txn.to_dict(), status=201)


class TransactionDetailView(FinanceApiView):

    def get(self, request, pk):
        txn = get_object_or_404(
            Transaction.objects.select_related('supplier', 'created_by', 'approved_by'), pk=pk
        )
        return JsonResponse(txn.to_dict())


class TransactionStatusView(FinanceApiView):
    """POST {status}: approve, reject, void or resubmit a transaction."""

    def post(self, request, pk):
        txn = get_object_or_404(Transaction, pk=pk)
        status = self.get_json().get('status')
        if not status:
            raise RecordValidationException("Status is required.")
        txn = change_transaction_status(txn, status, request.user)
        return JsonResponse(txn.to_dict())


# =====================================================================
# FINANCIAL PERMISSION VIEWS
# =====================================================================

class FinancialPermissionView(ApiView):
    """GET/PUT the financial permissions of a user (administrators only)."""
    required_roles = USER_ADMIN_ROLES

    def get(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)
        return JsonResponse(permissions_payload(user))

    def put(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)
        record = FinancialPermission.objects.filter(user=user).first() or FinancialPermission(user=user)
        form = FinancialPermissionForm(
            data=merge_instance_data(record, self.get_json(), FinancialPermissionForm.Meta.fields),
            instance=record
        )
        validate_form(form)
        form.save()
        logger.info("Financial permissions of %s updated by %s", user.email, request.user.email)
        return JsonResponse(permissions_payload(user))

    patch = put
