"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Finance models: fiscal years, budget categories, budgets,
             suppliers, transactions and per-user financial permissions.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models, transaction
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, StatusMixin, TimeStampedMixin
from apps.core.utils import iso, money


class TransactionType(models.TextChoices):
    REVENUE = 'REVENUE', _('Revenue')
    EXPENSE = 'EXPENSE', _('Expense')
    TRANSFER = 'TRANSFER', _('Transfer')


class TransactionStatus(models.TextChoices):
    DRAFT = 'DRAFT', _('Draft')
    PENDING = 'PENDING', _('Pending')
    APPROVED = 'APPROVED', _('Approved')
    REJECTED = 'REJECTED', _('Rejected')
    VOIDED = 'VOIDED', _('Voided')


class FiscalYear(AuditLogMixin):
    """
    A budget year of the barangay.

    Only one fiscal year is active at a time; activating one
    deactivates the others.

    Attributes:
        year: Display name (e.g., "2026" or "2026-2027").
        start_date: First day of the fiscal year.
        end_date: Last day of the fiscal year.
    """

    year = models.CharField(
        max_length=10,
        unique=True,
        validators=[MinLengthValidator(5)],
        verbose_name=_('Fiscal Year'),
        help_text=_('Display name for the fiscal year (e.g., "2026-2027").')
    )
    start_date = models.DateField(verbose_name=_('Start Date'))
    end_date = models.DateField(verbose_name=_('End Date'))
    is_active = models.BooleanField(
        default=False,
        verbose_name=_('Active'),
        help_text=_('The fiscal year new records default to.')
    )

    class Meta:
        verbose_name = _('Fiscal Year')
        verbose_name_plural = _('Fiscal Years')
        ordering = ['-start_date']

    def __str__(self) -> str:
        return f"FY {self.year}"

    def clean(self) -> None:
        """Validate that start_date is before end_date."""
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError({
                'end_date': _('End date must be after start date.')
            })

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_active:
                FiscalYear.objects.filter(is_active=True).exclude(pk=self.pk).update(is_active=False)
            super().save(*args, **kwargs)

    @classmethod
    def get_active(cls):
        return cls.objects.filter(is_active=True).first()

    def get_total_budget(self) -> Decimal:
        return money(self.budgets.aggregate(total=Sum('amount'))['total'])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'year': self.year,
            'start_date': iso(self.start_date),
            'end_date': iso(self.end_date),
            'is_active': self.is_active,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class BudgetCategory(TimeStampedMixin):
    """A node in the budget classification tree (e.g., 5-02 MOOE)."""

    code = models.CharField(max_length=20, unique=True, verbose_name=_('Code'))
    name = models.CharField(max_length=150, verbose_name=_('Name'))
    description = models.TextField(blank=True, verbose_name=_('Description'))
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='children',
        verbose_name=_('Parent Category')
    )

    class Meta:
        verbose_name = _('Budget Category')
        verbose_name_plural = _('Budget Categories')
        ordering = ['code']

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    def clean(self) -> None:
        # Walk up the tree to refuse cycles
        ancestor = self.parent
        while ancestor is not None:
            if self.pk and ancestor.pk == self.pk:
                raise ValidationError({'parent': _('A category cannot be its own ancestor.')})
            ancestor = ancestor.parent

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'code': self.code,
            'name': self.name,
            'description': self.description,
            'parent_id': self.parent_id,
        }


class Budget(AuditLogMixin):
    """Appropriation of a budget category for a fiscal year."""

    fiscal_year = models.ForeignKey(
        FiscalYear,
        on_delete=models.PROTECT,
        related_name='budgets',
        verbose_name=_('Fiscal Year')
    )
    category = models.ForeignKey(
        BudgetCategory,
        on_delete=models.PROTECT,
        related_name='budgets',
        verbose_name=_('Category')
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    description = models.TextField(blank=True, verbose_name=_('Description'))

    class Meta:
        verbose_name = _('Budget')
        verbose_name_plural = _('Budgets')
        ordering = ['fiscal_year', 'category__code']
        constraints = [
            models.UniqueConstraint(
                fields=['fiscal_year', 'category'],
                name='unique_budget_per_category_year'
            )
        ]

    def __str__(self) -> str:
        return f"{self.category.code} - FY {self.fiscal_year.year}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'fiscal_year_id': self.fiscal_year_id,
            'fiscal_year': self.fiscal_year.year,
            'category_id': self.category_id,
            'category': self.category.to_dict(),
            'amount': str(self.amount),
            'description': self.description,
            'created_at': iso(self.created_at),
        }


class Supplier(TimeStampedMixin, StatusMixin):
    """A vendor the barangay pays for goods or services."""

    name = models.CharField(max_length=200, unique=True, verbose_name=_('Name'))
    contact_person = models.CharField(max_length=150, blank=True, verbose_name=_('Contact Person'))
    phone = models.CharField(max_length=50, blank=True, verbose_name=_('Phone'))
    email = models.EmailField(blank=True, verbose_name=_('Email'))
    address = models.CharField(max_length=255, blank=True, verbose_name=_('Address'))
    tax_id = models.CharField(max_length=30, blank=True, verbose_name=_('TIN'))

    class Meta:
        verbose_name = _('Supplier')
        verbose_name_plural = _('Suppliers')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'name': self.name,
            'contact_person': self.contact_person,
            'phone': self.phone,
            'email': self.email,
            'address': self.address,
            'tax_id': self.tax_id,
            'is_active': self.is_active,
        }


class Transaction(AuditLogMixin):
    """
    A revenue, expense or transfer entry.

    Attributes:
        reference_number: Official receipt / disbursement voucher number.
        approved_by: Set when the transaction is created as or moved to
            APPROVED.
    """

    type = models.CharField(max_length=10, choices=TransactionType.choices, verbose_name=_('Type'))
    reference_number = models.CharField(max_length=50, unique=True, verbose_name=_('Reference Number'))
    date = models.DateField(verbose_name=_('Date'))
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    description = models.TextField(verbose_name=_('Description'))
    fiscal_year = models.ForeignKey(
        FiscalYear,
        on_delete=models.PROTECT,
        related_name='transactions',
        verbose_name=_('Fiscal Year')
    )
    budget = models.ForeignKey(
        Budget,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='transactions',
        verbose_name=_('Budget')
    )
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions',
        verbose_name=_('Supplier')
    )
    resident = models.ForeignKey(
        'residents.Resident',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions',
        verbose_name=_('Resident')
    )
    household = models.ForeignKey(
        'residents.Household',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions',
        verbose_name=_('Household')
    )
    status = models.CharField(
        max_length=10,
        choices=TransactionStatus.choices,
        default=TransactionStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status')
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_transactions',
        verbose_name=_('Approved By')
    )

    class Meta:
        verbose_name = _('Transaction')
        verbose_name_plural = _('Transactions')
        ordering = ['-date', '-created_at']

    def __str__(self) -> str:
        return f"{self.reference_number} ({self.get_type_display()})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'type': self.type,
            'reference_number': self.reference_number,
            'date': iso(self.date),
            'amount': str(self.amount),
            'description': self.description,
            'fiscal_year_id': self.fiscal_year_id,
            'budget_id': self.budget_id,
            'supplier_id': self.supplier_id,
            'supplier': self.supplier.name if self.supplier_id else None,
            'resident_id': self.resident_id,
            'household_id': self.household_id,
            'status': self.status,
            'created_by': self.created_by.email if self.created_by_id else None,
            'approved_by': self.approved_by.email if self.approved_by_id else None,
            'created_at': iso(self.created_at),
        }


class FinancialPermission(TimeStampedMixin):
    """
    Finance rights granted to a user on top of their role.

    SUPER_ADMIN and CAPTAIN hold every permission without a limit and
    need no record. Users without a record hold none.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='financial_permission',
        verbose_name=_('User')
    )
    can_create_budget = models.BooleanField(default=False, verbose_name=_('Can Create Budget'))
    can_approve_budget = models.BooleanField(default=False, verbose_name=_('Can Approve Budget'))
    can_create_transaction = models.BooleanField(default=False, verbose_name=_('Can Create Transaction'))
    can_approve_transaction = models.BooleanField(default=False, verbose_name=_('Can Approve Transaction'))
    can_view_reports = models.BooleanField(default=False, verbose_name=_('Can View Reports'))
    transaction_amount_limit = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Transaction Amount Limit')
    )

    class Meta:
        verbose_name = _('Financial Permission')
        verbose_name_plural = _('Financial Permissions')

    def __str__(self) -> str:
        return f"Financial permissions of {self.user}"
