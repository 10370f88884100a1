"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Annual Investment Program models: the program, its projects,
             project milestones and expenses, and attachments.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, TimeStampedMixin
from apps.core.utils import iso, money


class AIPStatus(models.TextChoices):
    DRAFT = 'DRAFT', _('Draft')
    SUBMITTED = 'SUBMITTED', _('Submitted')
    APPROVED = 'APPROVED', _('Approved')
    REJECTED = 'REJECTED', _('Rejected')
    IMPLEMENTED = 'IMPLEMENTED', _('Implemented')
    COMPLETED = 'COMPLETED', _('Completed')


class ProjectStatus(models.TextChoices):
    PLANNED = 'PLANNED', _('Planned')
    ONGOING = 'ONGOING', _('Ongoing')
    COMPLETED = 'COMPLETED', _('Completed')
    DELAYED = 'DELAYED', _('Delayed')
    CANCELLED = 'CANCELLED', _('Cancelled')


class MilestoneStatus(models.TextChoices):
    PENDING = 'PENDING', _('Pending')
    COMPLETED = 'COMPLETED', _('Completed')
    DELAYED = 'DELAYED', _('Delayed')
    CANCELLED = 'CANCELLED', _('Cancelled')


def _user_label(user):
    if user is None:
        return None
    return {'id': user.pk, 'name': user.get_full_name(), 'email': user.email}


class AnnualInvestmentProgram(AuditLogMixin):
    """
    The barangay's Annual Investment Program for one fiscal year.

    Non-status fields are editable only while DRAFT. Status moves
    through the transitions in apps.aip.workflows; approval records
    approved_by and approved_date.
    """

    fiscal_year = models.ForeignKey(
        'finance.FiscalYear',
        on_delete=models.PROTECT,
        related_name='aips',
        verbose_name=_('Fiscal Year')
    )
    title = models.CharField(max_length=255, verbose_name=_('Title'))
    description = models.TextField(blank=True, verbose_name=_('Description'))
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Total Amount')
    )
    status = models.CharField(
        max_length=12,
        choices=AIPStatus.choices,
        default=AIPStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status')
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_aips',
        verbose_name=_('Approved By')
    )
    approved_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Approved Date'))

    class Meta:
        verbose_name = _('Annual Investment Program')
        verbose_name_plural = _('Annual Investment Programs')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.title} (FY {self.fiscal_year.year})"

    def get_total_expenditure(self) -> Decimal:
        return money(AIPExpense.objects.filter(project__aip=self).aggregate(
            total=Sum('amount')
        )['total'])

    def to_dict(self, detail: bool = False) -> Dict[str, Any]:
        projects = list(self.projects.all())
        data = {
            'id': self.pk,
            'fiscal_year': {'id': self.fiscal_year_id, 'year': self.fiscal_year.year},
            'title': self.title,
            'description': self.description,
            'total_amount': str(self.total_amount),
            'status': self.status,
            'created_by': _user_label(self.created_by),
            'approved_by': _user_label(self.approved_by),
            'approved_date': iso(self.approved_date),
            'project_count': len(projects),
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        if detail:
            data['total_expenditure'] = str(self.get_total_expenditure())
            data['projects'] = [project.to_dict(detail=True) for project in projects]
            data['attachments'] = [attachment.to_dict() for attachment in self.attachments.all()]
        else:
            data['projects'] = [
                {'id': p.pk, 'title': p.title, 'total_cost': str(p.total_cost), 'status': p.status}
                for p in projects
            ]
        return data


class AIPProject(TimeStampedMixin):
    """
    A project listed in an AIP.

    Attributes:
        project_code: Unique within the AIP.
        progress: 0-100, recomputed from completed milestones.
    """

    aip = models.ForeignKey(
        AnnualInvestmentProgram,
        on_delete=models.CASCADE,
        related_name='projects',
        verbose_name=_('AIP')
    )
    project_code = models.CharField(max_length=50, verbose_name=_('Project Code'))
    title = models.CharField(max_length=255, verbose_name=_('Title'))
    description = models.TextField(verbose_name=_('Description'))
    sector = models.CharField(max_length=100, verbose_name=_('Sector'))
    location = models.CharField(max_length=255, blank=True, verbose_name=_('Location'))
    expected_beneficiaries = models.CharField(
        max_length=255, blank=True, verbose_name=_('Expected Beneficiaries')
    )
    start_date = models.DateField(verbose_name=_('Start Date'))
    end_date = models.DateField(verbose_name=_('End Date'))
    total_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Total Cost')
    )
    budget_category = models.ForeignKey(
        'finance.BudgetCategory',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='aip_projects',
        verbose_name=_('Budget Category')
    )
    fund_source = models.CharField(max_length=100, blank=True, verbose_name=_('Fund Source'))
    status = models.CharField(
        max_length=10,
        choices=ProjectStatus.choices,
        default=ProjectStatus.PLANNED,
        db_index=True,
        verbose_name=_('Status')
    )
    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_('Progress (%)')
    )

    class Meta:
        verbose_name = _('AIP Project')
        verbose_name_plural = _('AIP Projects')
        ordering = ['project_code']
        constraints = [
            models.UniqueConstraint(
                fields=['aip', 'project_code'],
                name='unique_project_code_per_aip'
            )
        ]

    def __str__(self) -> str:
        return f"{self.project_code} - {self.title}"

    def clean(self) -> None:
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError({'end_date': _('End date must be after start date')})

    def get_total_expenditure(self) -> Decimal:
        return money(self.expenses.aggregate(total=Sum('amount'))['total'])

    def to_dict(self, detail: bool = False) -> Dict[str, Any]:
        data = {
            'id': self.pk,
            'aip_id': self.aip_id,
            'project_code': self.project_code,
            'title': self.title,
            'description': self.description,
            'sector': self.sector,
            'location': self.location,
            'expected_beneficiaries': self.expected_beneficiaries,
            'start_date': iso(self.start_date),
            'end_date': iso(self.end_date),
            'total_cost': str(self.total_cost),
            'budget_category': self.budget_category.to_dict() if self.budget_category_id else None,
            'fund_source': self.fund_source,
            'status': self.status,
            'progress': self.progress,
        }
        if detail:
            data['milestones'] = [milestone.to_dict() for milestone in self.milestones.all()]
            data['expenses'] = [expense.to_dict() for expense in self.expenses.all()]
            data['total_expenditure'] = str(self.get_total_expenditure())
        return data


class AIPMilestone(TimeStampedMixin):
    """A checkpoint of a project; completed_at is set on completion."""

    project = models.ForeignKey(
        AIPProject,
        on_delete=models.CASCADE,
        related_name='milestones',
        verbose_name=_('Project')
    )
    title = models.CharField(max_length=255, verbose_name=_('Title'))
    description = models.TextField(blank=True, verbose_name=_('Description'))
    due_date = models.DateField(verbose_name=_('Due Date'))
    status = models.CharField(
        max_length=10,
        choices=MilestoneStatus.choices,
        default=MilestoneStatus.PENDING,
        verbose_name=_('Status')
    )
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Completed At'))

    class Meta:
        verbose_name = _('Milestone')
        verbose_name_plural = _('Milestones')
        ordering = ['due_date', 'pk']

    def __str__(self) -> str:
        return self.title

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'project_id': self.project_id,
            'title': self.title,
            'description': self.description,
            'due_date': iso(self.due_date),
            'status': self.status,
            'completed_at': iso(self.completed_at),
        }


class AIPExpense(AuditLogMixin):
    """
    Spending charged to a project.

    An optional link to a finance EXPENSE transaction ties the expense
    to the books; linked expenses keep their AIP from being deleted.
    """

    project = models.ForeignKey(
        AIPProject,
        on_delete=models.CASCADE,
        related_name='expenses',
        verbose_name=_('Project')
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    description = models.TextField(verbose_name=_('Description'))
    date = models.DateField(verbose_name=_('Date'))
    reference = models.CharField(max_length=100, blank=True, verbose_name=_('Reference'))
    transaction = models.ForeignKey(
        'finance.Transaction',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='aip_expenses',
        verbose_name=_('Transaction')
    )

    class Meta:
        verbose_name = _('AIP Expense')
        verbose_name_plural = _('AIP Expenses')
        ordering = ['-date', '-created_at']

    def __str__(self) -> str:
        return f"{self.project.project_code}: {self.amount}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'project_id': self.project_id,
            'amount': str(self.amount),
            'description': self.description,
            'date': iso(self.date),
            'reference': self.reference,
            'transaction': (
                {'id': self.transaction_id, 'reference_number': self.transaction.reference_number}
                if self.transaction_id else None
            ),
            'created_at': iso(self.created_at),
        }


class AIPAttachment(TimeStampedMixin):
    """Metadata of a document attached to an AIP or to one of its projects."""

    aip = models.ForeignKey(
        AnnualInvestmentProgram,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='attachments',
        verbose_name=_('AIP')
    )
    project = models.ForeignKey(
        AIPProject,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='attachments',
        verbose_name=_('Project')
    )
    file_name = models.CharField(max_length=255, verbose_name=_('File Name'))
    file_url = models.URLField(max_length=500, verbose_name=_('File URL'))
    file_type = models.CharField(max_length=100, verbose_name=_('File Type'))
    file_size = models.PositiveIntegerField(verbose_name=_('File Size (bytes)'))
    description = models.TextField(blank=True, verbose_name=_('Description'))
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='aip_attachments',
        verbose_name=_('Uploaded By')
    )

    class Meta:
        verbose_name = _('AIP Attachment')
        verbose_name_plural = _('AIP Attachments')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return self.file_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'aip_id': self.aip_id,
            'project_id': self.project_id,
            'file_name': self.file_name,
            'file_url': self.file_url,
            'file_type': self.file_type,
            'file_size': self.file_size,
            'description': self.description,
            'uploaded_by': _user_label(self.uploaded_by),
            'created_at': iso(self.created_at),
        }
