"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Relief record model.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin
from apps.core.utils import iso


class ReliefStatus(models.TextChoices):
    PENDING = 'PENDING', _('Pending')
    APPROVED = 'APPROVED', _('Approved')
    DISTRIBUTED = 'DISTRIBUTED', _('Distributed')
    REJECTED = 'REJECTED', _('Rejected')


class ReliefRecord(AuditLogMixin):
    """
    Relief given (or to be given) to a resident.

    Attributes:
        type: Kind of relief, e.g. "Food Pack" or "Financial Aid".
        amount: Cash value of the relief.
    """

    resident = models.ForeignKey(
        'residents.Resident',
        on_delete=models.CASCADE,
        related_name='relief_records',
        verbose_name=_('Resident')
    )
    type = models.CharField(max_length=100, verbose_name=_('Relief Type'))
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Amount')
    )
    status = models.CharField(
        max_length=12,
        choices=ReliefStatus.choices,
        default=ReliefStatus.PENDING,
        db_index=True,
        verbose_name=_('Status')
    )
    notes = models.TextField(blank=True, verbose_name=_('Notes'))

    class Meta:
        verbose_name = _('Relief Record')
        verbose_name_plural = _('Relief Records')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.type} for {self.resident}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'resident_id': self.resident_id,
            'resident_name': self.resident.full_name,
            'type': self.type,
            'amount': str(self.amount),
            'status': self.status,
            'notes': self.notes,
            'created_by': self.created_by.email if self.created_by_id else None,
            'created_at': iso(self.created_at),
        }
