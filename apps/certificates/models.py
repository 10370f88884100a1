"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Models for issued certificates and the editable
             certificate templates.
-------------------------------------------------------------------------
"""
from typing import Any, Dict
from django.db import models, transaction
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, TimeStampedMixin
from apps.core.utils import iso


class CertificateType(models.TextChoices):
    RESIDENCY = 'RESIDENCY', _('Certificate of Residency')
    INDIGENCY = 'INDIGENCY', _('Certificate of Indigency')
    CLEARANCE = 'CLEARANCE', _('Barangay Clearance')
    BUSINESS_PERMIT = 'BUSINESS_PERMIT', _('Barangay Business Permit')
    CFA = 'CFA', _('Certification to File Action')


class CertificateStatus(models.TextChoices):
    PENDING = 'PENDING', _('Pending')
    APPROVED = 'APPROVED', _('Approved')
    RELEASED = 'RELEASED', _('Released')
    REJECTED = 'REJECTED', _('Rejected')
    CANCELLED = 'CANCELLED', _('Cancelled')


class Certificate(AuditLogMixin):
    """
    A certificate requested by a resident.

    Attributes:
        control_number: CN-YYYY-NNNNN, sequential within the year.
        official: Name of the signing officer printed on the document.
        business_name, owner_name, business_address: Business permits only.
        issued_date: Set when the certificate is released.
    """

    control_number = models.CharField(
        max_length=30,
        unique=True,
        editable=False,
        verbose_name=_('Control Number')
    )
    certificate_type = models.CharField(
        max_length=20,
        choices=CertificateType.choices,
        verbose_name=_('Certificate Type')
    )
    purpose = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Purpose')
    )
    status = models.CharField(
        max_length=15,
        choices=CertificateStatus.choices,
        default=CertificateStatus.PENDING,
        db_index=True,
        verbose_name=_('Status')
    )
    resident = models.ForeignKey(
        'residents.Resident',
        on_delete=models.PROTECT,
        related_name='certificates',
        verbose_name=_('Resident')
    )
    official = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('Signing Official')
    )
    business_name = models.CharField(max_length=200, blank=True, verbose_name=_('Business Name'))
    owner_name = models.CharField(max_length=200, blank=True, verbose_name=_('Owner Name'))
    business_address = models.CharField(max_length=255, blank=True, verbose_name=_('Business Address'))
    issued_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Issued Date')
    )
    remarks = models.TextField(
        blank=True,
        verbose_name=_('Remarks')
    )

    class Meta:
        verbose_name = _('Certificate')
        verbose_name_plural = _('Certificates')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f"{self.control_number} - {self.get_certificate_type_display()}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'control_number': self.control_number,
            'certificate_type': self.certificate_type,
            'certificate_type_display': str(self.get_certificate_type_display()),
            'purpose': self.purpose,
            'status': self.status,
            'resident_id': self.resident_id,
            'resident_name': self.resident.full_name,
            'official': self.official,
            'business_name': self.business_name,
            'owner_name': self.owner_name,
            'business_address': self.business_address,
            'issued_date': iso(self.issued_date),
            'remarks': self.remarks,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class CertificateTemplate(TimeStampedMixin):
    """
    Editable body of a certificate type.

    The content may contain placeholders such as [RESIDENT_NAME] and
    [PURPOSE]; see apps.certificates.services.PLACEHOLDERS. At most one
    template per type is the default.
    """

    certificate_type = models.CharField(
        max_length=20,
        choices=CertificateType.choices,
        verbose_name=_('Certificate Type')
    )
    name = models.CharField(max_length=150, verbose_name=_('Template Name'))
    content = models.TextField(verbose_name=_('Body'))
    header_html = models.TextField(blank=True, verbose_name=_('Header HTML'))
    footer_html = models.TextField(blank=True, verbose_name=_('Footer HTML'))
    css = models.TextField(blank=True, verbose_name=_('Custom CSS'))
    is_default = models.BooleanField(default=False, verbose_name=_('Default for Type'))

    class Meta:
        verbose_name = _('Certificate Template')
        verbose_name_plural = _('Certificate Templates')
        ordering = ['certificate_type', 'name']

    def __str__(self) -> str:
        return f"{self.name} ({self.get_certificate_type_display()})"

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_default:
                CertificateTemplate.objects.filter(
                    certificate_type=self.certificate_type, is_default=True
                ).exclude(pk=self.pk).update(is_default=False)
            super().save(*args, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'certificate_type': self.certificate_type,
            'name': self.name,
            'content': self.content,
            'header_html': self.header_html,
            'footer_html': self.footer_html,
            'css': self.css,
            'is_default': self.is_default,
            'updated_at': iso(self.updated_at),
        }
