"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Database models for blotter cases handled under the
             Katarungang Pambarangay process: cases, parties, hearings,
             status history and attachments.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict

from django.db import models
from django.conf import settings
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, TimeStampedMixin
from apps.core.utils import iso


class BlotterCaseStatus(models.TextChoices):
    FILED = 'FILED', _('Filed')
    DOCKETED = 'DOCKETED', _('Docketed')
    SUMMONED = 'SUMMONED', _('Summoned')
    MEDIATION = 'MEDIATION', _('Mediation')
    CONCILIATION = 'CONCILIATION', _('Conciliation')
    EXTENDED = 'EXTENDED', _('Extended')
    RESOLVED = 'RESOLVED', _('Resolved')
    CLOSED = 'CLOSED', _('Closed')
    DISMISSED = 'DISMISSED', _('Dismissed')
    ESCALATED = 'ESCALATED', _('Escalated')
    CERTIFIED = 'CERTIFIED', _('Certified')
    # Legacy statuses from the paper blotter book
    PENDING = 'PENDING', _('Pending')
    ONGOING = 'ONGOING', _('Ongoing')


ACTIVE_CASE_STATUSES = [
    BlotterCaseStatus.FILED,
    BlotterCaseStatus.DOCKETED,
    BlotterCaseStatus.SUMMONED,
    BlotterCaseStatus.MEDIATION,
    BlotterCaseStatus.CONCILIATION,
    BlotterCaseStatus.EXTENDED,
    BlotterCaseStatus.PENDING,
    BlotterCaseStatus.ONGOING,
]


class BlotterPriority(models.TextChoices):
    LOW = 'LOW', _('Low')
    MEDIUM = 'MEDIUM', _('Medium')
    HIGH = 'HIGH', _('High')
    URGENT = 'URGENT', _('Urgent')


class PartyType(models.TextChoices):
    COMPLAINANT = 'COMPLAINANT', _('Complainant')
    RESPONDENT = 'RESPONDENT', _('Respondent')
    WITNESS = 'WITNESS', _('Witness')


class HearingStatus(models.TextChoices):
    SCHEDULED = 'SCHEDULED', _('Scheduled')
    COMPLETED = 'COMPLETED', _('Completed')
    CANCELLED = 'CANCELLED', _('Cancelled')
    RESCHEDULED = 'RESCHEDULED', _('Rescheduled')


class BlotterCase(AuditLogMixin):
    """
    A dispute brought before the Lupong Tagapamayapa.

    Attributes:
        case_number: BLT-YYYY-NNNN, sequential within the year.
        entertained_by: Name of the officer who received the complaint.
        filing_fee / filing_fee_paid: Docketing fee (P100 by default).
        *_date: Milestones of the mediation/conciliation process.
        escalated_to: Court or office the case was elevated to.
    """

    case_number = models.CharField(
        max_length=30,
        unique=True,
        editable=False,
        verbose_name=_('Case Number')
    )
    report_date = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        verbose_name=_('Report Date')
    )

    # Incident
    incident_date = models.DateField(verbose_name=_('Incident Date'))
    incident_time = models.TimeField(null=True, blank=True, verbose_name=_('Incident Time'))
    incident_location = models.CharField(max_length=255, verbose_name=_('Incident Location'))
    incident_type = models.CharField(max_length=100, verbose_name=_('Incident Type'))
    incident_description = models.TextField(verbose_name=_('Incident Description'))

    status = models.CharField(
        max_length=15,
        choices=BlotterCaseStatus.choices,
        default=BlotterCaseStatus.FILED,
        db_index=True,
        verbose_name=_('Status')
    )
    priority = models.CharField(
        max_length=10,
        choices=BlotterPriority.choices,
        default=BlotterPriority.MEDIUM,
        verbose_name=_('Priority')
    )
    entertained_by = models.CharField(max_length=150, blank=True, verbose_name=_('Entertained By'))

    filing_fee = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('100.00'),
        verbose_name=_('Filing Fee')
    )
    filing_fee_paid = models.BooleanField(default=False, verbose_name=_('Filing Fee Paid'))

    # Process dates
    docket_date = models.DateField(null=True, blank=True, verbose_name=_('Docket Date'))
    summon_date = models.DateField(null=True, blank=True, verbose_name=_('Summon Date'))
    mediation_start_date = models.DateField(null=True, blank=True, verbose_name=_('Mediation Start'))
    mediation_end_date = models.DateField(null=True, blank=True, verbose_name=_('Mediation End'))
    conciliation_start_date = models.DateField(null=True, blank=True, verbose_name=_('Conciliation Start'))
    conciliation_end_date = models.DateField(null=True, blank=True, verbose_name=_('Conciliation End'))
    extension_date = models.DateField(null=True, blank=True, verbose_name=_('Extension Date'))
    certification_date = models.DateField(null=True, blank=True, verbose_name=_('Certification Date'))

    resolution_method = models.CharField(max_length=100, blank=True, verbose_name=_('Resolution Method'))
    escalated_to = models.CharField(max_length=150, blank=True, verbose_name=_('Escalated To'))

    class Meta:
        verbose_name = _('Blotter Case')
        verbose_name_plural = _('Blotter Cases')
        ordering = ['-report_date']

    def __str__(self) -> str:
        return f"{self.case_number} - {self.incident_type}"

    def parties_of(self, party_type: str):
        return [party for party in self.parties.all() if party.party_type == party_type]

    @property
    def complainants(self):
        return self.parties_of(PartyType.COMPLAINANT)

    @property
    def respondents(self):
        return self.parties_of(PartyType.RESPONDENT)

    @property
    def witnesses(self):
        return self.parties_of(PartyType.WITNESS)

    def to_dict(self, detail: bool = False) -> Dict[str, Any]:
        data = {
            'id': self.pk,
            'case_number': self.case_number,
            'report_date': iso(self.report_date),
            'incident_date': iso(self.incident_date),
            'incident_time': iso(self.incident_time),
            'incident_location': self.incident_location,
            'incident_type': self.incident_type,
            'incident_description': self.incident_description,
            'status': self.status,
            'priority': self.priority,
            'entertained_by': self.entertained_by,
            'filing_fee': str(self.filing_fee),
            'filing_fee_paid': self.filing_fee_paid,
            'docket_date': iso(self.docket_date),
            'summon_date': iso(self.summon_date),
            'mediation_start_date': iso(self.mediation_start_date),
            'mediation_end_date': iso(self.mediation_end_date),
            'conciliation_start_date': iso(self.conciliation_start_date),
            'conciliation_end_date': iso(self.conciliation_end_date),
            'extension_date': iso(self.extension_date),
            'certification_date': iso(self.certification_date),
            'resolution_method': self.resolution_method,
            'escalated_to': self.escalated_to,
            'parties': [party.to_dict() for party in self.parties.all()],
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        if detail:
            data['hearings'] = [hearing.to_dict() for hearing in self.hearings.all()]
            data['status_updates'] = [update.to_dict() for update in self.status_updates.all()]
            data['attachments'] = [attachment.to_dict() for attachment in self.attachments.all()]
        return data


class BlotterParty(TimeStampedMixin):
    """A complainant, respondent or witness in a case."""

    case = models.ForeignKey(
        BlotterCase,
        on_delete=models.CASCADE,
        related_name='parties',
        verbose_name=_('Case')
    )
    party_type = models.CharField(max_length=15, choices=PartyType.choices, verbose_name=_('Party Type'))
    first_name = models.CharField(max_length=100, verbose_name=_('First Name'))
    middle_name = models.CharField(max_length=100, blank=True, verbose_name=_('Middle Name'))
    last_name = models.CharField(max_length=100, verbose_name=_('Last Name'))
    address = models.CharField(max_length=255, blank=True, verbose_name=_('Address'))
    contact_number = models.CharField(max_length=30, blank=True, verbose_name=_('Contact Number'))
    email = models.EmailField(blank=True, verbose_name=_('Email'))
    is_resident = models.BooleanField(default=False, verbose_name=_('Is Resident'))
    resident = models.ForeignKey(
        'residents.Resident',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='blotter_parties',
        verbose_name=_('Resident Record')
    )

    class Meta:
        verbose_name = _('Blotter Party')
        verbose_name_plural = _('Blotter Parties')
        ordering = ['party_type', 'last_name']

    def __str__(self) -> str:
        return f"{self.full_name} ({self.get_party_type_display()})"

    @property
    def full_name(self) -> str:
        return ' '.join(part for part in (self.first_name, self.middle_name, self.last_name) if part)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'party_type': self.party_type,
            'first_name': self.first_name,
            'middle_name': self.middle_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'address': self.address,
            'contact_number': self.contact_number,
            'email': self.email,
            'is_resident': self.is_resident,
            'resident_id': self.resident_id,
        }


class BlotterHearing(TimeStampedMixin):
    """A scheduled mediation or conciliation session."""

    case = models.ForeignKey(
        BlotterCase,
        on_delete=models.CASCADE,
        related_name='hearings',
        verbose_name=_('Case')
    )
    date = models.DateField(verbose_name=_('Hearing Date'))
    time = models.TimeField(null=True, blank=True, verbose_name=_('Hearing Time'))
    location = models.CharField(max_length=255, blank=True, verbose_name=_('Location'))
    status = models.CharField(
        max_length=15,
        choices=HearingStatus.choices,
        default=HearingStatus.SCHEDULED,
        verbose_name=_('Status')
    )
    notes = models.TextField(blank=True, verbose_name=_('Notes'))
    minutes = models.TextField(blank=True, verbose_name=_('Minutes'))

    class Meta:
        verbose_name = _('Hearing')
        verbose_name_plural = _('Hearings')
        ordering = ['date', 'time']

    def __str__(self) -> str:
        return f"{self.case.case_number} hearing on {self.date}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'case_id': self.case_id,
            'date': iso(self.date),
            'time': iso(self.time),
            'location': self.location,
            'status': self.status,
            'notes': self.notes,
            'minutes': self.minutes,
        }


class BlotterStatusUpdate(models.Model):
    """Entry in a case's status history."""

    case = models.ForeignKey(
        BlotterCase,
        on_delete=models.CASCADE,
        related_name='status_updates',
        verbose_name=_('Case')
    )
    status = models.CharField(max_length=15, choices=BlotterCaseStatus.choices, verbose_name=_('Status'))
    notes = models.TextField(blank=True, verbose_name=_('Notes'))
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='blotter_status_updates',
        verbose_name=_('Updated By')
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Timestamp'))

    class Meta:
        verbose_name = _('Status Update')
        verbose_name_plural = _('Status Updates')
        ordering = ['created_at', 'pk']

    def __str__(self) -> str:
        return f"{self.case.case_number}: {self.status}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'status': self.status,
            'notes': self.notes,
            'updated_by': self.updated_by.get_full_name() if self.updated_by else None,
            'created_at': iso(self.created_at),
        }


class BlotterAttachment(TimeStampedMixin):
    """Metadata of a document filed with a case (the file lives elsewhere)."""

    case = models.ForeignKey(
        BlotterCase,
        on_delete=models.CASCADE,
        related_name='attachments',
        verbose_name=_('Case')
    )
    file_name = models.CharField(max_length=255, verbose_name=_('File Name'))
    file_url = models.URLField(max_length=500, verbose_name=_('File URL'))
    file_type = models.CharField(max_length=100, blank=True, verbose_name=_('File Type'))
    file_size = models.PositiveIntegerField(default=0, verbose_name=_('File Size (bytes)'))

    class Meta:
        verbose_name = _('Attachment')
        verbose_name_plural = _('Attachments')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return self.file_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.pk,
            'file_name': self.file_name,
            'file_url': self.file_url,
            'file_type': self.file_type,
            'file_size': self.file_size,
            'created_at': iso(self.created_at),
        }
