"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for blotter cases, parties, hearings and status
             updates.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict

from django import forms
from django.utils.translation import gettext_lazy as _

from apps.blotter.models import (
    BlotterAttachment, BlotterCase, BlotterHearing, BlotterParty, HearingStatus,
)
from apps.core.utils import today


class BlotterCaseForm(forms.ModelForm):
    """Complaint details. The filing fee defaults to P100."""

    class Meta:
        model = BlotterCase
        fields = [
            'incident_date', 'incident_time', 'incident_location', 'incident_type',
            'incident_description', 'priority', 'entertained_by', 'filing_fee',
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['filing_fee'].required = False
        self.fields['priority'].required = False

    def clean_incident_date(self):
        incident_date = self.cleaned_data.get('incident_date')
        if incident_date and incident_date > today():
            raise forms.ValidationError(_('Incident date cannot be in the future.'))
        return incident_date

    def clean_filing_fee(self):
        filing_fee = self.cleaned_data.get('filing_fee')
        if filing_fee is None:
            return self.instance.filing_fee if self.instance.pk else Decimal('100.00')
        if filing_fee < 0:
            raise forms.ValidationError(_('Filing fee cannot be negative.'))
        return filing_fee

    def clean_priority(self):
        return self.cleaned_data.get('priority') or self.instance.priority


class BlotterPartyForm(forms.ModelForm):

    class Meta:
        model = BlotterParty
        fields = [
            'party_type', 'first_name', 'middle_name', 'last_name', 'address',
            'contact_number', 'email', 'is_resident', 'resident',
        ]


class BlotterHearingForm(forms.ModelForm):

    class Meta:
        model = BlotterHearing
        fields = ['date', 'time', 'location', 'status', 'notes', 'minutes']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False

    def clean_status(self):
        return self.cleaned_data.get('status') or HearingStatus.SCHEDULED


class BlotterAttachmentForm(forms.ModelForm):

    class Meta:
        model = BlotterAttachment
        fields = ['file_name', 'file_url', 'file_type', 'file_size']


class StatusUpdateForm(forms.Form):
    """
    Optional fields sent along with a status change.

    The status itself is checked by the service so an unknown value
    gets the "Invalid status provided" message.
    """

    status = forms.CharField(max_length=15)
    remarks = forms.CharField(required=False)
    filing_fee = forms.DecimalField(required=False, max_digits=14, decimal_places=2, min_value=0)
    filing_fee_paid = forms.NullBooleanField(required=False)
    docket_date = forms.DateField(required=False)
    summon_date = forms.DateField(required=False)
    mediation_start_date = forms.DateField(required=False)
    mediation_end_date = forms.DateField(required=False)
    conciliation_start_date = forms.DateField(required=False)
    conciliation_end_date = forms.DateField(required=False)
    extension_date = forms.DateField(required=False)
    certification_date = forms.DateField(required=False)
    resolution_method = forms.CharField(required=False, max_length=100)
    escalated_to = forms.CharField(required=False, max_length=150)

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        for prefix in ('mediation', 'conciliation'):
            start = cleaned_data.get(f'{prefix}_start_date')
            end = cleaned_data.get(f'{prefix}_end_date')
            if start and end and end < start:
                self.add_error(f'{prefix}_end_date', _('End date cannot be before the start date.'))
        return cleaned_data

    def submitted_fields(self) -> Dict[str, Any]:
        """Cleaned values for the keys actually present in the payload."""
        fields = {}
        for name, value in self.cleaned_data.items():
            if name not in self.data or name in ('status', 'remarks'):
                continue
            # Non-nullable columns
            if value is None and name in ('filing_fee', 'filing_fee_paid'):
                continue
            fields[name] = value
        return fields
