"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Relief record form.
-------------------------------------------------------------------------
"""
from decimal import Decimal

from django import forms

from apps.relief.models import ReliefRecord, ReliefStatus


class ReliefRecordForm(forms.ModelForm):
    """Status defaults to PENDING and amount to 0."""

    class Meta:
        model = ReliefRecord
        fields = ['resident', 'type', 'amount', 'status', 'notes']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].required = False
        self.fields['amount'].required = False

    def clean_status(self):
        return self.cleaned_data.get('status') or ReliefStatus.PENDING

    def clean_amount(self):
        amount = self.cleaned_data.get('amount')
        return Decimal('0.00') if amount is None else amount
