"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django forms for the residents module with validation of
             employment, identity and household fields.
-------------------------------------------------------------------------
"""
from typing import Any, Dict
from django import forms
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from apps.core.utils import today
from apps.residents.models import (
    EmploymentStatus, Household, HouseholdStatus, HouseholdType, Resident,
)


class ResidentForm(forms.ModelForm):
    """
    Form for registering and updating residents.
    """

    class Meta:
        model = Resident
        fields = [
            'first_name', 'middle_name', 'last_name', 'extension_name', 'alias',
            'birth_date', 'gender', 'civil_status', 'contact_no', 'email', 'address',
            'occupation', 'employment_status', 'unemployment_reason',
            'educational_attainment', 'blood_type', 'religion', 'ethnic_group',
            'nationality', 'father_name', 'father_middle_name', 'father_last_name',
            'mother_first_name', 'mother_middle_name', 'mother_maiden_name',
            'voter_in_barangay', 'sectors', 'identity_type', 'identity_number',
            'user_photo', 'household',
        ]

    def clean_birth_date(self):
        birth_date = self.cleaned_data.get('birth_date')
        if birth_date and birth_date > today():
            raise ValidationError(_('Birth date cannot be in the future.'))
        return birth_date

    def clean_sectors(self):
        sectors = self.cleaned_data.get('sectors') or []
        if not isinstance(sectors, list) or not all(isinstance(s, str) for s in sectors):
            raise ValidationError(_('Sectors must be a list of names.'))
        return sectors

    def clean_nationality(self):
        return self.cleaned_data.get('nationality') or 'Filipino'

    def clean(self) -> Dict[str, Any]:
        """Cross-field rules for employment and identity documents."""
        cleaned_data = super().clean()

        if (cleaned_data.get('employment_status') == EmploymentStatus.EMPLOYED
                and not cleaned_data.get('occupation')):
            self.add_error('occupation', _('Occupation is required for employed residents.'))

        if cleaned_data.get('identity_type') and not cleaned_data.get('identity_number'):
            self.add_error('identity_number', _('ID number is required when an ID type is given.'))

        return cleaned_data


class HouseholdCreateForm(forms.Form):
    """
    Form for registering a household.

    Accepts either a single comma-separated ``address`` or the
    individual address fields.
    """

    address = forms.CharField(max_length=500, required=False)
    house_no = forms.CharField(max_length=50, required=False)
    street = forms.CharField(max_length=150, required=False)
    barangay = forms.CharField(max_length=150, required=False)
    city = forms.CharField(max_length=150, required=False)
    province = forms.CharField(max_length=150, required=False)
    zip_code = forms.CharField(max_length=10, required=False)
    latitude = forms.FloatField(required=False, min_value=-90, max_value=90)
    longitude = forms.FloatField(required=False, min_value=-180, max_value=180)
    type = forms.ChoiceField(choices=HouseholdType.choices, required=False)
    status = forms.ChoiceField(choices=HouseholdStatus.choices, required=False)
    notes = forms.CharField(required=False)
    resident_ids = forms.JSONField(required=False)
    head_of_household = forms.IntegerField(required=False)

    def clean_resident_ids(self):
        resident_ids = self.cleaned_data.get('resident_ids') or []
        if not isinstance(resident_ids, list):
            raise ValidationError(_('resident_ids must be a list.'))
        return resident_ids

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        if not cleaned_data.get('address') and not (
            cleaned_data.get('house_no') and cleaned_data.get('street')
        ):
            raise ValidationError(_('Address is required.'))
        return cleaned_data


class HouseholdForm(forms.ModelForm):
    """Form for updating an existing household."""

    class Meta:
        model = Household
        fields = [
            'house_no', 'street', 'barangay', 'city', 'province', 'zip_code',
            'latitude', 'longitude', 'type', 'status', 'notes',
        ]
