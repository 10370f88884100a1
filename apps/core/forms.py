"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for the barangay profile, officials and council
             members.
-------------------------------------------------------------------------
"""
from django import forms

from apps.core.models import BarangayInfo, CouncilMember, Officials


class BarangayInfoForm(forms.ModelForm):

    class Meta:
        model = BarangayInfo
        fields = [
            'name', 'district', 'city', 'province', 'address', 'contact_number',
            'email', 'website', 'postal_code', 'logo', 'footer_text',
        ]


class OfficialsForm(forms.ModelForm):

    class Meta:
        model = Officials
        fields = ['punong_barangay', 'secretary', 'treasurer']


class CouncilMemberForm(forms.ModelForm):
    """Form for adding or editing a Sangguniang Barangay member."""

    class Meta:
        model = CouncilMember
        fields = ['name', 'position', 'order', 'is_active']

    def clean_name(self):
        return (self.cleaned_data.get('name') or '').strip()
