"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for certificate requests and certificate templates.
-------------------------------------------------------------------------
"""
from typing import Any, Dict
from django import forms
from django.utils.translation import gettext_lazy as _

from apps.certificates.models import Certificate, CertificateTemplate, CertificateType


class CertificateForm(forms.ModelForm):
    """
    Form for requesting and editing a certificate.

    Business permits require the business name and address.
    """

    class Meta:
        model = Certificate
        fields = [
            'certificate_type', 'purpose', 'resident', 'official',
            'business_name', 'owner_name', 'business_address', 'remarks',
        ]

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        if cleaned_data.get('certificate_type') == CertificateType.BUSINESS_PERMIT:
            if not cleaned_data.get('business_name'):
                self.add_error('business_name', _('Business name is required for business permits.'))
            if not cleaned_data.get('business_address'):
                self.add_error('business_address', _('Business address is required for business permits.'))
        return cleaned_data


class CertificateTemplateForm(forms.ModelForm):

    class Meta:
        model = CertificateTemplate
        fields = ['certificate_type', 'name', 'content', 'header_html', 'footer_html', 'css', 'is_default']
