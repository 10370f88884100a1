"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for certificates and templates.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.certificates.models import Certificate, CertificateTemplate


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    """Admin configuration for Certificate model."""

    list_display = ['control_number', 'certificate_type', 'resident', 'status', 'issued_date', 'created_at']
    list_filter = ['certificate_type', 'status']
    search_fields = ['control_number', 'resident__first_name', 'resident__last_name', 'business_name']
    readonly_fields = ['control_number', 'created_by', 'updated_by', 'created_at', 'updated_at']
    raw_id_fields = ['resident']
    date_hierarchy = 'created_at'


@admin.register(CertificateTemplate)
class CertificateTemplateAdmin(admin.ModelAdmin):
    list_display = ['name', 'certificate_type', 'is_default', 'updated_at']
    list_filter = ['certificate_type', 'is_default']
    search_fields = ['name']
