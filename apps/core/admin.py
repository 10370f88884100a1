"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the barangay profile,
             officials and council members.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.core.models import BarangayInfo, CouncilMember, Officials


class SingletonAdmin(admin.ModelAdmin):
    """Admin for single-row settings tables (no add once the row exists)."""

    def has_add_permission(self, request) -> bool:
        return not self.model.objects.exists()

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(BarangayInfo)
class BarangayInfoAdmin(SingletonAdmin):
    list_display = ['name', 'city', 'province', 'contact_number', 'updated_at']
    fieldsets = (
        (None, {'fields': ('name', 'district', 'city', 'province', 'postal_code')}),
        ('Contact', {'fields': ('address', 'contact_number', 'email', 'website')}),
        ('Documents', {'fields': ('logo', 'footer_text')}),
    )


@admin.register(Officials)
class OfficialsAdmin(SingletonAdmin):
    list_display = ['punong_barangay', 'secretary', 'treasurer', 'updated_at']


@admin.register(CouncilMember)
class CouncilMemberAdmin(admin.ModelAdmin):
    """Admin configuration for CouncilMember model."""

    list_display = ['name', 'position', 'order', 'is_active']
    list_filter = ['is_active']
    list_editable = ['order', 'is_active']
    search_fields = ['name', 'position']
    ordering = ['order', 'name']
