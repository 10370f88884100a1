"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL routing for core app (settings, officials, notifications).
-------------------------------------------------------------------------
"""
from django.urls import path
from apps.core.views import (
    BarangayInfoView,
    OfficialsView,
    CouncilMemberListCreateView,
    CouncilMemberDetailView,
    OfficialsListView,
    NotificationSummaryView,
)

app_name = 'core'

urlpatterns = [
    # Settings
    path('settings/barangay/', BarangayInfoView.as_view(), name='barangay_info'),
    path('settings/officials/', OfficialsView.as_view(), name='officials_settings'),
    path('settings/council-members/', CouncilMemberListCreateView.as_view(), name='council_member_list'),
    path('settings/council-members/<int:pk>/', CouncilMemberDetailView.as_view(), name='council_member_detail'),

    # Officials roster
    path('officials/', OfficialsListView.as_view(), name='officials_list'),

    # Notifications
    path('notifications/', NotificationSummaryView.as_view(), name='notifications'),
]
