"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL patterns for the report exports (mounted at /api/reports/).
             AIP reports are routed with the AIP API.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.reporting import views

app_name = 'reporting'

urlpatterns = [
    path('residents/', views.ResidentReportView.as_view(), name='residents'),
    path('households/', views.HouseholdReportView.as_view(), name='households'),
    path('disaster-relief/', views.DisasterReliefReportView.as_view(), name='disaster_relief'),
]
