"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL patterns for the advisor API.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.advisor import views

app_name = 'advisor'

urlpatterns = [
    path('advisor/', views.AdvisorView.as_view(), name='recommendations'),
]
