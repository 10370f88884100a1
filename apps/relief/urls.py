"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL patterns for the relief API.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.relief import views

app_name = 'relief'

urlpatterns = [
    path('', views.ReliefRecordListCreateView.as_view(), name='record_list'),
    path('<int:pk>/', views.ReliefRecordDetailView.as_view(), name='record_detail'),
]
