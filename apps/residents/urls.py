"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the residents module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.residents import views

app_name = 'residents'

urlpatterns = [
    # Residents
    path('search/', views.GlobalSearchView.as_view(), name='global_search'),

    path('residents/', views.ResidentListCreateView.as_view(), name='resident_list'),
    path('residents/search/', views.ResidentSearchView.as_view(), name='resident_search'),
    path('residents/export/', views.ResidentExportView.as_view(), name='resident_export'),
    path('residents/export/xlsx/', views.ResidentExcelExportView.as_view(), name='resident_export_xlsx'),
    path('residents/<int:pk>/', views.ResidentDetailView.as_view(), name='resident_detail'),
    path('residents/<int:pk>/residency-duration/', views.ResidencyDurationView.as_view(), name='residency_duration'),

    # Households
    path('households/', views.HouseholdListCreateView.as_view(), name='household_list'),
    path('households/<int:pk>/', views.HouseholdDetailView.as_view(), name='household_detail'),
    path('households/<int:pk>/residents/', views.HouseholdResidentsView.as_view(), name='household_residents'),
    path(
        'households/<int:pk>/residents/<int:resident_pk>/',
        views.HouseholdMemberView.as_view(),
        name='household_member'
    ),
    path('households/<int:pk>/statistics/', views.HouseholdStatisticsView.as_view(), name='household_statistics'),
    path('households/<int:pk>/history/', views.HouseholdHistoryView.as_view(), name='household_history'),
]
