"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL patterns for the AIP API (mounted at /api/finance/aip/).
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.advisor.views import AIPInsightsView
from apps.aip import views
from apps.reporting.views import AIPReportCSVView, AIPReportPDFView, AIPReportView

app_name = 'aip'

urlpatterns = [
    path('', views.AIPListCreateView.as_view(), name='aip_list'),
    path('<int:pk>/', views.AIPDetailView.as_view(), name='aip_detail'),
    path('<int:pk>/status/', views.AIPStatusView.as_view(), name='aip_status'),
    path('<int:pk>/projects/', views.AIPProjectListCreateView.as_view(), name='project_list'),
    path(
        '<int:pk>/attachments/',
        views.AIPAttachmentListCreateView.as_view(owner='aip'),
        name='aip_attachments'
    ),
    path('<int:pk>/insights/', AIPInsightsView.as_view(), name='aip_insights'),
    path('<int:pk>/report/', AIPReportView.as_view(), name='aip_report'),
    path('<int:pk>/report/csv/', AIPReportCSVView.as_view(), name='aip_report_csv'),
    path('<int:pk>/report/pdf/', AIPReportPDFView.as_view(), name='aip_report_pdf'),

    # Projects
    path('projects/<int:pk>/', views.AIPProjectDetailView.as_view(), name='project_detail'),
    path('projects/<int:pk>/milestones/', views.AIPMilestoneListCreateView.as_view(), name='milestone_list'),
    path('projects/<int:pk>/expenses/', views.AIPExpenseListCreateView.as_view(), name='expense_list'),
    path(
        'projects/<int:pk>/attachments/',
        views.AIPAttachmentListCreateView.as_view(owner='project'),
        name='project_attachments'
    ),

    path('milestones/<int:pk>/', views.AIPMilestoneDetailView.as_view(), name='milestone_detail'),
    path('expenses/<int:pk>/', views.AIPExpenseDetailView.as_view(), name='expense_detail'),
    path('attachments/<int:pk>/', views.AIPAttachmentDetailView.as_view(), name='attachment_detail'),
]
