"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL routing for blotter app.
-------------------------------------------------------------------------
"""
from django.urls import path
from apps.blotter.views import (
    BlotterCaseListCreateView,
    BlotterCaseDetailView,
    BlotterStatusView,
    BlotterFilingFeeView,
    BlotterCertificateView,
    BlotterProcessFlowView,
    BlotterPartyCreateView,
    BlotterHearingListCreateView,
    BlotterHearingDetailView,
    BlotterAttachmentView,
    BlotterReportView,
)

app_name = 'blotter'

urlpatterns = [
    path('', BlotterCaseListCreateView.as_view(), name='case_list'),
    path('<int:pk>/', BlotterCaseDetailView.as_view(), name='case_detail'),

    # Process
    path('<int:pk>/status/', BlotterStatusView.as_view(), name='case_status'),
    path('<int:pk>/filing-fee/', BlotterFilingFeeView.as_view(), name='filing_fee'),
    path('<int:pk>/certificate/', BlotterCertificateView.as_view(), name='certificate'),
    path('<int:pk>/process-flow/', BlotterProcessFlowView.as_view(), name='process_flow'),

    # Parties, hearings and attachments
    path('<int:pk>/parties/', BlotterPartyCreateView.as_view(), name='party_list'),
    path('<int:pk>/hearings/', BlotterHearingListCreateView.as_view(), name='hearing_list'),
    path('hearings/<int:pk>/', BlotterHearingDetailView.as_view(), name='hearing_detail'),
    path('<int:pk>/attachments/', BlotterAttachmentView.as_view(), name='attachment_list'),

    # Documents
    path('<int:pk>/report/', BlotterReportView.as_view(), name='report'),
]
