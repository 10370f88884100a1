"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL routing for certificates app.
-------------------------------------------------------------------------
"""
from django.urls import path
from apps.certificates.views import (
    CertificateListCreateView,
    CertificateDetailView,
    CertificateStatusView,
    CertificatePDFView,
    CertificateTemplateListCreateView,
    CertificateTemplateDetailView,
)

app_name = 'certificates'

urlpatterns = [
    path('', CertificateListCreateView.as_view(), name='certificate_list'),
    path('<int:pk>/', CertificateDetailView.as_view(), name='certificate_detail'),
    path('<int:pk>/status/', CertificateStatusView.as_view(), name='certificate_status'),
    path('<int:pk>/pdf/', CertificatePDFView.as_view(), name='certificate_pdf'),

    # Templates
    path('templates/', CertificateTemplateListCreateView.as_view(), name='template_list'),
    path('templates/<int:pk>/', CertificateTemplateDetailView.as_view(), name='template_detail'),
]
