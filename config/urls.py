"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Root URL configuration. JSON APIs live under /api/,
             certificate verification is public under /verify/.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from django.contrib.auth import views as auth_views

from apps.certificates.views import CertificateVerifyView
from apps.dashboard.views import DashboardStatsView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('login/', auth_views.LoginView.as_view(), name='login'),
    path('logout/', auth_views.LogoutView.as_view(), name='logout'),
    path('verify/<str:control_number>/', CertificateVerifyView.as_view(), name='certificate_verify'),
    path('api/', include('apps.core.urls')),
    path('api/users/', include('apps.users.urls')),
    path('api/', include('apps.residents.urls')),
    path('api/certificates/', include('apps.certificates.urls')),
    path('api/blotter/', include('apps.blotter.urls')),
    path('api/finance/aip/', include('apps.aip.urls')),
    path('api/finance/', include('apps.finance.urls')),
    path('api/relief/', include('apps.relief.urls')),
    path('api/reports/', include('apps.reporting.urls')),
    path('api/ai/', include('apps.advisor.urls')),
    path('api/dashboard/stats/', DashboardStatsView.as_view(), name='dashboard_stats'),
    path('dashboard/', include('apps.dashboard.urls')),
    path('', RedirectView.as_view(url='/dashboard/', permanent=False), name='home'),
]
