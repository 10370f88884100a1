"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL routing for users app.
-------------------------------------------------------------------------
"""
from django.urls import path
from apps.users.views import CurrentUserView, UserDetailView, UserListCreateView

app_name = 'users'

urlpatterns = [
    path('', UserListCreateView.as_view(), name='register'),
    path('me/', CurrentUserView.as_view(), name='me'),
    path('<int:pk>/', UserDetailView.as_view(), name='user_detail'),
]
