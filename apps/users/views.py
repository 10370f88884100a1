"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for staff account registration, listing,
             update and deletion, and the current user's profile.
-------------------------------------------------------------------------
"""
import logging

from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from apps.core.api import ApiView, validate_form
from apps.core.utils import paginate
from apps.users.forms import UserRegistrationForm, UserUpdateForm
from apps.users.models import CustomUser
from apps.users.permissions import USER_ADMIN_ROLES, USER_DELETE_ROLES, USER_UPDATE_ROLES
from apps.users.services import delete_user, primary_role, update_user

logger = logging.getLogger(__name__)


class UserListCreateView(ApiView):
    """GET: staff accounts (search, role, status). POST: register one."""
    required_roles = USER_ADMIN_ROLES

    def get(self, request):
        queryset = CustomUser.objects.prefetch_related('roles')
        search = (request.GET.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search) |
                Q(email__icontains=search)
            )
        if request.GET.get('role'):
            queryset = queryset.filter(roles__code=request.GET['role'])
        if request.GET.get('status') in ('ACTIVE', 'INACTIVE'):
            queryset = queryset.filter(is_active=request.GET['status'] == 'ACTIVE')
        users, meta = paginate(queryset.distinct(), request.GET.get('page'), request.GET.get('limit'))
        return JsonResponse({'users': [user.to_dict() for user in users], 'meta': meta})

    def post(self, request):
        form = UserRegistrationForm(data=self.get_json())
        validate_form(form)
        user = form.save()
        logger.info("User %s registered by %s", user.email, request.user.email)
        return JsonResponse(
            {'message': 'User registered successfully', 'user': user.to_dict()},
            status=201
        )


class UserDetailView(ApiView):
    """
    GET a staff account, PUT/PATCH it (super admin only) or DELETE it
    (super admin or captain).
    """
    required_roles = USER_ADMIN_ROLES
    write_roles = USER_UPDATE_ROLES
    delete_roles = USER_DELETE_ROLES

    def get(self, request, pk):
        return JsonResponse(get_object_or_404(CustomUser, pk=pk).to_dict())

    def patch(self, request, pk):
        user = get_object_or_404(CustomUser, pk=pk)
        data = {
            'name': user.get_full_name(),
            'email': user.email,
            'role': primary_role(user),
            'status': 'ACTIVE' if user.is_active else 'INACTIVE',
            'position': user.position,
            'phone': user.phone,
        }
        data.update(self.get_json())
        form = UserUpdateForm(data=data, instance=user)
        user = update_user(request.user, user, validate_form(form))
        return JsonResponse(user.to_dict())

    put = patch

    def delete(self, request, pk):
        delete_user(request.user, get_object_or_404(CustomUser, pk=pk))
        return JsonResponse({'message': 'User deleted successfully'})


class CurrentUserView(ApiView):

    def get(self, request):
        return JsonResponse(request.user.to_dict())
