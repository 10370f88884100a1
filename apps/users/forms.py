"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Forms for registering and updating barangay staff accounts.
-------------------------------------------------------------------------
"""
from typing import Any, Dict, Optional, Tuple
from django import forms
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

from apps.users.models import RoleCode

User = get_user_model()


def split_name(name: str) -> Tuple[str, str]:
    """Split a full name on the last space into first and last name."""
    first_name, _sep, last_name = (name or '').strip().rpartition(' ')
    if not first_name:
        first_name, last_name = last_name, ''
    return first_name, last_name


class UserRegistrationForm(forms.Form):
    """
    Registration of a staff account by an administrator.

    name is split on the last space into first and last name.
    """

    name = forms.CharField(max_length=300)
    email = forms.EmailField()
    password = forms.CharField(min_length=8, strip=False)
    role = forms.ChoiceField(choices=RoleCode.choices)
    position = forms.CharField(max_length=100, required=False)
    phone = forms.CharField(max_length=20, required=False)

    def clean_email(self) -> str:
        email = User.objects.normalize_email(self.cleaned_data['email'])
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError(_('A user with this email already exists.'))
        return email

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        cleaned_data['first_name'], cleaned_data['last_name'] = split_name(cleaned_data.get('name'))
        return cleaned_data

    def save(self):
        data = self.cleaned_data
        return User.objects.create_user(
            email=data['email'],
            password=data['password'],
            first_name=data['first_name'],
            last_name=data['last_name'],
            position=data.get('position') or '',
            phone=data.get('phone') or '',
            role=data['role'],
        )


class UserUpdateForm(forms.Form):
    """
    Update of a staff account's profile, role and active flag.

    ``status`` takes ACTIVE or INACTIVE and is exposed as is_active.
    """

    STATUS_CHOICES = [('ACTIVE', _('Active')), ('INACTIVE', _('Inactive'))]

    name = forms.CharField(max_length=300)
    email = forms.EmailField()
    role = forms.ChoiceField(choices=RoleCode.choices)
    status = forms.ChoiceField(choices=STATUS_CHOICES)
    position = forms.CharField(max_length=100, required=False)
    phone = forms.CharField(max_length=20, required=False)

    def __init__(self, *args, instance: Optional[Any] = None, **kwargs):
        self.instance = instance
        super().__init__(*args, **kwargs)

    def clean_email(self) -> str:
        email = User.objects.normalize_email(self.cleaned_data['email'])
        taken = User.objects.filter(email__iexact=email)
        if self.instance is not None:
            taken = taken.exclude(pk=self.instance.pk)
        if taken.exists():
            raise forms.ValidationError(_('Email already in use.'))
        return email

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        cleaned_data['first_name'], cleaned_data['last_name'] = split_name(cleaned_data.get('name'))
        cleaned_data['is_active'] = cleaned_data.get('status') == 'ACTIVE'
        return cleaned_data
