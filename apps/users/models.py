"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Custom User model with role-based access control (RBAC).
             Barangay officials log in with their email address and
             hold one or more database-driven roles.
-------------------------------------------------------------------------
"""
import uuid
from typing import Optional, List
from django.contrib.auth.models import AbstractUser, BaseUserManager, Group
from django.db import models
from django.utils.translation import gettext_lazy as _


class RoleCode(models.TextChoices):
    """
    Standard role codes for the system.

    These are used as reference codes when creating Role objects.
    """
    SUPER_ADMIN = 'SUPER_ADMIN', _('Super Administrator')
    ADMIN = 'ADMIN', _('Administrator')
    CAPTAIN = 'CAPTAIN', _('Punong Barangay (Captain)')
    SECRETARY = 'SECRETARY', _('Barangay Secretary')
    TREASURER = 'TREASURER', _('Barangay Treasurer')


class Role(models.Model):
    """
    Dynamic Role model for database-driven RBAC.

    Linked 1-to-1 with Django's Group model to leverage standard
    Django permissions system. Roles can be assigned to users
    via ManyToMany relationship.

    Attributes:
        name: Human-readable role name.
        code: Unique identifier for the role (see RoleCode).
        description: Detailed description of the role's responsibilities.
        group: Associated Django Group for permission management.
        is_system_role: If True, role cannot be deleted by users.
    """

    name = models.CharField(
        max_length=100,
        verbose_name=_('Role Name'),
        help_text=_('Human-readable name for the role.')
    )
    code = models.SlugField(
        max_length=50,
        unique=True,
        verbose_name=_('Role Code'),
        help_text=_('Unique identifier code (e.g., CAPTAIN, TREASURER).')
    )
    description = models.TextField(
        blank=True,
        verbose_name=_('Description'),
        help_text=_('Detailed description of role responsibilities.')
    )
    group = models.OneToOneField(
        Group,
        on_delete=models.CASCADE,
        related_name='bms_role',
        verbose_name=_('Django Group'),
        help_text=_('Associated Django Group for permissions.')
    )
    is_system_role = models.BooleanField(
        default=False,
        verbose_name=_('System Role'),
        help_text=_('System roles cannot be deleted by users.')
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Role')
        verbose_name_plural = _('Roles')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        """Create or update the associated Django Group."""
        if not self.pk:
            group, _created = Group.objects.get_or_create(name=self.name)
            self.group = group
        elif self.group and self.group.name != self.name:
            self.group.name = self.name
            self.group.save()
        super().save(*args, **kwargs)

    @classmethod
    def get_by_code(cls, code: str) -> Optional['Role']:
        """
        Get a role by its code.

        Args:
            code: The role code to look up.

        Returns:
            Role instance or None if not found.
        """
        try:
            return cls.objects.get(code=code)
        except cls.DoesNotExist:
            return None

    @classmethod
    def get_or_create_system_role(cls, code: str) -> 'Role':
        """Return the system role for a RoleCode, creating it when missing."""
        role = cls.get_by_code(code)
        if role is None:
            role = cls.objects.create(
                name=str(RoleCode(code).label),
                code=code,
                is_system_role=True,
            )
        return role


class CustomUserManager(BaseUserManager):
    """
    Custom manager for CustomUser model.

    Provides methods to create regular users and superusers keyed
    by email address.
    """

    def create_user(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields
    ) -> 'CustomUser':
        """
        Create and return a regular user.

        Args:
            email: User's email address (login identifier).
            password: User's password.
            **extra_fields: Additional fields for the user model. A
                ``role`` code may be passed and is assigned via the
                roles relation.

        Returns:
            The created CustomUser instance.

        Raises:
            ValueError: If email is not provided.
        """
        if not email:
            raise ValueError(_('Email is required for user creation.'))

        email = self.normalize_email(email)
        role_code = extra_fields.pop('role', None)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)

        if role_code:
            user.roles.add(Role.get_or_create_system_role(role_code))
        return user

    def create_superuser(
        self,
        email: str,
        password: Optional[str] = None,
        **extra_fields
    ) -> 'CustomUser':
        """Create and return a superuser holding the SUPER_ADMIN role."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', RoleCode.SUPER_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """
    Custom User model for BMS.

    Uses the email address as the unique identifier instead of
    username.

    Attributes:
        email: Login identifier.
        roles: Roles held by the user.
        position: Official title (e.g., Kagawad, Barangay Secretary).
        phone: Contact phone number.
    """

    username = None

    public_id = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        db_index=True,
        verbose_name=_('Public ID'),
        help_text=_('Unique UUID for external reference.')
    )
    email = models.EmailField(
        unique=True,
        verbose_name=_('Email Address')
    )
    roles = models.ManyToManyField(
        Role,
        blank=True,
        related_name='users',
        verbose_name=_('Roles'),
        help_text=_('Roles assigned to this user.')
    )
    position = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('Position'),
        help_text=_('Official title (e.g., Kagawad, Barangay Secretary).')
    )
    phone = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('Phone Number')
    )
    first_name = models.CharField(
        max_length=150,
        verbose_name=_('First Name')
    )
    last_name = models.CharField(
        max_length=150,
        blank=True,
        verbose_name=_('Last Name')
    )

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name']

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        ordering = ['first_name', 'last_name']

    def __str__(self) -> str:
        return f"{self.get_full_name() or self.email} ({self.get_role_display()})"

    def get_full_name(self) -> str:
        """Return the user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    def get_short_name(self) -> str:
        return self.first_name

    def get_display_name(self) -> str:
        """Full name, falling back to the email address."""
        return self.get_full_name() or self.email

    def get_role_display(self) -> str:
        """Return comma-separated list of role names."""
        role_names = list(self.roles.values_list('name', flat=True))
        return ', '.join(role_names) if role_names else 'No Role'

    def has_role(self, role_code: str) -> bool:
        """Check if user has a specific role by code."""
        return self.roles.filter(code=role_code).exists()

    def has_any_role(self, role_codes: List[str]) -> bool:
        """
        Check if user has any of the specified roles.

        Args:
            role_codes: List of role codes to check.

        Returns:
            True if user has any of the roles or is a superuser.
        """
        if self.is_superuser:
            return True
        return self.roles.filter(code__in=role_codes).exists()

    def get_role_codes(self) -> List[str]:
        """Return list of role codes assigned to this user."""
        return list(self.roles.values_list('code', flat=True))

    def is_super_admin(self) -> bool:
        return self.is_superuser or self.has_role(RoleCode.SUPER_ADMIN)

    def is_captain(self) -> bool:
        return self.has_role(RoleCode.CAPTAIN)

    def to_dict(self) -> dict:
        return {
            'id': self.pk,
            'public_id': str(self.public_id),
            'email': self.email,
            'name': self.get_full_name(),
            'position': self.position,
            'phone': self.phone,
            'roles': self.get_role_codes(),
            'is_active': self.is_active,
        }
