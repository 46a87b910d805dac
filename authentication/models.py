"""
Authentication models for Saathi Backend.

Contains:
- Custom User model with role-based access control

Citizens raise SOS cases, officers respond to them, admins dispatch and
supervise. Officer field data (badge, station, position) lives on
responders.Officer, linked one-to-one to the user.
"""

from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin

from core.models import BaseModel


class UserRole(models.TextChoices):
    """User role constants."""
    CITIZEN = 'citizen', 'Citizen'
    OFFICER = 'officer', 'Officer'
    ADMIN = 'admin', 'Admin'


class UserManager(BaseUserManager):
    """
    Custom user manager for the Saathi User model.
    """

    def get_queryset(self):
        """Return only non-deleted users by default."""
        return super().get_queryset().filter(is_deleted=False)

    def create_user(self, identifier, password=None, **extra_fields):
        """
        Create and return a regular user.

        Args:
            identifier: Unique identifier (phone or email)
            password: User password
            **extra_fields: Additional fields
        """
        if not identifier:
            raise ValueError('User must have an identifier')

        user = self.model(identifier=identifier, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_officer(self, identifier, password, **extra_fields):
        """Create a user with the officer role."""
        extra_fields['role'] = UserRole.OFFICER
        return self.create_user(identifier, password, **extra_fields)

    def create_admin(self, identifier, password, **extra_fields):
        """Create a dispatcher/admin user."""
        extra_fields['role'] = UserRole.ADMIN
        extra_fields.setdefault('is_staff', True)
        return self.create_user(identifier, password, **extra_fields)

    def create_superuser(self, identifier, password, **extra_fields):
        """Create a superuser for admin access."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(identifier, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin, BaseModel):
    """
    Custom User model for Saathi.

    - UUID primary key (inherited from BaseModel)
    - identifier field instead of username (phone or email)
    - Role-based access control
    - Soft delete only
    """

    identifier = models.CharField(
        max_length=255,
        unique=True,
        help_text="Unique identifier (phone number or email)"
    )

    name = models.CharField(
        max_length=120,
        blank=True,
        help_text="Display name"
    )

    phone = models.CharField(
        max_length=30,
        blank=True,
        help_text="Contact phone number"
    )

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CITIZEN,
        db_index=True,
        help_text="User role determining access level"
    )

    is_staff = models.BooleanField(
        default=False,
        help_text="Designates whether user can access admin site"
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Designates whether user account is active"
    )

    objects = UserManager()

    USERNAME_FIELD = 'identifier'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'saathi_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'is_active'], name='user_role_active_idx'),
        ]

    def __str__(self):
        return self.name or self.identifier

    @property
    def is_citizen(self):
        return self.role == UserRole.CITIZEN

    @property
    def is_officer(self):
        return self.role == UserRole.OFFICER

    @property
    def is_admin(self):
        """Admins dispatch, reassign and force-close cases."""
        return self.role == UserRole.ADMIN or self.is_superuser
