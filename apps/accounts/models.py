from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserRole(models.TextChoices):
    INSTALLER = 'installer', 'Installer'
    ADMIN = 'admin', 'Admin'


class UserStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


# Written only through the ledger recomputation's queryset update
LEDGER_CACHED_FIELDS = ('points', 'level')


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        # Stored lowercased: the unique index is case-sensitive, lookups are not
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)

    def get_by_natural_key(self, username):
        return self.get(email__iexact=username)


class User(AbstractBaseUser, PermissionsMixin):
    """Program participant: an installer earning points, or an admin."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)
    region = models.CharField(max_length=100, blank=True)

    # Program membership
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.INSTALLER
    )
    status = models.CharField(
        max_length=20,
        choices=UserStatus.choices,
        default=UserStatus.ACTIVE
    )
    invited_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='invitees'
    )

    # Cached projection of the points ledger. Written only by
    # apps.rewards.services.ledger.recompute_balance, never incremented.
    points = models.IntegerField(default=0, editable=False)
    level = models.PositiveSmallIntegerField(default=1, editable=False)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_4b85f2_idx'),
            models.Index(fields=['role', 'status'], name='users_role_5a1c0e_idx'),
            models.Index(fields=['created_at'], name='users_created_6b7d3a_idx'),
        ]

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        """
        Keep Django's is_active flag in step with program status.

        Updates of an existing row never write ``points`` or ``level``: an
        instance loaded before a ledger append would roll the cached
        balance back.
        """
        self.is_active = self.status != UserStatus.INACTIVE
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'status' in update_fields:
            update_fields = set(update_fields) | {'is_active'}

        if not self._state.adding and not kwargs.get('force_insert'):
            if update_fields is None:
                update_fields = [
                    field.name for field in self._meta.concrete_fields
                    if not field.primary_key
                ]
            update_fields = [
                name for name in update_fields
                if name not in LEDGER_CACHED_FIELDS
            ]

        if update_fields is not None:
            kwargs['update_fields'] = update_fields
        super().save(*args, **kwargs)

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN or self.is_superuser

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]
