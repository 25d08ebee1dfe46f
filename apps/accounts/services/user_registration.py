"""Installer account creation service."""

import logging
from typing import Optional

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole, UserStatus
from .exceptions import UserRegistrationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def create_installer(
    *,
    email: str,
    password: str,
    display_name: str = "",
    phone: Optional[str] = None,
    region: str = "",
    invited_by: Optional[User] = None
) -> User:
    """
    Create an installer account on behalf of an admin.

    Installers start with an empty ledger, so points and level keep
    their model defaults (0 and 1).

    Args:
        email: Installer's email address
        password: Initial password (will be hashed)
        display_name: Optional display name
        phone: Optional phone number, unique across users
        region: Optional region label
        invited_by: Admin creating the account

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email or phone is already taken
    """
    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name,
            phone=phone or None,
            region=region,
            role=UserRole.INSTALLER,
            status=UserStatus.ACTIVE,
            invited_by=invited_by,
        )
    except IntegrityError:
        raise UserRegistrationError("A user with this email or phone already exists")

    logger.info(
        "Installer account %s created by %s",
        user.id, invited_by.id if invited_by else None,
    )
    return user
