"""
Warranty code parsing.

Accepted shapes, case-insensitive, surrounding whitespace ignored::

    https://<long host>/p/<uuid>
    https://<short host>/p/<uuid>
    <uuid>

The scheme is optional (``http`` or ``https``) and a trailing slash is
allowed. Parsing is pure: no database, no registry.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from django.conf import settings

from .exceptions import InvalidFormatError, InvalidUUIDError

UUID_SHAPE = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE,
)
UUID_V4 = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$',
    re.IGNORECASE,
)
PRINTED_LABEL = re.compile(r'^[0-9a-z]{6}$', re.IGNORECASE)

MAX_CODE_LENGTH = 2048


@dataclass(frozen=True)
class ParsedCode:
    """A syntactically valid unit identifier extracted from scanned text."""

    unit_id: str
    host: Optional[str] = None

    @property
    def is_bare(self) -> bool:
        return self.host is None


def _url_pattern(hosts: Sequence[str]):
    alternatives = '|'.join(re.escape(host) for host in hosts)
    return re.compile(
        rf'^(?:https?://)?(?P<host>{alternatives})/p/(?P<token>[^/?#\s]+)/?$',
        re.IGNORECASE,
    )


def is_uuid4(value: str) -> bool:
    return bool(UUID_V4.match(value))


def parse_scanned_code(raw: str, *, hosts: Optional[Sequence[str]] = None) -> ParsedCode:
    """
    Extract the unit identifier from raw scanned text.

    Args:
        raw: Text decoded from the QR code or typed by the user
        hosts: Accepted warranty link hosts (default REWARDS['WARRANTY_HOSTS'])

    Returns:
        ParsedCode with the canonical lowercase hyphenated identifier

    Raises:
        InvalidFormatError: Text matches no accepted shape
        InvalidUUIDError: Identifier position holds a UUID that is not version 4
    """
    if not isinstance(raw, str):
        raise InvalidFormatError()

    text = raw.strip()
    if not text or len(text) > MAX_CODE_LENGTH:
        raise InvalidFormatError()

    if hosts is None:
        hosts = settings.REWARDS['WARRANTY_HOSTS']

    host = None
    match = _url_pattern(hosts).match(text) if hosts else None
    if match:
        host = match.group('host').lower()
        token = match.group('token')
    elif PRINTED_LABEL.match(text):
        raise InvalidFormatError('Printed label codes are not accepted. Please scan the QR code.')
    else:
        token = text

    if not UUID_SHAPE.match(token):
        raise InvalidFormatError()
    if not is_uuid4(token):
        raise InvalidUUIDError(f'{token} is not a valid unit identifier.')

    return ParsedCode(unit_id=token.lower(), host=host)
