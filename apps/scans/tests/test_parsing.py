"""Tests for warranty code parsing."""

import pytest

from apps.scans.services import (
    parse_scanned_code,
    is_uuid4,
    RejectionReason,
    InvalidFormatError,
    InvalidUUIDError,
)

UNIT_ID = 'e9b3cb66-9341-4a8c-9b5d-c6b5cb65117e'
HOSTS = ['warranty.example.com', 'w.example.com']


def parse(raw):
    return parse_scanned_code(raw, hosts=HOSTS)


class TestAcceptedShapes:
    """Every accepted shape yields the same canonical identifier."""

    @pytest.mark.parametrize('raw', [
        f'https://warranty.example.com/p/{UNIT_ID}',
        f'https://w.example.com/p/{UNIT_ID}',
        UNIT_ID,
    ])
    def test_shapes_extract_same_identifier(self, raw):
        assert parse(raw).unit_id == UNIT_ID

    def test_long_and_short_links_agree(self):
        long_form = parse(f'https://warranty.example.com/p/{UNIT_ID}')
        short_form = parse(f'https://w.example.com/p/{UNIT_ID}')

        assert long_form.unit_id == short_form.unit_id
        assert long_form.host == 'warranty.example.com'
        assert short_form.host == 'w.example.com'

    def test_bare_identifier(self):
        parsed = parse(UNIT_ID)

        assert parsed.is_bare
        assert parsed.host is None

    @pytest.mark.parametrize('raw', [
        f'  https://warranty.example.com/p/{UNIT_ID}\n',
        f'http://warranty.example.com/p/{UNIT_ID}',
        f'warranty.example.com/p/{UNIT_ID}',
        f'https://w.example.com/p/{UNIT_ID}/',
        f'HTTPS://W.EXAMPLE.COM/P/{UNIT_ID.upper()}',
    ])
    def test_tolerated_variations(self, raw):
        assert parse(raw).unit_id == UNIT_ID

    def test_canonical_lowercase(self):
        assert parse(UNIT_ID.upper()).unit_id == UNIT_ID

    def test_hosts_from_settings(self, settings):
        settings.REWARDS = {**settings.REWARDS, 'WARRANTY_HOSTS': ['scan.example.org']}

        assert parse_scanned_code(f'https://scan.example.org/p/{UNIT_ID}').unit_id == UNIT_ID
        with pytest.raises(InvalidFormatError):
            parse_scanned_code(f'https://warranty.example.com/p/{UNIT_ID}')


class TestRejections:
    """Malformed text is classified without side effects."""

    @pytest.mark.parametrize('raw', [
        'not-a-url',
        '',
        '   ',
        f'https://evil.example.com/p/{UNIT_ID}',
        f'https://warranty.example.com.evil.com/p/{UNIT_ID}',
        f'https://warranty.example.com/x/{UNIT_ID}',
        f'https://warranty.example.com/p/{UNIT_ID}/extra',
        f'https://warranty.example.com/p/{UNIT_ID}?ref=1',
        f'ftp://warranty.example.com/p/{UNIT_ID}',
        'https://warranty.example.com/p/',
        'https://warranty.example.com/p/not-a-uuid',
        UNIT_ID.replace('-', ''),
        UNIT_ID + 'ff',
    ])
    def test_invalid_format(self, raw):
        with pytest.raises(InvalidFormatError) as exc_info:
            parse(raw)

        assert exc_info.value.reason == RejectionReason.INVALID_FORMAT
        assert exc_info.value.retryable is False

    @pytest.mark.parametrize('raw', [None, 12345, b'bytes'])
    def test_non_text_input(self, raw):
        with pytest.raises(InvalidFormatError):
            parse(raw)

    def test_overlong_input(self):
        with pytest.raises(InvalidFormatError):
            parse('https://warranty.example.com/p/' + 'a' * 5000)

    @pytest.mark.parametrize('token', [
        'c232ab00-9414-11ec-b3c8-9f6bdeced846',  # version 1
        'e9b3cb66-9341-3a8c-9b5d-c6b5cb65117e',  # version 3
        'e9b3cb66-9341-4a8c-7b5d-c6b5cb65117e',  # variant nibble 7
        'e9b3cb66-9341-4a8c-cb5d-c6b5cb65117e',  # variant nibble c
        '00000000-0000-0000-0000-000000000000',
    ])
    def test_wrong_version_or_variant(self, token):
        for raw in (token, f'https://w.example.com/p/{token}'):
            with pytest.raises(InvalidUUIDError) as exc_info:
                parse(raw)

            assert exc_info.value.reason == RejectionReason.INVALID_UUID

    @pytest.mark.parametrize('label', ['AB12CD', 'abc123', '9Z9Z9Z'])
    def test_printed_labels_rejected(self, label):
        with pytest.raises(InvalidFormatError) as exc_info:
            parse(label)

        assert 'label' in exc_info.value.detail.lower()


class TestIsUUID4:
    def test_v4(self):
        assert is_uuid4(UNIT_ID)

    def test_v1(self):
        assert not is_uuid4('c232ab00-9414-11ec-b3c8-9f6bdeced846')
