"""Tests for core utility functions."""

from django.test import SimpleTestCase
from rest_framework.test import APIRequestFactory

from core.utils import (
    PathValidationError,
    get_client_ip,
    normalize_client_ip,
    sanitize_filename,
    validate_filename,
)


class SanitizeFilenameTest(SimpleTestCase):
    """Tests for sanitize_filename function."""

    def test_takes_basename(self):
        self.assertEqual(sanitize_filename('../../etc/passwd'), 'passwd')
        self.assertEqual(sanitize_filename('C:\\Users\\me\\photo.png'), 'photo.png')

    def test_replaces_unsafe_characters(self):
        self.assertEqual(sanitize_filename('my photo (1).jpg'), 'my_photo__1_.jpg')

    def test_keeps_safe_names(self):
        self.assertEqual(sanitize_filename('20260101-abc_def.jpg'), '20260101-abc_def.jpg')


class ValidateFilenameTest(SimpleTestCase):
    """Tests for validate_filename function."""

    def test_valid_filename_passes(self):
        self.assertEqual(validate_filename('20260101-ab12.jpg'), '20260101-ab12.jpg')

    def test_empty_filename_fails(self):
        with self.assertRaises(PathValidationError):
            validate_filename('')

    def test_dot_names_fail(self):
        for name in ('.', '..'):
            with self.assertRaises(PathValidationError):
                validate_filename(name)

    def test_traversal_fails(self):
        for name in ('../secret.jpg', 'a/b.jpg', 'a\\b.jpg', 'bad name.jpg', 'x\x00.jpg'):
            with self.assertRaises(PathValidationError):
                validate_filename(name)


class ClientIpTest(SimpleTestCase):
    def test_ipv4_mapped_collapses(self):
        self.assertEqual(normalize_client_ip('::ffff:192.168.1.5'), '192.168.1.5')

    def test_missing_address(self):
        self.assertEqual(normalize_client_ip(None), 'unknown')
        self.assertEqual(normalize_client_ip(''), 'unknown')

    def test_unparseable_value_is_stripped(self):
        self.assertEqual(normalize_client_ip(' not-an-ip '), 'not-an-ip')

    def test_forwarded_header_ignored_without_proxies(self):
        request = APIRequestFactory().get(
            '/', REMOTE_ADDR='10.0.0.9', HTTP_X_FORWARDED_FOR='1.2.3.4'
        )
        self.assertEqual(get_client_ip(request), '10.0.0.9')
