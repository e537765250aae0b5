"""Tests for the public student registration endpoint."""

from unittest.mock import Mock, patch

import requests
from django.test import override_settings
from rest_framework import status

from core.tests.base import CampusAPITestCase
from core.throttling import DdosGuard
from students.models import StudentRegistration

URL = '/api/students/register/'


def registration(**overrides):
    data = {
        'name': '  Nguyen Van An  ',
        'email': ' An.Nguyen@Example.COM ',
        'phone': '0912345678',
        'major': 'Computer Science',
    }
    data.update(overrides)
    return data


def recaptcha_reply(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class StudentRegisterTest(CampusAPITestCase):
    """Tests for POST /api/students/register/"""

    def test_registration_is_stored(self):
        response = self.client.post(URL, registration(), format='json', HTTP_USER_AGENT='pytest-browser')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = StudentRegistration.objects.get(pk=response.data['data']['id'])
        self.assertEqual(record.name, 'Nguyen Van An')
        self.assertEqual(record.email, 'an.nguyen@example.com')
        self.assertEqual(record.status, StudentRegistration.STATUS_NEW)
        self.assertEqual(record.ip_address, '127.0.0.1')
        self.assertEqual(record.user_agent, 'pytest-browser')

    def test_international_phone_format(self):
        response = self.client.post(URL, registration(phone='+84912345678'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_invalid_fields_rejected(self):
        for field, value in (
            ('email', 'not-an-email'),
            ('email', 'a@b..com'),
            ('email', 'x@-y.com'),
            ('email', 'a@b.c,d'),
            ('phone', '12345'),
            ('phone', '+1912345678'),
            ('facebook', 'facebook.com/someone'),
            ('facebook', 'ftp://facebook.com/someone'),
            ('name', ''),
        ):
            with self.subTest(field=field, value=value):
                response = self.client.post(
                    URL, registration(**{field: value}), format='json',
                    HTTP_X_TEST_BYPASS_RL='true',
                )
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, response.data['data']['errors'])
        self.assertEqual(StudentRegistration.objects.count(), 0)

    def test_facebook_link_accepted(self):
        response = self.client.post(
            URL, registration(facebook='https://facebook.com/an.nguyen'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_fourth_registration_in_a_minute_is_rate_limited(self):
        for _ in range(3):
            self.assertEqual(
                self.client.post(URL, registration(), format='json').status_code,
                status.HTTP_201_CREATED,
            )

        response = self.client.post(URL, registration(), format='json')

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response.data['status'], 'error')
        self.assertGreater(response.data['data']['remainingSec'], 0)
        self.assertIn('Retry-After', response)
        self.assertEqual(StudentRegistration.objects.count(), 3)

    def test_rate_limit_bypass_header(self):
        for _ in range(5):
            response = self.client.post(
                URL, registration(), format='json', HTTP_X_TEST_BYPASS_RL='true'
            )
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_ddos_guard_runs_before_rate_limit(self):
        # Frozen clock: every request lands in the same one-second bucket
        guard = DdosGuard(threshold=1, sustain_seconds=0, block_seconds=60, clock=lambda: 1000.0)

        with patch('core.throttling.get_ddos_guard', return_value=guard):
            first = self.client.post(URL, registration(), format='json')
            second = self.client.post(URL, registration(), format='json')
            blocked = self.client.post(URL, registration(), format='json')
            still_blocked = self.client.post(URL, registration(), format='json')

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)

        self.assertEqual(blocked.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(blocked.data['data'], {'blockMs': 60000, 'strikes': 1})

        self.assertEqual(still_blocked.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(still_blocked.data['data'], {'remainingMs': 60000, 'remainingMin': 1})
        self.assertEqual(StudentRegistration.objects.count(), 2)

    def test_ddos_bypass_header(self):
        guard = DdosGuard(threshold=1, sustain_seconds=0, block_seconds=60, clock=lambda: 1000.0)

        with patch('core.throttling.get_ddos_guard', return_value=guard):
            for _ in range(3):
                response = self.client.post(
                    URL, registration(), format='json', HTTP_X_TEST_BYPASS_DDOS='true'
                )
                self.assertEqual(response.status_code, status.HTTP_201_CREATED)


@override_settings(RECAPTCHA_ENABLED=True, RECAPTCHA_SECRET_KEY='test-secret')
class RecaptchaTest(CampusAPITestCase):
    """reCAPTCHA verification when enabled."""

    @patch('students.recaptcha.requests.post')
    def test_valid_token_accepted(self, mock_post):
        mock_post.return_value = recaptcha_reply({'success': True})

        response = self.client.post(URL, registration(recaptchaToken='token-123'), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sent = mock_post.call_args.kwargs['data']
        self.assertEqual(sent['secret'], 'test-secret')
        self.assertEqual(sent['response'], 'token-123')
        self.assertEqual(sent['remoteip'], '127.0.0.1')
        self.assertEqual(mock_post.call_args.kwargs['timeout'], 5)

    @patch('students.recaptcha.requests.post')
    def test_rejected_token(self, mock_post):
        mock_post.return_value = recaptcha_reply({'success': False, 'error-codes': ['invalid-input-response']})

        response = self.client.post(URL, registration(recaptchaToken='bad'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('recaptcha', response.data['data']['errors'])
        self.assertEqual(StudentRegistration.objects.count(), 0)

    @patch('students.recaptcha.requests.post')
    def test_missing_token(self, mock_post):
        response = self.client.post(URL, registration(), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_post.assert_not_called()

    @patch('students.recaptcha.requests.post', side_effect=requests.Timeout)
    def test_verification_timeout_fails_closed(self, mock_post):
        response = self.client.post(URL, registration(recaptchaToken='token-123'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(StudentRegistration.objects.count(), 0)

    @patch('students.recaptcha.requests.post')
    def test_non_object_reply_fails_closed(self, mock_post):
        mock_post.return_value = recaptcha_reply(['unexpected'])

        response = self.client.post(URL, registration(recaptchaToken='token-123'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('recaptcha', response.data['data']['errors'])
        self.assertEqual(StudentRegistration.objects.count(), 0)

    @override_settings(RECAPTCHA_SECRET_KEY='')
    @patch('students.recaptcha.requests.post')
    def test_missing_secret_rejects(self, mock_post):
        response = self.client.post(URL, registration(recaptchaToken='token-123'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('recaptcha', response.data['data']['errors'])
        mock_post.assert_not_called()
