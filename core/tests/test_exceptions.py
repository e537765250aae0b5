"""Tests for the error envelope."""

from rest_framework import status

from core.tests.base import CampusAPITestCase


class ErrorEnvelopeTest(CampusAPITestCase):
    def test_unauthenticated_request_uses_envelope(self):
        response = self.client.get('/api/images/')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['status'], 'error')
        self.assertIn('message', response.data)
        self.assertEqual(response['WWW-Authenticate'], 'Bearer')

    def test_forbidden_role_uses_envelope(self):
        self.authenticate()
        response = self.client.get('/api/images/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['status'], 'error')

    def test_invalid_token_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = self.client.get('/api/users/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_health_ping(self):
        response = self.client.get('/api/health/ping/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'status': 'ok'})
