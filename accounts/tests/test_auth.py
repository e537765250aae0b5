"""Tests for registration, login and token endpoints."""

from django.contrib.auth import get_user_model
from rest_framework import status

from accounts.tests.factories import UserFactory
from accounts.tokens import TOKEN_TYPE_REFRESH, create_refresh_token, decode_token
from core.tests.base import CampusAPITestCase

User = get_user_model()


class RegistrationTest(CampusAPITestCase):
    """Tests for POST /api/users/auth/register/"""

    def _payload(self, **overrides):
        data = {
            'username': 'newstudent',
            'email': 'NewStudent@Example.com',
            'password': 'Campus-pass-2026',
            'first_name': 'New',
            'last_name': 'Student',
        }
        data.update(overrides)
        return data

    def test_registration_creates_student_and_returns_tokens(self):
        response = self.client.post('/api/users/auth/register/', self._payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'success')
        self.assertEqual(response.data['data']['user']['role'], User.ROLE_STUDENT)
        self.assertIn('accessToken', response.data['data']['tokens'])

        user = User.objects.get(username='newstudent')
        self.assertEqual(user.email, 'newstudent@example.com')
        self.assertTrue(user.check_password('Campus-pass-2026'))

    def test_role_cannot_be_chosen_at_registration(self):
        response = self.client.post(
            '/api/users/auth/register/', self._payload(role='admin'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username='newstudent').role, User.ROLE_STUDENT)

    def test_duplicate_email_rejected(self):
        UserFactory(email='newstudent@example.com')
        response = self.client.post('/api/users/auth/register/', self._payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['data']['errors'])


class LoginTest(CampusAPITestCase):
    """Tests for POST /api/users/auth/login/"""

    def test_login_with_username(self):
        UserFactory(username='lecturer1')
        response = self.client.post(
            '/api/users/auth/login/', {'login': 'lecturer1', 'password': 'testpass123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('accessToken', response.data['data']['tokens'])

    def test_login_with_email(self):
        UserFactory(username='lecturer1')
        response = self.client.post(
            '/api/users/auth/login/',
            {'login': 'Lecturer1@example.com', 'password': 'testpass123'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_password_returns_401(self):
        UserFactory(username='lecturer1')
        response = self.client.post(
            '/api/users/auth/login/', {'login': 'lecturer1', 'password': 'nope'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Invalid credentials')

    def test_inactive_user_returns_401(self):
        UserFactory(username='lecturer1', is_active=False)
        response = self.client.post(
            '/api/users/auth/login/', {'login': 'lecturer1', 'password': 'testpass123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_is_rate_limited(self):
        for _ in range(10):
            self.client.post('/api/users/auth/login/', {'login': 'x', 'password': 'y'}, format='json')

        response = self.client.post(
            '/api/users/auth/login/', {'login': 'x', 'password': 'y'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertIn('Retry-After', response)


class TokenTest(CampusAPITestCase):
    def test_me_returns_current_user(self):
        self.authenticate()
        response = self.client.get('/api/users/auth/me/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['username'], self.user.username)

    def test_refresh_token_cannot_authenticate(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {create_refresh_token(self.user)}')
        response = self.client.get('/api/users/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_issues_new_pair(self):
        response = self.client.post(
            '/api/users/auth/refresh/',
            {'refreshToken': create_refresh_token(self.user)},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        access = response.data['data']['tokens']['accessToken']
        self.assertEqual(decode_token(access)['sub'], str(self.user.pk))

    def test_refresh_token_carries_type(self):
        payload = decode_token(create_refresh_token(self.user), TOKEN_TYPE_REFRESH)
        self.assertEqual(payload['role'], self.user.role)


class AdminUsersTest(CampusAPITestCase):
    """Tests for /api/users/admin/"""

    def setUp(self):
        super().setUp()
        self.admin = self.create_admin()

    def test_list_requires_admin(self):
        self.authenticate(self.create_faculty())
        response = self.client.get('/api/users/admin/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filters_by_role(self):
        self.create_faculty()
        self.authenticate(self.admin)

        response = self.client.get('/api/users/admin/?role=faculty')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        items = response.data['data']['items']
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]['role'], 'faculty')
        self.assertEqual(response.data['data']['pagination']['total'], 1)

    def test_admin_can_promote_user(self):
        self.authenticate(self.admin)
        response = self.client.patch(
            f'/api/users/admin/{self.user.pk}/', {'role': 'faculty'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, User.ROLE_FACULTY)

    def test_admin_cannot_demote_self(self):
        self.authenticate(self.admin)
        response = self.client.patch(
            f'/api/users/admin/{self.admin.pk}/', {'role': 'student'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_user_returns_404(self):
        self.authenticate(self.admin)
        response = self.client.get('/api/users/admin/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
