"""Tests for the admin registration endpoints."""

from rest_framework import status

from core.tests.base import CampusAdminTestCase
from students.models import StudentRegistration
from students.tests.factories import StudentRegistrationFactory


class RegistrationListTest(CampusAdminTestCase):
    """Tests for GET /api/students/registrations/"""

    def test_list_paginates(self):
        StudentRegistrationFactory.create_batch(12)

        response = self.client.get('/api/students/registrations/?page=2')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['items']), 2)
        self.assertEqual(
            response.data['data']['pagination'], {'page': 2, 'limit': 10, 'total': 12, 'totalPages': 2}
        )

    def test_filter_by_status(self):
        StudentRegistrationFactory(status=StudentRegistration.STATUS_ENROLLED)
        StudentRegistrationFactory()

        response = self.client.get('/api/students/registrations/?status=enrolled')

        items = response.data['data']['items']
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]['status'], 'enrolled')

    def test_search(self):
        StudentRegistrationFactory(name='Tran Thi Binh', major='Architecture')
        StudentRegistrationFactory(name='Le Van Cuong')

        response = self.client.get('/api/students/registrations/?search=architecture')

        self.assertEqual([i['name'] for i in response.data['data']['items']], ['Tran Thi Binh'])

    def test_faculty_forbidden(self):
        self.authenticate(self.create_faculty())
        response = self.client.get('/api/students/registrations/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class RegistrationStatusTest(CampusAdminTestCase):
    """Tests for PATCH /api/students/registrations/<id>/status/"""

    def test_update_status(self):
        record = StudentRegistrationFactory()

        response = self.client.patch(
            f'/api/students/registrations/{record.pk}/status/', {'status': 'contacted'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], 'contacted')
        record.refresh_from_db()
        self.assertEqual(record.status, StudentRegistration.STATUS_CONTACTED)

    def test_invalid_status(self):
        record = StudentRegistrationFactory()
        response = self.client.patch(
            f'/api/students/registrations/{record.pk}/status/', {'status': 'graduated'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_registration(self):
        response = self.client.patch(
            '/api/students/registrations/00000000-0000-0000-0000-000000000000/status/',
            {'status': 'contacted'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
