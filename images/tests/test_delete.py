"""Tests for the image delete endpoints and the reference check."""

from rest_framework import status

from content.tests.factories import ArticleFactory
from core.tests.base import CampusAdminTestCase
from images.tests.helpers import write_file


class ImageDeleteTest(CampusAdminTestCase):
    """Tests for DELETE /api/images/delete/"""

    def setUp(self):
        super().setUp()
        self.images = self.media_root / 'images'
        self.images.mkdir(parents=True, exist_ok=True)

    def _delete(self, data, url='/api/images/delete/'):
        return self.client.delete(url, data, format='json')

    def test_referenced_image_returns_409(self):
        write_file(self.images, 'hero.jpg')
        ArticleFactory(slug='welcome-week', featured_image='/api/images/images/hero.jpg')
        ArticleFactory(slug='alumni-night', featured_image='/api/images/images/hero.jpg')

        response = self._delete({'filename': 'hero.jpg'})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(
            response.data['message'], 'Image is in use by article(s): alumni-night, welcome-week'
        )
        self.assertEqual(len(response.data['data']['articles']), 2)
        self.assertTrue((self.images / 'hero.jpg').is_file())

    def test_unreferenced_image_is_deleted(self):
        write_file(self.images, 'hero.jpg')
        ArticleFactory(featured_image='/api/images/images/other.jpg')

        response = self._delete({'filename': 'hero.jpg'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse((self.images / 'hero.jpg').exists())

    def test_delete_by_url(self):
        write_file(self.images, 'hero.jpg')
        response = self._delete({'imageUrl': '/api/images/images/hero.jpg'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_temporary_image_url_does_not_touch_permanent_copy(self):
        write_file(self.images, 'x.jpg')
        write_file(self.media_root / 'temp_images', 'x.jpg')

        for url in ('/api/images/delete/', '/api/images/force-delete/'):
            with self.subTest(url=url):
                response = self._delete({'imageUrl': '/api/images/temp_images/x.jpg'}, url=url)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.assertTrue((self.images / 'x.jpg').is_file())
        self.assertTrue((self.media_root / 'temp_images' / 'x.jpg').is_file())

    def test_foreign_image_url_rejected(self):
        response = self._delete({'imageUrl': 'https://example.com/uploads/x.jpg'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_image_returns_404(self):
        response = self._delete({'filename': 'missing.jpg'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_traversal_returns_400(self):
        response = self._delete({'filename': '../../etc/passwd'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filename_required(self):
        response = self._delete({})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_faculty_cannot_delete(self):
        write_file(self.images, 'hero.jpg')
        self.authenticate(self.create_faculty())

        response = self._delete({'filename': 'hero.jpg'})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue((self.images / 'hero.jpg').is_file())

    def test_bulk_delete_reports_partition(self):
        write_file(self.images, 'a.jpg')
        response = self._delete({'filenames': ['a.jpg', 'nope.jpg']}, url='/api/images/bulk-delete/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['deleted'], ['a.jpg'])
        self.assertEqual(list(response.data['data']['failed']), ['nope.jpg'])

    def test_bulk_delete_requires_names(self):
        response = self._delete({'filenames': []}, url='/api/images/bulk-delete/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_force_delete_reports_dangling_references(self):
        write_file(self.images, 'hero.jpg')
        ArticleFactory(slug='welcome-week', featured_image='/api/images/images/hero.jpg')

        response = self._delete({'filename': 'hero.jpg'}, url='/api/images/force-delete/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [ref['slug'] for ref in response.data['data']['danglingReferences']], ['welcome-week']
        )
        self.assertFalse((self.images / 'hero.jpg').exists())

    def test_force_delete_is_audited(self):
        write_file(self.images, 'hero.jpg')
        with self.assertLogs('campus.audit', level='WARNING') as logs:
            self._delete({'filename': 'hero.jpg'}, url='/api/images/force-delete/')
        self.assertIn('image.force_delete images/hero.jpg', logs.output[0])


class ImagePromoteEndpointTest(CampusAdminTestCase):
    def test_promote(self):
        temp = self.media_root / 'temp_images'
        temp.mkdir(parents=True, exist_ok=True)
        write_file(temp, 'a.jpg')

        response = self.client.post(
            '/api/images/promote/', {'url': '/api/images/temp_images/a.jpg'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['url'], '/api/images/images/a.jpg')


class ImageListEndpointTest(CampusAdminTestCase):
    def test_list(self):
        images = self.media_root / 'images'
        images.mkdir(parents=True, exist_ok=True)
        for i in range(25):
            write_file(images, f'img{i:02d}.jpg', age_seconds=60 * (i + 1))

        response = self.client.get('/api/images/?page=3&limit=10')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(len(data['items']), 5)
        self.assertEqual(data['pagination'], {'page': 3, 'limit': 10, 'total': 25, 'totalPages': 3})
        self.assertEqual(data['items'][0]['url'], '/api/images/images/img20.jpg')

    def test_invalid_query_returns_400(self):
        response = self.client.get('/api/images/?limit=500')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get('/api/images/?startDate=2026-02-01&endDate=2026-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
