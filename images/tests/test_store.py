"""Tests for AssetStore promotion, bulk delete and listing."""

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from content.tests.factories import ArticleFactory
from core.exceptions import ValidationError
from core.storage import LocalStorageBackend
from core.tests.base import MediaRootMixin
from images.exceptions import ImageNotFoundError, InvalidFilenameError
from images.store import AssetStore, ImageListFilters
from images.tests.helpers import write_file


class AssetStoreTestCase(MediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.storage = LocalStorageBackend(root=self.media_root)
        self.store = AssetStore(storage=self.storage)
        self.images = self.media_root / 'images'
        self.temp_images = self.media_root / 'temp_images'


class PromoteTest(AssetStoreTestCase):
    def test_promote_moves_temp_image(self):
        write_file(self.temp_images, 'a.jpg')

        url = self.store.promote('/api/images/temp_images/a.jpg')

        self.assertEqual(url, '/api/images/images/a.jpg')
        self.assertTrue((self.images / 'a.jpg').is_file())
        self.assertFalse((self.temp_images / 'a.jpg').exists())

    def test_promote_accepts_absolute_url(self):
        write_file(self.temp_images, 'a.jpg')
        url = self.store.promote('https://cms.example.edu/api/images/temp_images/a.jpg')
        self.assertEqual(url, '/api/images/images/a.jpg')

    def test_promote_is_idempotent(self):
        write_file(self.temp_images, 'a.jpg')
        self.store.promote('/api/images/temp_images/a.jpg')

        self.assertEqual(
            self.store.promote('/api/images/temp_images/a.jpg'), '/api/images/images/a.jpg'
        )
        self.assertEqual(
            self.store.promote('/api/images/images/a.jpg'), '/api/images/images/a.jpg'
        )

    def test_promote_keeps_existing_permanent_copy(self):
        write_file(self.images, 'a.jpg', b'permanent')
        write_file(self.temp_images, 'a.jpg', b'temporary')

        url = self.store.promote('/api/images/temp_images/a.jpg')

        self.assertEqual(url, '/api/images/images/a.jpg')
        self.assertEqual((self.images / 'a.jpg').read_bytes(), b'permanent')
        self.assertFalse((self.temp_images / 'a.jpg').exists())

    def test_promote_missing_image(self):
        with self.assertRaises(ImageNotFoundError):
            self.store.promote('/api/images/temp_images/missing.jpg')
        with self.assertRaises(ImageNotFoundError):
            self.store.promote('/api/images/images/missing.jpg')

    def test_promote_rejects_foreign_urls(self):
        for url in ('/media/a.jpg', '/api/images/temp_uploads/a.jpg', '', '/api/images/temp_images/'):
            with self.subTest(url=url):
                with self.assertRaises(InvalidFilenameError):
                    self.store.promote(url)

    def test_temporary_url_detection(self):
        self.assertTrue(AssetStore.is_temporary_url('/api/images/temp_images/a.jpg'))
        self.assertFalse(AssetStore.is_temporary_url('/api/images/images/a.jpg'))
        self.assertFalse(AssetStore.is_temporary_url('https://elsewhere.example/a.jpg'))


class BulkDeleteTest(AssetStoreTestCase):
    def test_each_name_succeeds_or_fails_independently(self):
        write_file(self.images, 'a.jpg')
        write_file(self.images, 'b.jpg')
        write_file(self.images, 'used.jpg')
        ArticleFactory(slug='open-day', featured_image='/api/images/images/used.jpg')

        result = self.store.bulk_delete(['a.jpg', 'missing.jpg', '../etc/passwd', 'used.jpg', 'b.jpg', 'a.jpg'])

        self.assertEqual(result.deleted, ['a.jpg', 'b.jpg'])
        self.assertEqual(set(result.failed), {'missing.jpg', '../etc/passwd', 'used.jpg'})
        self.assertEqual(result.failed['missing.jpg'], 'Image not found')
        self.assertIn('open-day', result.failed['used.jpg'])
        self.assertTrue((self.images / 'used.jpg').is_file())
        self.assertFalse((self.images / 'a.jpg').exists())

    def test_empty_list_rejected(self):
        with self.assertRaises(ValidationError):
            self.store.bulk_delete([])

    def test_too_many_names_rejected(self):
        with self.assertRaises(ValidationError):
            self.store.bulk_delete([f'{i}.jpg' for i in range(AssetStore.MAX_BULK_FILENAMES + 1)])


class ListTest(AssetStoreTestCase):
    def test_pagination_newest_first(self):
        for i in range(25):
            # i=0 is the newest
            write_file(self.images, f'img{i:02d}.jpg', age_seconds=60 * (i + 1))

        page = self.store.list(ImageListFilters(page=3, limit=10))

        self.assertEqual(page.total, 25)
        self.assertEqual(page.total_pages, 3)
        self.assertEqual([info.name for info in page.items], [f'img{i}.jpg' for i in range(20, 25)])

        first = self.store.list(ImageListFilters(page=1, limit=10))
        self.assertEqual(first.items[0].name, 'img00.jpg')

    def test_page_past_the_end_is_empty(self):
        write_file(self.images, 'a.jpg')
        page = self.store.list(ImageListFilters(page=5, limit=10))
        self.assertEqual(page.items, [])
        self.assertEqual(page.total, 1)

    def test_size_filters_are_inclusive(self):
        write_file(self.images, 'small.jpg', b'x' * 10)
        write_file(self.images, 'medium.jpg', b'x' * 100)
        write_file(self.images, 'large.jpg', b'x' * 1000)

        page = self.store.list(ImageListFilters(min_size=10, max_size=100))

        self.assertEqual(sorted(info.name for info in page.items), ['medium.jpg', 'small.jpg'])

    def test_date_filters(self):
        write_file(self.images, 'today.jpg')
        write_file(self.images, 'old.jpg', age_seconds=10 * 24 * 3600)
        today = timezone.localdate()

        page = self.store.list(ImageListFilters(start_date=today - timedelta(days=1)))
        self.assertEqual([info.name for info in page.items], ['today.jpg'])

        page = self.store.list(ImageListFilters(end_date=today - timedelta(days=5)))
        self.assertEqual([info.name for info in page.items], ['old.jpg'])

    def test_temporary_images_are_not_listed(self):
        write_file(self.temp_images, 'a.jpg')
        self.assertEqual(self.store.list(ImageListFilters()).total, 0)
