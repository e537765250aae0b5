"""Tests for the cleanup_temp_images management command."""

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from core.storage import LocalStorageBackend
from core.tests.base import MediaRootMixin
from images.tests.helpers import write_file

DAY = 24 * 3600


class CleanupTempImagesTest(MediaRootMixin, TestCase):
    def setUp(self):
        super().setUp()
        LocalStorageBackend(root=self.media_root)
        self.staging = self.media_root / 'temp_uploads'
        self.temp_images = self.media_root / 'temp_images'
        self.images = self.media_root / 'images'

        write_file(self.staging, 'stale-upload.png', age_seconds=2 * DAY)
        write_file(self.temp_images, 'stale.jpg', age_seconds=2 * DAY)
        write_file(self.temp_images, 'fresh.jpg', age_seconds=3600)
        write_file(self.images, 'old-permanent.jpg', age_seconds=30 * DAY)

    def test_removes_stale_temporary_files_only(self):
        out = StringIO()
        call_command('cleanup_temp_images', stdout=out)

        self.assertFalse((self.staging / 'stale-upload.png').exists())
        self.assertFalse((self.temp_images / 'stale.jpg').exists())
        self.assertTrue((self.temp_images / 'fresh.jpg').exists())
        self.assertTrue((self.images / 'old-permanent.jpg').exists())
        self.assertIn('Deleted 2 temporary file(s)', out.getvalue())

    def test_hours_option(self):
        call_command('cleanup_temp_images', hours=72, stdout=StringIO())
        self.assertTrue((self.temp_images / 'stale.jpg').exists())

    def test_dry_run_deletes_nothing(self):
        out = StringIO()
        call_command('cleanup_temp_images', dry_run=True, stdout=out)

        self.assertTrue((self.temp_images / 'stale.jpg').exists())
        self.assertIn('would delete 1 file(s)', out.getvalue())
        self.assertIn('Dry run', out.getvalue())
