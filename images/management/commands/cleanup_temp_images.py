"""Management command to remove stale staged uploads and unpromoted images."""

from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from core.storage import LOCATION_STAGING, LOCATION_TEMPORARY, get_media_storage


class Command(BaseCommand):
    """Delete files in temp_uploads/ and temp_images/ older than a threshold."""

    help = "Remove temporary image files older than X hours"

    def add_arguments(self, parser):
        parser.add_argument(
            "--hours",
            type=int,
            default=settings.CAMPUS_IMAGE_PIPELINE["TEMP_RETENTION_HOURS"],
            help="Delete temporary files older than X hours (default: TEMP_IMAGE_RETENTION_HOURS)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be deleted without actually deleting",
        )

    def handle(self, *args, **options):
        hours = options["hours"]
        dry_run = options["dry_run"]

        if hours < 1:
            self.stderr.write(self.style.ERROR("Minimum threshold is 1 hour"))
            return

        storage = get_media_storage()
        cutoff = timezone.now() - timedelta(hours=hours)
        total_deleted = 0

        for location in (LOCATION_STAGING, LOCATION_TEMPORARY):
            stale = [info for info in storage.list(location) if info.modified_at < cutoff]

            if not stale:
                continue

            if dry_run:
                self.stdout.write(f"{location}: would delete {len(stale)} file(s)")
                for info in stale[:5]:
                    self.stdout.write(f"  - {info.name} ({info.size} bytes)")
                if len(stale) > 5:
                    self.stdout.write(f"  ... and {len(stale) - 5} more")
                continue

            deleted = 0
            for info in stale:
                try:
                    storage.delete(location, info.name)
                except FileNotFoundError:
                    continue
                deleted += 1
            total_deleted += deleted
            self.stdout.write(f"{location}: deleted {deleted} file(s)")

        if dry_run:
            self.stdout.write(self.style.WARNING("Dry run - no files deleted"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Deleted {total_deleted} temporary file(s)"))
