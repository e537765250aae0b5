import math
import re

from django.conf import settings
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models
from django.utils import timezone

from core.models import AbstractBaseModel

SLUG_VALIDATOR = RegexValidator(
    r"^[a-z0-9]+(?:-[a-z0-9]+)*$",
    "Slug may only contain lowercase letters, digits and single hyphens",
)

_TAGS = re.compile(r"<[^>]*>")
WORDS_PER_MINUTE = 200


def strip_tags(html: str) -> str:
    return _TAGS.sub("", html or "")


class Category(AbstractBaseModel):
    """Article category. ``article_count`` is maintained by ArticleService."""

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_CHOICES = [(STATUS_ACTIVE, "Active"), (STATUS_INACTIVE, "Inactive")]

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, validators=[SLUG_VALIDATOR])
    description = models.TextField(max_length=500, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    sort_order = models.PositiveIntegerField(default=0)
    color = models.CharField(
        max_length=7,
        default="#007bff",
        validators=[RegexValidator(r"^#[0-9a-fA-F]{6}$", "Color must be a hex value like #1a2b3c")],
    )
    icon = models.CharField(max_length=50, blank=True)
    article_count = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = "Category"
        verbose_name_plural = "Categories"
        ordering = ["sort_order", "name"]

    def __str__(self):
        return self.name


class Article(AbstractBaseModel):
    """
    A news article or page.

    ``featured_image`` stores the public URL of an image asset; the image
    delete path looks articles up by exact match on it.
    """

    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"
    STATUS_ARCHIVED = "archived"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_ARCHIVED, "Archived"),
    ]

    title = models.CharField(max_length=200, validators=[MinLengthValidator(5)])
    slug = models.SlugField(max_length=250, unique=True, validators=[SLUG_VALIDATOR])
    content = models.TextField(validators=[MinLengthValidator(50)])
    excerpt = models.CharField(max_length=500, blank=True)
    featured_image = models.CharField(max_length=500, blank=True, default="", db_index=True)
    categories = models.ManyToManyField(Category, related_name="articles")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="articles"
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    published_at = models.DateTimeField(null=True, blank=True)
    featured = models.BooleanField(default=False)
    view_count = models.PositiveIntegerField(default=0)
    reading_time = models.PositiveIntegerField(default=1)
    tags = models.JSONField(default=list, blank=True)

    class Meta:
        verbose_name = "Article"
        verbose_name_plural = "Articles"
        ordering = ["-published_at", "-created_at"]
        indexes = [models.Index(fields=["status", "-published_at"], name="content_art_status_8f3c1e_idx")]

    def __str__(self):
        return self.title

    @staticmethod
    def calculate_reading_time(content: str) -> int:
        words = len(strip_tags(content).split())
        return max(1, math.ceil(words / WORDS_PER_MINUTE))

    def generate_excerpt(self, length: int = 150) -> str:
        text = strip_tags(self.content).strip()
        return f"{text[:length]}..." if len(text) > length else text

    def publish(self):
        self.status = self.STATUS_PUBLISHED
        if self.published_at is None:
            self.published_at = timezone.now()
        self.reading_time = self.calculate_reading_time(self.content)

    def unpublish(self):
        self.status = self.STATUS_DRAFT
        self.published_at = None
