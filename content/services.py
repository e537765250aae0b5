"""Article and category operations with explicit article-count bookkeeping.

Category.article_count is never touched by model signals. Every operation
that changes an article's category set applies the matching delta inside the
same transaction, so the count and the M2M rows commit together.
"""

import logging
from typing import Iterable

from django.db import transaction
from django.db.models import F
from django.utils.text import slugify

from core.exceptions import ConflictError, NotFoundError, ValidationError
from images.exceptions import ImageNotFoundError
from images.store import AssetStore

from .models import Article, Category

logger = logging.getLogger(__name__)


def unique_slug(model, source: str, exclude_pk=None, max_length: int = 250) -> str:
    """Slugify ``source`` and append -2, -3, ... until unused."""
    base = slugify(source)[:max_length].strip("-") or "item"
    slug = base
    counter = 2
    queryset = model.objects.all()
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    while queryset.filter(slug=slug).exists():
        suffix = f"-{counter}"
        slug = f"{base[: max_length - len(suffix)]}{suffix}"
        counter += 1
    return slug


def adjust_article_counts(category_ids: Iterable, delta: int) -> None:
    """Apply ``delta`` to article_count for the given categories, never below zero."""
    ids = list(category_ids)
    if not ids or delta == 0:
        return
    queryset = Category.objects.filter(pk__in=ids)
    if delta < 0:
        queryset = queryset.filter(article_count__gte=-delta)
    queryset.update(article_count=F("article_count") + delta)


class ArticleService:
    """Create, update, delete and publish articles."""

    def __init__(self, store: AssetStore | None = None):
        self.store = store or AssetStore()

    def _resolve_featured_image(self, url: str) -> str:
        """Promote a temporary image URL to its permanent URL."""
        url = (url or "").strip()
        if not url or not self.store.is_temporary_url(url):
            return url
        try:
            return self.store.promote(url)
        except ImageNotFoundError:
            raise ValidationError(
                "Featured image not found",
                data={"errors": {"featured_image": ["Temporary image no longer exists"]}},
            )

    def _apply_fields(self, article: Article, data: dict) -> None:
        for field in ("title", "content", "excerpt", "status", "featured", "tags"):
            if field in data:
                setattr(article, field, data[field])

        if "featured_image" in data:
            article.featured_image = self._resolve_featured_image(data["featured_image"])

        if not article.excerpt:
            article.excerpt = article.generate_excerpt()
        article.reading_time = Article.calculate_reading_time(article.content)

        if article.status == Article.STATUS_PUBLISHED and article.published_at is None:
            article.publish()

    @transaction.atomic
    def create(self, data: dict, author) -> Article:
        categories = list(data.get("categories", []))
        if not categories:
            raise ValidationError(
                "Validation failed",
                data={"errors": {"categories": ["Article must belong to at least one category"]}},
            )

        article = Article(author=author)
        self._apply_fields(article, data)
        article.slug = data.get("slug") or unique_slug(Article, article.title)
        article.save()

        article.categories.set(categories)
        adjust_article_counts([c.pk for c in categories], +1)

        logger.info(f"Article created: {article.slug} by {author.username}")
        return article

    @transaction.atomic
    def update(self, article: Article, data: dict) -> Article:
        self._apply_fields(article, data)
        if data.get("slug"):
            article.slug = data["slug"]
        article.save()

        if "categories" in data:
            new_ids = {c.pk for c in data["categories"]}
            if not new_ids:
                raise ValidationError(
                    "Validation failed",
                    data={"errors": {"categories": ["Article must belong to at least one category"]}},
                )
            old_ids = set(article.categories.values_list("pk", flat=True))
            article.categories.set(list(new_ids))
            adjust_article_counts(old_ids - new_ids, -1)
            adjust_article_counts(new_ids - old_ids, +1)

        return article

    @transaction.atomic
    def delete(self, article: Article) -> None:
        category_ids = list(article.categories.values_list("pk", flat=True))
        slug = article.slug
        article.delete()
        adjust_article_counts(category_ids, -1)
        logger.info(f"Article deleted: {slug}")

    def publish(self, article: Article) -> Article:
        if article.status == Article.STATUS_PUBLISHED:
            raise ConflictError("Article is already published")
        article.publish()
        article.save(update_fields=["status", "published_at", "reading_time", "updated_at"])
        return article

    def unpublish(self, article: Article) -> Article:
        if article.status != Article.STATUS_PUBLISHED:
            raise ConflictError("Article is not published")
        article.unpublish()
        article.save(update_fields=["status", "published_at", "updated_at"])
        return article

    @staticmethod
    def record_view(article: Article) -> None:
        Article.objects.filter(pk=article.pk).update(view_count=F("view_count") + 1)
        article.view_count += 1


class CategoryService:
    """Category writes. Deleting a category that still has articles is refused."""

    def create(self, data: dict) -> Category:
        category = Category(**data)
        if not category.slug:
            category.slug = unique_slug(Category, category.name, max_length=120)
        category.save()
        return category

    def update(self, category: Category, data: dict) -> Category:
        for field, value in data.items():
            setattr(category, field, value)
        category.save()
        return category

    @transaction.atomic
    def delete(self, category: Category) -> None:
        category = Category.objects.select_for_update().get(pk=category.pk)
        if category.article_count > 0 or category.articles.exists():
            raise ConflictError(
                f"Category '{category.name}' still has {category.article_count} article(s)"
            )
        category.delete()


def get_article_or_404(**lookup) -> Article:
    try:
        return Article.objects.select_related("author").prefetch_related("categories").get(**lookup)
    except (Article.DoesNotExist, ValueError):
        raise NotFoundError("Article not found")


def get_category_or_404(**lookup) -> Category:
    try:
        return Category.objects.get(**lookup)
    except (Category.DoesNotExist, ValueError):
        raise NotFoundError("Category not found")
