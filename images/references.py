"""Refuse deletion of images that articles still point at."""

from content.models import Article
from core.storage import LOCATION_PERMANENT

from .exceptions import ImageInUseError
from .locations import public_url


class ReferenceGuard:
    """
    Cross-check a permanent image against Article.featured_image.

    Matching is exact on the canonical URL. The check and the unlink that
    follows are not one transaction; an article saved in between can still
    end up pointing at a deleted file.
    """

    def find_references(self, filename: str) -> list[dict]:
        url = public_url(filename, LOCATION_PERMANENT)
        return [
            {"id": str(row["id"]), "slug": row["slug"], "title": row["title"]}
            for row in Article.objects.filter(featured_image=url)
            .order_by("slug")
            .values("id", "slug", "title")
        ]

    def ensure_unreferenced(self, filename: str) -> None:
        """
        Raises:
            ImageInUseError: If any article references the image
        """
        references = self.find_references(filename)
        if references:
            slugs = ", ".join(ref["slug"] for ref in references)
            raise ImageInUseError(
                f"Image is in use by article(s): {slugs}",
                data={"filename": filename, "articles": references},
            )
