"""URL configuration for articles and categories."""

from django.urls import path

from .api import (
    ArticleDetailView,
    ArticleListCreateView,
    ArticlePublishView,
    ArticleUnpublishView,
    CategoryDetailView,
    CategoryListCreateView,
    PublicArticleBySlugView,
    PublicArticleListView,
    PublicCategoryListView,
)

article_urlpatterns = [
    path("", ArticleListCreateView.as_view(), name="articles"),
    path("public/", PublicArticleListView.as_view(), name="articles-public"),
    path("public/slug/<slug:slug>/", PublicArticleBySlugView.as_view(), name="articles-public-slug"),
    path("<uuid:article_id>/", ArticleDetailView.as_view(), name="articles-detail"),
    path("<uuid:article_id>/publish/", ArticlePublishView.as_view(), name="articles-publish"),
    path("<uuid:article_id>/unpublish/", ArticleUnpublishView.as_view(), name="articles-unpublish"),
]

category_urlpatterns = [
    path("", CategoryListCreateView.as_view(), name="categories"),
    path("public/", PublicCategoryListView.as_view(), name="categories-public"),
    path("<uuid:category_id>/", CategoryDetailView.as_view(), name="categories-detail"),
]
