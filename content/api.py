"""API views for articles and categories."""

import logging

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import IsAdminRole, IsFacultyOrAdmin
from core.exceptions import AuthorizationError, ValidationError
from core.pagination import CampusPagination
from core.views import CampusBaseAPIView, api_response

from .models import Article, Category
from .serializers import ArticleSerializer, ArticleWriteSerializer, CategorySerializer
from .services import ArticleService, CategoryService, get_article_or_404, get_category_or_404

logger = logging.getLogger(__name__)


def _paginate(view, request, queryset, serializer_class):
    paginator = CampusPagination()
    page = paginator.paginate_queryset(queryset, request, view=view)
    return paginator.get_paginated_response(serializer_class(page, many=True).data)


def _filter_articles(queryset, params):
    category = params.get("category")
    if category:
        queryset = queryset.filter(categories__slug=category)

    search = params.get("search", "").strip()
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(excerpt__icontains=search))

    if params.get("featured") in ("true", "1"):
        queryset = queryset.filter(featured=True)

    return queryset.distinct()


def _write_data(request, instance=None, partial=False) -> dict:
    serializer = ArticleWriteSerializer(instance, data=request.data, partial=partial)
    if not serializer.is_valid():
        raise ValidationError("Validation failed", data={"errors": serializer.errors})
    return serializer.validated_data


def _check_ownership(request, article: Article) -> None:
    """Faculty may only change their own articles."""
    if not request.user.is_admin_role and article.author_id != request.user.pk:
        raise AuthorizationError("You can only modify your own articles")


# =============================================================================
# Public
# =============================================================================


class PublicArticleListView(CampusBaseAPIView):
    """Published articles, newest first."""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="List published articles",
        parameters=[
            OpenApiParameter("category", str, description="Category slug"),
            OpenApiParameter("search", str),
            OpenApiParameter("featured", bool),
            OpenApiParameter("page", int),
            OpenApiParameter("limit", int),
        ],
        tags=["Articles"],
    )
    def get(self, request: Request) -> Response:
        queryset = (
            Article.objects.filter(status=Article.STATUS_PUBLISHED)
            .select_related("author")
            .prefetch_related("categories")
            .order_by("-published_at")
        )
        return _paginate(self, request, _filter_articles(queryset, request.query_params), ArticleSerializer)


class PublicArticleBySlugView(CampusBaseAPIView):
    """One published article. Each read counts as a view."""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(summary="Get published article by slug", responses={200: ArticleSerializer}, tags=["Articles"])
    def get(self, request: Request, slug: str) -> Response:
        article = get_article_or_404(slug=slug, status=Article.STATUS_PUBLISHED)
        ArticleService.record_view(article)
        return api_response("OK", ArticleSerializer(article).data)


class PublicCategoryListView(CampusBaseAPIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(summary="List active categories", tags=["Categories"])
    def get(self, request: Request) -> Response:
        queryset = Category.objects.filter(status=Category.STATUS_ACTIVE)
        return api_response("OK", CategorySerializer(queryset, many=True).data)


# =============================================================================
# Articles (faculty and admins)
# =============================================================================


class ArticleListCreateView(CampusBaseAPIView):
    permission_classes = [IsFacultyOrAdmin]

    @extend_schema(
        summary="List articles",
        parameters=[
            OpenApiParameter("status", str),
            OpenApiParameter("category", str, description="Category slug"),
            OpenApiParameter("search", str),
        ],
        tags=["Articles"],
    )
    def get(self, request: Request) -> Response:
        queryset = Article.objects.select_related("author").prefetch_related("categories")
        article_status = request.query_params.get("status")
        if article_status:
            queryset = queryset.filter(status=article_status)
        return _paginate(
            self, request, _filter_articles(queryset, request.query_params), ArticleSerializer
        )

    @extend_schema(summary="Create article", request=ArticleWriteSerializer, responses={201: ArticleSerializer}, tags=["Articles"])
    def post(self, request: Request) -> Response:
        article = ArticleService().create(_write_data(request), author=request.user)
        return api_response("Article created", ArticleSerializer(article).data, status.HTTP_201_CREATED)


class ArticleDetailView(CampusBaseAPIView):
    permission_classes = [IsFacultyOrAdmin]

    @extend_schema(summary="Get article", responses={200: ArticleSerializer}, tags=["Articles"])
    def get(self, request: Request, article_id) -> Response:
        return api_response("OK", ArticleSerializer(get_article_or_404(pk=article_id)).data)

    @extend_schema(summary="Update article", request=ArticleWriteSerializer, responses={200: ArticleSerializer}, tags=["Articles"])
    def patch(self, request: Request, article_id) -> Response:
        article = get_article_or_404(pk=article_id)
        _check_ownership(request, article)
        article = ArticleService().update(article, _write_data(request, article, partial=True))
        return api_response("Article updated", ArticleSerializer(article).data)

    @extend_schema(summary="Delete article", tags=["Articles"])
    def delete(self, request: Request, article_id) -> Response:
        article = get_article_or_404(pk=article_id)
        _check_ownership(request, article)
        ArticleService().delete(article)
        return api_response("Article deleted")


class ArticlePublishView(CampusBaseAPIView):
    permission_classes = [IsFacultyOrAdmin]

    @extend_schema(summary="Publish article", request=None, responses={200: ArticleSerializer}, tags=["Articles"])
    def patch(self, request: Request, article_id) -> Response:
        article = get_article_or_404(pk=article_id)
        _check_ownership(request, article)
        ArticleService().publish(article)
        return api_response("Article published", ArticleSerializer(article).data)


class ArticleUnpublishView(CampusBaseAPIView):
    permission_classes = [IsFacultyOrAdmin]

    @extend_schema(summary="Unpublish article", request=None, responses={200: ArticleSerializer}, tags=["Articles"])
    def patch(self, request: Request, article_id) -> Response:
        article = get_article_or_404(pk=article_id)
        _check_ownership(request, article)
        ArticleService().unpublish(article)
        return api_response("Article unpublished", ArticleSerializer(article).data)


# =============================================================================
# Categories (admins)
# =============================================================================


class CategoryListCreateView(CampusBaseAPIView):
    def get_permissions(self):
        if self.request.method == "GET":
            return [IsFacultyOrAdmin()]
        return [IsAdminRole()]

    @extend_schema(summary="List categories", tags=["Categories"])
    def get(self, request: Request) -> Response:
        return api_response("OK", CategorySerializer(Category.objects.all(), many=True).data)

    @extend_schema(summary="Create category", request=CategorySerializer, responses={201: CategorySerializer}, tags=["Categories"])
    def post(self, request: Request) -> Response:
        serializer = CategorySerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})
        category = CategoryService().create(serializer.validated_data)
        return api_response("Category created", CategorySerializer(category).data, status.HTTP_201_CREATED)


class CategoryDetailView(CampusBaseAPIView):
    def get_permissions(self):
        if self.request.method == "GET":
            return [IsFacultyOrAdmin()]
        return [IsAdminRole()]

    @extend_schema(summary="Get category", responses={200: CategorySerializer}, tags=["Categories"])
    def get(self, request: Request, category_id) -> Response:
        return api_response("OK", CategorySerializer(get_category_or_404(pk=category_id)).data)

    @extend_schema(summary="Update category", request=CategorySerializer, responses={200: CategorySerializer}, tags=["Categories"])
    def patch(self, request: Request, category_id) -> Response:
        category = get_category_or_404(pk=category_id)
        serializer = CategorySerializer(category, data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError("Validation failed", data={"errors": serializer.errors})
        category = CategoryService().update(category, serializer.validated_data)
        return api_response("Category updated", CategorySerializer(category).data)

    @extend_schema(summary="Delete category", description="Refused with 409 while the category has articles.", tags=["Categories"])
    def delete(self, request: Request, category_id) -> Response:
        CategoryService().delete(get_category_or_404(pk=category_id))
        return api_response("Category deleted")
