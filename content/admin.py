from django.contrib import admin

from .models import Article, Category


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'status', 'sort_order', 'article_count']
    list_filter = ['status']
    search_fields = ['name', 'slug']
    readonly_fields = ['id', 'article_count', 'created_at', 'updated_at']


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    """Read-mostly admin; writes go through the API so category counts stay correct."""

    list_display = ['title', 'slug', 'status', 'author', 'published_at', 'view_count']
    list_filter = ['status', 'featured']
    search_fields = ['title', 'slug', 'featured_image']
    readonly_fields = ['id', 'view_count', 'created_at', 'updated_at']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
