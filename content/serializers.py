"""Serializers for content app."""

from rest_framework import serializers

from .models import SLUG_VALIDATOR, Article, Category


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'description', 'status', 'sort_order',
            'color', 'icon', 'article_count', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'article_count', 'created_at', 'updated_at']
        extra_kwargs = {'slug': {'required': False}}


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'color']


class ArticleSerializer(serializers.ModelSerializer):
    """Read representation of an article."""

    categories = CategorySummarySerializer(many=True, read_only=True)
    author = serializers.SerializerMethodField()

    class Meta:
        model = Article
        fields = [
            'id', 'title', 'slug', 'content', 'excerpt', 'featured_image',
            'categories', 'author', 'status', 'published_at', 'featured',
            'view_count', 'reading_time', 'tags', 'created_at', 'updated_at',
        ]

    def get_author(self, obj) -> dict:
        return {
            'id': obj.author_id,
            'username': obj.author.username,
            'name': obj.author.get_full_name() or obj.author.username,
        }


class ArticleWriteSerializer(serializers.Serializer):
    """Input for article create/update. Counts and slugs are handled by ArticleService."""

    title = serializers.CharField(min_length=5, max_length=200, trim_whitespace=True)
    slug = serializers.CharField(max_length=250, required=False, validators=[SLUG_VALIDATOR])
    content = serializers.CharField(min_length=50, trim_whitespace=True)
    excerpt = serializers.CharField(max_length=500, required=False, allow_blank=True)
    featured_image = serializers.CharField(max_length=500, required=False, allow_blank=True)
    categories = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), many=True, allow_empty=False
    )
    status = serializers.ChoiceField(choices=Article.STATUS_CHOICES, required=False)
    featured = serializers.BooleanField(required=False)
    tags = serializers.ListField(
        child=serializers.CharField(max_length=30), required=False
    )

    def validate_slug(self, value):
        value = value.strip().lower()
        queryset = Article.objects.filter(slug=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("Slug already exists.")
        return value

    def validate_tags(self, value):
        return [tag.strip().lower() for tag in value if tag.strip()]
