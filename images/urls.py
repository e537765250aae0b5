"""URL configuration for image endpoints."""

from django.urls import path, re_path

from .api import (
    ImageBulkDeleteView,
    ImageDeleteView,
    ImageForceDeleteView,
    ImageListView,
    ImagePromoteView,
    ImageServeView,
    ImageTempUploadView,
    ImageUploadView,
)

urlpatterns = [
    path("", ImageListView.as_view(), name="images-list"),
    path("upload/", ImageUploadView.as_view(), name="images-upload"),
    path("upload-temp/", ImageTempUploadView.as_view(), name="images-upload-temp"),
    path("promote/", ImagePromoteView.as_view(), name="images-promote"),
    path("delete/", ImageDeleteView.as_view(), name="images-delete"),
    path("bulk-delete/", ImageBulkDeleteView.as_view(), name="images-bulk-delete"),
    path("force-delete/", ImageForceDeleteView.as_view(), name="images-force-delete"),
    re_path(
        r"^(?P<location>images|temp_images)/(?P<filename>[^/]+)$",
        ImageServeView.as_view(),
        name="images-serve",
    ),
]
