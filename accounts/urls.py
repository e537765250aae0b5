"""URL configuration for users and authentication."""

from django.urls import path

from .api import (
    AdminUserDetailView,
    AdminUserListView,
    AuthMeView,
    LoginView,
    RefreshView,
    RegistrationView,
)

urlpatterns = [
    path("auth/register/", RegistrationView.as_view(), name="auth-register"),
    path("auth/login/", LoginView.as_view(), name="auth-login"),
    path("auth/refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("auth/me/", AuthMeView.as_view(), name="auth-me"),
    path("admin/", AdminUserListView.as_view(), name="admin-users"),
    path("admin/<int:user_id>/", AdminUserDetailView.as_view(), name="admin-users-detail"),
]
