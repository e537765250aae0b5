"""URL configuration for student registration."""

from django.urls import path

from .api import RegistrationListView, RegistrationStatusView, StudentRegisterView

urlpatterns = [
    path("register/", StudentRegisterView.as_view(), name="students-register"),
    path("registrations/", RegistrationListView.as_view(), name="students-registrations"),
    path(
        "registrations/<uuid:registration_id>/status/",
        RegistrationStatusView.as_view(),
        name="students-registration-status",
    ),
]
