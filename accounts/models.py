from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Campus CMS user.

    Roles gate the API: admins manage everything, faculty author content and
    upload images, students can only read their own profile.
    """

    ROLE_ADMIN = "admin"
    ROLE_FACULTY = "faculty"
    ROLE_STUDENT = "student"

    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_FACULTY, "Faculty"),
        (ROLE_STUDENT, "Student"),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_STUDENT)
    phone = models.CharField(max_length=20, blank=True)

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["-date_joined"]

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def is_admin_role(self) -> bool:
        return self.role == self.ROLE_ADMIN or self.is_superuser

    @property
    def can_author(self) -> bool:
        """Faculty and admins can write articles and upload images."""
        return self.is_admin_role or self.role == self.ROLE_FACULTY
