from django.db import models

from core.models import AbstractBaseModel


class StudentRegistration(AbstractBaseModel):
    """
    A prospective student's enrollment inquiry.

    Created by the public registration form and afterwards only changed by
    admins moving it through ``status``.
    """

    STATUS_NEW = "new"
    STATUS_CONTACTED = "contacted"
    STATUS_ENROLLED = "enrolled"
    STATUS_REJECTED = "rejected"
    STATUS_CHOICES = [
        (STATUS_NEW, "New"),
        (STATUS_CONTACTED, "Contacted"),
        (STATUS_ENROLLED, "Enrolled"),
        (STATUS_REJECTED, "Rejected"),
    ]

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=254, db_index=True)
    phone = models.CharField(max_length=20)
    major = models.CharField(max_length=150)
    facebook = models.URLField(max_length=500, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_NEW)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True)

    class Meta:
        verbose_name = "Student registration"
        verbose_name_plural = "Student registrations"
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status", "-created_at"], name="students_reg_status_2b7d4a_idx")]

    def __str__(self):
        return f"{self.name} <{self.email}>"
