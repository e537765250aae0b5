from django.contrib import admin

from .models import StudentRegistration


@admin.register(StudentRegistration)
class StudentRegistrationAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'phone', 'major', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'email', 'phone', 'major']
    readonly_fields = ['id', 'ip_address', 'user_agent', 'created_at', 'updated_at']
