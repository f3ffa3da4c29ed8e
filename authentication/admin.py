from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'name', 'role', 'batch', 'semester', 'is_approved']
    list_filter = ['role', 'is_approved', 'batch', 'semester']
    search_fields = ['email', 'name', 'regdno']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Classroom', {'fields': ('name', 'role', 'is_approved', 'regdno', 'subject', 'batch', 'semester', 'photo')}),
    )


admin.site.register(User, UserAdmin)
