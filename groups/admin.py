from django.contrib import admin

from .models import Group, GroupMembership


class GroupMembershipInline(admin.TabularInline):
    model = GroupMembership
    extra = 0


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'subject', 'batch', 'semester', 'created_by', 'created_at']
    list_filter = ['batch', 'semester']
    inlines = [GroupMembershipInline]
