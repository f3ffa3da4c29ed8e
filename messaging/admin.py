from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['id', 'group', 'sender', 'type', 'created_at']
    list_filter = ['type']
    search_fields = ['content', 'file_name']
