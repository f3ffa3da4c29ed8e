from django.contrib import admin

from .models import Assignment, Submission


class SubmissionInline(admin.TabularInline):
    model = Submission
    extra = 0
    fields = ['student', 'submitted_at', 'grade', 'graded', 'graded_by']
    readonly_fields = ['student', 'submitted_at']


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ['title', 'group', 'deadline', 'max_marks', 'created_by']
    list_filter = ['group']
    inlines = [SubmissionInline]
