from django.urls import path

from . import views

urlpatterns = [
    path('', views.AssignmentCreateView.as_view(), name='assignment-create'),
    path('group/<int:group_id>/', views.GroupAssignmentsView.as_view(), name='group-assignments'),
    path('<int:pk>/', views.AssignmentDetailView.as_view(), name='assignment-detail'),

    # ===== Submissions & grading =====
    path('<int:pk>/submit/', views.SubmitAssignmentView.as_view(), name='assignment-submit'),
    path('<int:pk>/submissions/<int:submission_id>/grade/', views.GradeSubmissionView.as_view(), name='grade-submission'),
    path('<int:pk>/gradesheet/', views.GradeSheetView.as_view(), name='gradesheet'),
]
