from django.urls import path

from . import views

urlpatterns = [
    path('', views.GroupListCreateView.as_view(), name='group-list'),
    path('<int:pk>/', views.GroupDetailView.as_view(), name='group-detail'),

    # ===== Membership =====
    path('<int:pk>/members/', views.GroupMembersView.as_view(), name='group-members'),
    path('<int:pk>/members/<int:user_id>/', views.GroupMemberRemoveView.as_view(), name='group-member-remove'),
    path('<int:pk>/available-students/', views.AvailableStudentsView.as_view(), name='group-available-students'),
]
