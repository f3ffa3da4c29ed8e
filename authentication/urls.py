from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    RegistrationView,
    LoginView,
    MeView,
    UserListView,
    PendingUsersView,
    ApproveUserView,
    RejectUserView,
)

urlpatterns = [
    path('register/', RegistrationView.as_view(), name='register'),
    path('login/', LoginView.as_view(), name='login'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('me/', MeView.as_view(), name='me'),

    # ===== Approval & directory =====
    path('users/', UserListView.as_view(), name='user-list'),
    path('pending/', PendingUsersView.as_view(), name='pending-users'),
    path('users/<int:user_id>/approve/', ApproveUserView.as_view(), name='approve-user'),
    path('users/<int:user_id>/reject/', RejectUserView.as_view(), name='reject-user'),
]
