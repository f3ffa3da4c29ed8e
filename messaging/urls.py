from django.urls import path

from . import views

urlpatterns = [
    path('', views.MessageCreateView.as_view(), name='message-create'),
    path('group/<int:group_id>/', views.GroupMessagesView.as_view(), name='group-messages'),
    path('<int:pk>/read/', views.MarkReadView.as_view(), name='message-read'),
    path('<int:pk>/', views.MessageDeleteView.as_view(), name='message-delete'),
]
