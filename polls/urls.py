from django.urls import path

from . import views

urlpatterns = [
    path('', views.PollCreateView.as_view(), name='poll-create'),
    path('group/<int:group_id>/', views.GroupPollsView.as_view(), name='group-polls'),
    path('<int:pk>/', views.PollDetailView.as_view(), name='poll-detail'),
    path('<int:pk>/vote/', views.VotePollView.as_view(), name='poll-vote'),
]
