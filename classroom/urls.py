from django.contrib import admin
from django.urls import include, path

from . import views

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health/', views.health, name='health'),
    path('api/auth/', include('authentication.urls')),
    path('api/groups/', include('groups.urls')),
    path('api/messages/', include('messaging.urls')),
    path('api/assignments/', include('assignments.urls')),
    path('api/polls/', include('polls.urls')),
    path('uploads/<path:path>', views.serve_upload, name='serve-upload'),
]
