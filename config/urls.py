from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # API endpoints
    path('api/auth/', include('apps.accounts.urls')),
    path('api/clinics/', include('apps.clinics.urls')),
    path('api/settings/', include('apps.settings_core.urls')),
    path('api/visits/', include('apps.visits.urls')),
    path('api/surveys/', include('apps.surveys.urls')),
]
