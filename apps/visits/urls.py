# apps/visits/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import AppointmentViewSet, QueueViewSet

router = DefaultRouter()
router.register(r'appointments', AppointmentViewSet, basename='appointment')
router.register(r'queue', QueueViewSet, basename='queue')

app_name = 'visits'

urlpatterns = [
    path('', include(router.urls)),
]
