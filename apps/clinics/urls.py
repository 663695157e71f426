# apps/clinics/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.clinics import views

router = DefaultRouter()
router.register(r'branches', views.BranchViewSet, basename='branch')
router.register(r'services', views.ServiceViewSet, basename='service')
router.register(r'schedules', views.ServiceScheduleViewSet, basename='schedule')
router.register(r'service-points', views.ServicePointViewSet, basename='service-point')

urlpatterns = [
    path('available-slots/', views.AvailableSlotsView.as_view(), name='available-slots'),
    path('', include(router.urls)),
]

app_name = 'clinics'
