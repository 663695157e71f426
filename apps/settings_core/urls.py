# apps/settings_core/urls.py

from django.urls import path
from . import views

app_name = 'settings_core'

urlpatterns = [
    path('branches/<int:branch_id>/policy/', views.BranchPolicyView.as_view(), name='branch-policy'),
]
