# apps/surveys/urls.py
from django.urls import path

from . import views

app_name = 'surveys'

urlpatterns = [
    path('queue/<int:queue_entry_id>/', views.QueueEntrySurveyView.as_view(), name='queue-survey'),
    path('token/<str:token>/', views.SurveyByTokenView.as_view(), name='survey-by-token'),
]
