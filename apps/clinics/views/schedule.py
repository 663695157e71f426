from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from apps.clinics.models import ServiceSchedule
from apps.clinics.serializers import ServiceScheduleSerializer
from core.permissions import IsAdminOrReadOnly


class ServiceScheduleViewSet(viewsets.ModelViewSet):
    """
    Weekly opening windows per service.
    Anyone signed in can read them; only administrators change them.
    """
    queryset = ServiceSchedule.objects.filter(deleted_at__isnull=True).select_related("service")
    serializer_class = ServiceScheduleSerializer
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    filterset_fields = ["service", "day_of_week", "is_active"]

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        instance.delete(user=self.request.user)
