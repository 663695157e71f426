from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.clinics.models import ServicePoint
from apps.clinics.serializers import (
    ServicePointSerializer,
    ServicePointServicesSerializer,
    ServicePointStatusSerializer,
)
from core.permissions import IsAdmin, IsAdminOrReadOnly

import logging
logger = logging.getLogger(__name__)


class ServicePointViewSet(viewsets.ModelViewSet):
    queryset = (
        ServicePoint.objects.filter(deleted_at__isnull=True)
        .select_related("branch")
        .prefetch_related("service_links")
    )
    serializer_class = ServicePointSerializer
    filterset_fields = ["branch", "is_active"]

    def get_permissions(self):
        if self.action in ["services", "set_status"]:
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated(), IsAdminOrReadOnly()]

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        instance.delete(user=self.request.user)

    @action(detail=True, methods=["put"])
    def services(self, request, pk=None):
        service_point = self.get_object()
        serializer = ServicePointServicesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(service_point)

        # Drop the prefetched links read before the update
        service_point._prefetched_objects_cache = {}

        logger.info(
            f"Service point {service_point.id} now serves "
            f"{sorted(service_point.supported_service_ids())}"
        )
        return Response(ServicePointSerializer(service_point).data)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        service_point = self.get_object()
        serializer = ServicePointStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service_point.is_active = serializer.validated_data["is_active"]
        service_point.updated_by = request.user
        service_point.save(update_fields=["is_active", "updated_by", "updated_at"])

        return Response(ServicePointSerializer(service_point).data)
