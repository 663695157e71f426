from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.clinics.models import Branch, Service
from apps.clinics.serializers import (
    BranchSerializer,
    ServicePointSerializer,
    ServiceSerializer,
)
from apps.clinics.services.service_point_service import get_service_points
from core.exceptions import DomainError, error_response
from core.permissions import IsAdminOrReadOnly

import logging
logger = logging.getLogger(__name__)


# =========================
# BranchView
# =========================

class BranchViewSet(viewsets.ModelViewSet):
    queryset = Branch.objects.filter(deleted_at__isnull=True)
    serializer_class = BranchSerializer
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    filterset_fields = ["is_active"]

    def perform_create(self, serializer):
        branch = serializer.save(created_by=self.request.user, updated_by=self.request.user)
        logger.info(f"Branch {branch.code} created by {self.request.user}")

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        instance.delete(user=self.request.user)

    @action(detail=True, methods=["get"], url_path="service-points")
    def service_points(self, request, pk=None):
        branch = self.get_object()
        try:
            points = get_service_points(branch.id)
        except DomainError as exc:
            return error_response(exc)
        return Response(ServicePointSerializer(points, many=True).data)


# =========================
# ServiceView
# =========================

class ServiceViewSet(viewsets.ModelViewSet):
    queryset = Service.objects.filter(deleted_at__isnull=True)
    serializer_class = ServiceSerializer
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    filterset_fields = ["is_active"]

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_destroy(self, instance):
        instance.delete(user=self.request.user)
