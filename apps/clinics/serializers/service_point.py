from django.db import transaction
from rest_framework import serializers

from apps.clinics.models import Service, ServicePoint, ServicePointService


class ServicePointSerializer(serializers.ModelSerializer):
    branch_name = serializers.CharField(source="branch.name", read_only=True)
    service_ids = serializers.SerializerMethodField()

    class Meta:
        model = ServicePoint
        fields = [
            "id",
            "branch",
            "branch_name",
            "name",
            "description",
            "is_active",
            "service_ids",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "is_active", "created_at", "updated_at"]

    def get_service_ids(self, obj):
        return sorted(obj.supported_service_ids())


class ServicePointServicesSerializer(serializers.Serializer):
    """
    Full desired set of services for a service point.
    Saving replaces the current set in one transaction: missing links are
    deactivated, new or previously deactivated ones are activated.
    """

    services = serializers.PrimaryKeyRelatedField(
        queryset=Service.objects.filter(deleted_at__isnull=True),
        many=True,
    )

    def save(self, service_point):
        wanted = {service.id for service in self.validated_data["services"]}

        with transaction.atomic():
            links = {
                link.service_id: link
                for link in ServicePointService.objects.select_for_update().filter(
                    service_point=service_point
                )
            }

            for service_id, link in links.items():
                should_be_active = service_id in wanted
                if link.is_active != should_be_active:
                    link.is_active = should_be_active
                    link.save(update_fields=["is_active"])

            ServicePointService.objects.bulk_create(
                ServicePointService(service_point=service_point, service_id=service_id)
                for service_id in wanted - links.keys()
            )

        return service_point


class ServicePointStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
