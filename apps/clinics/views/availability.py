from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.clinics.serializers import AvailableSlotsQuerySerializer
from apps.clinics.services.availability_service import get_service_slots
from core.constants import DayOfWeek
from core.exceptions import DomainError, error_response


class AvailableSlotsView(APIView):
    """
    Bookable "HH:MM" slots of a service on a date.
    An empty list means the service is closed that day.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = AvailableSlotsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        service_id = query.validated_data["service"]
        date = query.validated_data["date"]

        try:
            slots = get_service_slots(service_id, date)
        except DomainError as exc:
            return error_response(exc)

        return Response({
            "service": service_id,
            "date": date.isoformat(),
            "day_of_week": DayOfWeek.for_date(date).label,
            "slots": slots,
        })
