from .branch import BranchSerializer, ServiceSerializer
from .schedule import ServiceScheduleSerializer, AvailableSlotsQuerySerializer
from .service_point import (
    ServicePointSerializer,
    ServicePointServicesSerializer,
    ServicePointStatusSerializer,
)
