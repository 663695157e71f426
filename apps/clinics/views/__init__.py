from .branch import BranchViewSet, ServiceViewSet
from .schedule import ServiceScheduleViewSet
from .service_point import ServicePointViewSet
from .availability import AvailableSlotsView
