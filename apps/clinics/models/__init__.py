from .branch import Branch
from .service import Service
from .service_point import ServicePoint, ServicePointService
from .schedule import ServiceSchedule
