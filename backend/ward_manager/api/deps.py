from functools import lru_cache

from ..core.config import settings
from ..services.backend import WardBackend, build_backend
from ..services.ward import WardService


@lru_cache
def get_backend() -> WardBackend:
    return build_backend(settings)


def get_ward_service() -> WardService:
    return WardService(get_backend(), settings)
