import os
from functools import lru_cache

from src.platform.config.core_setting import settings


@lru_cache(maxsize=1)
def get_service_context() -> str:
    """'<service>@<env>:<instance>', the instance being the container hostname or the PID"""
    service_name = os.getenv('SERVICE_NAME', 'cinema-booking')
    instance_id = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())
    return f'{service_name}@{settings.DEPLOY_ENV}:{instance_id}'
