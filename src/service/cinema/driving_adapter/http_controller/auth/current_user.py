from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@inject
async def get_current_user_id(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=settings.AUTH_COOKIE_NAME),
) -> int:
    """Authenticated principal from the session cookie (stateless, no DB query)"""
    return jwt_auth.get_user_id_from_jwt(token)
