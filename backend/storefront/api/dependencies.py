"""Request dependencies: session authentication, role guard and shared components."""

from typing import Annotated, Callable, Coroutine

from fastapi import Depends, Request

from storefront.config import get_settings
from storefront.errors import ForbiddenError, UnauthorizedError
from storefront.models.user import CurrentUser, UserRole
from storefront.services.auth_service import SECURE_PREFIX, auth_service, session_token_from_cookie
from storefront.services.catalog_service import ProductCatalog

settings = get_settings()


async def get_current_user(request: Request) -> CurrentUser:
    """Resolve the session cookie to the signed-in user."""
    cookie = request.cookies.get(settings.session_cookie_name) or request.cookies.get(
        SECURE_PREFIX + settings.session_cookie_name
    )
    token = session_token_from_cookie(cookie)
    if token is None:
        raise UnauthorizedError()
    return await auth_service.get_user_for_token(token)


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def require_role(role: UserRole) -> Callable[..., Coroutine[None, None, CurrentUser]]:
    """Build a guard that admits only users holding ``role``."""

    async def guard(user: CurrentUserDep) -> CurrentUser:
        if user.role != role:
            raise ForbiddenError(f"{role.value.capitalize()} access required")
        return user

    return guard


AdminUserDep = Annotated[CurrentUser, Depends(require_role(UserRole.ADMIN))]


def get_catalog(request: Request) -> ProductCatalog:
    """The product catalog built in the application lifespan."""
    return request.app.state.catalog


CatalogDep = Annotated[ProductCatalog, Depends(get_catalog)]
