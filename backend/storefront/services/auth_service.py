"""Session resolution against the auth provider's collections."""

import logging
from typing import Optional
from urllib.parse import unquote

from storefront.database.mongodb import mongodb
from storefront.errors import UnauthorizedError
from storefront.models.user import CurrentUser, UserInDB
from storefront.utils.helpers import id_filter, naive_utc, utcnow

logger = logging.getLogger(__name__)

SECURE_PREFIX = "__Secure-"


def session_token_from_cookie(cookie_value: Optional[str]) -> Optional[str]:
    """Extract the token from a signed ``<token>.<signature>`` cookie value.

    The signature is not verified here. The token itself is a random secret
    that must match a stored session, so the lookup is what authenticates.
    """
    if not cookie_value:
        return None
    token = unquote(cookie_value).split(".", 1)[0].strip()
    return token or None


class AuthService:
    """Resolves session tokens to users."""

    @staticmethod
    async def get_user_for_token(token: str) -> CurrentUser:
        """Load the user behind a live session token.

        Raises:
            UnauthorizedError: the session is unknown or expired, or its user is gone.
        """
        session = await mongodb.sessions.find_one({"token": token})
        if not session:
            raise UnauthorizedError("Invalid session")

        expires_at = session.get("expiresAt")
        if expires_at is not None and naive_utc(expires_at) <= naive_utc(utcnow()):
            raise UnauthorizedError("Session expired")

        user_doc = await mongodb.users.find_one(id_filter(str(session.get("userId"))))
        if not user_doc:
            logger.warning("Session %s references a missing user", session.get("_id"))
            raise UnauthorizedError("Invalid session")

        return UserInDB.model_validate(user_doc).to_current_user()


# Global auth service instance
auth_service = AuthService()
