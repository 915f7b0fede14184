"""Authentication dependencies for FastAPI."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.v1.dependencies import get_identity_service
from core.exceptions import AuthenticationError, ErrorCode, ProfileRequiredError
from domain.services.identity_service import IdentityService, SessionContext
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Dependency to get the current authenticated user.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    token = credentials.credentials
    user = await auth_provider.validate_token(token)

    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return user


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]


async def get_session_context(
    user: CurrentUser,
    identity_service: IdentityService = Depends(get_identity_service),
) -> SessionContext:
    """Resolve the authenticated identity and its profile, if registered."""
    return await identity_service.open_session(user.external_id)


CurrentSession = Annotated[SessionContext, Depends(get_session_context)]


async def get_current_profile_id(session: CurrentSession) -> UUID:
    """
    Dependency for routes that need a registered profile.

    Raises:
        ProfileRequiredError: If the identity has not completed registration
    """
    if session.profile_id is None:
        raise ProfileRequiredError()
    return session.profile_id


CurrentProfileId = Annotated[UUID, Depends(get_current_profile_id)]
