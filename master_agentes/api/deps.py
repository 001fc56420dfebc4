"""FastAPI dependencies for auth and tenant resolution."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.core.auth import decode_access_token
from master_agentes.core.errors import CredentialsRequiredError, InvalidCredentialsError
from master_agentes.core.tenant_context import set_tenant_context
from master_agentes.domain.services.credential_service import CredentialService
from master_agentes.persistence.database import get_db
from master_agentes.persistence.models.chatvolt_credential import ChatVoltCredential
from master_agentes.persistence.models.tenant import User
from master_agentes.persistence.repositories.user_repository import UserRepository

security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current authenticated user from the session JWT.

    Args:
        credentials: HTTP bearer credentials
        db: Database session

    Returns:
        Current user

    Raises:
        HTTPException: If authentication fails
    """
    payload = decode_access_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    user_repo = UserRepository(db)
    user = await user_repo.get_by_id(None, user_id)  # No tenant scoping for user lookup

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


async def require_tenant_context(
    current_user: Annotated[User, Depends(get_current_user)],
) -> int:
    """Require the session user to belong to a tenant.

    Args:
        current_user: Current authenticated user

    Returns:
        Tenant ID

    Raises:
        HTTPException: If the user has no tenant
    """
    if current_user.tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tenant context required",
        )
    set_tenant_context(current_user.tenant_id)
    return current_user.tenant_id


async def get_chatvolt_credential(
    db: Annotated[AsyncSession, Depends(get_db)],
    x_api_key: Annotated[str | None, Header(alias="x-api-key")] = None,
    x_org_id: Annotated[str | None, Header(alias="x-org-id")] = None,
) -> ChatVoltCredential:
    """Resolve the proxy headers to the active credential of a tenant.

    Raises:
        CredentialsRequiredError: Either header is missing
        InvalidCredentialsError: No active credential matches
    """
    if not x_api_key or not x_org_id:
        raise CredentialsRequiredError("Forneça x-api-key e x-org-id nos headers da requisição")

    credential = await CredentialService(db).resolve(x_api_key, x_org_id)
    if credential is None:
        raise InvalidCredentialsError("Verifique suas credenciais do ChatVolt")

    set_tenant_context(credential.tenant_id)
    return credential
