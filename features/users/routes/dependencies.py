from typing import Optional
from fastapi import Depends, Header, HTTPException, Request

from features.users.services.auth_service import AuthService

def get_auth_service(request: Request) -> AuthService:
    """Dependency to get the AuthService instance."""
    return request.app.state.auth_service

def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Token from an ``Authorization: Bearer <token>`` header, if present."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()

def require_token(token: Optional[str] = Depends(get_bearer_token)) -> str:
    if token is None:
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return token

def get_optional_user_id(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[str]:
    if token is None:
        return None
    return auth_service.get_user_id(token)

def get_current_user_id(
    token: str = Depends(require_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> str:
    user_id = auth_service.get_user_id(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user_id
