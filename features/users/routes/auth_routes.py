from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from features.users.models.user_types import (
    AuthCredentials,
    AuthResult,
    ConvertAccountRequest,
    CreateAccountRequest,
    UserProfile,
)
from features.users.routes.dependencies import get_auth_service, require_token
from features.users.services.auth_service import AuthService

router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
    responses={
        400: {"description": "Invalid credentials or request"},
        401: {"description": "Authentication failed"}
    }
)

def _respond(result: AuthResult, failure_status: int = 400):
    if result.success:
        return result
    return JSONResponse(status_code=failure_status, content=result.model_dump())

@router.post(
    "/register",
    response_model=AuthResult,
    summary="Create an account",
    description="Creates an email/password account and returns a bearer token"
)
async def register(
    request: CreateAccountRequest,
    service: AuthService = Depends(get_auth_service)
):
    credentials = AuthCredentials(email=request.email, password=request.password)
    return _respond(service.create_account(credentials, request.name))

@router.post(
    "/login",
    response_model=AuthResult,
    summary="Sign in",
    description="Signs in with email and password and returns a bearer token"
)
async def login(
    credentials: AuthCredentials,
    service: AuthService = Depends(get_auth_service)
):
    result = service.sign_in(credentials)
    # Malformed credentials are a bad request, wrong ones are unauthorized
    status = 401 if result.error == "Invalid email or password" else 400
    return _respond(result, status)

@router.post(
    "/anonymous",
    response_model=AuthResult,
    summary="Sign in anonymously",
    description="Creates an anonymous user that can later be converted to a full account"
)
async def sign_in_anonymously(service: AuthService = Depends(get_auth_service)):
    return service.sign_in_anonymously()

@router.post(
    "/convert",
    response_model=AuthResult,
    summary="Convert anonymous account",
    description="Attaches email and password to the anonymous user behind the bearer token"
)
async def convert_account(
    request: ConvertAccountRequest,
    token: str = Depends(require_token),
    service: AuthService = Depends(get_auth_service)
):
    credentials = AuthCredentials(email=request.email, password=request.password)
    return _respond(service.convert_anonymous_account(token, credentials, request.name))

@router.post(
    "/logout",
    summary="Sign out",
    description="Revokes the bearer token"
)
async def logout(
    token: str = Depends(require_token),
    service: AuthService = Depends(get_auth_service)
):
    if not service.sign_out(token):
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return {"success": True}

@router.get(
    "/me",
    response_model=UserProfile,
    summary="Get the current user",
    description="Returns the profile of the user behind the bearer token"
)
async def get_current_user(
    token: str = Depends(require_token),
    service: AuthService = Depends(get_auth_service)
) -> UserProfile:
    profile = service.get_current_user(token)
    if profile is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return profile
