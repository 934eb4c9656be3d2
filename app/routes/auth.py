# app/routes/auth.py

"""
Auth Routes.

Summary
-------
Endpoints include:
  - Register (returns the new profile and a ready-to-use token)
  - Login (email and password, JSON body)
  - Me (profile of the bearer)

Tokens are stateless JWTs; there is no refresh or logout endpoint.
"""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.dependencies import AuthServiceDep, CurrentUserDep
from app.managers import AUTH_LIMIT, limiter
from app.schemas.auth import LoginRequest, Token
from app.schemas.user import RegisterResponse, UserCreate, UserResponse

router = APIRouter(prefix="/api/auth", tags=["🔐 Auth"])

USER_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "name": "John Doe",
    "email": "johndoe@gmail.com",
    "createdAt": "2025-01-01T00:00:00Z",
}
AUTH_RATE_LIMIT_RESPONSE = {
    "description": "Rate limit exceeded",
    "content": {
        "application/json": {"example": {"message": "Too many requests, limit is 5 per 1 minute"}},
    },
}


@router.post(
    "/register",
    response_class=ORJSONResponse,
    response_model=RegisterResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account and receive an access token in the same response.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {**USER_EXAMPLE, "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."},
                },
            },
        },
        400: {
            "description": "Invalid input or email already registered",
            "content": {
                "application/json": {
                    "example": {"message": "Email 'johndoe@gmail.com' is already registered"},
                },
            },
        },
        429: AUTH_RATE_LIMIT_RESPONSE,
    },
    operation_id="auth_register",
)
@limiter.limit(AUTH_LIMIT)
async def register_user(
    request: Request,
    response: Response,
    user_create: UserCreate,
    auth_service: AuthServiceDep,
) -> RegisterResponse:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context (required by the rate limiter).
    response : Response
        Response object for middleware/decorators.
    user_create : UserCreate
        Name, email and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    RegisterResponse
        Stored profile plus an access token.

    Raises
    ------
    DuplicateEntryError
        If the email is already registered.
    """
    user, token = await auth_service.register_user(user_create)
    return RegisterResponse(
        id=user.uuid,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        token=token.access_token,
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=Token,
    summary="Login for access token",
    description="Exchange email and password for a bearer token.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "tokenType": "bearer",
                    },
                },
            },
        },
        401: {
            "description": "Wrong email or password",
            "content": {
                "application/json": {"example": {"message": "Invalid email or password"}},
            },
        },
        429: AUTH_RATE_LIMIT_RESPONSE,
    },
    operation_id="auth_login",
)
@limiter.limit(AUTH_LIMIT)
async def login_for_access_token(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> Token:
    user = await auth_service.authenticate_user(credentials.email, credentials.password)
    return auth_service.create_token_for_user(user)


@router.get(
    "/me",
    response_class=ORJSONResponse,
    response_model=UserResponse,
    summary="Get current user",
    responses={
        200: {"content": {"application/json": {"example": USER_EXAMPLE}}},
        401: {
            "description": "Missing or invalid bearer token",
            "content": {
                "application/json": {"example": {"message": "Not authorized, no token"}},
            },
        },
    },
    operation_id="auth_me",
)
async def read_users_me(user: CurrentUserDep) -> UserResponse:
    """Profile of the authenticated caller."""
    return UserResponse.model_validate(user, from_attributes=True)
