from datetime import timedelta
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from samankhojo.api.auth_utils import create_access_token
from samankhojo.api.deps import get_auth_service, get_current_user, get_rules
from samankhojo.api.errors import raise_for_errors
from samankhojo.components.auth import AuthService, RegisterInput
from samankhojo.domain.entities import User
from samankhojo.rules.models import Rules

router = APIRouter()


class Token(BaseModel):
    access_token: str
    token_type: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    display_name: str
    phone: str | None = None


def _user_dict(user: User) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "display_name": user.display_name,
        "phone": user.phone,
        "roles": user.roles,
    }


@router.post("/register", status_code=201)
def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Register a customer account."""
    user, errors = service.register(
        RegisterInput(
            email=data.email,
            password=data.password,
            display_name=data.display_name,
            phone=data.phone,
        )
    )
    if user is None:
        raise_for_errors(errors)
    return _user_dict(user)


@router.post("/login", response_model=Token)
async def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    service: AuthService = Depends(get_auth_service),
    rules: Rules = Depends(get_rules),
) -> Token:
    """Authenticate user and return access token."""
    user = service.authenticate(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.status != "active":
        raise HTTPException(status_code=400, detail="User account is inactive")

    ttl_minutes = rules.auth.token_ttl_minutes
    access_token = create_access_token(
        data={"sub": str(user.id)}, expires_delta=timedelta(minutes=ttl_minutes)
    )

    # Set HttpOnly Cookie
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=ttl_minutes * 60,
        expires=ttl_minutes * 60,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )

    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    """Log out user by clearing cookie."""
    response.delete_cookie(key="access_token")
    return {"status": "success"}


@router.get("/me")
def read_users_me(
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Get current user info."""
    return _user_dict(current_user)
