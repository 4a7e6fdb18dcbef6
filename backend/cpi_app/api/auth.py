"""
Authentication API endpoints.

HTTP Basic Auth against the accounts in settings (the primary account plus
EXTRA_USERS). The authenticated username is the user id that owns city
records, so two accounts never see each other's cities.
"""

from typing import Dict, Optional
import secrets

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel

from cpi_app.api.dependencies import get_prosperity_service
from cpi_app.config import settings
from cpi_app.services.prosperity_service import ProsperityService


router = APIRouter()
security = HTTPBasic()

ADMIN_ROLE = "admin"
USER_ROLE = "user"


# ----- Pydantic Schemas -----


class Account(BaseModel):
    """An authenticated account."""

    username: str
    role: str


class AccountSummary(Account):
    """Account info plus how many city records it owns."""

    city_records: int


class SessionResponse(BaseModel):
    status: str
    username: str
    message: str


# ----- Authentication Functions -----


def authenticate(username: str, password: str, accounts: Dict[str, str]) -> Optional[Account]:
    """
    Match a username/password pair against the configured accounts.

    Every account is compared so the time taken does not reveal which
    usernames exist.
    """
    expected: Optional[str] = None
    for name, secret in accounts.items():
        if secrets.compare_digest(username.encode("utf8"), name.encode("utf8")):
            expected = secret
    password_ok = secrets.compare_digest(password.encode("utf8"), (expected or "").encode("utf8"))
    if expected is None or not password_ok:
        return None
    role = ADMIN_ROLE if username == settings.basic_auth_username else USER_ROLE
    return Account(username=username, role=role)


def get_current_user(credentials: HTTPBasicCredentials = Depends(security)) -> Account:
    """Dependency resolving the signed-in account; 401 otherwise."""
    account = authenticate(credentials.username, credentials.password, settings.users)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return account


def get_user_id(account: Account = Depends(get_current_user)) -> str:
    """Dependency resolving the id city records are stored under."""
    return account.username


# ----- API Endpoints -----


@router.post("/login", response_model=SessionResponse)
async def login(account: Account = Depends(get_current_user)):
    """
    Verify credentials.

    Basic Auth has no session; the client keeps sending the same credentials.
    """
    return SessionResponse(status="success", username=account.username, message="Login successful")


@router.post("/logout")
async def logout():
    """No-op for Basic Auth; the client drops its stored credentials."""
    return {"status": "success", "message": "Logged out"}


@router.get("/me", response_model=AccountSummary)
async def get_account(
    account: Account = Depends(get_current_user),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """The signed-in account and the number of cities it has records for."""
    records = await service.list_cities(account.username)
    return AccountSummary(username=account.username, role=account.role, city_records=len(records))


@router.get("/check")
async def check_auth(account: Account = Depends(get_current_user)):
    """200 with the username when the credentials are valid, 401 otherwise."""
    return {"authenticated": True, "username": account.username}
