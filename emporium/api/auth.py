# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /auth/login   - Exchange username + password for an access token
#   POST /auth/signup  - Create an account
#
# =============================================================================

from fastapi import APIRouter, Depends

from emporium.api.deps import get_hasher, get_store, get_token_service
from emporium.auth.context import Identity
from emporium.auth.passwords import PasswordHasher
from emporium.auth.tokens import TokenService
from emporium.core.models import (
    LoginRequest,
    Role,
    SignupResponse,
    TokenResponse,
    UserCreate,
    UserPublic,
)
from emporium.services.users import authenticate_user, create_user
from emporium.storage import DocumentStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    store: DocumentStore = Depends(get_store),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Authenticate and get an access token.

    The token is valid for one hour.
    """
    user = await authenticate_user(store, hasher, data.username, data.password)
    identity = Identity(id=user["id"], username=user["username"], role=Role(user["role"]))
    return TokenResponse(token=tokens.issue(identity))


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    data: UserCreate,
    store: DocumentStore = Depends(get_store),
    hasher: PasswordHasher = Depends(get_hasher),
):
    """
    Create a new account.
    """
    user = await create_user(store, hasher, data)
    return SignupResponse(user=UserPublic.model_validate(user))
