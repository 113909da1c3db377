"""
Authentication Endpoints

Staff registration and login. Every authenticated staff member has full access to
the ledger; there are no roles.

Endpoints:
- /register: Creates a staff account and issues an access token.
- /login: Authenticates with a JSON body and issues an access token.
- /token: OAuth2 password flow (used by the Swagger "Authorize" button).
- /me: Returns the current staff member.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from clinica.api.dependencies import get_current_user, get_db
from clinica.core.security import create_access_token, get_password_hash, verify_password
from clinica.logging import get_logger
from clinica.models.user import User
from clinica.schemas.auth import Login, Token
from clinica.schemas.user import UserCreate, UserOut

router = APIRouter()
logger = get_logger(__name__)


async def _authenticate(db: AsyncSession, email: str, password: str) -> User:
    result = await db.execute(select(User).filter(User.email == email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email o contraseña inválidos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user.last_login_at = datetime.now(timezone.utc)
    await db.commit()
    return user


@router.post("/register")
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """
    Register a staff member and return an access token.

    Password policy: at least 8 characters with one special character.
    """
    email = user_data.email.lower()
    existing = await db.execute(select(User).filter(User.email == email))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El email ya está registrado")

    user = User(
        name=user_data.name,
        email=email,
        password=get_password_hash(user_data.password),
        token_version=1,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("Usuario registrado", user_id=user.id)
    access_token = create_access_token(data={"sub": str(user.id)}, token_version=user.token_version)
    return {
        "user": UserOut.model_validate(user),
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.post("/token", response_model=Token)
async def oauth2_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    Standard OAuth2 endpoint. The OAuth2 'username' field carries the email.
    """
    user = await _authenticate(db, form_data.username, form_data.password)
    access_token = create_access_token(data={"sub": str(user.id)}, token_version=user.token_version)
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/login", response_model=Token)
async def login(login_data: Login, db: AsyncSession = Depends(get_db)):
    user = await _authenticate(db, login_data.email, login_data.password)
    access_token = create_access_token(data={"sub": str(user.id)}, token_version=user.token_version)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me")
async def read_me(current_user: User = Depends(get_current_user)):
    return {"user": UserOut.model_validate(current_user)}
