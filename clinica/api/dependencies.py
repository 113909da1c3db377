from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from clinica.db.session import SessionAsync
from clinica.models.user import User
from clinica.core.security import SECRET_KEY, ALGORITHM
from clinica.services.coordinator import LedgerCoordinator

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/auth/token",
    description="Autenticación con email y contraseña del personal"
)


async def get_db():
    async with SessionAsync() as session:
        yield session


async def get_current_user(
        token: str = Depends(oauth2_scheme),
        db: AsyncSession = Depends(get_db),
):
    """
    Resolve the logged-in staff member from the bearer token.

    Raises:
        HTTPException 401: missing, invalid or revoked token
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Credenciales inválidas",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub")
        tv = payload.get("tv")
        if user_id is None or tv is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if not user or int(tv) != int(user.token_version or 1):
        raise credentials_exception
    return user


async def get_coordinator(db: AsyncSession = Depends(get_db)) -> LedgerCoordinator:
    return LedgerCoordinator(db)
