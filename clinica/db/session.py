from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from clinica.core.config import settings
from clinica.helpers.getters import isDebugMode
import logging
logger = logging.getLogger(__name__)

if isDebugMode():
    logger.info("Using EXTERNAL database URL for debug mode")
    DATABASE_URL = settings.DATABASE_EXTERNAL_URL
else:
    logger.info("Using INTERNAL database URL for production mode")
    DATABASE_URL = settings.DATABASE_INTERNAL_URL

if DATABASE_URL.startswith("sqlite"):
    engine = create_async_engine(DATABASE_URL, future=True, echo=False)
else:
    engine = create_async_engine(DATABASE_URL, future=True, echo=False, pool_pre_ping=True, pool_recycle=3600)

SessionAsync = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
