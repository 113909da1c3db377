from clinica.core.config import settings


def isDebugMode() -> bool:
    """True when running locally (DEBUG flag or development mode)."""
    return settings.DEBUG or settings.MODE == "development"
