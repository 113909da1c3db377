from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinica.api.endpoints import appointments, auth, catalog, clients, dashboard, packages, payments, sessions
from clinica.api.error_handlers import register_error_handlers
from clinica.core.config import settings
from clinica.core.logging import init_sentry, setup_logging
from clinica.db.base import Base
from clinica.db.session import engine
from clinica.helpers.getters import isDebugMode
from clinica.middleware.logging import RequestLoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


app = FastAPI(
    title="API Clínica - Paquetes, Sesiones y Pagos",
    description="""
## 🔐 Autenticación

Esta API usa OAuth2 con Password Flow. Todo el personal autenticado tiene acceso completo.

### Cómo autenticarse en Swagger UI:

1. **Regístrate** con `POST /api/auth/register` y copia el `access_token`
2. **O inicia sesión** con el botón **Authorize**:
   - En el campo `username` escribe tu **email**
   - En el campo `password` tu **contraseña**
3. **O usa** `POST /api/auth/login` con JSON `{"email": "...", "password": "..."}`

## 📋 Libro de clientes

- **Clientes**: alta, edición y baja (la baja elimina todo su historial)
- **Paquetes**: S1, S5, S10, S15 y S20; solo un paquete activo por cliente
- **Sesiones**: numeración automática, sin exceder el máximo del paquete
- **Pagos**: el adeudo se calcula siempre a partir de los pagos registrados
- **Dashboard**: clientes activos, ingresos del mes y sesiones de hoy

Las operaciones de escritura responden `{"success": true, "data": ...}` o
`{"success": false, "error": "...", "code": "..."}`.
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Initialize logging and error tracking
setup_logging()
init_sentry()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request logging stays on in production; in debug mode it is optional
app.add_middleware(RequestLoggingMiddleware, enabled=not isDebugMode())

register_error_handlers(app)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(clients.router, prefix="/api/clients", tags=["clients"])
app.include_router(packages.router, prefix="/api/packages", tags=["packages"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])
app.include_router(appointments.router, prefix="/api/appointments", tags=["appointments"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(catalog.router, prefix="/api/catalog", tags=["catalog"])


@app.get("/")
def root():
    return {"message": "Bienvenido a la API de la clínica. La documentación está en /docs"}


@app.get("/health")
def health():
    return {"status": "ok"}
