"""
Ledger Mutation Coordinator

Validates and applies every create/update/delete on clients, packages, sessions,
payments and appointments, enforcing the ledger invariants before writing:

- a client has at most one package with status 'Activo'; creating a package or
  promoting one to 'Activo' demotes the others and moves the client's
  active_package_id pointer, all in one transaction
- a package never holds more session records than its tier's ceiling
- session numbers are assigned once and never reused
- the stored Adeudo/Pagado flag of a package follows its debt after every write

Each public operation runs in its own transaction and returns a MutationResult;
domain and storage failures are rolled back and reported as values.
"""

from functools import wraps
from typing import Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.core.catalog import session_ceiling
from clinica.core.errors import (
    CapacityError,
    InconsistentStateError,
    LedgerError,
    PersistenceError,
    ValidationError,
)
from clinica.core.logging import capture_error
from clinica.db.store import RecordStore
from clinica.helpers.dates import to_utc
from clinica.logging import get_logger
from clinica.models.appointment import Appointment
from clinica.models.client import Client, ClientStatus
from clinica.models.client_package import ClientPackage, PackageStatus, PaymentStatus
from clinica.models.payment import Payment
from clinica.models.session_record import SessionRecord
from clinica.schemas.appointment import AppointmentCreate
from clinica.schemas.client import ClientCreate, ClientUpdate
from clinica.schemas.client_package import PackageCreate, PackageUpdate
from clinica.schemas.payment import PaymentCreate, PaymentUpdate
from clinica.schemas.result import MutationResult
from clinica.schemas.session_record import SessionCreate, SessionUpdate
from clinica.services.derivation import payment_status_for

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _parse(schema: Type[SchemaT], data: Union[SchemaT, dict]) -> SchemaT:
    """Accept an already validated schema or raw form data."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        fields = [".".join(str(loc) for loc in err["loc"]) for err in e.errors()]
        raise ValidationError(details={"fields": fields}) from e


def mutation(failure_message: str):
    """
    Run a coordinator operation as one transaction.

    Commits on success. On LedgerError or a storage failure the transaction is
    rolled back and a failed MutationResult is returned. Storage failures are
    reported with `failure_message` only; the detail goes to the logs and Sentry.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs) -> MutationResult:
            operation = func.__name__
            try:
                data = await func(self, *args, **kwargs)
                await self.db.commit()
            except PersistenceError as e:
                await self.db.rollback()
                capture_error(e.__cause__ or e, context={"mutation": {"operation": operation}})
                return MutationResult.fail(PersistenceError(failure_message, operation))
            except LedgerError as e:
                await self.db.rollback()
                logger.warning("Mutation rejected", operation=operation, code=e.code, reason=e.message)
                return MutationResult.fail(e)
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error("Mutation failed", operation=operation, error=type(e).__name__)
                capture_error(e, context={"mutation": {"operation": operation}})
                return MutationResult.fail(PersistenceError(failure_message, operation))
            return MutationResult.ok(data)
        return wrapper
    return decorator


class LedgerCoordinator:
    """
    Entry point for every ledger write.

    Usage:
        coordinator = LedgerCoordinator(db)
        result = await coordinator.create_session({"package_id": 4, "status": "Completada"})
        if not result.success:
            print(result.error)  # "El paquete ya alcanzó el máximo de 5 sesión(es)"
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.clients = RecordStore(db, Client)
        self.packages = RecordStore(db, ClientPackage)
        self.sessions = RecordStore(db, SessionRecord)
        self.payments = RecordStore(db, Payment)
        self.appointments = RecordStore(db, Appointment)

    # ==================== Clients ====================

    @mutation("Error al crear el cliente")
    async def create_client(self, data: Union[ClientCreate, dict]) -> Client:
        payload = _parse(ClientCreate, data)
        client = await self.clients.create(
            **payload.model_dump(),
            status=ClientStatus.ACTIVE.value,
        )
        logger.info("Cliente creado", client_id=client.id)
        return client

    @mutation("Error al actualizar el cliente")
    async def update_client(self, client_id: int, data: Union[ClientUpdate, dict]) -> Client:
        payload = _parse(ClientUpdate, data)
        fields = payload.model_dump()
        fields["status"] = payload.status.value
        return await self.clients.update(client_id, **fields)

    @mutation("Error al eliminar el cliente")
    async def delete_client(self, client_id: int) -> dict:
        """Irreversible: removes the client with every package, session, payment and appointment."""
        client = await self.clients.get(client_id, for_update=True)
        client.active_package_id = None
        await self.db.flush()

        owned = select(ClientPackage.id).where(ClientPackage.client_id == client_id)
        sessions = await self.sessions.delete_where(SessionRecord.package_id.in_(owned))
        payments = await self.payments.delete_where(Payment.package_id.in_(owned))
        packages = await self.packages.delete_where(ClientPackage.client_id == client_id)
        await self.appointments.delete_where(Appointment.client_id == client_id)
        await self.clients.delete(client_id)

        logger.info(
            "Cliente eliminado",
            client_id=client_id,
            packages=packages,
            sessions=sessions,
            payments=payments,
        )
        return {"id": client_id}

    # ==================== Packages ====================

    @mutation("Error al crear el paquete")
    async def create_package(self, data: Union[PackageCreate, dict]) -> ClientPackage:
        payload = _parse(PackageCreate, data)
        # Row lock serializes concurrent promotions for the same client
        client = await self.clients.get(payload.client_id, for_update=True)
        client_id = client.id

        try:
            demoted = await self._demote_active_packages(client.id)
            package = await self.packages.create(
                client_id=client.id,
                package_type=payload.package_type.value,
                total_price=payload.total_price,
                start_date=to_utc(payload.start_date),
                status=PackageStatus.ACTIVE.value,
                payment_status=payment_status_for(payload.total_price).value,
                last_session_number=0,
            )
            client.active_package_id = package.id
            await self.db.flush()
        except PersistenceError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise InconsistentStateError(client_id) from e
            raise
        except IntegrityError as e:
            raise InconsistentStateError(client_id) from e

        logger.info(
            "Paquete creado",
            client_id=client.id,
            package_id=package.id,
            package_type=package.package_type,
            demoted=demoted,
        )
        return package

    @mutation("Error al actualizar el paquete")
    async def update_package(self, package_id: int, data: Union[PackageUpdate, dict]) -> ClientPackage:
        payload = _parse(PackageUpdate, data)
        package = await self.packages.get(package_id)
        client = await self.clients.get(package.client_id, for_update=True)
        client_id = client.id

        recorded = await self.sessions.count(SessionRecord.package_id == package.id)
        ceiling = session_ceiling(payload.package_type)
        if recorded > ceiling:
            raise CapacityError(
                ceiling,
                f"El paquete ya tiene {recorded} sesiones registradas; "
                f"el máximo de {payload.package_type.value} es {ceiling} sesión(es)",
            )

        try:
            if payload.status == PackageStatus.ACTIVE:
                # Demote before touching the package so the flush never sees two actives
                await self._demote_active_packages(client.id, exclude_id=package.id)
                client.active_package_id = package.id
            elif client.active_package_id == package.id:
                client.active_package_id = None

            package.package_type = payload.package_type.value
            package.total_price = payload.total_price
            package.status = payload.status.value
            await self.db.flush()
        except PersistenceError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise InconsistentStateError(client_id) from e
            raise
        except IntegrityError as e:
            raise InconsistentStateError(client_id) from e

        await self._sync_payment_status(package)
        return package

    @mutation("Error al eliminar el paquete")
    async def delete_package(self, package_id: int) -> dict:
        package = await self.packages.get(package_id)
        client = await self.clients.get(package.client_id, for_update=True)
        if client.active_package_id == package.id:
            client.active_package_id = None
            await self.db.flush()

        sessions = await self.sessions.delete_where(SessionRecord.package_id == package_id)
        payments = await self.payments.delete_where(Payment.package_id == package_id)
        await self.packages.delete(package_id)

        logger.info(
            "Paquete eliminado",
            package_id=package_id,
            client_id=client.id,
            sessions=sessions,
            payments=payments,
        )
        return {"id": package_id, "client_id": client.id}

    async def _demote_active_packages(self, client_id: int, exclude_id: Optional[int] = None) -> int:
        criteria = [
            ClientPackage.client_id == client_id,
            ClientPackage.status == PackageStatus.ACTIVE.value,
        ]
        if exclude_id is not None:
            criteria.append(ClientPackage.id != exclude_id)
        return await self.packages.update_where(*criteria, status=PackageStatus.FINISHED.value)

    async def _sync_payment_status(self, package: ClientPackage) -> None:
        """Recompute the stored Adeudo/Pagado flag from the current payments."""
        paid = await self.payments.sum(Payment.amount, Payment.package_id == package.id)
        debt = package.total_price - paid
        status = payment_status_for(debt)
        if package.payment_status != status.value:
            package.payment_status = status.value
            await self.db.flush()
            if status == PaymentStatus.PAID:
                logger.great("Paquete liquidado", package_id=package.id, client_id=package.client_id)
        if debt < 0:
            logger.warning("Paquete con saldo a favor", package_id=package.id, credit=-debt)

    # ==================== Sessions ====================

    @mutation("Error al registrar la sesión")
    async def create_session(self, data: Union[SessionCreate, dict]) -> SessionRecord:
        payload = _parse(SessionCreate, data)
        # Row lock serializes concurrent numbering for the same package
        package = await self.packages.get(payload.package_id, for_update=True)

        recorded = await self.sessions.count(SessionRecord.package_id == package.id)
        ceiling = session_ceiling(package.package_type)
        if recorded >= ceiling:
            raise CapacityError(ceiling)

        number = max(recorded, package.last_session_number or 0) + 1
        session = await self.sessions.create(
            package_id=package.id,
            session_number=number,
            session_date=to_utc(payload.session_date),
            status=payload.status.value,
        )
        package.last_session_number = number
        await self.db.flush()
        await self._sync_payment_status(package)
        return session

    @mutation("Error al actualizar la sesión")
    async def update_session(self, session_id: int, data: Union[SessionUpdate, dict]) -> SessionRecord:
        payload = _parse(SessionUpdate, data)
        session = await self.sessions.update(
            session_id,
            session_date=to_utc(payload.session_date),
            status=payload.status.value,
        )
        await self._sync_payment_status(await self.packages.get(session.package_id))
        return session

    @mutation("Error al eliminar la sesión")
    async def delete_session(self, session_id: int) -> dict:
        """Remaining sessions keep their numbers."""
        session = await self.sessions.get(session_id)
        package_id = session.package_id
        await self.sessions.delete(session_id)
        await self._sync_payment_status(await self.packages.get(package_id))
        return {"id": session_id, "package_id": package_id}

    # ==================== Payments ====================

    @mutation("Error al registrar el pago")
    async def create_payment(self, data: Union[PaymentCreate, dict]) -> Payment:
        payload = _parse(PaymentCreate, data)
        package = await self.packages.get(payload.package_id)
        payment = await self.payments.create(
            package_id=package.id,
            amount=payload.amount,
            payment_date=to_utc(payload.payment_date),
            method=payload.method.value,
            notes=payload.notes,
        )
        await self._sync_payment_status(package)
        logger.info("Pago registrado", package_id=package.id, payment_id=payment.id, amount=payment.amount)
        return payment

    @mutation("Error al actualizar el pago")
    async def update_payment(self, payment_id: int, data: Union[PaymentUpdate, dict]) -> Payment:
        payload = _parse(PaymentUpdate, data)
        payment = await self.payments.update(
            payment_id,
            amount=payload.amount,
            payment_date=to_utc(payload.payment_date),
            method=payload.method.value,
            notes=payload.notes,
        )
        await self._sync_payment_status(await self.packages.get(payment.package_id))
        return payment

    @mutation("Error al eliminar el pago")
    async def delete_payment(self, payment_id: int) -> dict:
        payment = await self.payments.get(payment_id)
        package_id = payment.package_id
        await self.payments.delete(payment_id)
        await self._sync_payment_status(await self.packages.get(package_id))
        return {"id": payment_id, "package_id": package_id}

    # ==================== Appointments ====================

    @mutation("Error al registrar la cita")
    async def create_appointment(self, data: Union[AppointmentCreate, dict]) -> Appointment:
        payload = _parse(AppointmentCreate, data)
        start, end = to_utc(payload.start_time), to_utc(payload.end_time)
        if end <= start:
            raise ValidationError(
                "La hora de término debe ser posterior a la de inicio",
                details={"fields": ["end_time"]},
            )
        client = await self.clients.get(payload.client_id)
        return await self.appointments.create(
            client_id=client.id,
            start_time=start,
            end_time=end,
            cal_event_id=payload.cal_event_id,
        )

    @mutation("Error al eliminar la cita")
    async def delete_appointment(self, appointment_id: int) -> dict:
        await self.appointments.delete(appointment_id)
        return {"id": appointment_id}

