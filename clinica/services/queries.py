"""
Read projections for the dashboard and the client detail page.

Every projection loads current records and derives figures on the spot; nothing
derived is cached or stored.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clinica.core.catalog import display_name
from clinica.db.store import RecordStore
from clinica.helpers.dates import day_bounds, month_start, now_local, to_utc
from clinica.models.client import Client, ClientStatus
from clinica.models.client_package import ClientPackage, PackageStatus
from clinica.models.payment import Payment
from clinica.models.session_record import SessionRecord, SessionStatus
from clinica.schemas.client_package import ActivePackageOverview, PackageSummary
from clinica.schemas.dashboard import ClientDetail, DashboardClientRow, DashboardStats
from clinica.schemas.payment import PaymentHistoryItem
from clinica.schemas.session_record import SessionHistoryItem
from clinica.services.derivation import (
    derive_package,
    derive_packages,
    select_dashboard_package,
    select_detail_package,
    total_debt,
)

LEDGER_OPTIONS = (
    selectinload(ClientPackage.sessions),
    selectinload(ClientPackage.payments),
)


def _client_with_ledger():
    return (
        selectinload(Client.packages).selectinload(ClientPackage.sessions),
        selectinload(Client.packages).selectinload(ClientPackage.payments),
    )


async def dashboard_clients(db: AsyncSession) -> List[DashboardClientRow]:
    """Clients table, newest clients first."""
    clients = await RecordStore(db, Client).find_many(
        order_by=(Client.created_at.desc(), Client.id.desc()),
        options=_client_with_ledger(),
    )

    rows = []
    for client in clients:
        ledger = derive_package(select_dashboard_package(client.packages, client.active_package_id))
        rows.append(DashboardClientRow(
            id=client.id,
            name=client.name,
            age=client.age,
            pathology=client.pathology,
            active_package_type=ledger.package.package_type if ledger else None,
            sessions_used=ledger.sessions_used if ledger else 0,
            sessions_total=ledger.sessions_total if ledger else 0,
            sessions_label=f"{ledger.sessions_used} / {ledger.sessions_total}" if ledger else "0 / 0",
            client_status=client.status,
            package_badge=ledger.badge.value if ledger else None,
            debt=total_debt(ledger),
            next_session=ledger.next_session.session_date if ledger and ledger.next_session else None,
        ))
    return rows


async def dashboard_stats(db: AsyncSession, now: Optional[datetime] = None) -> DashboardStats:
    """
    Headline figures at instant `now` (defaults to the current clinic-local time).

    Monthly earnings sum payments dated from the first instant of the current month
    up to `now`; today's sessions count sessions dated within the current local day.
    """
    now = to_utc(now) if now is not None else to_utc(now_local())
    clients = RecordStore(db, Client)
    day_start, day_end = day_bounds(now)

    active_clients = await clients.count(Client.status == ClientStatus.ACTIVE.value)
    total_clients = await clients.count()
    monthly_earnings = await RecordStore(db, Payment).sum(
        Payment.amount,
        Payment.payment_date >= month_start(now),
        Payment.payment_date <= now,
    )
    today_sessions = await RecordStore(db, SessionRecord).count(
        SessionRecord.session_date >= day_start,
        SessionRecord.session_date <= day_end,
    )

    return DashboardStats(
        active_clients=active_clients,
        total_clients=total_clients,
        monthly_earnings=monthly_earnings,
        today_sessions=today_sessions,
    )


async def client_detail(db: AsyncSession, client_id: int) -> Optional[ClientDetail]:
    client = await RecordStore(db, Client).find_by_id(client_id, options=_client_with_ledger())
    if client is None:
        return None

    ledger = derive_package(select_detail_package(client.packages))
    overview = None
    if ledger is not None:
        overview = ActivePackageOverview(
            id=ledger.package.id,
            type=ledger.package.package_type,
            display_name=display_name(ledger.package.package_type),
            sessions_remaining=ledger.sessions_remaining,
            sessions_total=ledger.sessions_total,
            current_debt=ledger.debt,
            badge=ledger.badge.value,
            next_session_date=ledger.next_session.session_date if ledger.next_session else None,
        )

    return ClientDetail(
        id=client.id,
        name=client.name,
        age=client.age,
        email=client.email,
        phone=client.phone,
        pathology=client.pathology,
        notes=client.notes,
        status=client.status,
        total_debt=total_debt(ledger),
        active_package=overview,
    )


async def client_packages(db: AsyncSession, client_id: int) -> List[PackageSummary]:
    """Package history, most recently started first."""
    packages = await RecordStore(db, ClientPackage).find_many(
        ClientPackage.client_id == client_id,
        options=LEDGER_OPTIONS,
    )
    return [
        PackageSummary(
            id=ledger.package.id,
            type=ledger.package.package_type,
            cost=ledger.package.total_price,
            paid=ledger.paid,
            debt=ledger.debt,
            sessions_completed=ledger.sessions_used,
            sessions_total=ledger.sessions_total,
            start_date=ledger.package.start_date,
            status=ledger.package.status,
            payment_status=ledger.package.payment_status,
            badge=ledger.badge.value,
        )
        for ledger in derive_packages(packages)
    ]


async def client_payments(db: AsyncSession, client_id: int) -> List[PaymentHistoryItem]:
    """Every payment of the client, newest first."""
    payments = await RecordStore(db, Payment).find_many(
        Payment.package.has(ClientPackage.client_id == client_id),
        order_by=(Payment.payment_date.desc(), Payment.id.desc()),
        options=(selectinload(Payment.package),),
    )
    return [
        PaymentHistoryItem(
            id=p.id,
            date=p.payment_date,
            amount=p.amount,
            method=p.method,
            package_id=p.package_id,
            package_type=p.package.package_type,
            notes=p.notes,
        )
        for p in payments
    ]


async def client_sessions(db: AsyncSession, client_id: int) -> List[SessionHistoryItem]:
    """Every session of the client, highest session number first."""
    sessions = await RecordStore(db, SessionRecord).find_many(
        SessionRecord.package.has(ClientPackage.client_id == client_id),
        order_by=(SessionRecord.session_number.desc(), SessionRecord.id.desc()),
        options=(selectinload(SessionRecord.package),),
    )
    return [
        SessionHistoryItem(
            id=s.id,
            session_number=s.session_number,
            date=s.session_date,
            package_id=s.package_id,
            package_type=s.package.package_type,
            status=s.status,
        )
        for s in sessions
    ]


async def next_session(db: AsyncSession, client_id: int) -> Optional[SessionRecord]:
    """Earliest scheduled pending session in the client's packages in progress."""
    sessions = await RecordStore(db, SessionRecord).find_many(
        SessionRecord.package.has(
            (ClientPackage.client_id == client_id)
            & (ClientPackage.status == PackageStatus.ACTIVE.value)
        ),
        SessionRecord.status == SessionStatus.PENDING.value,
        SessionRecord.session_date.is_not(None),
        order_by=(SessionRecord.session_date.asc(), SessionRecord.session_number.asc()),
        limit=1,
    )
    return sessions[0] if sessions else None
