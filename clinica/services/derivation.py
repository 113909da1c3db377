"""
Ledger derivation.

Pure functions that turn a client's raw packages, sessions and payments into the
figures the dashboard shows: which package is in progress, sessions used and
remaining, amount paid, debt, next pending session and status badges.

Nothing here touches the database or raises on missing data: an absent package
yields zero/absent defaults. Callers load packages with their sessions and
payments before deriving.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional

from clinica.core.catalog import session_ceiling
from clinica.helpers.dates import as_aware
from clinica.models.client_package import ClientPackage, PackageStatus, PaymentStatus
from clinica.models.session_record import SessionRecord, SessionStatus

ZERO = Decimal("0")


class PackageBadge(str, Enum):
    """Badge shown next to a package on the dashboard"""
    ACTIVE_OWED = "Activo/Adeudo"
    ACTIVE_PAID = "Activo/Pagado"
    ACTIVE_CREDIT = "Activo/Crédito"
    CONCLUDED = "Concluido"


@dataclass(frozen=True)
class PackageLedger:
    """Derived figures for one package."""
    package: ClientPackage
    paid: Decimal
    debt: Decimal
    sessions_used: int
    sessions_total: int
    sessions_remaining: int
    badge: PackageBadge
    next_session: Optional[SessionRecord]


def paid_amount(package: ClientPackage) -> Decimal:
    return sum((Decimal(p.amount) for p in package.payments), ZERO)


def package_debt(package: ClientPackage) -> Decimal:
    """total_price - paid. Negative when overpaid; never floored."""
    return Decimal(package.total_price) - paid_amount(package)


def sessions_used(package: ClientPackage) -> int:
    return sum(1 for s in package.sessions if s.status == SessionStatus.COMPLETED.value)


def sessions_total(package: ClientPackage) -> int:
    """Session ceiling from the catalog, not the number of session records."""
    return session_ceiling(package.package_type)


def package_badge(status: str, debt: Decimal) -> PackageBadge:
    if status == PackageStatus.FINISHED.value:
        return PackageBadge.CONCLUDED
    if debt > 0:
        return PackageBadge.ACTIVE_OWED
    if debt < 0:
        return PackageBadge.ACTIVE_CREDIT
    return PackageBadge.ACTIVE_PAID


def payment_status_for(debt: Decimal) -> PaymentStatus:
    """Value of the stored Adeudo/Pagado flag for a given debt."""
    return PaymentStatus.OWED if debt > 0 else PaymentStatus.PAID


def next_pending_session(package: Optional[ClientPackage]) -> Optional[SessionRecord]:
    """Earliest 'Pendiente' session with a date."""
    if package is None:
        return None
    scheduled = [
        s for s in package.sessions
        if s.status == SessionStatus.PENDING.value and s.session_date is not None
    ]
    if not scheduled:
        return None
    return min(scheduled, key=lambda s: (as_aware(s.session_date), s.session_number))


def _recency_key(package: ClientPackage):
    return (as_aware(package.start_date), package.id or 0)


def most_recent(packages: Iterable[ClientPackage]) -> Optional[ClientPackage]:
    packages = list(packages)
    if not packages:
        return None
    return max(packages, key=_recency_key)


def select_dashboard_package(
    packages: Iterable[ClientPackage],
    active_package_id: Optional[int] = None,
) -> Optional[ClientPackage]:
    """
    Package shown on the dashboard list.

    Fallback chain: the client's active package pointer, then any package with
    status 'Activo', then the most recently started package, else None.
    """
    packages = list(packages)
    if active_package_id is not None:
        for package in packages:
            if package.id == active_package_id:
                return package
    active = [p for p in packages if p.status == PackageStatus.ACTIVE.value]
    if active:
        return most_recent(active)
    return most_recent(packages)


def select_detail_package(packages: Iterable[ClientPackage]) -> Optional[ClientPackage]:
    """
    Package shown on the client detail page: the most recently started one among
    'Activo' and 'Terminado' packages, regardless of which of them is in progress.
    """
    candidates = [
        p for p in packages
        if p.status in (PackageStatus.ACTIVE.value, PackageStatus.FINISHED.value)
    ]
    return most_recent(candidates)


def derive_package(package: Optional[ClientPackage]) -> Optional[PackageLedger]:
    if package is None:
        return None
    debt = package_debt(package)
    used = sessions_used(package)
    total = sessions_total(package)
    return PackageLedger(
        package=package,
        paid=paid_amount(package),
        debt=debt,
        sessions_used=used,
        sessions_total=total,
        sessions_remaining=total - used,
        badge=package_badge(package.status, debt),
        next_session=next_pending_session(package),
    )


def derive_packages(packages: Iterable[ClientPackage]) -> List[PackageLedger]:
    """Ledger for every package, most recently started first."""
    ordered = sorted(packages, key=_recency_key, reverse=True)
    return [derive_package(p) for p in ordered]


def total_debt(ledger: Optional[PackageLedger]) -> Decimal:
    return ledger.debt if ledger is not None else ZERO
