"""
Package catalog: the fixed session tiers the clinic sells.

Each tier maps to a session ceiling (how many session records a package of that tier
may hold) and a suggested list price. Staff may override the price per package.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List


class PackageTier(str, Enum):
    """Package sizes offered by the clinic"""
    S1 = "S1"
    S5 = "S5"
    S10 = "S10"
    S15 = "S15"
    S20 = "S20"


SESSION_CEILINGS: Dict[PackageTier, int] = {
    PackageTier.S1: 1,
    PackageTier.S5: 5,
    PackageTier.S10: 10,
    PackageTier.S15: 15,
    PackageTier.S20: 20,
}

SUGGESTED_PRICES: Dict[PackageTier, Decimal] = {
    PackageTier.S1: Decimal("350"),
    PackageTier.S5: Decimal("1250"),
    PackageTier.S10: Decimal("2500"),
    PackageTier.S15: Decimal("3900"),
    PackageTier.S20: Decimal("5200"),
}


def session_ceiling(tier: PackageTier) -> int:
    return SESSION_CEILINGS[PackageTier(tier)]


def suggested_price(tier: PackageTier) -> Decimal:
    return SUGGESTED_PRICES[PackageTier(tier)]


def display_name(tier: PackageTier) -> str:
    """Human label, e.g. '1 sesión' or '5 sesiones'."""
    count = session_ceiling(tier)
    return f"{count} sesión" if count == 1 else f"{count} sesiones"


def catalog_entries() -> List[Dict]:
    """All tiers in ascending size, for the package form."""
    return [
        {
            "tier": tier.value,
            "sessions": SESSION_CEILINGS[tier],
            "suggested_price": SUGGESTED_PRICES[tier],
            "display_name": display_name(tier),
        }
        for tier in PackageTier
    ]
