"""
Configuration spécifique au module Orders.
Contient les statuts, les transitions attendues et les tolérances de contrôle d'intégrité.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Tuple


class OrderStatus(str, Enum):
    """Statuts du cycle de vie d'une commande."""
    NEW = "NEW"
    NEGOTIATING = "NEGOTIATING"
    SHIPPING = "SHIPPING"
    COMPLETED = "COMPLETED"


# Progression attendue. Une transition hors table est appliquée mais journalisée.
ALLOWED_STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.NEW: frozenset({OrderStatus.NEGOTIATING}),
    OrderStatus.NEGOTIATING: frozenset({OrderStatus.SHIPPING}),
    OrderStatus.SHIPPING: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
}

# Statuts comptés comme "en traitement" dans les statistiques
PROCESSING_STATUSES: Tuple[OrderStatus, ...] = (OrderStatus.NEGOTIATING, OrderStatus.SHIPPING)

# Écart absolu toléré entre le total déclaré et le total recalculé
TOTAL_TOLERANCE: Decimal = Decimal("0.01")
# Écart relatif toléré entre le prix soumis et le prix catalogue (5%)
PRICE_TOLERANCE: Decimal = Decimal("0.05")

MONEY_QUANTUM: Decimal = Decimal("0.01")
