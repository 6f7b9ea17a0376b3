from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from pydantic import Field as PydanticField, field_validator
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship

from src.core.schemas import CamelModel, StrictCamelModel, Money, utc_now
from src.orders.config import OrderStatus

# --- Modèles de table ---

class Order(SQLModel, table=True):
    """Commande passée par un client (rattachée à l'utilisateur invité)."""
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    customer_name: str = Field(max_length=255)
    phone: str = Field(index=True, max_length=50)
    address: str
    notes: Optional[str] = Field(default=None)
    total: Decimal = Field(max_digits=10, decimal_places=2)
    status: OrderStatus = Field(default=OrderStatus.NEW, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
    )

    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "OrderItem.id"},
    )


class OrderItem(SQLModel, table=True):
    """Ligne de commande. Nom, prix et image sont figés au moment de la commande."""
    __tablename__ = "order_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    name: str = Field(max_length=255)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    quantity: int
    image: str = Field(default="")

    order: Optional[Order] = Relationship(back_populates="items")

# --- Schémas d'entrée ---

class OrderItemIn(StrictCamelModel):
    product_id: int
    quantity: int = PydanticField(ge=1)
    price: Decimal = PydanticField(ge=0, max_digits=10, decimal_places=2)


class CustomerInfo(StrictCamelModel):
    full_name: str = PydanticField(min_length=1, max_length=255)
    phone: str = PydanticField(min_length=1, max_length=50)
    address: str = PydanticField(min_length=1)
    notes: Optional[str] = None


class OrderCreate(StrictCamelModel):
    """Corps de création d'une commande par un client."""
    items: List[OrderItemIn] = PydanticField(min_length=1)
    customer_info: CustomerInfo
    total: Decimal = PydanticField(ge=0, max_digits=10, decimal_places=2)


class OrderStatusUpdate(StrictCamelModel):
    status: OrderStatus


class OrderInfoUpdate(StrictCamelModel):
    """
    Mise à jour des informations client. Seuls les champs présents sont appliqués;
    une chaîne vide est une valeur, pas une absence.
    """
    customer_name: Optional[str] = PydanticField(default=None, max_length=255)
    phone: Optional[str] = PydanticField(default=None, max_length=50)
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("customer_name", "phone", "address")
    @classmethod
    def not_null(cls, value):
        # null explicite interdit sur les colonnes obligatoires
        if value is None:
            raise ValueError("must not be null")
        return value


class AdminOrderUpdate(OrderInfoUpdate):
    status: Optional[OrderStatus] = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

# --- Schémas de sortie ---

class OrderItemRead(CamelModel):
    id: int
    product_id: int
    name: str
    price: Money
    quantity: int
    image: str


class OrderRead(CamelModel):
    id: int
    customer_name: str
    phone: str
    address: str
    notes: Optional[str] = None
    total: Money
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemRead] = []


class OrderCreateResponse(CamelModel):
    success: bool = True
    order: OrderRead
    message: str = "Order created successfully"


class OrdersByPhoneResponse(CamelModel):
    success: bool = True
    orders: List[OrderRead]
    total: int
    message: str


class OrderMutationResponse(CamelModel):
    success: bool = True
    order: OrderRead


class OrderUpdateResponse(OrderMutationResponse):
    message: str = "Order updated successfully"


class OrderListResponse(CamelModel):
    orders: List[OrderRead]
    total: int
    page: int
    total_pages: int


class OrderStats(CamelModel):
    total_orders: int
    new_orders: int
    processing_orders: int
    completed_orders: int
    total_revenue: float
