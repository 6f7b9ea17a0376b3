from typing import Optional, List, Dict, Literal
from decimal import Decimal
from datetime import datetime

from pydantic import Field as PydanticField, field_validator
from sqlalchemy import Column, JSON, DateTime
from sqlmodel import SQLModel, Field, Relationship

from src.core.schemas import CamelModel, StrictCamelModel, Money, utc_now
from src.categories.models import Category
from src.reviews.models import ReviewSummary

# --- Modèle Product SQLModel ---

class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, max_length=255)
    description: str = Field(default="")
    price: Decimal = Field(max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    # Listes / dictionnaires stockés en JSON
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    specifications: Dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    in_stock: bool = Field(default=True, nullable=False)
    # 0 = stock non suivi
    stock_count: int = Field(default=0, nullable=False)
    rating: float = Field(default=0, nullable=False)
    review_count: int = Field(default=0, nullable=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
    )

    category: Optional[Category] = Relationship()

# --- Schémas API pour Product ---

class ProductCreate(StrictCamelModel):
    name: str = PydanticField(min_length=1, max_length=255)
    description: str = ""
    price: Decimal = PydanticField(ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = PydanticField(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    images: List[str] = []
    features: List[str] = []
    specifications: Dict[str, str] = {}
    in_stock: bool = True
    stock_count: int = PydanticField(default=0, ge=0)


class ProductUpdate(StrictCamelModel):
    name: Optional[str] = PydanticField(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = PydanticField(default=None, ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = PydanticField(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None
    specifications: Optional[Dict[str, str]] = None
    in_stock: Optional[bool] = None
    stock_count: Optional[int] = PydanticField(default=None, ge=0)


class ProductRead(CamelModel):
    id: int
    name: str
    description: str
    price: Money
    original_price: Optional[Money] = None
    category_id: Optional[int] = None
    category: Optional[str] = None
    images: List[str] = []
    features: List[str] = []
    specifications: Dict[str, str] = {}
    in_stock: bool
    stock_count: int
    rating: float
    review_count: int
    created_at: datetime
    updated_at: datetime

    @field_validator("category", mode="before")
    @classmethod
    def category_name(cls, value):
        # Relation chargée -> on n'expose que le nom
        if isinstance(value, Category):
            return value.name
        return value


class ProductReadWithReviews(ProductRead):
    reviews: List[ReviewSummary] = []


class ProductQuery(CamelModel):
    """Filtres, tri et pagination de la liste des produits."""
    search: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = PydanticField(default=None, ge=0)
    max_price: Optional[Decimal] = PydanticField(default=None, ge=0)
    sort_by: Literal["createdAt", "price", "name", "rating"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"
    page: int = PydanticField(default=1, ge=1)
    limit: int = PydanticField(default=10, ge=1)


class ProductListResponse(CamelModel):
    products: List[ProductRead]
    total: int
    page: int
    total_pages: int
    limit: int


class ProductMutationResponse(CamelModel):
    success: bool = True
    product: ProductRead
    message: str


class ProductDeleteResponse(CamelModel):
    success: bool = True
    message: str
