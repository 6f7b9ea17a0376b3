from typing import Optional, List
from datetime import datetime

from pydantic import Field as PydanticField, field_validator
from sqlalchemy import UniqueConstraint, DateTime
from sqlmodel import SQLModel, Field

from src.core.schemas import CamelModel, StrictCamelModel, utc_now

# --- Modèle Review (Table) ---
class Review(SQLModel, table=True):
    """Avis d'un utilisateur sur un produit (un seul avis par couple produit/utilisateur)."""
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("product_id", "user_id", name="uq_review_product_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", index=True, nullable=False)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    # Nom de l'auteur copié au moment de l'avis
    user_name: str = Field(max_length=255)
    rating: int = Field(nullable=False)
    comment: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
    )

# --- Schémas API ---
class ReviewCreate(StrictCamelModel):
    rating: int = PydanticField(ge=1, le=5)
    comment: Optional[str] = PydanticField(default=None, min_length=10, max_length=1000)

class ReviewUpdate(StrictCamelModel):
    rating: Optional[int] = PydanticField(default=None, ge=1, le=5)
    comment: Optional[str] = PydanticField(default=None, min_length=10, max_length=1000)

    @field_validator("rating")
    @classmethod
    def rating_not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

class ReviewSummary(CamelModel):
    """Vue courte d'un avis, embarquée dans le détail d'un produit."""
    id: int
    rating: int
    comment: Optional[str] = None
    user_name: str
    created_at: datetime

class ReviewRead(ReviewSummary):
    product_id: int
    user_id: int
    updated_at: datetime

class ReviewListResponse(CamelModel):
    reviews: List[ReviewRead]
    total: int
    average_rating: float

class ReviewMutationResponse(CamelModel):
    success: bool = True
    review: ReviewRead
    message: str

class ReviewDeleteResponse(CamelModel):
    success: bool = True
    message: str
