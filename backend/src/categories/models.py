from typing import Optional, List
from datetime import datetime

from pydantic import Field as PydanticField
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from src.core.schemas import CamelModel, StrictCamelModel, utc_now
from src.categories.constants import CATEGORY_NAME_MIN_LENGTH, CATEGORY_NAME_MAX_LENGTH

# --- Modèle Category (Table) ---
class Category(SQLModel, table=True):
    """Modèle de table pour les catégories."""
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True, max_length=100)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
    )

# --- Schémas API ---
class CategoryCreate(StrictCamelModel):
    """Schéma pour la création (et le renommage) d'une catégorie."""
    name: str = PydanticField(min_length=CATEGORY_NAME_MIN_LENGTH, max_length=CATEGORY_NAME_MAX_LENGTH)

class CategoryUpdate(CategoryCreate):
    pass

class CategoryRead(CamelModel):
    """Schéma pour la lecture d'une catégorie."""
    id: int
    name: str
    created_at: datetime
    updated_at: datetime

class CategoryNamesResponse(CamelModel):
    categories: List[str]

class CategoryMutationResponse(CamelModel):
    success: bool = True
    category: CategoryRead

class CategoryDeleteResponse(CamelModel):
    success: bool = True
    message: str
