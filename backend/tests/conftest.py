# Standard Library
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# First-Party Libraries
from src.main import app
from src.database import get_db_session
from src.categories.models import Category
from src.products.models import Product
from src.users.models import User
from src.auth.security import get_password_hash, create_user_token
from src.uploads.dependencies import get_file_storage
from src.uploads.storage import AbstractFileStorage

# URL de base pour la DB en mémoire
TEST_DATABASE_BASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_URL_PREFIX = "/static/uploads"

# --- Stockage de fichiers simulé ---

class InMemoryFileStorage(AbstractFileStorage):
    """Stockage simulé: garde les fichiers en mémoire et trace les suppressions."""

    def __init__(self, url_prefix: str = TEST_URL_PREFIX):
        self.url_prefix = url_prefix
        self.files: Dict[str, bytes] = {}
        self.deleted: List[str] = []

    async def save(self, key: str, content: bytes, content_type: Optional[str] = None) -> str:
        self.files[key] = content
        return f"{self.url_prefix}/{key}"

    async def delete(self, key: str) -> None:
        self.deleted.append(key)
        self.files.pop(key, None)

    def key_from_url(self, url: str) -> Optional[str]:
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    engine: AsyncEngine = create_async_engine(
        TEST_DATABASE_BASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()

@pytest.fixture
def file_storage() -> InMemoryFileStorage:
    return InMemoryFileStorage()

@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession, file_storage: InMemoryFileStorage) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la session DB de test et le stockage simulé."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_file_storage] = lambda: file_storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

# --- Fixtures Utilisateur et Authentification ---

async def _create_user(db_session: AsyncSession, email: str, password: str, name: str, is_admin: bool) -> User:
    user = User(email=email, password_hash=get_password_hash(password), name=name, is_admin=is_admin)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user

@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur standard."""
    return await _create_user(db_session, "testuser@example.com", "testpassword", "Test User", False)

@pytest_asyncio.fixture(scope="function")
async def test_user_2(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "testuser2@example.com", "testpassword2", "Test User 2", False)

@pytest_asyncio.fixture(scope="function")
async def admin_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur admin."""
    return await _create_user(db_session, "admin@example.com", "adminpassword", "Admin User", True)

def _auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_user_token(user.id, user.email)}"}

@pytest.fixture
def auth_headers_user(test_user: User) -> dict[str, str]:
    return _auth_headers(test_user)

@pytest.fixture
def auth_headers_user_2(test_user_2: User) -> dict[str, str]:
    return _auth_headers(test_user_2)

@pytest.fixture
def auth_headers_admin(admin_user: User) -> dict[str, str]:
    return _auth_headers(admin_user)

# --- Fixtures Catalogue ---

@pytest_asyncio.fixture(scope="function")
async def test_category(db_session: AsyncSession) -> Category:
    category = Category(name="Lanterns")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category

async def _create_product(db_session: AsyncSession, **values) -> Product:
    product = Product(**values)
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product

@pytest_asyncio.fixture(scope="function")
async def test_product(db_session: AsyncSession, test_category: Category) -> Product:
    """Produit suivi en stock (stock 5, prix 10.00)."""
    return await _create_product(
        db_session,
        name="Paper Lantern",
        description="Classic red paper lantern",
        price=Decimal("10.00"),
        category_id=test_category.id,
        images=["/static/uploads/images/a_lantern.png", "/static/uploads/images/b_lantern.png"],
        features=["Handmade"],
        specifications={"color": "red"},
        in_stock=True,
        stock_count=5,
    )

@pytest_asyncio.fixture(scope="function")
async def untracked_product(db_session: AsyncSession, test_category: Category) -> Product:
    """Produit dont le stock n'est pas suivi (stock_count = 0) et sans image."""
    return await _create_product(
        db_session,
        name="Silk Lantern",
        description="Silk lantern made to order",
        price=Decimal("5.00"),
        category_id=test_category.id,
        in_stock=True,
        stock_count=0,
    )

@pytest_asyncio.fixture(scope="function")
async def out_of_stock_product(db_session: AsyncSession, test_category: Category) -> Product:
    return await _create_product(
        db_session,
        name="Stone Lantern",
        description="Garden stone lantern",
        price=Decimal("80.00"),
        category_id=test_category.id,
        in_stock=False,
        stock_count=0,
    )

@pytest.fixture
def order_payload(test_product: Product, untracked_product: Product) -> dict:
    """Commande valide: 2 x 10.00 + 1 x 5.00 = 25.00."""
    return {
        "items": [
            {"productId": test_product.id, "quantity": 2, "price": 10.00},
            {"productId": untracked_product.id, "quantity": 1, "price": 5.00},
        ],
        "customerInfo": {
            "fullName": "Jane Doe",
            "phone": "+1-555-0100",
            "address": "1 Lantern Street",
            "notes": "Leave at the door",
        },
        "total": 25.00,
    }
