"""
Module principal de l'application FastAPI Lantern Store.

Ce module configure et initialise l'instance FastAPI, ajoute les middlewares nécessaires (CORS),
monte les fichiers téléversés en statique, et inclut les routeurs des différentes fonctionnalités
de l'API (authentification, utilisateurs, catalogue, avis, commandes, uploads, administration).
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.config import settings
from src.core.schemas import error_detail
from src.database import create_tables

# --- Importer les routeurs ---
from src.auth.router import auth_router
from src.users.router import user_router
from src.categories.router import router as categories_router
from src.products.router import router as product_router
from src.reviews.router import router as review_router
from src.orders.router import router as order_router
from src.uploads.router import router as upload_router
from src.admin.router import router as admin_router

# Configurer le logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Création des tables manquantes...")
    await create_tables()
    yield
    logger.info("Arrêt de l'application.")


app = FastAPI(
    title=settings.APP_NAME,
    description="API de la boutique: catalogue, avis, commandes invité contrôlées et tableau de bord admin.",
    version="2.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Entrée mal formée: 400 avec le kind ValidationError."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    logger.info(f"Requête invalide sur {request.url.path}: {len(errors)} erreur(s)")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": error_detail("ValidationError", "Request validation failed", errors=errors)},
    )


# Fichiers téléversés (stockage local)
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)

# ======================================================
# Inclure les routeurs
# ======================================================
api = settings.API_PREFIX
app.include_router(auth_router, prefix=f"{api}/auth", tags=["Authentification"])
app.include_router(user_router, prefix=f"{api}/users", tags=["Utilisateurs"])
app.include_router(categories_router, prefix=f"{api}/categories", tags=["Categories"])
app.include_router(product_router, prefix=f"{api}/products", tags=["Produits"])
app.include_router(review_router, prefix=f"{api}/products/{{product_id}}/reviews", tags=["Avis"])
app.include_router(order_router, prefix=f"{api}/orders", tags=["Orders"])
app.include_router(upload_router, prefix=f"{api}/upload", tags=["Uploads"])
app.include_router(admin_router, prefix=f"{api}/admin", tags=["Admin"])


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok"}
