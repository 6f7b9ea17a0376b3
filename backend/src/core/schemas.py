from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# ======================================================
# Configuration Commune Pydantic
# ======================================================

# Configuration commune pour activer le mode ORM (from_attributes)
class OrmBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True
    )


class CamelModel(OrmBaseModel):
    """Schéma exposé en camelCase (ex: customerName), lisible aussi par nom Python."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StrictCamelModel(CamelModel):
    """Schéma d'entrée qui refuse les champs inconnus au lieu de les ignorer."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


def utc_now() -> datetime:
    """Horodatage courant, toujours avec fuseau UTC."""
    return datetime.now(timezone.utc)


def error_detail(kind: str, message: str, **extra: Any) -> Dict[str, Any]:
    """Corps d'erreur structuré renvoyé dans `detail`."""
    detail = {"kind": kind, "message": message}
    detail.update(extra)
    return detail


# Montants: Decimal en interne, nombre JSON en sortie
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
