"""
Schémas Pydantic - Modèles Request/Response pour l'API AgriSmart
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any

from agrismart.core.security import MAX_QUERY_LENGTH


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# ============================================
# REQUEST MODELS
# ============================================

class CropCreate(BaseModel):
    """Nouvelle culture. Seul `name` est obligatoire."""
    name: str
    variety: Optional[str] = None
    planted_date: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class TaskCreate(BaseModel):
    """Nouvelle tâche. `crop_id` n'est pas vérifié contre la table crops."""
    crop_id: Optional[int] = None
    task_name: str
    due_date: Optional[str] = None

    @field_validator("task_name")
    @classmethod
    def task_name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class TaskCompletionUpdate(BaseModel):
    completed: bool


class AdviceRequest(BaseModel):
    query: str = Field(..., max_length=MAX_QUERY_LENGTH)
    context: Optional[Dict[str, Any]] = None

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class DiagnosisRequest(BaseModel):
    """Photo encodée en base64 (sans préfixe data:)."""
    image: str
    mime_type: str = "image/jpeg"

    @field_validator("image")
    @classmethod
    def image_not_blank(cls, value: str) -> str:
        return _not_blank(value)


# ============================================
# RESPONSE MODELS
# ============================================

class CropOut(BaseModel):
    id: int
    name: str
    variety: Optional[str] = None
    planted_date: Optional[str] = None
    status: str


class TaskOut(BaseModel):
    id: int
    crop_id: Optional[int] = None
    task_name: str
    due_date: Optional[str] = None
    completed: bool
    crop_name: Optional[str] = None


class CreatedResponse(BaseModel):
    id: int


class SuccessResponse(BaseModel):
    success: bool = True


class AdviceResponse(BaseModel):
    advice: str


class HealthResponse(BaseModel):
    status: str
    database: str
    version: str
