"""
Services — couche métier AgriSmart.

Structure :
  - db_handler.py     : Store des cultures et tâches (SQLAlchemy ORM)
  - models.py         : Modèles SQLAlchemy (source unique de vérité)
  - llm_clients.py    : Clients LLM (Groq / Azure OpenAI / Gemini)
  - prompts.py        : Prompts centralisés
  - advisory.py       : Conseil, diagnostic photo, tendances du marché
"""

from .db_handler import FarmDatabase, UpdateOutcome
from .advisory import AdvisoryService, AdvisoryServiceError

__all__ = [
    "FarmDatabase",
    "UpdateOutcome",
    "AdvisoryService",
    "AdvisoryServiceError",
]
