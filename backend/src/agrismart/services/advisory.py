"""
Advisory Service — Conseils agronomiques, diagnostic photo et tendances du marché.

Collaborateur externe (LLM hébergé) : lent ou indisponible à tout moment.
Toute défaillance est convertie en AdvisoryServiceError, que la couche API
transforme en réponse "réessayez plus tard".
"""

import base64
import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, ConfigDict, Field

from agrismart.core.security import sanitize_user_input
from .llm_clients import get_chat_client, get_sdk_client, resolve_model
from .prompts import (
    ADVICE_USER_TEMPLATE,
    AGRISMART_SYSTEM,
    DIAGNOSIS_PROMPT,
    MARKET_CROPS,
    MARKET_TRENDS_PROMPT,
)

logger = logging.getLogger(__name__)


class AdvisoryServiceError(Exception):
    """Le service de conseil n'a pas pu répondre (config, réseau, format)."""


class PlantDiagnosis(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plant_name: str = Field(alias="plantName")
    health_status: str = Field(alias="healthStatus")
    diagnosis: str
    treatment: List[str] = []
    urgency: str


class MarketTrend(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    crop: str
    price_trend: str = Field(alias="priceTrend")
    current_price: str = Field(alias="currentPrice")
    outlook: str


@contextmanager
def _advisory_call(operation: str):
    try:
        yield
    except AdvisoryServiceError:
        raise
    except Exception as exc:
        logger.warning("Advisory %s failed: %s", operation, exc, exc_info=True)
        raise AdvisoryServiceError(f"{operation} failed: {exc.__class__.__name__}") from exc


class AdvisoryService:
    """
    Façade au-dessus des clients LLM.

    Les clients sont créés paresseusement : une clé absente ne bloque pas
    le démarrage de l'API, seulement les appels de conseil.
    """

    def __init__(self, chat_client=None, sdk_client=None):
        self._chat = chat_client
        self._sdk = sdk_client

    @property
    def chat(self):
        if self._chat is None:
            self._chat = get_chat_client()
        return self._chat

    @property
    def sdk(self):
        if self._sdk is None:
            self._sdk = get_sdk_client()
        return self._sdk

    def _complete_json(self, messages: List[Dict[str, Any]], *, vision: bool = False) -> Any:
        completion = self.sdk.chat.completions.create(
            model=resolve_model(vision=vision),
            messages=messages,
            temperature=0.2,
            response_format={"type": "json_object"},
        )
        content = completion.choices[0].message.content
        if not content:
            raise AdvisoryServiceError("Empty response from the advisory model.")
        return json.loads(content)

    def get_advice(self, query: str, context: Optional[Dict[str, Any]] = None) -> str:
        query = sanitize_user_input(query)
        if not query:
            raise ValueError("query is required")

        prompt = ADVICE_USER_TEMPLATE.format(
            query=query,
            context=json.dumps(context or {}, ensure_ascii=False, default=str),
        )
        with _advisory_call("advice"):
            response = self.chat.invoke(
                [SystemMessage(content=AGRISMART_SYSTEM), HumanMessage(content=prompt)]
            )
            text = response.content if isinstance(response.content, str) else ""
            if not text.strip():
                raise AdvisoryServiceError("Empty response from the advisory model.")
            logger.info("Advice generated (%d chars)", len(text))
            return text

    def diagnose_image(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> PlantDiagnosis:
        if not image_bytes:
            raise ValueError("image is required")

        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": DIAGNOSIS_PROMPT.format()},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            }
        ]
        with _advisory_call("diagnosis"):
            payload = self._complete_json(messages, vision=True)
            diagnosis = PlantDiagnosis.model_validate(payload)
            logger.info(
                "Diagnosis: plant=%s status=%s urgency=%s",
                diagnosis.plant_name, diagnosis.health_status, diagnosis.urgency,
            )
            return diagnosis

    def get_market_trends(self) -> List[MarketTrend]:
        prompt = MARKET_TRENDS_PROMPT.format(crops=", ".join(MARKET_CROPS))
        with _advisory_call("market trends"):
            payload = self._complete_json([
                {"role": "system", "content": AGRISMART_SYSTEM},
                {"role": "user", "content": prompt},
            ])
            # Mode JSON : objet {"trends": [...]}, une liste nue reste acceptée
            items = payload.get("trends") if isinstance(payload, dict) else payload
            if not isinstance(items, list):
                raise AdvisoryServiceError("Market trends payload is not a list.")
            return [MarketTrend.model_validate(item) for item in items]
