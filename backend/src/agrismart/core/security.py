"""
Security Module — Hygiène des requêtes AgriSmart.

Fournit :
- Génération de request ID (en-tête X-Request-ID)
- Nettoyage des questions envoyées au modèle de conseil
"""

import secrets

# Longueur maximale d'une question de conseil, partagée avec AdviceRequest
MAX_QUERY_LENGTH = 4000


def generate_request_id() -> str:
    """Identifiant opaque (32 caractères hex) pour corréler logs et réponses."""
    return secrets.token_hex(16)


def sanitize_user_input(text: str, max_length: int = MAX_QUERY_LENGTH) -> str:
    """Retire les caractères de contrôle (sauf \\n et \\t) et borne la longueur."""
    if not text:
        return ""
    text = "".join(ch for ch in text[:max_length] if ch in "\n\t" or ord(ch) >= 32)
    return text.strip()


__all__ = [
    "MAX_QUERY_LENGTH",
    "generate_request_id",
    "sanitize_user_input",
]
