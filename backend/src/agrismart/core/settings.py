"""
Settings — Configuration centralisée AgriSmart (Pydantic Settings).

Toute la configuration passe par ici. Plus jamais de os.getenv() éparpillé.
Usage:
    from agrismart.core.settings import settings
    print(settings.DATABASE_URL)
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration centralisée, lue depuis les variables d'env / .env."""

    # --- Paths ---
    STATIC_DIR: str = "dist"

    # --- API ---
    APP_NAME: str = "AgriSmart"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: list[str] = ["*"]

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "app.log"

    # --- Database (SQLite par défaut, toute URL SQLAlchemy acceptée) ---
    DATABASE_URL: str = "sqlite:///./agriculture.db"

    # --- LLM (Provider-agnostic) ---
    # Valeurs possibles : "groq", "azure", "gemini"
    LLM_PROVIDER: str = "groq"
    AGRISMART_APIKEY: str = ""
    GROQ_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    LLM_VISION_MODEL: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    LLM_TEMPERATURE: float = 0.2
    LLM_TIMEOUT_SECONDS: float = 30.0

    @property
    def llm_api_key(self) -> str:
        """Retourne la clé API du provider configuré (ou la clé générique)."""
        if self.AGRISMART_APIKEY:
            return self.AGRISMART_APIKEY
        if self.LLM_PROVIDER == "azure":
            return self.AZURE_OPENAI_API_KEY
        if self.LLM_PROVIDER == "gemini":
            return self.GEMINI_API_KEY
        return self.GROQ_API_KEY

    # --- Azure OpenAI (utilisé si LLM_PROVIDER=azure) ---
    AZURE_OPENAI_API_KEY: str = ""
    AZURE_OPENAI_ENDPOINT: str = ""
    AZURE_OPENAI_DEPLOYMENT_NAME: str = "gpt-4o"
    AZURE_OPENAI_API_VERSION: str = "2024-05-01-preview"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # --- Sentry (observabilité erreurs) ---
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"


# Singleton — importable partout
settings = Settings()
