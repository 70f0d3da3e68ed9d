from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://calmwell:calmwell@db:5432/calmwell"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    CORS_ORIGINS: str = "*"

    # Chat companion. An empty key keeps the API up; replies use the fallback.
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_MAX_TOKENS: int = 500
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_TIMEOUT: float = 30.0

    # Home dashboard
    DAILY_REFLECTION_TARGET: int = 4
    RECENT_ENTRIES_LIMIT: int = 20
    USER_READY_TIMEOUT: float = 0.5

    # Chat messages per user per local day
    CHAT_DAILY_LIMIT: int = 30

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
