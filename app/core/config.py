# app/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.APP_NAME: str = os.getenv("APP_NAME", "Expense Management API")
        self.ENV: str = os.getenv("ENV", "development")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        # DB
        self.DATABASE_URL: str = os.getenv("DATABASE_URL")
        self.DB_HOST: str = os.getenv("DB_HOST")
        self.DB_PORT: str = os.getenv("DB_PORT", "5432")
        self.DB_NAME: str = os.getenv("DB_NAME")
        self.DB_USER: str = os.getenv("DB_USER")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD")
        self.DB_SSLMODE: str = os.getenv("DB_SSLMODE", "require")
        self.DB_CONNECT_TIMEOUT: int = int(os.getenv("DB_CONNECT_TIMEOUT", "15"))

        # MONEY
        self.DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "GBP")

        # ASSISTANT (GROQ)
        self.GROQ_API_KEY: str = os.getenv("GROQ_API_KEY")
        self.GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
        self.GROQ_TIMEOUT_SECONDS: float = float(os.getenv("GROQ_TIMEOUT_SECONDS", "30"))
        self.CHAT_MAX_TOOL_ROUNDS: int = int(os.getenv("CHAT_MAX_TOOL_ROUNDS", "5"))

        # DEMO ACTORS (no authentication in this service)
        self.DEFAULT_ACTORS_ENABLED: bool = _as_bool(os.getenv("DEFAULT_ACTORS_ENABLED", "true"))
        self.DEFAULT_SUBMITTER_ID: int = int(os.getenv("DEFAULT_SUBMITTER_ID", "1"))
        self.DEFAULT_REVIEWER_ID: int = int(os.getenv("DEFAULT_REVIEWER_ID", "2"))

        # FRONTEND
        self.CORS_ORIGINS: list[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

    @property
    def assistant_configured(self) -> bool:
        return bool(self.GROQ_API_KEY)

    @property
    def database_configured(self) -> bool:
        return bool(self.DATABASE_URL) or all(
            [self.DB_HOST, self.DB_NAME, self.DB_USER, self.DB_PASSWORD]
        )


settings = Settings()
