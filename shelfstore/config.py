# shelfstore/config.py
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    DATABASE_URL: str = "sqlite:///./shelfstore.db"

    # Extra CORS origin for the deployed client
    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Initial admin account, created at startup only while the users table is empty
    SEED_ADMIN: bool = True
    ADMIN_EMAIL: str = "admin@shelfstore.io"
    ADMIN_PASSWORD: str = "Admin@123456"

    model_config = SettingsConfigDict(extra="ignore")

    @property
    def database_url(self) -> str:
        # Hosted Postgres hands out postgres://, SQLAlchemy requires postgresql://
        if self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
        return self.DATABASE_URL

settings = Settings()
