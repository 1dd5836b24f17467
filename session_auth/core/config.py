import os
from typing import Optional
from dotenv import load_dotenv

from session_auth.utils.errors import ConfigurationError

load_dotenv()

class Settings:
    ENV: str = os.getenv("ENV", "local")
    APP_NAME: str = os.getenv("APP_NAME", "session-auth")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./session_auth.db")
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"
    DATABASE_POOL_SIZE: int = int(os.getenv("DATABASE_POOL_SIZE", 20))
    DATABASE_MAX_OVERFLOW: int = int(os.getenv("DATABASE_MAX_OVERFLOW", 10))

    # Token / session
    TOKEN_JWT_SECRET: Optional[str] = os.getenv("TOKEN_JWT_SECRET")
    TOKEN_EXPIRE_SECONDS: int = int(os.getenv("TOKEN_EXPIRE_SECONDS", 3600))
    # Sessions closer than this to expiry are refreshed on use
    TOKEN_REFRESH_WINDOW_SECONDS: int = int(os.getenv("TOKEN_REFRESH_WINDOW_SECONDS", 600))

    def validate(self) -> None:
        """Fail fast on settings the token service cannot run with."""
        if self.TOKEN_EXPIRE_SECONDS <= 0:
            raise ConfigurationError("TOKEN_EXPIRE_SECONDS must be a positive integer")
        if self.TOKEN_REFRESH_WINDOW_SECONDS < 0:
            raise ConfigurationError("TOKEN_REFRESH_WINDOW_SECONDS must not be negative")


settings = Settings()
