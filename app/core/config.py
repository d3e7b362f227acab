import os
from typing import Optional, List
from dotenv import load_dotenv

load_dotenv()

class Settings:
    ENV: str = os.getenv("ENV", "local")
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    APP_NAME: str = os.getenv("APP_NAME", "Snappie")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api/v1")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"
    DATABASE_POOL_SIZE: int = int(os.getenv("DATABASE_POOL_SIZE", 20))
    DATABASE_MAX_OVERFLOW: int = int(os.getenv("DATABASE_MAX_OVERFLOW", 10))

    # Registration gate. Shared secret, distinct from session tokens.
    REGISTRATION_API_KEY: Optional[str] = os.getenv("REGISTRATION_API_KEY")

    # Session tokens
    SESSION_LIFETIME_HOURS: int = int(os.getenv("SESSION_LIFETIME_HOURS", 24))
    TOKEN_BYTES: int = max(32, int(os.getenv("TOKEN_BYTES", 32)))
    TOKEN_NAME: str = os.getenv("TOKEN_NAME", "API Login")

    # Signed (legacy) credential issued next to the opaque token
    LEGACY_JWT_ENABLED: bool = os.getenv("LEGACY_JWT_ENABLED", "True").lower() == "true"
    SECRET_KEY: Optional[str] = os.getenv("SECRET_KEY")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")

    # CORS
    BACKEND_CORS_ORIGINS: Optional[str] = os.getenv("BACKEND_CORS_ORIGINS")

    # Profile defaults
    DEFAULT_IMAGE_URL: str = os.getenv("DEFAULT_IMAGE_URL", "https://via.placeholder.com/150")

    @property
    def cors_origins(self) -> List[str]:
        if not self.BACKEND_CORS_ORIGINS:
            return []
        return [o.strip() for o in self.BACKEND_CORS_ORIGINS.split(",") if o.strip()]

    @property
    def diagnostics_enabled(self) -> bool:
        return self.DEBUG or self.ENV == "development"

    @property
    def signed_tokens_enabled(self) -> bool:
        return self.LEGACY_JWT_ENABLED and bool(self.SECRET_KEY)


settings = Settings()
