from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    JWT_ISSUER: str = "notesrole-app"
    JWT_AUDIENCE: str = "notesrole-users"

    BCRYPT_ROUNDS: int = 12
    INVITATION_EXPIRE_DAYS: int = 7

    APP_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    ENVIRONMENT: str = "development"  # "development" or "production"

    ADMIN_API_KEY: str

    @property
    def is_production(self):
        return self.ENVIRONMENT == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
