from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "RevenueForecaster"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Forecasting
    DEFAULT_HORIZON: int = 3
    MAX_HORIZON: int = 12
    MODEL_VERSION: str = "2.0.0"
    RANDOM_SEED: Optional[int] = Field(default=None)

    # Budgeting
    DEFAULT_MONTHLY_LIMIT: float = 50000.0

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
