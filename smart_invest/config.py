"""
Application configuration loaded from environment variables.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from smart_invest.core.constants import BATCH_TIMEOUT_SECONDS, QUOTE_TIMEOUT_SECONDS


class Settings(BaseSettings):
    """Application settings from environment variables (prefix SMART_INVEST_)."""

    model_config = SettingsConfigDict(env_prefix="SMART_INVEST_", env_file=".env", extra="ignore")

    # Data storage
    data_path: Path = Path("./data")
    portfolios_file: str = "portfolios.json"
    transactions_file: str = "transactions.json"
    recommendations_file: str = "recommendations.json"

    # Market data
    chart_url: str = "https://query1.finance.yahoo.com/v8/finance/chart/"
    search_url: str = "https://query2.finance.yahoo.com/v1/finance/search"
    quote_timeout_seconds: float = QUOTE_TIMEOUT_SECONDS
    batch_timeout_seconds: float = BATCH_TIMEOUT_SECONDS

    @property
    def portfolios_path(self) -> Path:
        return self.data_path / self.portfolios_file

    @property
    def transactions_path(self) -> Path:
        return self.data_path / self.transactions_file

    @property
    def recommendations_path(self) -> Path:
        return self.data_path / self.recommendations_file


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
