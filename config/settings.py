"""
QuantPyTrader Analytics Settings
Configuration management using Pydantic Settings
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal
import logging

from analytics.core.interfaces import AnalysisConfig


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    app_name: str = "QuantPyTrader Analytics"
    debug: bool = False
    log_level: str = "INFO"

    # Capital and position sizing
    initial_capital: float = Field(default=10000.0, gt=0)
    position_size_type: Literal["fixed", "percentage"] = "fixed"
    position_size: float = Field(default=100.0, ge=0)
    commission_rate: float = Field(default=0.0, ge=0, lt=1)

    # Period segmentation
    period_unit: str = "day"
    period_length: int = Field(default=1, gt=0)

    # Distributions
    bin_size_in_std_dev: float = Field(default=0.5, gt=0)
    distribution_display_range_sd: float = Field(default=3.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_analysis_config(self) -> AnalysisConfig:
        """Build a per-run analysis configuration from these defaults"""
        return AnalysisConfig(
            initial_capital=self.initial_capital,
            position_size_type=self.position_size_type,
            position_size=self.position_size,
            commission_rate=self.commission_rate,
            period_unit=self.period_unit,
            period_length=self.period_length,
            bin_size_in_std_dev=self.bin_size_in_std_dev,
            distribution_display_range_sd=self.distribution_display_range_sd,
        )


def configure_logging(level: str = None) -> None:
    """Apply the configured log level to the root logger"""
    level_name = (level or settings.log_level).upper()
    if settings.debug and level is None:
        level_name = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Global settings instance
settings = Settings()
