"""
Configuration Management Module

This module handles loading, validating, and providing access to application configuration
from environment variables (.env file).

Uses Pydantic Settings for automatic validation and type conversion.

Key Features:
- Loads configuration from .env file
- Validates all required settings
- Provides type-safe access to configuration values
- Converts comma-separated strings to lists (CORS origins)
- Handles optional settings with sensible defaults

Usage:
    from core.config import settings

    # Access configuration values
    print(settings.binance_base_url)
    print(settings.symbols_cache_ttl)  # 86400 by default
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """
    Application Settings

    This class defines all configuration parameters for the application.
    Values are automatically loaded from environment variables or .env file.

    Attributes:
        binance_base_url: Base URL for the Binance spot API
        quote_asset: Reference currency a pair must be quoted in to be monitored
        kline_limit: Number of candles fetched per symbol
        rsi_period: RSI lookback period
        min_closing_prices: Series shorter than this are skipped before computing RSI
        symbols_cache_ttl: Lifetime of the cached trading pair list in seconds
        symbols_strict: Surface trading pair lookup failures instead of returning []
        max_concurrency: Maximum number of symbols fetched at the same time
        symbol_timeout: Time budget for one symbol (fetch + compute) in seconds
        request_timeout: Timeout for a single HTTP request in seconds
        max_retries: HTTP attempts per request when rate limited
        app_host: Host address for FastAPI server
        app_port: Port number for FastAPI server
        environment: Current environment (development, production)
        debug: Enable debug mode with verbose logging
        log_level: Logging level
        cors_origins: Comma-separated list of allowed CORS origins
    """

    # ============================================
    # Binance API Configuration
    # ============================================

    binance_base_url: str = Field(
        default="https://api.binance.com",
        description="Binance spot API base URL"
    )

    quote_asset: str = Field(
        default="USDT",
        description="Quote currency of the monitored trading pairs"
    )

    # ============================================
    # RSI Configuration
    # ============================================

    kline_limit: int = Field(
        default=50,
        description="Number of recent candles fetched per symbol"
    )

    rsi_period: int = Field(
        default=14,
        description="RSI lookback period"
    )

    min_closing_prices: int = Field(
        default=14,
        description="Minimum closing prices required before computing RSI"
    )

    # ============================================
    # Caching Configuration
    # ============================================

    symbols_cache_ttl: int = Field(
        default=86400,
        description="Trading pair list cache TTL in seconds (1 day)"
    )

    symbols_strict: bool = Field(
        default=True,
        description="Fail the request when the trading pair list cannot be fetched"
    )

    # ============================================
    # Concurrency & Timeouts
    # ============================================

    max_concurrency: int = Field(
        default=20,
        description="Maximum concurrent kline requests"
    )

    symbol_timeout: float = Field(
        default=15.0,
        description="Per-symbol time budget in seconds"
    )

    request_timeout: float = Field(
        default=10.0,
        description="HTTP request timeout in seconds"
    )

    max_retries: int = Field(
        default=3,
        description="HTTP attempts per request on rate limit responses"
    )

    # ============================================
    # Application Configuration
    # ============================================

    app_host: str = Field(
        default="0.0.0.0",
        description="FastAPI server host address"
    )

    app_port: int = Field(
        default=5084,
        description="FastAPI server port"
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, production)"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # ============================================
    # CORS Configuration
    # ============================================

    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # ============================================
    # Pydantic Settings Configuration
    # ============================================

    model_config = SettingsConfigDict(
        # Look for .env file in the project root
        env_file=".env",
        # Ignore extra fields in .env that aren't defined here
        extra="ignore",
        # Case-insensitive environment variable matching
        case_sensitive=False
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Convert comma-separated CORS origins string to a list.

        Returns:
            List of allowed origin URLs (e.g., ["*"] or ["http://localhost:3000"])

        Example:
            >>> settings.cors_origins_list
            ['*']
        """
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# ============================================
# Global Settings Instance
# ============================================

# Create a single instance of settings to be imported throughout the application
settings = Settings()


# ============================================
# Configuration Validation
# ============================================

def validate_configuration(config: Settings = None) -> None:
    """
    Validate critical configuration settings on application startup.

    Args:
        config: Settings to validate (defaults to the global settings)

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    # Import logger here to avoid circular import
    # (logging.py imports config.py, so we can't import at module level)
    from core.logging import logger

    config = config or settings

    if not config.quote_asset.strip():
        raise ValueError("QUOTE_ASSET must not be empty")

    positive_ints = {
        "KLINE_LIMIT": config.kline_limit,
        "RSI_PERIOD": config.rsi_period,
        "MIN_CLOSING_PRICES": config.min_closing_prices,
        "SYMBOLS_CACHE_TTL": config.symbols_cache_ttl,
        "MAX_CONCURRENCY": config.max_concurrency,
        "MAX_RETRIES": config.max_retries,
    }
    for name, value in positive_ints.items():
        if value <= 0:
            raise ValueError(f"{name} must be a positive integer, got {value}")

    for name, value in {"SYMBOL_TIMEOUT": config.symbol_timeout,
                        "REQUEST_TIMEOUT": config.request_timeout}.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    if config.kline_limit <= config.rsi_period:
        raise ValueError(
            f"KLINE_LIMIT ({config.kline_limit}) must be greater than "
            f"RSI_PERIOD ({config.rsi_period})"
        )

    # Validate port number
    if not (1 <= config.app_port <= 65535):
        raise ValueError(f"Invalid port number: {config.app_port}. Must be between 1 and 65535")

    # Validate log level
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.log_level.upper() not in valid_log_levels:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{config.log_level}'. "
            f"Must be one of: {', '.join(valid_log_levels)}"
        )

    # Log successful validation
    logger.info("Configuration validated successfully")
    logger.info(f"Binance API: {config.binance_base_url} (quote asset {config.quote_asset})")
    logger.info(f"RSI period: {config.rsi_period}, kline limit: {config.kline_limit}")
    logger.info(f"Concurrency: {config.max_concurrency}, symbol timeout: {config.symbol_timeout}s")
    logger.info(f"Server: {config.app_host}:{config.app_port}")
    logger.info(f"Log level: {config.log_level.upper()}")
