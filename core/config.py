"""
Configuration Management Module

This module handles loading, validating, and providing access to application configuration
from environment variables (.env file).

Uses Pydantic Settings for automatic validation and type conversion.

Key Features:
- Loads configuration from .env file
- Validates all required settings
- Provides type-safe access to configuration values
- Converts comma-separated strings to lists (symbols, ignored symbols, origins)
- Handles optional settings with sensible defaults

Usage:
    from core.config import settings

    # Access configuration values
    print(settings.gateio_ws_url)
    print(settings.default_symbols_list)  # Returns a list of strings
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
        gateio_ws_url: Gate.io spot WebSocket endpoint
        gateio_pairs_url: HTTP endpoint listing every tradable pair
        default_symbols: Pairs used when the pairs endpoint is unavailable
        ignore_symbols: Pairs never included in the subscription
        rate_source_id: Source identifier attached to every emitted rate
        keepalive_interval: Seconds between liveness probes
        reconnect_short_delay: Delay for the first reconnect attempts
        reconnect_long_delay: Delay once the short attempts are used up
        reconnect_short_attempts: Highest attempt number still using the short delay
        reconnect_max_attempts: Ceiling for the reconnect attempt counter
        request_timeout: Timeout for HTTP requests in seconds
        print_price_updates: Log a progress line for every price update
        app_host: Host address for FastAPI server
        app_port: Port number for FastAPI server
        environment: Current environment (development, production)
        debug: Enable debug mode with verbose logging
        log_level: Logging level name
        cors_origins: Allowed CORS origins
    """

    # ============================================
    # Gate.io Configuration
    # ============================================

    gateio_ws_url: str = Field(
        default="wss://api.gateio.ws/ws/v4/",
        description="Gate.io spot WebSocket endpoint"
    )

    gateio_pairs_url: str = Field(
        default="https://data.gateapi.io/api2/1/pairs",
        description="Gate.io endpoint returning the list of tradable pairs"
    )

    default_symbols: str = Field(
        default="BTC_USDT,ETH_USDT,BNB_USDT",
        description="Comma-separated fallback pairs used when the pairs endpoint fails"
    )

    ignore_symbols: str = Field(
        default="",
        description="Comma-separated pairs excluded from the ticker subscription"
    )

    rate_source_id: str = Field(
        default="gateio",
        description="Source identifier attached to emitted rate updates"
    )

    # ============================================
    # Connection Lifecycle
    # ============================================

    keepalive_interval: float = Field(
        default=5.0,
        description="Seconds between WebSocket liveness probes"
    )

    reconnect_short_delay: float = Field(
        default=2.0,
        description="Reconnect delay (seconds) for the first attempts"
    )

    reconnect_long_delay: float = Field(
        default=30.0,
        description="Reconnect delay (seconds) after the short attempts are used up"
    )

    reconnect_short_attempts: int = Field(
        default=4,
        description="Highest attempt number that still uses the short delay"
    )

    reconnect_max_attempts: int = Field(
        default=60,
        description="Reconnect attempt counter saturates at this value"
    )

    request_timeout: int = Field(
        default=10,
        description="HTTP request timeout in seconds"
    )

    print_price_updates: bool = Field(
        default=True,
        description="Log a fixed-width progress line per price update"
    )

    # ============================================
    # Application Configuration
    # ============================================

    app_host: str = Field(
        default="0.0.0.0",
        description="FastAPI server host address"
    )

    app_port: int = Field(
        default=8000,
        description="FastAPI server port"
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, production)"
    )

    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
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

    # ============================================
    # Custom Properties
    # ============================================

    @property
    def default_symbols_list(self) -> List[str]:
        """
        Convert comma-separated fallback pairs to a list.

        Example:
            >>> settings.default_symbols_list
            ['BTC_USDT', 'ETH_USDT', 'BNB_USDT']
        """
        return [s.strip().upper() for s in self.default_symbols.split(",") if s.strip()]

    @property
    def ignore_symbols_list(self) -> List[str]:
        """
        Convert comma-separated ignored pairs to a list (empty by default).
        """
        return [s.strip().upper() for s in self.ignore_symbols.split(",") if s.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Convert comma-separated CORS origins string to a list.

        Example:
            >>> settings.cors_origins_list
            ['http://localhost:3000', 'http://localhost:5173']
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

def validate_configuration() -> None:
    """
    Validate critical configuration settings on application startup.

    Raises:
        ValueError: If required configuration is missing or invalid

    This function is called during application initialization to ensure
    the configuration is valid before the rate stream starts.
    """
    # Import here to avoid circular import
    # (logging.py imports config.py, so we can't import at module level)
    from core.logging import logger
    from core.utils.pairs import is_valid_pair

    if not settings.default_symbols_list:
        raise ValueError("DEFAULT_SYMBOLS must contain at least one pair")

    for symbol in settings.default_symbols_list + settings.ignore_symbols_list:
        if not is_valid_pair(symbol):
            raise ValueError(
                f"Invalid pair '{symbol}'. "
                f"Pairs must look like BASE_QUOTE (e.g. BTC_USDT)"
            )

    if not settings.gateio_ws_url.startswith(("ws://", "wss://")):
        raise ValueError(f"Invalid GATEIO_WS_URL: '{settings.gateio_ws_url}'")

    # Timers
    for name in ("keepalive_interval", "reconnect_short_delay", "reconnect_long_delay"):
        if getattr(settings, name) <= 0:
            raise ValueError(f"{name.upper()} must be positive, got {getattr(settings, name)}")

    if not (1 <= settings.reconnect_short_attempts <= settings.reconnect_max_attempts):
        raise ValueError(
            f"RECONNECT_SHORT_ATTEMPTS must be between 1 and RECONNECT_MAX_ATTEMPTS "
            f"({settings.reconnect_max_attempts}), got {settings.reconnect_short_attempts}"
        )

    # Validate port number
    if not (1 <= settings.app_port <= 65535):
        raise ValueError(f"Invalid port number: {settings.app_port}. Must be between 1 and 65535")

    # Validate log level
    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if settings.log_level.upper() not in valid_log_levels:
        raise ValueError(
            f"Invalid LOG_LEVEL: '{settings.log_level}'. "
            f"Must be one of: {', '.join(valid_log_levels)}"
        )

    # Log successful validation
    logger.info("Configuration validated successfully")
    logger.info(f"Gate.io WebSocket: {settings.gateio_ws_url}")
    logger.info(f"Fallback pairs: {', '.join(settings.default_symbols_list)}")
    logger.info(f"Ignored pairs: {', '.join(settings.ignore_symbols_list) or 'none'}")
    logger.info(f"Server: {settings.app_host}:{settings.app_port}")
    logger.info(f"Log level: {settings.log_level.upper()}")
