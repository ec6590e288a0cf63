"""
Core Package

Contains the exchange-agnostic pieces of the rate streamer:
- config / logging: Settings and the application logger
- schemas: Pydantic models (NormalizedRate, PriceUpdate, ConnectionState)
- rate_publisher: RateSink interface and its bus/callback implementations
"""
