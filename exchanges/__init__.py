"""
Exchange Connectors Package

Each exchange has its own subfolder with:
- api_client.py: REST API logic
- ws_client.py: WebSocket streaming logic

Currently implemented: Gate.io spot tickers (exchanges/gateio).
"""
