"""
FastAPI Application Package

Process shell for the Gate.io rate streamer: starts the ticker stream on
startup, stops it on shutdown, and exposes its state over REST/WebSocket.
"""
