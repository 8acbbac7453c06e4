# src/duelrank/middleware/__init__.py

"""Middleware components for DuelRank API."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
