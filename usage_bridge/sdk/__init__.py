"""
SDK for Usage Bridge.

Provides programmatic access to usage translation.
"""

from .reporter import UsageReporter

__all__ = ["UsageReporter"]
