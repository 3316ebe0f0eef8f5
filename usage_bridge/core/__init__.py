"""
Core modules for Usage Bridge.

This package contains the core functionality for context-limit resolution,
usage scaling, and translation into the client usage shape.
"""
