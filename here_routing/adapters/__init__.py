"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the client to external systems:
- HTTP transport (requests)
"""
