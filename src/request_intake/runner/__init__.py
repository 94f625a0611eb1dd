"""
CLI runner module.

Provides commands:
- inspect: List ZIP entries
- decode: Textual payload to bytes
- parse: Form text to request record
- process: End-to-end attachment intake
- query: Mailbox search query for a day
- init-config: Default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
