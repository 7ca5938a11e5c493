"""
CLI command modules.
"""

from distributor_cli.commands import generate, identifier_hash, verify

__all__ = ["generate", "identifier_hash", "verify"]
