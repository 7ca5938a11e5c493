"""
Merkle distributor: off-line artifact generation and claim verification.

Subpackages:
- crypto: Keccak-256 helpers and hex codecs
- merkle: tree builder, leaf encoders, balance trees
- balances: balance map parsing and artifact verification
- schemas: artifact models and the error taxonomy
- config: runtime configuration
"""

__version__ = "0.1.0"
