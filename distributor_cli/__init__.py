"""
Merkle Distributor CLI

Command-line interface for building and auditing distribution artifacts.

Usage:
    python -m distributor_cli generate balances.json --out artifact.json
    python -m distributor_cli verify artifact.json
    python -m distributor_cli hash 6ccbe73b-2166-4109-816a-193c9dde9a14
"""

__version__ = "0.1.0"
