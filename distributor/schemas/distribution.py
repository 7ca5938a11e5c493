"""
Module 01 - Schemas
File: distribution.py

Purpose: The published distribution artifact.

This is the blob that gets distributed and pinned to content-addressed
storage. It is sufficient for recreating the entire Merkle tree: anyone
can verify that every entitlement is included and that the tree holds
no additional ones.

Wire format (field names and hex encodings are fixed):
    {
      "merkleRoot": "0x<64 hex>",
      "tokenTotal": "0x<even-length hex>",
      "claims": {
        "<identifier>": {"index": 0, "amount": "0x..", "proof": ["0x..", ...]},
        ...
      }
    }
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SchemaValidationException

_DIGEST_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_QUANTITY_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def _check_digest(value: str) -> str:
    if not _DIGEST_RE.match(value):
        raise ValueError(f"expected 0x-prefixed 32-byte hex, got {value!r}")
    return value


def _check_quantity(value: str) -> str:
    if not _QUANTITY_RE.match(value):
        raise ValueError(f"expected 0x-prefixed hex quantity, got {value!r}")
    return value


class ClaimInfo(BaseModel):
    """One identifier's entitlement and its inclusion proof."""

    model_config = ConfigDict(extra="forbid")

    index: int = Field(..., ge=0, description="Leaf index in the tree")
    amount: str = Field(..., description="Amount as 0x hex quantity")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling digests from leaf to root",
    )
    flags: Optional[dict[str, bool]] = Field(
        default=None,
        description="Reasons carried over from the new input format",
    )

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: str) -> str:
        return _check_quantity(value)

    @field_validator("proof")
    @classmethod
    def _proof_items(cls, value: list[str]) -> list[str]:
        return [_check_digest(item) for item in value]

    @property
    def amount_value(self) -> int:
        return int(self.amount, 16)


class MerkleDistributorInfo(BaseModel):
    """Root, total, and per-identifier claims of one distribution."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    merkle_root: str = Field(..., alias="merkleRoot")
    token_total: str = Field(..., alias="tokenTotal")
    claims: dict[str, ClaimInfo] = Field(default_factory=dict)

    @field_validator("merkle_root")
    @classmethod
    def _root(cls, value: str) -> str:
        return _check_digest(value)

    @field_validator("token_total")
    @classmethod
    def _total(cls, value: str) -> str:
        return _check_quantity(value)

    @property
    def token_total_value(self) -> int:
        return int(self.token_total, 16)

    def to_dict(self) -> dict[str, Any]:
        """Wire-format dictionary (camelCase keys, no empty flags)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleDistributorInfo":
        """
        Load an artifact from its wire-format dictionary.

        Raises:
            SchemaValidationException: If the data does not match the format
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise _schema_error(e) from e

    @classmethod
    def from_json(cls, text: str) -> "MerkleDistributorInfo":
        try:
            return cls.model_validate_json(text)
        except ValidationError as e:
            raise _schema_error(e) from e


def _schema_error(error: ValidationError) -> SchemaValidationException:
    first = error.errors()[0] if error.errors() else {}
    return SchemaValidationException(
        message=f"Invalid distribution artifact: {first.get('msg', str(error))}",
        field_path=".".join(str(p) for p in first.get("loc", ())),
        details={"error_count": error.error_count()},
    )
