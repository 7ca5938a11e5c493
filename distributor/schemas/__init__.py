"""
Module 01 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    REVERT_ALREADY_CLAIMED,
    REVERT_INSUFFICIENT_TOKEN,
    REVERT_INVALID_PROOF,
    REVERT_TRANSFER_FAILED,
    REVERT_TREE_ALREADY_PROVEN,
    REVERT_TREE_INVALID_PROOF,
    AlreadyClaimedException,
    AlreadyProvenException,
    BalanceMapException,
    ContractRevert,
    DistributorError,
    DistributorException,
    DuplicateIdentifierException,
    EmptyBalanceMapException,
    ErrorCodes,
    InsufficientRemainingException,
    InvalidAmountException,
    InvalidArgumentException,
    InvalidIdentifierException,
    InvalidProofException,
    NonPositiveAmountException,
    SchemaValidationException,
    TokenRevert,
    TransferFailedException,
)

# Published artifact
from .distribution import ClaimInfo, MerkleDistributorInfo

# Verification results
from .verification import CheckResult, CheckSeverity, VerificationResult


__all__ = [
    # Errors
    "ErrorCodes",
    "DistributorError",
    "DistributorException",
    "SchemaValidationException",
    "BalanceMapException",
    "DuplicateIdentifierException",
    "NonPositiveAmountException",
    "InvalidIdentifierException",
    "InvalidAmountException",
    "EmptyBalanceMapException",
    "ContractRevert",
    "AlreadyClaimedException",
    "InsufficientRemainingException",
    "InvalidProofException",
    "TransferFailedException",
    "AlreadyProvenException",
    "TokenRevert",
    "InvalidArgumentException",
    "REVERT_ALREADY_CLAIMED",
    "REVERT_INSUFFICIENT_TOKEN",
    "REVERT_INVALID_PROOF",
    "REVERT_TRANSFER_FAILED",
    "REVERT_TREE_ALREADY_PROVEN",
    "REVERT_TREE_INVALID_PROOF",
    # Artifact
    "ClaimInfo",
    "MerkleDistributorInfo",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
