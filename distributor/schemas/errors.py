"""
Module 01 - Schemas
File: errors.py

Purpose: Standard error taxonomy for the distributor.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Balance map validation (artifact generation)
    DUPLICATE_IDENTIFIER = "DuplicateIdentifier"
    NON_POSITIVE_AMOUNT = "NonPositiveAmount"
    INVALID_IDENTIFIER = "InvalidIdentifier"
    INVALID_AMOUNT = "InvalidAmount"
    EMPTY_BALANCE_MAP = "EmptyBalanceMap"

    # Claims
    ALREADY_CLAIMED = "AlreadyClaimed"
    INSUFFICIENT_REMAINING = "InsufficientRemaining"
    INVALID_PROOF = "InvalidProof"
    TRANSFER_FAILED = "TransferFailed"

    # Tree registry
    ALREADY_PROVEN = "AlreadyProven"

    # Token collaborator
    TOKEN_REVERT = "TokenRevert"

    # Arguments outside the ABI ranges
    INVALID_ARGUMENT = "InvalidArgument"

    # Artifacts
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"


# Revert reasons, as reported by the distributor contracts
REVERT_ALREADY_CLAIMED = "MerkleDistributor: Drop already claimed."
REVERT_INSUFFICIENT_TOKEN = "MerkleDistributor: Insufficient token."
REVERT_INVALID_PROOF = "MerkleDistributor: Invalid proof."
REVERT_TRANSFER_FAILED = "MerkleDistributor: Transfer failed."
REVERT_TREE_ALREADY_PROVEN = "MerkleTree: Already proven."
REVERT_TREE_INVALID_PROOF = "MerkleTree: Invalid proof."


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class DistributorError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the CLI and by callers that report failures without raising.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        description="Machine-readable error code from ErrorCodes",
        min_length=1,
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "DistributorException":
        """Convert this error model to a raised exception."""
        return DistributorException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DistributorException(Exception):
    """
    Base exception for all distributor errors.

    Carries structured error information and can be converted
    to/from DistributorError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "DISTRIBUTOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> DistributorError:
        """Convert this exception to a DistributorError model."""
        return DistributorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class SchemaValidationException(DistributorException):
    """Exception raised when an artifact does not match its schema."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
        )


# -----------------------------------------------------------------------------
# Balance map validation
# -----------------------------------------------------------------------------

class BalanceMapException(DistributorException):
    """Base exception for balance map validation failures."""

    def __init__(
        self,
        message: str,
        code: str,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if identifier is not None:
            full_details["identifier"] = identifier
        super().__init__(message=message, code=code, details=full_details)
        self.identifier = identifier


class DuplicateIdentifierException(BalanceMapException):
    """The same identifier appears twice after normalization."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            message=f"Duplicate target: {identifier}",
            code=ErrorCodes.DUPLICATE_IDENTIFIER,
            identifier=identifier,
        )


class NonPositiveAmountException(BalanceMapException):
    """An entitlement amount is zero or negative."""

    def __init__(self, identifier: str, amount: int) -> None:
        super().__init__(
            message=f"Invalid amount for target: {identifier}",
            code=ErrorCodes.NON_POSITIVE_AMOUNT,
            identifier=identifier,
            details={"amount": str(amount)},
        )


class InvalidIdentifierException(BalanceMapException):
    """An identifier is not a valid address or identifier hash."""

    def __init__(self, identifier: Any, reason: str = "") -> None:
        super().__init__(
            message=f"Found invalid identifier: {identifier}",
            code=ErrorCodes.INVALID_IDENTIFIER,
            identifier=str(identifier),
            details={"reason": reason} if reason else None,
        )


class InvalidAmountException(BalanceMapException):
    """An amount is not an integer or does not fit uint256."""

    def __init__(self, identifier: str, amount: Any) -> None:
        super().__init__(
            message=f"Unparseable amount for target: {identifier}",
            code=ErrorCodes.INVALID_AMOUNT,
            identifier=identifier,
            details={"amount": repr(amount)},
        )


class EmptyBalanceMapException(BalanceMapException):
    """The balance map contains no entitlements."""

    def __init__(self) -> None:
        super().__init__(
            message="Balance map contains no entitlements",
            code=ErrorCodes.EMPTY_BALANCE_MAP,
        )


# -----------------------------------------------------------------------------
# Contract reverts
# -----------------------------------------------------------------------------

class ContractRevert(DistributorException):
    """
    A contract call reverted.

    The message is the revert reason string; the transaction that raised
    it leaves no observable state change.
    """

    def __init__(
        self,
        reason: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=reason, code=code, details=details)

    @property
    def reason(self) -> str:
        return self.message


class AlreadyClaimedException(ContractRevert):
    def __init__(self, index: int, distribution_id: int | None = None) -> None:
        details: dict[str, Any] = {"index": index}
        if distribution_id is not None:
            details["distribution_id"] = distribution_id
        super().__init__(REVERT_ALREADY_CLAIMED, ErrorCodes.ALREADY_CLAIMED, details)


class InsufficientRemainingException(ContractRevert):
    def __init__(self, distribution_id: int, requested: int, remaining: int) -> None:
        super().__init__(
            REVERT_INSUFFICIENT_TOKEN,
            ErrorCodes.INSUFFICIENT_REMAINING,
            {
                "distribution_id": distribution_id,
                "requested": str(requested),
                "remaining": str(remaining),
            },
        )


class InvalidProofException(ContractRevert):
    def __init__(self, index: int, reason: str = REVERT_INVALID_PROOF) -> None:
        super().__init__(reason, ErrorCodes.INVALID_PROOF, {"index": index})


class TransferFailedException(ContractRevert):
    def __init__(self, token: str, detail: str | None = None) -> None:
        details: dict[str, Any] = {"token": token}
        if detail:
            details["token_reason"] = detail
        super().__init__(REVERT_TRANSFER_FAILED, ErrorCodes.TRANSFER_FAILED, details)


class AlreadyProvenException(ContractRevert):
    def __init__(self, tree_id: int, index: int) -> None:
        super().__init__(
            REVERT_TREE_ALREADY_PROVEN,
            ErrorCodes.ALREADY_PROVEN,
            {"tree_id": tree_id, "index": index},
        )


class TokenRevert(ContractRevert):
    """Revert raised by the token collaborator (ERC20 reason strings)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason, ErrorCodes.TOKEN_REVERT)


class InvalidArgumentException(ContractRevert):
    """An argument is outside its ABI type range."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(
            f"Invalid argument {name}: {value!r}",
            ErrorCodes.INVALID_ARGUMENT,
            {"argument": name},
        )
