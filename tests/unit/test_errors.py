"""
Module 01 - Error Taxonomy Unit Tests
Tests for distributor/schemas/errors.py and verification.py
"""
import pytest
from pydantic import ValidationError

from distributor.schemas import (
    REVERT_ALREADY_CLAIMED,
    REVERT_INSUFFICIENT_TOKEN,
    REVERT_TRANSFER_FAILED,
    AlreadyClaimedException,
    BalanceMapException,
    CheckResult,
    ContractRevert,
    DistributorError,
    DistributorException,
    DuplicateIdentifierException,
    EmptyBalanceMapException,
    ErrorCodes,
    InsufficientRemainingException,
    TokenRevert,
    TransferFailedException,
    VerificationResult,
)


class TestDistributorException:
    """Tests for the base exception and its error model."""

    def test_error_model_roundtrip(self):
        exc = DistributorException("boom", code="X", details={"a": 1})
        model = exc.to_error_model()
        assert model == DistributorError(code="X", message="boom", details={"a": 1})
        again = model.to_exception()
        assert (again.code, again.message, again.details) == ("X", "boom", {"a": 1})

    def test_error_model_forbids_extra(self):
        with pytest.raises(ValidationError):
            DistributorError(code="X", message="m", unexpected=True)

    def test_repr(self):
        assert repr(EmptyBalanceMapException()) == (
            "EmptyBalanceMapException(code='EmptyBalanceMap', "
            "message='Balance map contains no entitlements')"
        )


class TestBalanceMapErrors:
    """Tests for generation-time errors."""

    def test_duplicate(self):
        exc = DuplicateIdentifierException("0xabc")
        assert isinstance(exc, BalanceMapException)
        assert str(exc) == "Duplicate target: 0xabc"
        assert exc.details == {"identifier": "0xabc"}
        assert exc.code == ErrorCodes.DUPLICATE_IDENTIFIER


class TestContractReverts:
    """Tests for revert exceptions."""

    def test_reason_is_message(self):
        exc = AlreadyClaimedException(4, distribution_id=2)
        assert isinstance(exc, ContractRevert)
        assert exc.reason == REVERT_ALREADY_CLAIMED
        assert exc.details == {"index": 4, "distribution_id": 2}

    def test_single_campaign_details(self):
        assert AlreadyClaimedException(4).details == {"index": 4}

    def test_insufficient_remaining(self):
        exc = InsufficientRemainingException(1, requested=10, remaining=3)
        assert exc.reason == REVERT_INSUFFICIENT_TOKEN
        assert exc.details["requested"] == "10"
        assert exc.details["remaining"] == "3"

    def test_transfer_failed_keeps_token_reason(self):
        exc = TransferFailedException("0xToken", TokenRevert("ERC20: nope").reason)
        assert exc.reason == REVERT_TRANSFER_FAILED
        assert exc.details == {"token": "0xToken", "token_reason": "ERC20: nope"}

    def test_transfer_failed_without_detail(self):
        assert "token_reason" not in TransferFailedException("0xToken").details


class TestVerificationResult:
    """Tests for check aggregation."""

    def test_counts(self):
        result = VerificationResult(ok=False, checks=[
            CheckResult.passed("a"),
            CheckResult.failed("b", "bad b"),
            CheckResult.failed("c", "bad c"),
        ])
        assert result.passed_count == 1
        assert result.error_count == 2
        assert result.get_error_messages() == ["bad b", "bad c"]

    def test_failed_check_is_error(self):
        check = CheckResult.failed("proofs", "bad proof", {"identifier": "0xabc"})
        assert check.is_error
        assert check.details == {"identifier": "0xabc"}
        assert not CheckResult.passed("proofs").is_error

    def test_unknown_severity_rejected(self):
        with pytest.raises(ValidationError):
            CheckResult(check_id="a", ok=False, severity="warn", message="m")
