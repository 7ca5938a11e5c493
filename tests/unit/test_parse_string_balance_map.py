"""
Module 04 - String Balance Map Parser Unit Tests
Tests for distributor/balances/parse_string_balance_map.py
"""
import pytest

from distributor.balances import parse_string_balance_map
from distributor.merkle import StringBalanceTree
from distributor.schemas import DuplicateIdentifierException, InvalidIdentifierException
from fixtures.common import KNOWN_IDENTIFIER_HASHES, KNOWN_STRING_BALANCES


HASH_A = "0x1cca01e19858aa423f2195b7e5d071436f19a0cd0c1bf853e18e0ebf78328e5d"
HASH_B = "0x6a6453940381804fa6671a1f1cd3f295f83d751339ed0d8930654d4cdfa5ad75"
HASH_C = "0x9ca955ecc2d281be4ed5348b0f7a79b263afd8b58d1cf5dbf34e8f53c5443184"


class TestKnownArtifact:
    """Tests against a published three-entry artifact."""

    def test_token_total(self):
        info = parse_string_balance_map(KNOWN_STRING_BALANCES)
        assert info.token_total == "0x02ee"

    def test_indices_follow_sorted_hashes(self):
        info = parse_string_balance_map(KNOWN_STRING_BALANCES)
        assert [info.claims[h].index for h in (HASH_A, HASH_B, HASH_C)] == [0, 1, 2]

    def test_amounts(self):
        info = parse_string_balance_map(KNOWN_STRING_BALANCES)
        assert info.claims[HASH_A].amount == "0xfa"
        assert info.claims[HASH_B].amount == "0xc8"
        assert info.claims[HASH_C].amount == "0x012c"

    def test_proof_lengths_reflect_promotion(self):
        """Index 2 is the promoted trailing node and needs one sibling."""
        info = parse_string_balance_map(KNOWN_STRING_BALANCES)
        assert len(info.claims[HASH_A].proof) == 2
        assert len(info.claims[HASH_B].proof) == 2
        assert len(info.claims[HASH_C].proof) == 1

    def test_proofs_verify(self):
        info = parse_string_balance_map(KNOWN_STRING_BALANCES)
        for identifier_hash, claim in info.claims.items():
            assert StringBalanceTree.verify_proof(
                claim.index, identifier_hash, claim.amount_value, claim.proof, info.merkle_root
            )


class TestKeyHandling:
    """Tests for identifier normalization."""

    def test_hash_keys_matches_prehashed(self):
        raw_balances = {raw: KNOWN_STRING_BALANCES[h] for raw, h in KNOWN_IDENTIFIER_HASHES.items()}
        hashed = parse_string_balance_map(KNOWN_STRING_BALANCES)
        from_raw = parse_string_balance_map(raw_balances, hash_keys=True)
        assert from_raw.to_dict() == hashed.to_dict()

    def test_uppercase_hex_normalized(self):
        upper = {"0x" + h[2:].upper(): amount for h, amount in KNOWN_STRING_BALANCES.items()}
        info = parse_string_balance_map(upper)
        assert set(info.claims) == set(KNOWN_STRING_BALANCES)

    def test_case_duplicates_rejected(self):
        with pytest.raises(DuplicateIdentifierException):
            parse_string_balance_map({HASH_A: 1, "0x" + HASH_A[2:].upper(): 2})

    def test_raw_key_without_hashing_rejected(self):
        with pytest.raises(InvalidIdentifierException):
            parse_string_balance_map({"6ccbe73b-2166-4109-816a-193c9dde9a14": 1})

    def test_short_hash_rejected(self):
        with pytest.raises(InvalidIdentifierException):
            parse_string_balance_map({"0x1234": 1})

    def test_new_format(self):
        info = parse_string_balance_map([
            {"hashed": HASH_B, "earnings": 200, "reasons": "referral"},
            {"hashed": HASH_A, "earnings": "250"},
        ])
        assert info.claims[HASH_A].index == 0
        assert info.claims[HASH_B].flags == {"referral": True}
        assert info.token_total_value == 450
