"""
Packed claim bitmaps.

Claim index i lives in word i // 256 at bit i % 256, so a campaign of
N entitlements uses ceil(N / 256) words. Bits are only ever set.
Contracts pass a chain StorageMap as the word store so that bit writes
roll back with the transaction.
"""

from __future__ import annotations

from typing import MutableMapping, Optional

WORD_BITS = 256


def _locate(index: int) -> tuple[int, int]:
    if index < 0:
        raise ValueError(f"Claim index must be non-negative, got {index}")
    return index // WORD_BITS, index % WORD_BITS


class ClaimBitmap:
    """Set of consumed claim indices for a single campaign."""

    def __init__(self, words: Optional[MutableMapping[int, int]] = None) -> None:
        self._words = {} if words is None else words

    def is_set(self, index: int) -> bool:
        word_index, bit_index = _locate(index)
        mask = 1 << bit_index
        return self._words.get(word_index, 0) & mask == mask

    def set(self, index: int) -> None:
        word_index, bit_index = _locate(index)
        self._words[word_index] = self._words.get(word_index, 0) | (1 << bit_index)

    def word(self, word_index: int) -> int:
        """Raw 256-bit word, zero when never written."""
        return self._words.get(word_index, 0)

    @property
    def word_count(self) -> int:
        return len(self._words)


class CampaignClaimBitmap:
    """Consumed claim indices keyed by (campaign id, index)."""

    def __init__(self, words: Optional[MutableMapping[tuple[int, int], int]] = None) -> None:
        self._words = {} if words is None else words

    def is_set(self, campaign_id: int, index: int) -> bool:
        word_index, bit_index = _locate(index)
        mask = 1 << bit_index
        return self._words.get((campaign_id, word_index), 0) & mask == mask

    def set(self, campaign_id: int, index: int) -> None:
        word_index, bit_index = _locate(index)
        key = (campaign_id, word_index)
        self._words[key] = self._words.get(key, 0) | (1 << bit_index)

    def word(self, campaign_id: int, word_index: int) -> int:
        return self._words.get((campaign_id, word_index), 0)


__all__ = [
    "WORD_BITS",
    "ClaimBitmap",
    "CampaignClaimBitmap",
]
