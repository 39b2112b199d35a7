from abc import ABC, abstractmethod
from typing import Sequence
import hashlib

_INT32_MOD = 2**32
_INT32_MAX = 2**31 - 1
_SCORE_SCALE = 2**31


def _to_int32(value: int) -> int:
    value %= _INT32_MOD
    return value - _INT32_MOD if value > _INT32_MAX else value


def legacy_hash_code(text: str) -> int:
    """
    Signed 32-bit polynomial string hash (h = h * 31 + unit).

    Iterates over UTF-16 code units so that visitors bucketed by the browser
    tag land in the same variant here, including for astral characters.
    """
    data = text.encode("utf-16-le", errors="surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + unit)
    return h


def legacy_score(text: str) -> float:
    """Map ``text`` to [0, 1) via abs(hash) / 2**31."""
    # abs(-2**31) would give exactly 1.0; clamp so a full split keeps everyone in A
    return min(abs(legacy_hash_code(text)), _INT32_MAX) / _SCORE_SCALE


def _check_arms(variants: Sequence[str], traffic_split: float) -> None:
    if len(variants) != 2:
        raise ValueError("Exactly two variants are required")
    if not 0.0 <= traffic_split <= 1.0:
        raise ValueError("traffic_split must be in [0, 1]")


class BaseSplitter(ABC):
    """
    Abstract base class for two-arm splitters.
    """

    def __init__(self, experiment_id: str):
        self.exp_id = experiment_id

    @abstractmethod
    def score(self, visitor_id: str) -> float:
        """Deterministic position of the visitor in [0, 1) for this experiment."""

    def assign_variant(self, visitor_id: str, variants: Sequence[str], traffic_split: float) -> str:
        """
        Assign a visitor to one of two variants.
        Args:
            visitor_id: Stable visitor identifier (client-side storage id).
            variants: [variant_a, variant_b].
            traffic_split: Share of visitors routed to variant_a.
        Returns:
            variant name assigned to this visitor.
        """
        _check_arms(variants, traffic_split)
        return variants[0] if self.score(visitor_id) < traffic_split else variants[1]


class LegacyHashSplitter(BaseSplitter):
    """
    Bit-compatible with the assignment done by the deployed conversion tag.
    """

    def score(self, visitor_id: str) -> float:
        return legacy_score(f"{visitor_id}{self.exp_id}")


class HashBasedSplitter(BaseSplitter):
    """
    md5-based deterministic allocation, for experiments that do not need to
    agree with assignments already made in the browser.
    """

    def score(self, visitor_id: str) -> float:
        digest = hashlib.md5(f"{visitor_id}{self.exp_id}".encode()).hexdigest()
        return int(digest, 16) / 2**128


SPLITTERS = {
    "legacy": LegacyHashSplitter,
    "md5": HashBasedSplitter,
}


def get_splitter(splitter_type: str, experiment_id: str) -> BaseSplitter:
    try:
        splitter_cls = SPLITTERS[splitter_type]
    except KeyError:
        raise ValueError(f"Unknown splitter type: {splitter_type}") from None
    return splitter_cls(experiment_id)
