
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from school_face.models.enrolled_identity import EnrolledIdentity

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.6


class FaceMatchError(Exception):
    """Base class for face matching failures"""


class InvalidInput(FaceMatchError, ValueError):
    """Probe embedding or threshold rejected before any scan"""


class EmbeddingLengthMismatch(FaceMatchError):

    def __init__(self, expected: int, actual: int, identity_id: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.identity_id = identity_id
        where = f" for identity {identity_id}" if identity_id is not None else ""
        super().__init__(
            f"Embedding length mismatch{where}: expected {expected}, got {actual}"
        )


class MatchReason(str, Enum):
    NO_ENROLLED_FACES = "no enrolled faces"
    NOT_RECOGNIZED = "face not recognized"


@dataclass(frozen=True)
class Matched:
    identity_id: str
    display_name: str
    role: str
    distance: float
    confidence: float
    nisn: Optional[str] = None

    @property
    def is_match(self) -> bool:
        return True


@dataclass(frozen=True)
class NoMatch:
    reason: MatchReason

    @property
    def is_match(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.reason.value


MatchResult = Union[Matched, NoMatch]


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Plain L2 norm of ``a - b``. Both vectors must have the same length."""
    if len(a) != len(b):
        raise EmbeddingLengthMismatch(len(a), len(b))

    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.sum(diff * diff)))


def _validate_probe(probe: Sequence[float]) -> np.ndarray:
    if probe is None or isinstance(probe, (str, bytes)):
        raise InvalidInput("Probe embedding must be a sequence of numbers")
    try:
        vector = np.asarray(probe, dtype=np.float64)
    except (TypeError, ValueError):
        raise InvalidInput("Probe embedding must be a sequence of numbers")

    if vector.ndim != 1 or vector.size == 0:
        raise InvalidInput("Probe embedding must be a non-empty flat vector")
    if not np.all(np.isfinite(vector)):
        raise InvalidInput("Probe embedding contains non-finite values")
    return vector


def _validate_threshold(threshold: float) -> float:
    try:
        value = float(threshold)
    except (TypeError, ValueError):
        raise InvalidInput(f"Threshold must be a number, got {threshold!r}")
    if not math.isfinite(value) or value < 0:
        raise InvalidInput(f"Threshold must be finite and non-negative, got {value}")
    return value


def match(
    probe: Sequence[float],
    candidates: Sequence[EnrolledIdentity],
    threshold: float = DEFAULT_THRESHOLD
) -> MatchResult:
    """
    Find the enrolled identity closest to ``probe``.

    A candidate is accepted only when its distance is strictly below the
    running best, which starts at ``threshold``; equidistant candidates
    therefore resolve to the one seen first. Candidates without an
    embedding are skipped. A candidate whose embedding length differs from
    the probe aborts the whole call with EmbeddingLengthMismatch.
    """
    if len(candidates) == 0:
        return NoMatch(MatchReason.NO_ENROLLED_FACES)

    probe_vector = _validate_probe(probe)
    acceptance_bound = _validate_threshold(threshold)

    best_distance = acceptance_bound
    best: Optional[Matched] = None

    for candidate in candidates:
        if candidate.embedding is None:
            continue

        if len(candidate.embedding) != probe_vector.size:
            raise EmbeddingLengthMismatch(
                probe_vector.size, len(candidate.embedding), candidate.identity_id
            )

        distance = euclidean_distance(probe_vector, candidate.embedding)

        if distance < best_distance:
            best_distance = distance
            best = Matched(
                identity_id=candidate.identity_id,
                display_name=candidate.display_name,
                role=candidate.role,
                nisn=candidate.nisn,
                distance=distance,
                confidence=1 - distance
            )

    if best is None:
        return NoMatch(MatchReason.NOT_RECOGNIZED)
    return best


class FaceMatcher:

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = _validate_threshold(threshold)
        logger.info(f"FaceMatcher initialized (threshold={self.threshold})")

    def match(
        self,
        probe: Sequence[float],
        candidates: Sequence[EnrolledIdentity],
        threshold: Optional[float] = None
    ) -> MatchResult:
        if threshold is None:
            threshold = self.threshold

        result = match(probe, candidates, threshold)

        if result.is_match:
            logger.info(
                f"Matched {result.identity_id} "
                f"(distance={result.distance:.4f}, candidates={len(candidates)})"
            )
        else:
            logger.info(f"No match: {result.message} (candidates={len(candidates)})")
        return result
