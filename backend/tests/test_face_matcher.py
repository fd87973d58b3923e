
import math

import pytest

from school_face.models.enrolled_identity import EnrolledIdentity
from school_face.services.face_matcher import (
    EmbeddingLengthMismatch,
    FaceMatcher,
    InvalidInput,
    Matched,
    MatchReason,
    NoMatch,
    euclidean_distance,
    match,
)


def identity(identity_id, embedding, role="siswa"):
    return EnrolledIdentity(
        identity_id=identity_id,
        display_name=f"Name {identity_id}",
        role=role,
        embedding=embedding
    )


def test_distance_to_self_is_zero():
    a = [0.12, -0.5, 0.33, 0.9]
    assert euclidean_distance(a, a) == 0.0


def test_distance_is_symmetric():
    a = [0.1, 0.2, 0.3]
    b = [-0.4, 0.8, 0.05]
    assert euclidean_distance(a, b) == euclidean_distance(b, a)


def test_distance_is_plain_l2():
    assert euclidean_distance([0, 0], [3, 4]) == pytest.approx(5.0)
    assert euclidean_distance([1, 1], [0, 0]) == pytest.approx(math.sqrt(2))


def test_distance_rejects_length_mismatch():
    with pytest.raises(EmbeddingLengthMismatch) as exc_info:
        euclidean_distance([0, 0, 0], [0, 0])
    assert exc_info.value.expected == 3
    assert exc_info.value.actual == 2


def test_self_match_has_full_confidence():
    probe = [0.3, 0.1, -0.7]
    result = match(probe, [identity("A", list(probe))], 0.6)

    assert isinstance(result, Matched)
    assert result.identity_id == "A"
    assert result.distance == 0.0
    assert result.confidence == 1.0


def test_closest_candidate_wins():
    candidates = [identity("A", [0, 0]), identity("B", [1, 1])]
    result = match([0, 0], candidates, 0.6)

    assert result == Matched(
        identity_id="A",
        display_name="Name A",
        role="siswa",
        distance=0.0,
        confidence=1.0
    )


def test_closer_later_candidate_replaces_earlier():
    candidates = [identity("A", [0.5, 0]), identity("B", [0.1, 0])]
    result = match([0, 0], candidates, 0.6)

    assert result.identity_id == "B"
    assert result.distance == pytest.approx(0.1)
    assert result.confidence == pytest.approx(0.9)


def test_empty_candidates_report_no_enrolled_faces():
    result = match([0.1, 0.2], [], 0.6)

    assert isinstance(result, NoMatch)
    assert result.reason is MatchReason.NO_ENROLLED_FACES
    assert result.message == "no enrolled faces"


@pytest.mark.parametrize("threshold", [0.0, 0.6, 10.0])
def test_empty_candidates_ignore_threshold(threshold):
    assert match([1.0], [], threshold).reason is MatchReason.NO_ENROLLED_FACES


def test_candidate_outside_threshold_is_not_recognized():
    result = match([0, 0], [identity("A", [1, 1])], 0.6)

    assert isinstance(result, NoMatch)
    assert result.reason is MatchReason.NOT_RECOGNIZED
    assert result.message == "face not recognized"


def test_zero_threshold_rejects_inexact_candidates():
    candidates = [identity("A", [0.001, 0]), identity("B", [0, 0.002])]
    result = match([0, 0], candidates, 0.0)
    assert result.reason is MatchReason.NOT_RECOGNIZED


def test_zero_threshold_rejects_even_exact_candidate():
    # Acceptance is strictly below the bound
    result = match([0, 0], [identity("A", [0, 0])], 0.0)
    assert result.reason is MatchReason.NOT_RECOGNIZED


def test_distance_equal_to_threshold_is_rejected():
    result = match([0, 0], [identity("A", [0.5, 0])], 0.5)
    assert result.reason is MatchReason.NOT_RECOGNIZED


def test_tie_resolves_to_first_candidate():
    first = identity("A", [0.2, 0.2])
    second = identity("B", [0.2, 0.2])

    assert match([0, 0], [first, second], 0.6).identity_id == "A"
    assert match([0, 0], [second, first], 0.6).identity_id == "B"


def test_candidates_without_embedding_are_skipped():
    candidates = [identity("A", None), identity("B", [0.1, 0.1])]
    result = match([0, 0], candidates, 0.6)
    assert result.identity_id == "B"


def test_only_unembedded_candidates_are_not_recognized():
    result = match([0, 0], [identity("A", None)], 0.6)
    assert result.reason is MatchReason.NOT_RECOGNIZED


def test_length_mismatch_aborts_whole_scan():
    candidates = [identity("A", [0, 0]), identity("B", [0, 0, 0])]

    with pytest.raises(EmbeddingLengthMismatch) as exc_info:
        match([0, 0], candidates, 0.6)
    assert exc_info.value.identity_id == "B"


def test_length_mismatch_is_not_a_silent_skip():
    with pytest.raises(EmbeddingLengthMismatch):
        match([0, 0, 0], [identity("A", [0, 0])], 0.6)


def test_confidence_is_not_clamped():
    result = match([0, 0], [identity("A", [3, 4])], 10.0)
    assert result.distance == pytest.approx(5.0)
    assert result.confidence == pytest.approx(-4.0)


def test_nisn_is_carried_through():
    candidate = EnrolledIdentity(
        identity_id="A",
        display_name="Budi",
        role="siswa",
        nisn="0012345678",
        embedding=[0, 0]
    )
    assert match([0, 0], [candidate], 0.6).nisn == "0012345678"


@pytest.mark.parametrize("probe", [[], None, "0.1,0.2", [[0.1, 0.2]], [0.1, float("nan")], ["a", "b"]])
def test_invalid_probe_is_rejected(probe):
    with pytest.raises(InvalidInput):
        match(probe, [identity("A", [0, 0])], 0.6)


@pytest.mark.parametrize("threshold", [-0.1, float("inf"), float("nan"), "high"])
def test_invalid_threshold_is_rejected(threshold):
    with pytest.raises(InvalidInput):
        match([0, 0], [identity("A", [0, 0])], threshold)


def test_invalid_input_is_a_value_error():
    assert issubclass(InvalidInput, ValueError)
    assert not issubclass(EmbeddingLengthMismatch, ValueError)


def test_face_matcher_uses_configured_threshold():
    matcher = FaceMatcher(threshold=0.3)
    candidates = [identity("A", [0.4, 0])]

    assert matcher.match([0, 0], candidates).reason is MatchReason.NOT_RECOGNIZED
    assert matcher.match([0, 0], candidates, threshold=0.5).identity_id == "A"


def test_face_matcher_rejects_bad_configured_threshold():
    with pytest.raises(InvalidInput):
        FaceMatcher(threshold=-1)


def test_match_does_not_mutate_inputs():
    probe = [0.1, 0.2]
    candidates = [identity("A", [0.1, 0.25]), identity("B", [0.9, 0.9])]
    snapshot = [c.model_copy(deep=True) for c in candidates]

    match(probe, candidates, 0.6)

    assert probe == [0.1, 0.2]
    assert candidates == snapshot
