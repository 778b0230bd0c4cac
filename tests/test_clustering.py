"""Tests of the clustering engine and the cluster labeler."""

import numpy as np
import pytest

from sonai.clustering.engine import _update_centroids, fit
from sonai.clustering.labeler import ai_likelihood, label
from sonai.data_models import FEATURE_NAMES

FEATURES = len(FEATURE_NAMES)
IRREGULAR = [
    FEATURE_NAMES.index(name)
    for name in ("irregular_quotations", "irregular_dashes", "irregular_markdown")
]


@pytest.fixture
def separated_matrix() -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Plain rows near zero and rows with large irregularity values."""
    rng = np.random.default_rng(42)
    plain = np.abs(rng.normal(0.0, 0.01, size=(20, FEATURES)))
    irregular = np.abs(rng.normal(0.0, 0.01, size=(15, FEATURES)))
    irregular[:, IRREGULAR] += [0.9, 0.9, 6.0]
    return np.vstack([plain, irregular]), plain.mean(axis=0), irregular.mean(axis=0)


def test_fit_finds_separated_clusters(
    separated_matrix: tuple[np.ndarray, np.ndarray, np.ndarray],
) -> None:
    matrix, plain_mean, irregular_mean = separated_matrix

    result = fit(matrix, seed=1)

    irregular_index = int(np.argmax(result.centroids[:, IRREGULAR[-1]]))
    plain_index = 1 - irregular_index
    assert result.converged
    np.testing.assert_allclose(result.centroids[plain_index], plain_mean, atol=1e-9)
    np.testing.assert_allclose(
        result.centroids[irregular_index], irregular_mean, atol=1e-9
    )
    assert sorted(result.cluster_sizes()) == [15, 20]
    assert label(result.centroids) == irregular_index


def test_fit_is_reproducible_with_the_same_seed(
    separated_matrix: tuple[np.ndarray, np.ndarray, np.ndarray],
) -> None:
    matrix, _, _ = separated_matrix

    first = fit(matrix, seed=123, n_runs=3)
    second = fit(matrix, seed=123, n_runs=3)

    assert np.array_equal(first.centroids, second.centroids)
    assert np.array_equal(first.assignments, second.assignments)
    assert first.inertia == second.inertia


def test_identical_rows_do_not_produce_nan_centroids() -> None:
    matrix = np.ones((4, FEATURES))

    result = fit(matrix, seed=0, n_runs=2)

    assert np.all(np.isfinite(result.centroids))
    assert result.inertia == 0.0


def test_iteration_cap_returns_best_effort_result(
    monkeypatch: pytest.MonkeyPatch, logged_warnings: list[str]
) -> None:
    matrix = np.zeros((6, FEATURES))
    matrix[:, 0] = [0.0, 1.0, 2.0, 10.0, 11.0, 12.0]
    # Seeding on the first two rows needs a second pass to move rows 1 and 2.
    monkeypatch.setattr(
        "sonai.clustering.engine.kmeans_plusplus",
        lambda data, n_clusters, random_state: (
            data[:n_clusters].copy(),
            np.arange(n_clusters),
        ),
    )

    capped = fit(matrix, seed=5, max_iterations=1, n_runs=1)

    assert capped.iterations == 1
    assert capped.converged is False
    assert capped.centroids[:, 0].tolist() == [0.0, pytest.approx(7.2)]
    assert any("not converged" in message for message in logged_warnings)

    logged_warnings.clear()
    uncapped = fit(matrix, seed=5, n_runs=1)

    assert uncapped.converged is True
    assert uncapped.centroids[:, 0].tolist() == [1.0, 11.0]
    assert not logged_warnings


def test_empty_cluster_is_moved_to_the_farthest_row() -> None:
    data = np.zeros((3, FEATURES))
    data[:, 0] = [0.0, 1.0, 10.0]
    assignments = np.array([0, 0, 0])
    centroids = np.zeros((2, FEATURES))

    updated = _update_centroids(data, assignments, centroids)

    assert updated[0, 0] == pytest.approx(11.0 / 3)
    np.testing.assert_array_equal(updated[1], data[2])


def test_fit_supports_only_two_clusters() -> None:
    with pytest.raises(ValueError, match="Only 2 clusters"):
        fit(np.zeros((5, FEATURES)), k=3)


def test_fit_requires_at_least_two_rows() -> None:
    with pytest.raises(ValueError, match="At least 2 documents"):
        fit(np.zeros((1, FEATURES)))


def test_labeler_prefers_the_more_ai_like_centroid() -> None:
    plain = np.zeros(FEATURES)
    ai_like = np.zeros(FEATURES)
    ai_like[FEATURE_NAMES.index("emoji_rate")] = 2.0

    assert label(np.array([plain, ai_like])) == 1
    assert label(np.array([ai_like, plain])) == 0
    assert ai_likelihood(ai_like) > ai_likelihood(plain)


def test_labeler_breaks_ties_towards_the_first_centroid() -> None:
    centroid = np.full(FEATURES, 0.5)
    devlog_only = np.zeros(FEATURES)
    devlog_only[FEATURE_NAMES.index("devlog_count")] = 3.0

    assert label(np.array([centroid, centroid])) == 0
    assert label(np.array([np.zeros(FEATURES), devlog_only])) == 0
