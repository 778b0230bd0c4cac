"""Module fitting two centroids to a feature matrix with Lloyd's algorithm."""

from typing import Final

import numpy as np
from loguru import logger
from sklearn.cluster import kmeans_plusplus

from sonai.configuration import config
from sonai.data_models import ClusteringResult, FeatureMatrix

CLUSTERS: Final = 2


def fit(
    matrix: FeatureMatrix,
    k: int = CLUSTERS,
    *,
    seed: int = config.seed,
    max_iterations: int = config.max_iterations,
    n_runs: int = config.n_runs,
) -> ClusteringResult:
    """
    Fit two centroids to the rows of a feature matrix.

    Every run starts from a k-means++ initialisation and refines it until
    assignments stop changing or `max_iterations` is reached. The run with
    the lowest inertia is returned. Features are used unweighted and unscaled.

    Args:
        matrix (FeatureMatrix): Array of shape (documents, features).
        k (int, optional): Number of clusters. Only 2 is supported.
        seed (int, optional): Seed from which initialisations of all runs are
            derived. Defaults to the value from the configuration.
        max_iterations (int, optional): Iteration cap of a single run.
            Defaults to the value from the configuration.
        n_runs (int, optional): Number of independently initialised runs.
            Defaults to the value from the configuration.

    Raises:
        ValueError: Raised if `k` is not 2, the matrix is not two-dimensional,
            or it has fewer rows than clusters.

    Returns:
        ClusteringResult: Centroids and assignments of the best run.
    """
    if k != CLUSTERS:
        raise ValueError(f"Only {CLUSTERS} clusters are supported, got k={k}.")
    if max_iterations < 1 or n_runs < 1:
        raise ValueError("Both `max_iterations` and `n_runs` must be >= 1.")

    data = np.asarray(matrix, dtype=np.float64)
    if data.ndim != 2:
        raise ValueError(f"Expected a 2-D feature matrix, got {data.ndim} dimensions.")
    if data.shape[0] < k:
        raise ValueError(
            f"At least {k} documents are required to fit {k} clusters, "
            f"got {data.shape[0]}."
        )

    run_seeds = np.random.default_rng(seed).integers(0, 2**32 - 1, size=n_runs)

    results = []
    for run, run_seed in enumerate(run_seeds):
        result = _fit_once(data, k, int(run_seed), max_iterations)
        logger.debug(
            f"Run {run}: inertia={result.inertia:.4f}, "
            f"iterations={result.iterations}, converged={result.converged}"
        )
        results.append(result)

    # `min` keeps the earliest run among equal inertias.
    best = min(results, key=lambda candidate: candidate.inertia)
    if not best.converged:
        logger.warning(
            f"Clustering has not converged within {max_iterations} iterations. "
            "Returning the last centroids reached."
        )
    return best


def _fit_once(
    data: np.ndarray, k: int, seed: int, max_iterations: int
) -> ClusteringResult:
    centroids, _ = kmeans_plusplus(data, n_clusters=k, random_state=seed)
    assignments = _assign(data, centroids)

    converged = False
    iterations = 0
    while iterations < max_iterations:
        iterations += 1
        centroids = _update_centroids(data, assignments, centroids)
        new_assignments = _assign(data, centroids)
        if np.array_equal(new_assignments, assignments):
            converged = True
            break
        assignments = new_assignments

    return ClusteringResult(
        centroids=centroids,
        assignments=assignments,
        inertia=_inertia(data, centroids, assignments),
        iterations=iterations,
        converged=converged,
    )


def _distances(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    # Shape: (rows, clusters).
    return np.linalg.norm(data[:, np.newaxis, :] - centroids[np.newaxis, :, :], axis=2)


def _assign(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    # `argmin` resolves ties in favour of the lower cluster index.
    return np.argmin(_distances(data, centroids), axis=1)


def _update_centroids(
    data: np.ndarray, assignments: np.ndarray, centroids: np.ndarray
) -> np.ndarray:
    updated = centroids.copy()
    empty_clusters = []
    for cluster in range(centroids.shape[0]):
        members = data[assignments == cluster]
        if members.shape[0] == 0:
            empty_clusters.append(cluster)
            continue
        updated[cluster] = members.mean(axis=0)

    for cluster in empty_clusters:
        # Move the empty centroid onto the row worst served by its own centroid.
        distances = np.linalg.norm(data - updated[assignments], axis=1)
        farthest = int(np.argmax(distances))
        logger.debug(f"Cluster {cluster} is empty. Reinitialising it at row {farthest}.")
        updated[cluster] = data[farthest]

    return updated


def _inertia(data: np.ndarray, centroids: np.ndarray, assignments: np.ndarray) -> float:
    return float(np.sum((data - centroids[assignments]) ** 2))
