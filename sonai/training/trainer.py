"""Module training the two-cluster model of AI-like and human-like texts."""

from collections.abc import Sequence

import numpy as np
from loguru import logger
from sklearn.metrics import silhouette_score
from tqdm import tqdm

from sonai.clustering.engine import CLUSTERS, fit
from sonai.clustering.labeler import label
from sonai.configuration import config
from sonai.data_models import (
    ClusterModel,
    FeatureMatrix,
    TextMetrics,
    TrainingReport,
    build_feature_matrix,
)
from sonai.detection.metrics import TextMetricsExtractor


def train(
    documents: Sequence[str],
    *,
    seed: int = config.seed,
    max_iterations: int = config.max_iterations,
    n_runs: int = config.n_runs,
    samples_per_cluster: int = config.samples_per_cluster,
    extractor: TextMetricsExtractor | None = None,
) -> tuple[ClusterModel, TrainingReport]:
    """
    Cluster documents into AI-like and human-like texts.

    Args:
        documents (Sequence[str]): Raw texts, one per document.
        seed (int, optional): Seed of the centroid initialisation.
            Defaults to the value from the configuration.
        max_iterations (int, optional): Iteration cap of a clustering run.
            Defaults to the value from the configuration.
        n_runs (int, optional): Number of clustering restarts.
            Defaults to the value from the configuration.
        samples_per_cluster (int, optional): Number of random documents of each
            cluster to log for inspection. Defaults to the value from
            the configuration.
        extractor (TextMetricsExtractor | None, optional): Extractor of features.
            Defaults to a new extractor.

    Raises:
        ValueError: Raised if there are fewer documents than clusters.

    Returns:
        tuple[ClusterModel, TrainingReport]: The labelled model and a summary of
            the training run.
    """
    if len(documents) < CLUSTERS:
        logger.error(f"Cannot train on {len(documents)} document(s).")
        raise ValueError(
            f"At least {CLUSTERS} documents are required to train the model."
        )

    extractor = extractor or TextMetricsExtractor()
    metrics = list(
        tqdm(
            extractor.extract_many(documents),
            total=len(documents),
            desc="Calculating metrics",
            unit="document",
        )
    )
    matrix = build_feature_matrix(metrics)

    logger.info(f"Clustering {matrix.shape[0]} documents")
    result = fit(matrix, seed=seed, max_iterations=max_iterations, n_runs=n_runs)
    ai_cluster = label(result.centroids)

    model = ClusterModel(
        centroids=(result.centroids[0].tolist(), result.centroids[1].tolist()),
        ai_cluster=ai_cluster,
        seed=seed,
        documents=len(documents),
    )

    sizes = result.cluster_sizes()
    report = TrainingReport(
        documents=len(documents),
        ai_documents=sizes[ai_cluster],
        human_documents=sizes[1 - ai_cluster],
        ai_cluster=ai_cluster,
        inertia=result.inertia,
        iterations=result.iterations,
        converged=result.converged,
        silhouette=_silhouette(matrix, result.assignments),
    )

    _log_cluster_samples(
        documents,
        metrics,
        result.assignments,
        centroids=result.centroids,
        ai_cluster=ai_cluster,
        samples_per_cluster=samples_per_cluster,
        seed=seed,
    )
    logger.info(f"Training has finished:\n{report}")
    return model, report


def _silhouette(matrix: FeatureMatrix, assignments: np.ndarray) -> float | None:
    # Silhouette is only defined for 2 <= labels <= samples - 1.
    labels_count = len(np.unique(assignments))
    if not CLUSTERS <= labels_count <= len(assignments) - 1:
        return None
    return float(silhouette_score(matrix, assignments))


def _log_cluster_samples(
    documents: Sequence[str],
    metrics: Sequence[TextMetrics],
    assignments: np.ndarray,
    *,
    centroids: np.ndarray,
    ai_cluster: int,
    samples_per_cluster: int,
    seed: int,
) -> None:
    rng = np.random.default_rng(seed)
    for cluster in range(CLUSTERS):
        name = "AI" if cluster == ai_cluster else "Human"
        members = np.flatnonzero(assignments == cluster)
        chosen = rng.choice(
            members, size=min(samples_per_cluster, members.size), replace=False
        )

        profile = ", ".join(
            f"{feature}={value:.2f}"
            for feature, value in TextMetrics.from_vector(centroids[cluster]).non_zero()
        )
        logger.info(f"{'=' * 20} Cluster {cluster} ({name}) {'=' * 20}")
        logger.info(f"Centroid: {profile or 'all zeros'}")
        for i, index in enumerate(chosen):
            features = ", ".join(
                f"{feature}={value:.2f}" for feature, value in metrics[index].non_zero()
            )
            logger.info(
                f"--- Sample {i} ---\n"
                f"Features: {features or 'none'}\n"
                f"Text:\n{documents[index]}"
            )
