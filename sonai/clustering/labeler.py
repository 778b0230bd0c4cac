"""Module deciding which of two centroids represents AI-like text."""

from typing import Final

import numpy as np

from sonai.data_models import FEATURE_NAMES

# Emojis alone separate the clusters best, hence the larger weight.
AI_LEANING_WEIGHTS: Final[dict[str, float]] = {
    "emoji_rate": 2.0,
    "buzzword_rate": 1.0,
    "not_just_count": 1.0,
    "html_escape_count": 1.0,
    "irregular_ellipsis": 1.0,
    "irregular_quotations": 1.0,
    "irregular_dashes": 1.0,
    "irregular_markdown": 1.0,
}

WEIGHTS: Final = np.array(
    [AI_LEANING_WEIGHTS.get(name, 0.0) for name in FEATURE_NAMES], dtype=np.float64
)


def ai_likelihood(centroid: np.ndarray) -> float:
    """
    Score how AI-like a centroid is.

    Args:
        centroid (np.ndarray): A point in the feature space.

    Returns:
        float: Weighted sum of the AI-leaning features of the centroid.
    """
    return float(np.dot(WEIGHTS, np.asarray(centroid, dtype=np.float64)))


def label(centroids: np.ndarray) -> int:
    """
    Pick the centroid representing AI-like text.

    Args:
        centroids (np.ndarray): Array of shape (2, features).

    Returns:
        int: Index of the AI-like centroid. Ties, including identical
            centroids, resolve to 0.
    """
    first, second = (ai_likelihood(centroid) for centroid in centroids)
    return 1 if second > first else 0
