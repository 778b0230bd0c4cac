"""Module with the inference of AI-likeness from a trained cluster model."""

from typing import Final

import numpy as np

from sonai.data_models import ClusterModel, Prediction, TextMetrics
from sonai.detection.metrics import TextMetricsExtractor

EPSILON: Final = 1e-9


def membership(
    features: np.ndarray, centroids: np.ndarray, epsilon: float = EPSILON
) -> np.ndarray:
    """
    Turn distances to centroids into normalised inverse-distance weights.

    Args:
        features (np.ndarray): A point in the feature space.
        centroids (np.ndarray): Array of shape (clusters, features).
        epsilon (float, optional): Added to every distance so that a point lying
            exactly on a centroid does not divide by zero. Defaults to 1e-9.

    Returns:
        np.ndarray: Weights per centroid summing up to 1.0.
    """
    distances = np.linalg.norm(centroids - features, axis=1)
    scores = 1.0 / (distances + epsilon)
    return scores / scores.sum()


class Predictor:
    """Scores texts against an immutable, explicitly provided cluster model."""

    def __init__(
        self, model: ClusterModel, extractor: TextMetricsExtractor | None = None
    ) -> None:
        """
        Keep the model and prepare the feature extractor.

        Args:
            model (ClusterModel): A trained model. It is only read.
            extractor (TextMetricsExtractor | None, optional): Extractor of
                features. Defaults to a new extractor.
        """
        self._model = model
        self._centroids = model.centroid_matrix()
        self._extractor = extractor or TextMetricsExtractor()

    @property
    def model(self) -> ClusterModel:
        """The model used for predictions."""
        return self._model

    def predict(self, text: str) -> Prediction:
        """
        Evaluate whether a text is more AI-like or human-like.

        Args:
            text (str): Text to be evaluated.

        Returns:
            Prediction: Percentages summing up to 100 and the metrics of the text.
        """
        return self.predict_metrics(self._extractor.extract(text))

    def predict_metrics(self, metrics: TextMetrics) -> Prediction:
        """
        Evaluate already extracted metrics.

        Args:
            metrics (TextMetrics): Metrics of a text.

        Returns:
            Prediction: Percentages summing up to 100 and the given metrics.
        """
        weights = membership(metrics.to_vector(), self._centroids)
        chance_ai = float(100.0 * weights[self._model.ai_cluster])
        return Prediction(
            chance_ai=chance_ai,
            chance_human=100.0 - chance_ai,
            metrics=metrics,
        )


def predict(model: ClusterModel, text: str) -> Prediction:
    """
    Evaluate a text with a given model.

    Args:
        model (ClusterModel): A trained model.
        text (str): Text to be evaluated.

    Returns:
        Prediction: Percentages summing up to 100 and the metrics of the text.
    """
    return Predictor(model).predict(text)
