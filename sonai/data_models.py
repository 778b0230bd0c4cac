"""Module with project-wide data models."""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Final, Literal, Self

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

Verdict = Literal["AI", "Human"]
FeatureMatrix = np.ndarray


class TextMetrics(BaseModel):
    """
    Stylistic features of a single document.

    The declaration order of the fields is the positional layout of the feature
    vector used for both clustering and inference. Higher values lean towards
    AI-written text.
    """

    emoji_rate: float = Field(0.0, ge=0.0)
    buzzword_rate: float = Field(0.0, ge=0.0)
    not_just_count: float = Field(0.0, ge=0.0)
    html_escape_count: float = Field(0.0, ge=0.0)
    devlog_count: float = Field(0.0, ge=0.0)
    irregular_ellipsis: float = Field(0.0, ge=0.0)
    irregular_quotations: float = Field(0.0, ge=0.0, le=1.0)
    irregular_dashes: float = Field(0.0, ge=0.0, le=1.0)
    irregular_markdown: float = Field(0.0, ge=0.0)
    labels: float = Field(0.0, ge=0.0)
    hashtags: float = Field(0.0, ge=0.0)

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    def to_vector(self) -> np.ndarray:
        """
        Convert the metrics into a feature vector.

        Returns:
            np.ndarray: 1-D float vector ordered as `FEATURE_NAMES`.
        """
        return np.array(
            [getattr(self, name) for name in FEATURE_NAMES], dtype=np.float64
        )

    @classmethod
    def from_vector(cls, vector: Sequence[float] | np.ndarray) -> Self:
        """
        Build metrics back from a feature vector.

        Args:
            vector (Sequence[float] | np.ndarray): Values ordered as `FEATURE_NAMES`.

        Raises:
            ValueError: Raised if the vector has a wrong number of values.

        Returns:
            Self: Metrics with fields filled positionally.
        """
        values = [float(value) for value in vector]
        if len(values) != len(FEATURE_NAMES):
            raise ValueError(
                f"Expected {len(FEATURE_NAMES)} feature values, got {len(values)}."
            )
        return cls(**dict(zip(FEATURE_NAMES, values, strict=True)))

    def non_zero(self) -> list[tuple[str, float]]:
        """
        Get metrics with a non-zero value, the largest first.

        Returns:
            list[tuple[str, float]]: Pairs of a metric name and its value.
        """
        pairs = [(name, getattr(self, name)) for name in FEATURE_NAMES]
        return sorted(
            ((name, value) for name, value in pairs if value != 0.0),
            key=lambda pair: pair[1],
            reverse=True,
        )


FEATURE_NAMES: Final[tuple[str, ...]] = tuple(TextMetrics.model_fields)


def build_feature_matrix(metrics: Sequence[TextMetrics]) -> FeatureMatrix:
    """
    Stack metrics of many documents into a feature matrix.

    Args:
        metrics (Sequence[TextMetrics]): Metrics, one per document.

    Returns:
        FeatureMatrix: Array of shape (documents, features).
    """
    if not metrics:
        return np.zeros((0, len(FEATURE_NAMES)), dtype=np.float64)
    return np.vstack([sample.to_vector() for sample in metrics])


class ClusterModel(BaseModel):
    """Two fitted centroids and the index of the one representing AI-like text."""

    centroids: tuple[list[float], list[float]]
    ai_cluster: Literal[0, 1]
    features: tuple[str, ...] = FEATURE_NAMES
    seed: int | None = None
    documents: int = Field(0, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    @model_validator(mode="after")
    def validate_feature_layout(self) -> Self:
        """Validate that the model was fitted on the current feature layout."""
        if tuple(self.features) != FEATURE_NAMES:
            raise ValueError(
                "The model was trained on a different feature layout "
                f"{list(self.features)}; expected {list(FEATURE_NAMES)}. "
                "Retrain the model."
            )
        for centroid in self.centroids:
            if len(centroid) != len(FEATURE_NAMES):
                raise ValueError(
                    f"Each centroid must have {len(FEATURE_NAMES)} values, "
                    f"got {len(centroid)}."
                )
        return self

    @property
    def human_cluster(self) -> int:
        """Index of the centroid representing human-like text."""
        return 1 - self.ai_cluster

    def centroid_matrix(self) -> np.ndarray:
        """
        Get centroids as an array.

        Returns:
            np.ndarray: Array of shape (2, features).
        """
        return np.array(self.centroids, dtype=np.float64)


class Prediction(BaseModel):
    """Soft membership of a text in the AI-like and human-like clusters."""

    chance_ai: float = Field(..., ge=0.0, le=100.0)
    chance_human: float = Field(..., ge=0.0, le=100.0)
    metrics: TextMetrics

    model_config = ConfigDict(frozen=True)

    @property
    def most_likely(self) -> Verdict:
        """The more probable origin of the text."""
        return "AI" if self.chance_ai >= self.chance_human else "Human"

    def non_zero_metrics(self) -> list[tuple[str, float]]:
        """
        Get metrics of the text that contributed to the prediction.

        Returns:
            list[tuple[str, float]]: Non-zero metrics, the largest first.
        """
        return self.metrics.non_zero()

    def __str__(self) -> str:
        """
        Convert the prediction into a textual form.

        Returns:
            str: Pretty textual form of a prediction.
        """
        lines = [
            f"Text is most likely {self.most_likely}",
            "",
            "Chance:",
            f"  AI    = {self.chance_ai:.2f}%",
            f"  Human = {self.chance_human:.2f}%",
            "",
            "Non-zero metrics:",
        ]
        for name, value in self.non_zero_metrics():
            rendered = f"{value:g}" if float(value).is_integer() else f"{value:.2f}"
            lines.append(f"  {name}: {rendered}")
        return "\n".join(lines)


class ClusteringResult(BaseModel):
    """Outcome of fitting centroids to a feature matrix."""

    centroids: np.ndarray
    assignments: np.ndarray
    inertia: float
    iterations: int
    converged: bool

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    def cluster_sizes(self) -> list[int]:
        """
        Count rows assigned to every cluster.

        Returns:
            list[int]: Number of rows per cluster index.
        """
        counts = np.bincount(self.assignments, minlength=self.centroids.shape[0])
        return [int(count) for count in counts]


class TrainingReport(BaseModel):
    """Summary of a training run."""

    documents: int
    ai_documents: int
    human_documents: int
    ai_cluster: Literal[0, 1]
    inertia: float
    iterations: int
    converged: bool
    silhouette: float | None = None

    @property
    def ai_percentage(self) -> float:
        """Share of documents assigned to the AI-like cluster."""
        return 100.0 * self.ai_documents / self.documents if self.documents else 0.0

    @property
    def human_percentage(self) -> float:
        """Share of documents assigned to the human-like cluster."""
        return 100.0 * self.human_documents / self.documents if self.documents else 0.0

    def __str__(self) -> str:
        """
        Convert the report into a textual form.

        Returns:
            str: Pretty textual form of a report.
        """
        silhouette = "n/a" if self.silhouette is None else f"{self.silhouette:.4f}"
        return (
            f"  AI cluster:  {self.ai_cluster}\n"
            f"  Human:       {self.human_documents} ({self.human_percentage:.2f}%)\n"
            f"  AI:          {self.ai_documents} ({self.ai_percentage:.2f}%)\n"
            f"  Inertia:     {self.inertia:.4f}\n"
            f"  Iterations:  {self.iterations} (converged: {self.converged})\n"
            f"  Silhouette:  {silhouette}"
        )
