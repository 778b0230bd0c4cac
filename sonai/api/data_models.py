"""Package with data models for the API."""

from pydantic import BaseModel

from sonai.data_models import Prediction, Verdict


class HealthcheckResponse(BaseModel):
    """Response from the healthcheck endpoint indicating the status of the system."""

    is_healthy: bool


class PredictionRequest(BaseModel):
    """API request for a text origin evaluation."""

    text: str


class PredictionResponse(BaseModel):
    """Response sent when a client requests evaluation of a text."""

    chance_ai: float
    chance_human: float
    most_likely: Verdict
    metrics: dict[str, float]

    @classmethod
    def from_prediction(cls, prediction: Prediction) -> "PredictionResponse":
        """
        Build a response from a prediction.

        Args:
            prediction (Prediction): Prediction of the model.

        Returns:
            PredictionResponse: Response with the metrics as a plain mapping.
        """
        return cls(
            chance_ai=prediction.chance_ai,
            chance_human=prediction.chance_human,
            most_likely=prediction.most_likely,
            metrics=prediction.metrics.model_dump(),
        )
