"""Module with persistence of trained cluster models."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import override

from loguru import logger

from sonai.configuration import config
from sonai.data_models import ClusterModel


class ModelStore(ABC):
    """An interface for saving and loading a cluster model."""

    @abstractmethod
    def save(self, model: ClusterModel) -> None:
        """
        Persist a model, replacing the previous one.

        Args:
            model (ClusterModel): A trained model.
        """

    @abstractmethod
    def load(self) -> ClusterModel:
        """
        Load the persisted model.

        Raises:
            FileNotFoundError: Raised if no model has been saved yet.

        Returns:
            ClusterModel: The persisted model.
        """

    @abstractmethod
    def exists(self) -> bool:
        """
        Check whether a model has been saved.

        Returns:
            bool: True if `load()` can succeed.
        """


class FilesystemModelStore(ModelStore):
    """Keeps a model as a JSON document in the local filesystem."""

    def __init__(self, model_path: Path = config.model_path) -> None:
        """
        Set the path to the model file.

        Args:
            model_path (Path, optional): Path to the JSON model file.
                Defaults to the value from the configuration.
        """
        self._model_path = model_path.expanduser().resolve()

    @property
    def path(self) -> Path:
        """Resolved path to the model file."""
        return self._model_path

    @override
    def save(self, model: ClusterModel) -> None:
        self._model_path.parent.mkdir(parents=True, exist_ok=True)
        self._model_path.write_text(model.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved the model to {self._model_path}")

    @override
    def load(self) -> ClusterModel:
        if not self.exists():
            raise FileNotFoundError(
                f"There is no model file {self._model_path}. "
                "Train the model first with `sonai train`."
            )
        logger.info(f"Loading the model from {self._model_path}")
        return ClusterModel.model_validate_json(
            self._model_path.read_text(encoding="utf-8")
        )

    @override
    def exists(self) -> bool:
        return self._model_path.is_file()
