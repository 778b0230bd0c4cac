"""Shared fixtures of the test suite."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from sonai.data_models import ClusterModel
from sonai.training.model_store import FilesystemModelStore
from sonai.training.trainer import train

AI_LIKE_TEXTS = [
    "Big update today! 🚀🔥 It's not just a feature, it's a game-changer — "
    "built to leverage seamless synergy.",
    "Excited to share this! ✨🎉 It's not just an app, it's a revolutionary "
    "experience — powered by cutting-edge tech.",
    "We shipped it! 🎉🚀 It's not just faster, it's transformative — a robust "
    "and intuitive workflow.",
    "Huge milestone! 🔥💡 It's not just a redesign, it's a seamless journey — "
    "leveraging innovative tools.",
    "This is incredible! 💡✨ It's not just code, it's a testament to "
    "cutting-edge engineering — truly next-level.",
    "Launch day! 🚀🎉 It's not just a game, it's an immersive adventure — "
    "crafted with meticulous care.",
]

HUMAN_LIKE_TEXTS = [
    "went to the store today. bought milk.",
    "fixed the login bug today. next up is the settings page.",
    "spent most of the evening fighting the build system. it works now i think",
    "added a pause menu and some sound effects. still need to tweak the volume.",
    "not much progress this week, school has been busy. will try again on saturday.",
    "ported the renderer to the new engine version. frame rate went up a bit.",
]

AI_EXAMPLE = (
    "This is amazing!!! 🚀🚀 It's not just good, it's revolutionary — "
    "leveraging cutting-edge synergy."
)
HUMAN_EXAMPLE = "went to the store today. bought milk."


@pytest.fixture(scope="session")
def corpus() -> list[str]:
    """Documents forming two clearly separated groups."""
    return AI_LIKE_TEXTS + HUMAN_LIKE_TEXTS


@pytest.fixture(scope="session")
def trained_model(corpus: list[str]) -> ClusterModel:
    """A model trained on the shared corpus with a pinned seed."""
    model, _ = train(corpus, seed=7, n_runs=5, samples_per_cluster=1)
    return model


@pytest.fixture
def model_path(tmp_path: Path, trained_model: ClusterModel) -> Path:
    """Path to a saved copy of the trained model."""
    path = tmp_path / "models" / "model.json"
    FilesystemModelStore(path).save(trained_model)
    return path


@pytest.fixture
def logged_warnings() -> Iterator[list[str]]:
    """Messages logged at the WARNING level or above while the test runs."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]), level="WARNING"
    )
    yield messages
    logger.remove(handler_id)
