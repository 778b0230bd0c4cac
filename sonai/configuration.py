"""The configuration module."""

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field


class Configuration(BaseModel):
    """Configuration of the application."""

    project_name: str = "sonai"

    api_host: str = "0.0.0.0"  # noqa: S104, it is required for Docker deployment.
    api_port: int = 7123

    flavortown_api_root: str = "https://flavortown.hackclub.com/api/v1"
    flavortown_api_key: str = Field(
        default_factory=lambda: os.environ.get("FLAVORTOWN_API_KEY", "")
    )
    request_timeout_seconds: float = 30.0
    max_concurrent_requests: int = Field(8, ge=1)
    max_retries: int = Field(5, ge=0)
    http_cache_directory: Path = Path(".cache/http")

    corpus_file: Path = Path("./data/corpus.json")
    extra_corpus_file: Path = Path("./data/extra_corpus.json")
    model_path: Path = Path("./data/models/sonai_model.json")

    seed: int = 0x7F3A_9C1D_4B2E_6F80
    max_iterations: int = Field(300, ge=1)
    n_runs: int = Field(10, ge=1)
    samples_per_cluster: int = Field(5, ge=0)


def load_configuration(
    configuration_file: Path = Path("config.toml"),
) -> Configuration:
    """Load configuration from the configuration file."""
    if not configuration_file.exists():
        return Configuration()
    with configuration_file.open("rb") as f:
        settings = tomllib.load(f)
    return Configuration(**settings)


config = load_configuration()
