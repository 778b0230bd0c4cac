"""Entry point to the application as a Typer CLI."""

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from typer import Typer

from sonai.configuration import config

app = Typer(no_args_is_help=True)


@app.command("fetch")
def fetch_corpus(
    corpus_file: Annotated[
        Path, typer.Option(help="Where to save fetched documents.")
    ] = config.corpus_file,
) -> None:
    """Fetch projects and devlogs from Flavortown into the local corpus."""
    from diskcache import Cache

    from sonai.training.corpus import FilesystemCorpus
    from sonai.training.document_source import FlavortownSource

    config.http_cache_directory.mkdir(parents=True, exist_ok=True)
    with Cache(config.http_cache_directory) as page_cache:
        source = FlavortownSource(page_cache=page_cache)
        documents = asyncio.run(source.fetch_documents())
    FilesystemCorpus(corpus_file=corpus_file).save(documents)


@app.command("train")
def train_model(
    model_path: Annotated[
        Path, typer.Option(help="Where to save the trained model.")
    ] = config.model_path,
    corpus_file: Annotated[
        Path, typer.Option(help="Corpus to train on. Fetched when missing.")
    ] = config.corpus_file,
    seed: Annotated[
        int, typer.Option(help="Seed of the centroid initialisation.")
    ] = config.seed,
) -> None:
    """Cluster the corpus and save the labelled model."""
    from sonai.training.corpus import FilesystemCorpus
    from sonai.training.document_source import FlavortownSource
    from sonai.training.model_store import FilesystemModelStore
    from sonai.training.trainer import train

    corpus = FilesystemCorpus(corpus_file=corpus_file)
    source = None if corpus.exists() else FlavortownSource()
    documents = asyncio.run(corpus.get_documents(source))

    model, report = train(documents, seed=seed)
    FilesystemModelStore(model_path).save(model)
    typer.echo(f"Trained on {report.documents} documents.\n{report}")


@app.command("predict")
def predict_text(
    text: Annotated[str, typer.Argument(help="Text to evaluate or `-` for stdin.")],
    model_path: Annotated[
        Path, typer.Option(help="Path to the trained model.")
    ] = config.model_path,
) -> None:
    """Estimate whether a text reads as AI-written."""
    from sonai.detection.predictor import Predictor
    from sonai.training.model_store import FilesystemModelStore

    if text == "-":
        text = sys.stdin.read()

    predictor = Predictor(FilesystemModelStore(model_path).load())
    typer.echo(str(predictor.predict(text)))


@app.command("api")
def run_api() -> None:
    """Start up the backend sharing the Web API."""
    import uvicorn

    from sonai.api.router import create_app

    logger.info(f"Starting the API on {config.api_host}:{config.api_port}")
    uvicorn.run(create_app(), host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    app()
