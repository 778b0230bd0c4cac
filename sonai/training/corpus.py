"""Module with the on-disk corpus of training documents."""

from datetime import UTC, datetime
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from sonai.configuration import config
from sonai.training.document_source import DocumentSource


class Corpus(BaseModel):
    """Raw training documents saved together."""

    documents: list[str]
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


class FilesystemCorpus:
    """Corpus fetched once and reused, optionally extended with extra documents."""

    def __init__(
        self,
        corpus_file: Path = config.corpus_file,
        extra_corpus_file: Path = config.extra_corpus_file,
    ) -> None:
        """
        Set paths to the corpus files.

        Args:
            corpus_file (Path, optional): File with fetched documents.
                Defaults to the value from the configuration.
            extra_corpus_file (Path, optional): File with additional documents
                appended to the fetched ones if it exists. Defaults to the value
                from the configuration.
        """
        self._corpus_file = corpus_file.expanduser().resolve()
        self._extra_corpus_file = extra_corpus_file.expanduser().resolve()

    def exists(self) -> bool:
        """
        Check whether documents have been fetched already.

        Returns:
            bool: True if the corpus file exists.
        """
        return self._corpus_file.is_file()

    def save(self, documents: list[str]) -> None:
        """
        Save fetched documents, replacing the previous corpus.

        Args:
            documents (list[str]): Raw texts.
        """
        self._corpus_file.parent.mkdir(parents=True, exist_ok=True)
        corpus = Corpus(documents=documents)
        self._corpus_file.write_text(corpus.model_dump_json(), encoding="utf-8")
        logger.info(f"Saved {len(documents)} documents to {self._corpus_file}")

    async def get_documents(self, source: DocumentSource | None = None) -> list[str]:
        """
        Get training documents, fetching them first if the corpus is missing.

        Args:
            source (DocumentSource | None, optional): Source used when there is
                no saved corpus yet. Defaults to None.

        Raises:
            FileNotFoundError: Raised if the corpus is missing and no source
                has been provided.

        Returns:
            list[str]: Fetched documents followed by the extra documents.
        """
        if self.exists():
            documents = self._read(self._corpus_file)
            logger.info(f"Loaded {len(documents)} documents from {self._corpus_file}")
        elif source is None:
            raise FileNotFoundError(
                f"There is no corpus file {self._corpus_file}. "
                "Fetch documents first with `sonai fetch`."
            )
        else:
            documents = await source.fetch_documents()
            self.save(documents)

        if self._extra_corpus_file.is_file():
            extra = self._read(self._extra_corpus_file)
            logger.info(
                f"Appending {len(extra)} extra documents from {self._extra_corpus_file}"
            )
            documents = documents + extra

        return documents

    def _read(self, path: Path) -> list[str]:
        return Corpus.model_validate_json(path.read_text(encoding="utf-8")).documents
