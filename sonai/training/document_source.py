"""Module with sources of raw documents for training."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Final, TypeVar, override

import httpx
from diskcache import Cache
from loguru import logger
from pydantic import BaseModel
from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_after_attempt
from tqdm import tqdm

from sonai.configuration import config

RETRYABLE_STATUS_CODES: Final = frozenset(
    {httpx.codes.TOO_MANY_REQUESTS, httpx.codes.SERVICE_UNAVAILABLE}
)
DEFAULT_RETRY_AFTER_SECONDS: Final = 1.0

# Sentences pre-filled by the Flavortown templates, not written by anyone.
PROJECT_BOILERPLATE: Final = (
    "This is my first project on Flavortown.",
    "Im excited to share my progress!",
    "I'm excited to share my progress!",
)
DEVLOG_BOILERPLATE: Final = (
    "I'm working on my first project! This is so exciting. "
    "I can't wait to share more updates as I build.",
)


def remove_boilerplate(text: str, phrases: Iterable[str]) -> str:
    """
    Remove template phrases from a text.

    Args:
        text (str): Text of a document.
        phrases (Iterable[str]): Phrases to be removed.

    Returns:
        str: The text without the phrases and surrounding whitespace.
    """
    for phrase in phrases:
        text = text.replace(phrase, "")
    return text.strip()


class Pagination(BaseModel):
    """Pagination metadata of a Flavortown API response."""

    current_page: int = 1
    total_pages: int = 1
    total_count: int = 0
    next_page: int | None = None


class Page(BaseModel, ABC):
    """A single page of a paginated Flavortown API endpoint."""

    pagination: Pagination

    @abstractmethod
    def texts(self) -> list[str]:
        """
        Get texts of documents on the page with template phrases removed.

        Returns:
            list[str]: Texts, possibly empty.
        """


class Devlog(BaseModel):
    """A devlog entry."""

    body: str | None = None


class Project(BaseModel):
    """A project entry."""

    description: str | None = None


class DevlogPage(Page):
    """A page of the `devlogs` endpoint."""

    devlogs: list[Devlog]

    @override
    def texts(self) -> list[str]:
        return [
            remove_boilerplate(devlog.body or "", DEVLOG_BOILERPLATE)
            for devlog in self.devlogs
        ]


class ProjectPage(Page):
    """A page of the `projects` endpoint."""

    projects: list[Project]

    @override
    def texts(self) -> list[str]:
        return [
            remove_boilerplate(project.description or "", PROJECT_BOILERPLATE)
            for project in self.projects
        ]


P = TypeVar("P", bound=Page)


class DocumentSource(ABC):
    """An interface for a source of raw training documents."""

    @abstractmethod
    async def fetch_documents(self) -> list[str]:
        """
        Fetch all documents.

        Returns:
            list[str]: Non-empty raw texts.
        """


class FlavortownSource(DocumentSource):
    """Fetches project descriptions and devlogs from the Flavortown API."""

    def __init__(  # noqa: PLR0913
        self,
        api_key: str = config.flavortown_api_key,
        api_root: str = config.flavortown_api_root,
        *,
        timeout_seconds: float = config.request_timeout_seconds,
        max_concurrent_requests: int = config.max_concurrent_requests,
        max_retries: int = config.max_retries,
        page_cache: Cache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Configure access to the API.

        Args:
            api_key (str, optional): Bearer token of the API. Defaults to the value
                from the configuration.
            api_root (str, optional): Base URL of the API. Defaults to the value
                from the configuration.
            timeout_seconds (float, optional): Timeout of a single request.
            max_concurrent_requests (int, optional): The maximum number of pages
                fetched at once.
            max_retries (int, optional): How many times a rate-limited request
                is repeated before giving up.
            page_cache (Cache | None, optional): Cache of raw page responses.
                Pages are always fetched when None. Defaults to None.
            transport (httpx.AsyncBaseTransport | None, optional): Custom HTTP
                transport. Defaults to the network transport.

        Raises:
            ValueError: Raised if the API key is missing.
        """
        if not api_key:
            raise ValueError(
                "Flavortown API key is not set. "
                "Provide config.flavortown_api_key or set FLAVORTOWN_API_KEY."
            )
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._api_root = api_root.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._max_concurrent_requests = max_concurrent_requests
        self._max_retries = max_retries
        self._page_cache = page_cache
        self._transport = transport

    @override
    async def fetch_documents(self) -> list[str]:
        async with httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            projects = await self._fetch_all_pages(client, "projects", ProjectPage)
            devlogs = await self._fetch_all_pages(client, "devlogs", DevlogPage)

        documents = [text for text in (*projects, *devlogs) if text]
        logger.info(
            f"Fetched {len(documents)} non-empty documents "
            f"({len(projects)} projects, {len(devlogs)} devlogs)."
        )
        return documents

    async def _fetch_all_pages(
        self, client: httpx.AsyncClient, endpoint: str, page_model: type[P]
    ) -> list[str]:
        first = await self._fetch_page(client, endpoint, 1, page_model)
        total_pages = max(first.pagination.total_pages, 1)
        logger.info(
            f"Fetching `{endpoint}`: {total_pages} page(s), "
            f"{first.pagination.total_count} item(s)."
        )

        semaphore = asyncio.Semaphore(self._max_concurrent_requests)
        pbar = tqdm(total=total_pages, initial=1, desc=f"Fetching {endpoint}", unit="page")

        async def fetch(page: int) -> P:
            async with semaphore:
                result = await self._fetch_page(client, endpoint, page, page_model)
            pbar.update(1)
            return result

        try:
            rest = await asyncio.gather(
                *(fetch(page) for page in range(2, total_pages + 1))
            )
        finally:
            pbar.close()

        return [text for page in (first, *rest) for text in page.texts()]

    async def _fetch_page(
        self, client: httpx.AsyncClient, endpoint: str, page: int, page_model: type[P]
    ) -> P:
        url = f"{self._api_root}/{endpoint}"
        cache_key = f"{url}?page={page}"
        if self._page_cache is not None and cache_key in self._page_cache:
            return page_model.model_validate_json(str(self._page_cache[cache_key]))

        def log_retry(retry_state: RetryCallState) -> None:
            response = _last_response(retry_state)
            logger.warning(
                f"`{endpoint}` page {page} responded with {response.status_code}. "
                f"Retry {retry_state.attempt_number}/{self._max_retries} "
                f"in {_wait_retry_after(retry_state)}s."
            )

        retrying = AsyncRetrying(
            retry=retry_if_result(_is_retryable),
            stop=stop_after_attempt(self._max_retries + 1),
            wait=_wait_retry_after,
            before_sleep=log_retry,
            retry_error_callback=_last_response,
        )
        response = await retrying(client.get, url, params={"page": page})
        response.raise_for_status()

        if self._page_cache is not None:
            self._page_cache[cache_key] = response.text
        return page_model.model_validate_json(response.text)


def _is_retryable(response: httpx.Response) -> bool:
    return response.status_code in RETRYABLE_STATUS_CODES


def _last_response(retry_state: RetryCallState) -> httpx.Response:
    outcome = retry_state.outcome
    if outcome is None:
        raise RuntimeError("No request has been attempted yet.")
    return outcome.result()


def _wait_retry_after(retry_state: RetryCallState) -> float:
    return _retry_after_seconds(_last_response(retry_state))


def _retry_after_seconds(response: httpx.Response) -> float:
    value = response.headers.get("Retry-After")
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return max(float(value), 0.0)
    except ValueError:
        # HTTP-date values are not worth parsing for a short back-off.
        return DEFAULT_RETRY_AFTER_SECONDS
