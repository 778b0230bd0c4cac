"""Module with the API routes and application factory."""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import RedirectResponse
from loguru import logger

from sonai.api.data_models import (
    HealthcheckResponse,
    PredictionRequest,
    PredictionResponse,
)
from sonai.detection.predictor import Predictor
from sonai.training.model_store import FilesystemModelStore, ModelStore

router = APIRouter()


def build_lifespan(
    model_store: ModelStore | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """
    Build a lifespan loading the model once for the whole application.

    Args:
        model_store (ModelStore | None, optional): Store to load the model from.
            Defaults to the filesystem store from the configuration.

    Returns:
        Callable[[FastAPI], AbstractAsyncContextManager[None]]: FastAPI lifespan.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = model_store or FilesystemModelStore()
        app.state.predictor = Predictor(store.load())
        logger.info("The model has been loaded. Serving predictions.")
        yield

    return lifespan


@router.get("/healthcheck")
async def healthcheck(request: Request) -> HealthcheckResponse:
    """Report whether the model is loaded."""
    predictor = getattr(request.app.state, "predictor", None)
    return HealthcheckResponse(is_healthy=predictor is not None)


@router.post("/predict")
def predict(request: Request, body: PredictionRequest) -> PredictionResponse:
    """Evaluate how likely the text is AI-written. Runs in the threadpool."""
    predictor: Predictor = request.app.state.predictor
    return PredictionResponse.from_prediction(predictor.predict(body.text))


def create_app(model_store: ModelStore | None = None) -> FastAPI:
    """
    Create the API application.

    Args:
        model_store (ModelStore | None, optional): Store to load the model from.
            Defaults to the filesystem store from the configuration.

    Returns:
        FastAPI: Application with routes mounted under `/v1`.
    """
    app = FastAPI(
        title="sonai",
        summary="sonai estimates whether a devlog reads as AI-written.",
        lifespan=build_lifespan(model_store),
        docs_url="/v1/docs",
        openapi_url="/v1/openapi.json",
        redoc_url="/v1/redoc",
    )

    @app.get("/")
    async def root() -> RedirectResponse:
        """Redirect root to docs."""
        return RedirectResponse(url="/v1/docs")

    app.include_router(router, prefix="/v1")
    return app
