"""Thin MLflow tracing wrapper used by the upstream clients and the CLI.

Keeps every `mlflow` call site in one module so the rest of the code
imports `trace` / `start_span` from here, and so artifact logging never
breaks a report when the tracking store is unreachable.

    from agriadvisor.observability.tracing import trace, start_span

    @trace(name="generate", span_type="LLM")
    async def generate(prompt): ...

    with start_span("translate") as span:
        span.set_inputs({...})
"""

import logging
from contextlib import contextmanager
from pathlib import Path

import mlflow
from mlflow.exceptions import MlflowException

logger = logging.getLogger(__name__)


def trace(name: str | None = None, **kwargs):
    """Decorator: wraps a sync or async function with an MLflow trace."""
    return mlflow.trace(name=name, **kwargs) if name else mlflow.trace(**kwargs)


@contextmanager
def start_span(name: str = "span", **kwargs):
    """Context manager: MLflow span for a sub-step of a traced call."""
    with mlflow.start_span(name=name, **kwargs) as span:
        yield span


@contextmanager
def start_run(**kwargs):
    """Context manager: MLflow run (CLI report generation)."""
    with mlflow.start_run(**kwargs) as run:
        yield run


def log_params(params: dict) -> None:
    try:
        mlflow.log_params(params)
    except MlflowException as e:
        logger.warning("Param logging skipped: %s", e)


def set_tag(key: str, value: str) -> None:
    try:
        mlflow.set_tag(key, value)
    except MlflowException as e:
        logger.warning("Tag logging skipped: %s", e)


def log_text(text: str, artifact_file: str) -> None:
    try:
        mlflow.log_text(text, artifact_file)
    except MlflowException as e:
        logger.warning("Artifact logging skipped: %s", e)


def log_artifact(path: str) -> None:
    try:
        mlflow.log_artifact(path)
    except MlflowException as e:
        logger.warning("Artifact logging skipped: %s", e)


def set_tracking_uri(uri: str) -> None:
    mlflow.set_tracking_uri(uri)


def set_experiment(name: str) -> None:
    mlflow.set_experiment(name)


def enable_async_logging() -> None:
    mlflow.config.enable_async_logging()


def init_tracing(tracking_uri: str, experiment_name: str) -> bool:
    """Point MLflow at the tracking store; False if the store is unusable.

    A local `sqlite:///` store gets its parent directory created first.
    """
    if tracking_uri.startswith("sqlite:///"):
        Path(tracking_uri.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)
    set_tracking_uri(tracking_uri)
    try:
        set_experiment(experiment_name)
    except MlflowException as e:
        logger.warning("MLflow tracking store unavailable (%s): %s", tracking_uri, e)
        return False
    enable_async_logging()
    return True
