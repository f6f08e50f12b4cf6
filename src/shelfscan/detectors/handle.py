from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable

from shelfscan.detectors.base import ObjectDetector
from shelfscan.errors import ModelLoadError

LOGGER = logging.getLogger(__name__)


class ModelHandle:
    """Owns a lazily loaded object detector shared across requests.

    The first caller runs ``loader``; callers arriving while that load is in flight wait on the
    same future instead of starting their own. A failed load leaves the handle empty so a later
    call retries. The loaded detector is never mutated by the handle.
    """

    def __init__(self, loader: Callable[[], ObjectDetector]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._model: ObjectDetector | None = None
        self._inflight: Future[ObjectDetector] | None = None

    @classmethod
    def preloaded(cls, model: ObjectDetector) -> "ModelHandle":
        handle = cls(lambda: model)
        handle._model = model
        return handle

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def get(self, timeout: float | None = None) -> ObjectDetector:
        with self._lock:
            if self._model is not None:
                return self._model
            pending = self._inflight
            if pending is None:
                future: Future[ObjectDetector] = Future()
                self._inflight = future

        if pending is not None:
            try:
                return pending.result(timeout=timeout)
            except ModelLoadError:
                raise
            except Exception as exc:
                raise ModelLoadError(f"Object detector failed to load: {exc}") from exc

        try:
            LOGGER.info("Loading fallback object detector")
            model = self._loader()
        except Exception as exc:
            error = ModelLoadError(f"Object detector failed to load: {exc}")
            self._abandon(future, error)
            raise error from exc
        except BaseException as exc:
            self._abandon(future, ModelLoadError(f"Object detector load interrupted: {exc!r}"))
            raise

        with self._lock:
            self._model = model
            self._inflight = None
        future.set_result(model)
        return model

    def _abandon(self, future: Future[ObjectDetector], error: ModelLoadError) -> None:
        with self._lock:
            self._inflight = None
        future.set_exception(error)

    def close(self) -> None:
        with self._lock:
            model, self._model = self._model, None
        if model is not None:
            model.close()

    def __enter__(self) -> "ModelHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
