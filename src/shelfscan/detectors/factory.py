from __future__ import annotations

from shelfscan.config.schema import FallbackDetectorConfig, PrimaryDetectorConfig
from shelfscan.detectors.base import LabelDetector, ObjectDetector
from shelfscan.detectors.handle import ModelHandle
from shelfscan.detectors.mock import MockLabelDetector, MockObjectDetector
from shelfscan.detectors.roboflow import RoboflowDetector


def create_label_detector(cfg: PrimaryDetectorConfig) -> LabelDetector:
    if cfg.name == "roboflow":
        return RoboflowDetector(
            model=cfg.model,
            version=cfg.version,
            api_key=cfg.api_key,
            endpoint=cfg.endpoint,
            connect_timeout=cfg.connect_timeout,
            read_timeout=cfg.read_timeout,
        )
    if cfg.name == "mock":
        return MockLabelDetector()
    raise ValueError(f"Unsupported primary detector: {cfg.name}")


def create_object_detector(cfg: FallbackDetectorConfig) -> ObjectDetector:
    if cfg.name == "detr":
        from shelfscan.detectors.detr import DetrObjectDetector

        return DetrObjectDetector(name=cfg.name, model_id=cfg.model_id, device=cfg.device)
    if cfg.name == "mock":
        return MockObjectDetector()
    raise ValueError(f"Unsupported fallback detector: {cfg.name}")


def create_model_handle(cfg: FallbackDetectorConfig) -> ModelHandle:
    if cfg.name not in {"detr", "mock"}:
        raise ValueError(f"Unsupported fallback detector: {cfg.name}")
    return ModelHandle(lambda: create_object_detector(cfg))
