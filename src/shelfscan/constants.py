"""Project constants."""

from pathlib import Path

PROJECT_NAME = "ShelfScan"
RESULT_FORMAT_VERSION = "1.0.0"

ROBOFLOW_DETECT_URL = "https://detect.roboflow.com"
ROBOFLOW_API_KEY_ENV = "ROBOFLOW_API_KEY"
ROBOFLOW_MODEL_ENV = "ROBOFLOW_MODEL"
ROBOFLOW_VERSION_ENV = "ROBOFLOW_VERSION"

DEFAULT_FALLBACK_MODEL_ID = "facebook/detr-resnet-50"
DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
