from __future__ import annotations

from dataclasses import dataclass

import torch
from PIL.Image import Image

from shelfscan.detectors.base import ObjectDetector
from shelfscan.detectors.types import RawDetection


@dataclass
class DetrObjectDetector(ObjectDetector):
    name: str
    model_id: str
    device: str = "cpu"
    max_detections: int = 100

    def __post_init__(self) -> None:
        from transformers import AutoImageProcessor, AutoModelForObjectDetection

        self._device = self.device if torch.cuda.is_available() and self.device.startswith("cuda") else "cpu"
        self.processor = AutoImageProcessor.from_pretrained(self.model_id)
        self.model = AutoModelForObjectDetection.from_pretrained(self.model_id).to(self._device)
        self.model.eval()

    def predict(self, image: Image, threshold: float) -> list[RawDetection]:
        inputs = self.processor(images=image, return_tensors="pt").to(self._device)
        with torch.no_grad():
            outputs = self.model(**inputs)
        target_sizes = torch.tensor([image.size[::-1]], device=self._device)
        results = self.processor.post_process_object_detection(
            outputs,
            threshold=threshold,
            target_sizes=target_sizes,
        )[0]

        id2label = self.model.config.id2label
        detections: list[RawDetection] = []
        for score, label_idx, box in zip(results["scores"], results["labels"], results["boxes"]):
            if len(detections) >= self.max_detections:
                break
            x1, y1, x2, y2 = [float(v) for v in box.tolist()]
            if x2 <= x1 or y2 <= y1:
                continue
            idx = int(label_idx)
            detections.append(
                RawDetection(
                    class_name=str(id2label.get(idx, f"class-{idx}")).lower(),
                    score=float(score),
                    left=x1,
                    top=y1,
                    width=x2 - x1,
                    height=y2 - y1,
                )
            )
        return detections

    def close(self) -> None:
        del self.model
        if torch.cuda.is_available():
            torch.cuda.empty_cache()
