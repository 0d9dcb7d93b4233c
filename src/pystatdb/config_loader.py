"""Persist and load similarity weight profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


@dataclass
class WeightProfile:
    weights: Dict[str, float] = field(default_factory=dict)
    metrics: Optional[list[str]] = None

    @classmethod
    def load(cls, path: Path) -> "WeightProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        metrics = data.get("metrics")
        return cls(
            weights={key: float(value) for key, value in data.get("weights", {}).items()},
            metrics=list(metrics) if metrics else None,
        )

    def save(self, path: Path) -> None:
        payload: dict = {"weights": self.weights}
        if self.metrics:
            payload["metrics"] = self.metrics
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
