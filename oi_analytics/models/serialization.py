"""JSON serialization for result models."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel


def serialize_model(model: BaseModel) -> Dict[str, Any]:
    """Return a JSON-compatible payload for any result model."""

    return model.model_dump(mode="json")


__all__ = ["serialize_model"]
