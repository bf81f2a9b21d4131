"""Cache of loaded models keyed by their file path."""

from __future__ import annotations

from typing import Callable, Protocol


class Model(Protocol):
    """Anything that can be drawn."""

    def render(self) -> None: ...


class ModelManager:
    """Loads each model path once and hands out the shared instance."""

    def __init__(self, loader: Callable[[str], Model]) -> None:
        self._loader = loader
        self._models: dict[str, Model] = {}

    def load_model(self, path: str) -> Model:
        """Return the cached model for ``path``, loading it on first use."""
        model = self._models.get(path)
        if model is None:
            model = self._loader(path)
            self._models[path] = model
        return model

    def get_model(self, path: str) -> Model | None:
        """Return the cached model, or None if it was never loaded."""
        return self._models.get(path)

    def render_model(self, path: str) -> None:
        model = self.get_model(path)
        if model is None:
            raise KeyError(f"Model not found: {path}")
        model.render()

    def __contains__(self, path: object) -> bool:
        return path in self._models

    def __len__(self) -> int:
        return len(self._models)