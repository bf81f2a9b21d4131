"""Registry of the shader programs the renderer uses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar


@dataclass(frozen=True)
class ShaderSources:
    """Source files of one shader program: a graphics pipeline or a compute shader."""

    vertex: Path | None = None
    fragment: Path | None = None
    geometry: Path | None = None
    compute: Path | None = None

    def __post_init__(self) -> None:
        if self.compute is not None:
            if any(p is not None for p in (self.vertex, self.fragment, self.geometry)):
                raise ValueError("a compute shader cannot be combined with other stages")
        elif self.vertex is None or self.fragment is None:
            raise ValueError("a graphics shader needs both vertex and fragment stages")

    @property
    def paths(self) -> tuple[Path, ...]:
        """The stage files that are set, in pipeline order."""
        stages = (self.vertex, self.geometry, self.fragment, self.compute)
        return tuple(p for p in stages if p is not None)


# Each entry: program name, then its stage files as (stage, file name) pairs.
_PROGRAMS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    ("test", (("vertex", "test.vert"), ("fragment", "test.frag"))),
    ("lights", (("vertex", "lightShader.vert"), ("fragment", "lightShader.frag"))),
    ("geometry_pass", (("vertex", "gemotryPass.vert"), ("fragment", "gemotryPass.frag"))),
    ("lighting_pass", (("vertex", "lightingPass.vert"), ("fragment", "lightingPass.frag"))),
    ("atmosphere", (("vertex", "skybox.vert"), ("fragment", "skybox.frag"))),
    ("ssao", (("vertex", "ssao.vert"), ("fragment", "ssao.frag"))),
    ("ssao_blur", (("vertex", "ssao.vert"), ("fragment", "ssaoBlur.frag"))),
    ("lights_id", (("vertex", "lightShader.vert"), ("fragment", "lightBufferShader.frag"))),
    (
        "shadow_map_depth",
        (
            ("vertex", "shadowMapDepth.vert"),
            ("fragment", "shadowMapDepth.frag"),
            ("geometry", "shadowMapDepth.geom"),
        ),
    ),
    ("bloom_upsample", (("compute", "upSample.comp"),)),
    ("bloom_downsample", (("compute", "downSample.comp"),)),
    ("bloom_final", (("vertex", "lightingPass.vert"), ("fragment", "lightBloomFinal.frag"))),
)


class ShaderManager:
    """Holds the shader programs, looked up by name."""

    _instance: ClassVar[ShaderManager | None] = None

    def __init__(self) -> None:
        self._shaders: dict[str, ShaderSources] = {}

    @classmethod
    def get_instance(cls) -> ShaderManager:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(self, root: str | Path) -> None:
        """Register every program with paths under ``root/assets/shader``."""
        shader_dir = Path(root) / "assets" / "shader"
        self._shaders = {
            name: ShaderSources(**{stage: shader_dir / file for stage, file in stages})
            for name, stages in _PROGRAMS
        }

    @property
    def names(self) -> list[str]:
        return list(self._shaders)

    def get(self, name: str) -> ShaderSources:
        try:
            return self._shaders[name]
        except KeyError:
            raise KeyError(f"unknown shader: {name!r}") from None