"""Post-process effects: bloom mip chains and screen-space ambient occlusion."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from torchscene import glmath
from torchscene.camera import EditorCamera

_INT_MAX = 2**31 - 1
_DISPATCH_GROUP_SIZE = 8.0

SSAO_KERNEL_SIZE = 64
SSAO_NOISE_SIZE = 16
DEFAULT_BLOOM_MIP_CHAIN_LENGTH = 6


class PostProcessType(enum.Enum):
    """Post-process effects the factory can provide."""

    SSAO = enum.auto()
    BLOOM = enum.auto()


@dataclass(frozen=True)
class BloomMipTexture:
    """One level of the bloom mip chain."""

    size: tuple[float, float]
    int_size: tuple[int, int]
    texture: int = 0


@dataclass
class BloomSpecification:
    """State of the bloom effect."""

    mip_texture_chain: list[BloomMipTexture] = field(default_factory=list)
    mip_chain_length: int = DEFAULT_BLOOM_MIP_CHAIN_LENGTH
    src_viewport_size: tuple[int, int] = (0, 0)
    src_viewport_size_float: tuple[float, float] = (0.0, 0.0)
    bloom_filter_radius: float = 0.005
    bloom_blur_texture: int = 0
    src_texture: int = 0


@dataclass(eq=False)
class SSAOSpecification:
    """State of the SSAO effect; the kernel is an ``(n, 3)`` array of hemisphere samples."""

    ssao_framebuffer: int = 0
    ssao_blur_framebuffer: int = 0
    ssao_color_texture: int = 0
    ssao_color_blur_texture: int = 0
    ssao_kernel: np.ndarray = field(default_factory=lambda: np.zeros((0, 3)))
    noise_texture: int = 0
    camera: EditorCamera | None = None


class MinStdRand0:
    """Park-Miller minimal standard generator (multiplier 16807, modulus 2**31 - 1)."""

    MULTIPLIER = 16807
    MODULUS = 2**31 - 1

    def __init__(self, seed: int = 1) -> None:
        state = seed % self.MODULUS
        self._state = state if state != 0 else 1

    def next(self) -> int:
        """Advance the generator and return the new state."""
        self._state = (self._state * self.MULTIPLIER) % self.MODULUS
        return self._state

    def uniform(self) -> float:
        """A single-precision float drawn uniformly from ``[0, 1)``."""
        span = np.float32(self.MODULUS - 1)
        value = float(np.float32(self.next() - 1) / span)
        if value >= 1.0:
            value = float(np.nextafter(np.float32(1.0), np.float32(0.0)))
        return value


def lerp(a: float, b: float, f: float) -> float:
    """Linear interpolation from ``a`` to ``b`` by ``f``."""
    return a + f * (b - a)


def _check_size(width: int, height: int) -> None:
    if width < 0 or height < 0:
        raise ValueError("window size must not be negative")
    if width > _INT_MAX or height > _INT_MAX:
        raise ValueError("window size conversion overflow - cannot build bloom mip chain")


def build_bloom_mip_chain(
    width: int, height: int, length: int = DEFAULT_BLOOM_MIP_CHAIN_LENGTH
) -> list[BloomMipTexture]:
    """Successively halved mip levels below a ``width`` x ``height`` source."""
    _check_size(width, height)
    if length < 0:
        raise ValueError("mip chain length must not be negative")
    size_float = (float(width), float(height))
    size_int = (int(width), int(height))
    chain = []
    for _ in range(length):
        size_float = (size_float[0] * 0.5, size_float[1] * 0.5)
        size_int = (size_int[0] // 2, size_int[1] // 2)
        chain.append(BloomMipTexture(size=size_float, int_size=size_int))
    return chain


def _groups(size: tuple[float, float]) -> tuple[int, int]:
    return (
        math.ceil(size[0] / _DISPATCH_GROUP_SIZE),
        math.ceil(size[1] / _DISPATCH_GROUP_SIZE),
    )


def generate_ssao_kernel(rng: MinStdRand0) -> np.ndarray:
    """Hemisphere samples along +z, denser towards the centre."""
    samples = []
    for i in range(SSAO_KERNEL_SIZE):
        x = rng.uniform() * 2.0 - 1.0
        y = rng.uniform() * 2.0 - 1.0
        z = rng.uniform()
        sample = glmath.normalize([x, y, z]) * rng.uniform()
        t = i / SSAO_KERNEL_SIZE
        samples.append(sample * lerp(0.1, 1.0, t * t))
    return np.array(samples)


def generate_ssao_noise(rng: MinStdRand0) -> np.ndarray:
    """Random rotation vectors around the tangent-space z axis, for a 4x4 texture."""
    rows = []
    for _ in range(SSAO_NOISE_SIZE):
        x = rng.uniform() * 2.0 - 1.0
        y = rng.uniform() * 2.0 - 1.0
        rows.append((x, y, 0.0))
    return np.array(rows)


class Bloom:
    """Physically based bloom via compute down- and up-sampling over a mip chain."""

    def __init__(self, width: int, height: int) -> None:
        self.specification = BloomSpecification()
        self._initialize(width, height)

    def _initialize(self, width: int, height: int) -> None:
        spec = self.specification
        spec.mip_texture_chain = build_bloom_mip_chain(width, height, spec.mip_chain_length)
        spec.src_viewport_size = (int(width), int(height))
        spec.src_viewport_size_float = (float(width), float(height))

    def on_update(self, width: int, height: int) -> None:
        """Rebuild the mip chain for a new viewport size."""
        self.specification.mip_texture_chain = []
        self._initialize(width, height)

    def downsample_dispatch_sizes(self) -> list[tuple[int, int]]:
        """Work-group counts of each downsample pass, from the largest mip down."""
        return [_groups(mip.size) for mip in self.specification.mip_texture_chain]

    def upsample_dispatch_sizes(self) -> list[tuple[int, int]]:
        """Work-group counts of each upsample pass, from the smallest mip up.

        Each pass writes into the next larger mip, so its size decides the count.
        """
        chain = self.specification.mip_texture_chain
        return [_groups(dest.size) for dest in reversed(chain[:-1])]


class SSAO:
    """Screen-space ambient occlusion with a random sample kernel and noise."""

    def __init__(self, camera: EditorCamera | None = None, rng: MinStdRand0 | None = None) -> None:
        rng = MinStdRand0() if rng is None else rng
        self.specification = SSAOSpecification(camera=camera)
        self.specification.ssao_kernel = generate_ssao_kernel(rng)
        self.noise = generate_ssao_noise(rng)
        self.screen_size: tuple[int, int] | None = None

    def on_update(self, width: int, height: int) -> None:
        """Resize the occlusion buffers to the new screen size."""
        if width < 0 or height < 0:
            raise ValueError("screen size must not be negative")
        self.screen_size = (int(width), int(height))

    @property
    def uniforms(self) -> dict[str, Any]:
        """Uniforms of the SSAO shader."""
        values: dict[str, Any] = {"gPosition": 0, "gNormal": 1, "texNoise": 2}
        for i, sample in enumerate(self.specification.ssao_kernel):
            values[f"samples[{i}]"] = sample
        if self.specification.camera is not None:
            values["projection"] = self.specification.camera.projection
        if self.screen_size is not None:
            values["u_ScreenWidth"], values["u_ScreenHeight"] = self.screen_size
        return values


class PostProcessFactory:
    """Hands out one shared instance of each post-process effect."""

    def __init__(self, width: int, height: int, camera: EditorCamera | None = None) -> None:
        self._width = width
        self._height = height
        self._camera = camera
        self._effects: dict[PostProcessType, Bloom | SSAO] = {}

    def get_effect(self, effect_type: PostProcessType) -> Bloom | SSAO:
        if not isinstance(effect_type, PostProcessType):
            raise ValueError(f"unknown post-process effect: {effect_type!r}")
        effect = self._effects.get(effect_type)
        if effect is None:
            if effect_type is PostProcessType.SSAO:
                effect = SSAO(self._camera)
            else:
                effect = Bloom(self._width, self._height)
            self._effects[effect_type] = effect
        return effect