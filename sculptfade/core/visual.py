#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#
"""Material state and the per-object visual mutator."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set, Tuple

from .. import DEFAULT_PROPERTY_NAME
from ..debug import debug_log

# Blend factors and queues understood by the standard surface shader
BLEND_SRC_ALPHA = 5
BLEND_ONE_MINUS_SRC_ALPHA = 10
RENDER_MODE_TRANSPARENT = 3
RENDER_QUEUE_GEOMETRY = 2000
RENDER_QUEUE_TRANSPARENT = 3000

Color = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Texture:
    """Handle to a swappable texture resource."""

    name: str
    path: Optional[Path] = None

    @classmethod
    def from_path(cls, path: Path | str) -> "Texture":
        path = Path(path)
        return cls(name=path.stem, path=path)


@dataclass
class Material:
    """Surface parameters consumed by the renderer."""

    name: str = "Standard"
    textures: Dict[str, Optional[Texture]] = field(
        default_factory=lambda: {DEFAULT_PROPERTY_NAME: None}
    )
    floats: Dict[str, float] = field(default_factory=dict)
    ints: Dict[str, int] = field(default_factory=dict)
    keywords: Set[str] = field(default_factory=set)
    render_queue: int = RENDER_QUEUE_GEOMETRY
    color: Color = (1.0, 1.0, 1.0, 1.0)

    @classmethod
    def with_slots(cls, slots: Iterable[str], **kwargs: Any) -> "Material":
        return cls(textures={slot: None for slot in slots}, **kwargs)

    def has_property(self, name: str) -> bool:
        return name in self.textures

    def get_texture(self, name: str) -> Optional[Texture]:
        return self.textures.get(name)

    def set_texture(self, name: str, texture: Texture) -> None:
        # Unknown slots are ignored, matching the shader's own behaviour
        if name in self.textures:
            self.textures[name] = texture

    def set_float(self, name: str, value: float) -> None:
        self.floats[name] = float(value)

    def set_int(self, name: str, value: int) -> None:
        self.ints[name] = int(value)

    def enable_keyword(self, keyword: str) -> None:
        self.keywords.add(keyword)

    def disable_keyword(self, keyword: str) -> None:
        self.keywords.discard(keyword)

    def clone(self) -> "Material":
        instance = copy.deepcopy(self)
        instance.name = f"{self.name} (Instance)"
        return instance


class Renderer:
    """Draws one scene object; hands out a private material instance on request."""

    def __init__(self, shared_material: Material) -> None:
        self.shared_material = shared_material
        self._instance: Optional[Material] = None

    def get_owned_material(self) -> Optional[Material]:
        if self._instance is None:
            self._instance = self.shared_material.clone()
        return self._instance


class VisualMutator:
    """Mutates one object's private material instance and nothing else."""

    def __init__(self, material: Optional[Material]) -> None:
        self.material = material
        self.transparent = False
        self._base_rgb: Tuple[float, float, float] = (
            material.color[:3] if material is not None else (1.0, 1.0, 1.0)
        )

    def apply_replacement(self, property_name: str, resource: Optional[Texture]) -> bool:
        """Assign ``resource`` to the named slot; returns whether it was applied."""
        if resource is None or self.material is None:
            return False
        if not self.material.has_property(property_name):
            return False
        self.material.set_texture(property_name, resource)
        debug_log(
            "TEXTURE_SWAP",
            f"{self.material.name}.{property_name} -> {resource.name}",
        )
        return True

    def enable_transparency(self) -> None:
        """Switch the material to alpha blending so it draws after opaque geometry."""
        material = self.material
        if material is None:
            return

        material.set_float("_Mode", RENDER_MODE_TRANSPARENT)
        material.set_int("_SrcBlend", BLEND_SRC_ALPHA)
        material.set_int("_DstBlend", BLEND_ONE_MINUS_SRC_ALPHA)
        material.set_int("_ZWrite", 0)
        material.disable_keyword("_ALPHATEST_ON")
        material.enable_keyword("_ALPHABLEND_ON")
        material.disable_keyword("_ALPHAPREMULTIPLY_ON")
        material.render_queue = RENDER_QUEUE_TRANSPARENT

        self._base_rgb = material.color[:3]
        self.transparent = True

    def set_opacity(self, alpha: float) -> None:
        if self.material is None:
            return
        r, g, b = self._base_rgb
        self.material.color = (r, g, b, alpha)

    @property
    def opacity(self) -> float:
        if self.material is None:
            return 0.0
        return self.material.color[3]
