"""Public API for parametric tag generation."""

from keytag.assembler import generate, generate_async, merge_parts
from keytag.config import (
    BaseOptions,
    CodeOptions,
    ConfigError,
    TagConfig,
    check_config,
    load_config,
    validate_config,
)
from keytag.contracts import GenerationResult, Material, Profile, Solid
from keytag.geometry import GenerationError

__all__ = [
    "BaseOptions",
    "CodeOptions",
    "ConfigError",
    "GenerationError",
    "GenerationResult",
    "Material",
    "Profile",
    "Solid",
    "TagConfig",
    "check_config",
    "generate",
    "generate_async",
    "load_config",
    "merge_parts",
    "validate_config",
]
