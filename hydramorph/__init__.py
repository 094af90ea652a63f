from __future__ import annotations

from .catalog import FunctionCatalog, FunctionSpec, ParameterSpec, default_catalog
from .chain import CallableArg, CallNode, Chain, ExpressionArg, LiteralArg, Sketch
from .codegen import chain_to_source, generate, js_number
from .config import MutateOptions, RandomSketchSettings
from .deglobalize import deglobalize, uses_audio
from .errors import (
    CatalogError,
    GenerationError,
    GenerationValidationError,
    HydraMorphError,
    InvalidInputError,
    MutationExhaustedError,
    ParseError,
)
from .logging_utils import configure_logging as _configure_logging
from .morph import AlignmentEntry, MorphStep, SketchMorpher, morph_sketches
from .mutator import Mutator
from .parser import parse, validate_source
from .random_sketch import RandomSketchGenerator

__all__ = [
    "AlignmentEntry",
    "CallNode",
    "CallableArg",
    "CatalogError",
    "Chain",
    "ExpressionArg",
    "FunctionCatalog",
    "FunctionSpec",
    "GenerationError",
    "GenerationValidationError",
    "HydraMorphError",
    "InvalidInputError",
    "LiteralArg",
    "MorphStep",
    "MutateOptions",
    "Mutator",
    "MutationExhaustedError",
    "ParameterSpec",
    "ParseError",
    "RandomSketchGenerator",
    "RandomSketchSettings",
    "Sketch",
    "SketchMorpher",
    "chain_to_source",
    "default_catalog",
    "deglobalize",
    "generate",
    "js_number",
    "morph_sketches",
    "parse",
    "uses_audio",
    "validate_source",
]

__version__ = "0.1.0"

_configure_logging()
del _configure_logging
