from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import OUTPUT_CATEGORY, OUTPUT_NAME, normalize_category
from .errors import CatalogError
from .hydra_functions import HYDRA_FUNCTIONS

_LOGGER = logging.getLogger("hydramorph.catalog")


class ParameterSpec(BaseModel):
    name: str
    type: str = "float"
    default: float | int | str | bool | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class FunctionSpec(BaseModel):
    """One callable sketch function: name, category and ordered parameters."""

    name: str = Field(min_length=1)
    category: str = Field(alias="type")
    parameters: tuple[ParameterSpec, ...] = Field(default=(), alias="inputs")

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @field_validator("category")
    @classmethod
    def _normalize_category(cls, value: str) -> str:
        return normalize_category(value)

    def parameter(self, index: int) -> ParameterSpec | None:
        if 0 <= index < len(self.parameters):
            return self.parameters[index]
        return None

    def describe(self) -> str:
        params = ", ".join(f"{p.name}: {p.type} {{{p.default}}}" for p in self.parameters)
        return f"{self.name} [{self.category}] ({params})"


class FunctionCatalog:
    """Immutable lookup table of known sketch functions."""

    def __init__(self, specs: Iterable[FunctionSpec]) -> None:
        by_name: dict[str, FunctionSpec] = {}
        by_category: dict[str, list[FunctionSpec]] = {}
        for spec in specs:
            if spec.name in by_name:
                raise CatalogError(f"Duplicate function name in catalog: {spec.name!r}")
            if spec.name == OUTPUT_NAME:
                raise CatalogError(f"{OUTPUT_NAME!r} is reserved for the output call")
            by_name[spec.name] = spec
            by_category.setdefault(spec.category, []).append(spec)
        self._by_name: Mapping[str, FunctionSpec] = MappingProxyType(by_name)
        self._by_category: Mapping[str, tuple[FunctionSpec, ...]] = MappingProxyType(
            {category: tuple(items) for category, items in by_category.items()}
        )

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "FunctionCatalog":
        specs: list[FunctionSpec] = []
        for index, record in enumerate(records):
            try:
                specs.append(FunctionSpec.model_validate(record))
            except ValidationError as exc:
                raise CatalogError(f"Invalid catalog record at index {index}: {exc}") from exc
        catalog = cls(specs)
        _LOGGER.debug(
            "Loaded catalog with %d functions in %d categories",
            len(catalog),
            len(catalog.categories()),
        )
        return catalog

    def lookup(self, name: str | None) -> FunctionSpec | None:
        if name is None:
            return None
        return self._by_name.get(name)

    def resolve(self, name: str) -> FunctionSpec | None:
        """Like lookup, but also answers for the reserved output call."""
        if name == OUTPUT_NAME:
            return output_spec(name)
        return self.lookup(name)

    def by_category(self, category: str) -> tuple[FunctionSpec, ...]:
        return self._by_category.get(category, ())

    def categories(self) -> tuple[str, ...]:
        return tuple(self._by_category)

    def describe(self) -> list[str]:
        return [spec.describe() for spec in self]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[FunctionSpec]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


@functools.lru_cache(maxsize=None)
def output_spec(name: str = OUTPUT_NAME) -> FunctionSpec:
    return FunctionSpec(name=name, category=OUTPUT_CATEGORY)


@functools.lru_cache(maxsize=1)
def default_catalog() -> FunctionCatalog:
    return FunctionCatalog.from_records(HYDRA_FUNCTIONS)
