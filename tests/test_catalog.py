from __future__ import annotations

import pytest

from hydramorph.catalog import FunctionCatalog, FunctionSpec, default_catalog, output_spec
from hydramorph.errors import CatalogError


def test_default_catalog_covers_every_category() -> None:
    catalog = default_catalog()
    assert set(catalog.categories()) == {"source", "geometry", "color", "operator", "modulator"}


def test_lookup_resolves_known_function() -> None:
    spec = default_catalog().lookup("osc")
    assert spec is not None
    assert spec.category == "source"
    assert [p.name for p in spec.parameters] == ["frequency", "sync", "offset"]


def test_lookup_unknown_function_returns_none() -> None:
    catalog = default_catalog()
    assert catalog.lookup("sparkle") is None
    assert catalog.lookup(None) is None
    assert "sparkle" not in catalog


def test_by_category_lists_same_category_functions() -> None:
    names = {spec.name for spec in default_catalog().by_category("modulator")}
    assert {"modulate", "modulateScrollX", "modulateRotate"} <= names
    assert default_catalog().by_category("nonexistent") == ()


def test_resolve_answers_for_output_call() -> None:
    spec = default_catalog().resolve("out")
    assert spec is not None
    assert spec.category == "output"
    assert spec == output_spec()


def test_from_records_normalizes_native_type_tags() -> None:
    catalog = FunctionCatalog.from_records(
        [
            {
                "name": "osc",
                "type": "src",
                "inputs": [{"name": "frequency", "type": "float", "default": 60}],
            },
            {"name": "glow", "type": "sparkle", "inputs": []},
        ]
    )
    assert catalog.lookup("osc").category == "source"
    assert catalog.lookup("glow").category == "sparkle"
    assert len(catalog) == 2


def test_from_records_rejects_duplicates() -> None:
    record = {"name": "osc", "type": "src", "inputs": []}
    with pytest.raises(CatalogError, match="Duplicate"):
        FunctionCatalog.from_records([record, record])


def test_from_records_rejects_malformed_record() -> None:
    with pytest.raises(CatalogError, match="index 0"):
        FunctionCatalog.from_records([{"type": "src"}])


def test_output_name_is_reserved() -> None:
    with pytest.raises(CatalogError):
        FunctionCatalog([FunctionSpec(name="out", category="output")])


def test_describe_formats_parameters() -> None:
    spec = default_catalog().lookup("contrast")
    assert spec is not None
    assert spec.describe() == "contrast [color] (amount: float {1.6})"
    assert len(default_catalog().describe()) == len(default_catalog())
