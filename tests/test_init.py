import hydramorph


def test_public_api_reexports_are_accessible() -> None:
    for name in hydramorph.__all__:
        assert getattr(hydramorph, name) is not None

    assert callable(hydramorph.morph_sketches)
    assert hydramorph.Mutator.__name__ == "Mutator"
    assert issubclass(hydramorph.ParseError, hydramorph.HydraMorphError)
