import pytest

from formguard.layers.shadow.path import ShadowPath


def test_parse_nested_path():
    path = ShadowPath.parse("nestedshadow-form >> shadow-form >> #fname")

    assert path.hosts == ("nestedshadow-form", "shadow-form")
    assert path.target == "#fname"
    assert path.depth == 2
    assert str(path) == "nestedshadow-form >> shadow-form >> #fname"


def test_single_host_string_is_wrapped():
    path = ShadowPath("shadow-form", "#fname")
    assert path.hosts == ("shadow-form",)
    assert path.depth == 1


def test_paths_are_hashable_values():
    assert ShadowPath(["a"], "#t") == ShadowPath(("a",), "#t")
    assert len({ShadowPath(["a"], "#t"), ShadowPath(("a",), "#t")}) == 1


@pytest.mark.parametrize("text", ["#fname", "shadow-form >> ", " >> #fname", "a >>  >> #t"])
def test_parse_rejects_incomplete_paths(text):
    with pytest.raises(ValueError):
        ShadowPath.parse(text)


def test_empty_hosts_rejected():
    with pytest.raises(ValueError):
        ShadowPath((), "#fname")
