import pytest

from formguard.core.config import FormGuardConfig


def test_defaults_are_valid():
    config = FormGuardConfig().validate()
    assert config.form_locator == ("id", "automationtestform")
    assert config.shadow_host_tag == "shadow-form"
    assert config.max_shadow_depth == 5
    assert config.closed_root_heuristic is True


@pytest.mark.parametrize("changes", [
    {"timeout": 0},
    {"poll_interval": -1},
    {"page_load_timeout": 0},
    {"form_wait": -0.1},
    {"max_shadow_depth": 0},
])
def test_invalid_values_rejected(changes):
    with pytest.raises(ValueError):
        FormGuardConfig(**changes).validate()


def test_overrides_ignore_none():
    config = FormGuardConfig().with_overrides(timeout=None, screenshot_dir="/tmp/shots")
    assert config.timeout == 10.0
    assert config.screenshot_dir == "/tmp/shots"


def test_from_env_parses_types():
    config = FormGuardConfig.from_env({
        "FORMGUARD_TIMEOUT": "20",
        "FORMGUARD_MAX_SHADOW_DEPTH": "3",
        "FORMGUARD_CLOSED_ROOT_HEURISTIC": "off",
        "FORMGUARD_SHADOW_HOST_TAG": "signup-form",
        "FORMGUARD_FORM_LOCATOR": "css selector=#signup",
        "UNRELATED": "1",
    })

    assert config.timeout == 20.0
    assert config.max_shadow_depth == 3
    assert config.closed_root_heuristic is False
    assert config.shadow_host_tag == "signup-form"
    assert config.form_locator == ("css selector", "#signup")


@pytest.mark.parametrize("raw,expected", [
    ("none", None),
    ("", None),
    ("signup", ("id", "signup")),
    ("name = signup", ("name", "signup")),
])
def test_form_locator_forms(raw, expected):
    assert FormGuardConfig.from_env({"FORMGUARD_FORM_LOCATOR": raw}).form_locator == expected


def test_from_env_validates():
    with pytest.raises(ValueError):
        FormGuardConfig.from_env({"FORMGUARD_TIMEOUT": "0"})


def test_from_env_without_variables_gives_defaults():
    assert FormGuardConfig.from_env({}) == FormGuardConfig()
