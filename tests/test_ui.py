import pytest

from gatus.ui import (
    DEFAULT_DESCRIPTION,
    DEFAULT_HEADER,
    DEFAULT_LOGO,
    DEFAULT_TITLE,
    Button,
    ButtonValidationError,
    UIConfig,
    get_default_config,
)


def test_validate_and_set_defaults_fills_empty_fields():
    cfg = UIConfig(title="", description="", header="", logo="", link="")
    cfg.validate_and_set_defaults()
    assert cfg.title == DEFAULT_TITLE
    assert cfg.description == DEFAULT_DESCRIPTION
    assert cfg.header == DEFAULT_HEADER
    assert cfg.logo == ""
    assert cfg.link == ""


def test_validate_and_set_defaults_keeps_custom_values():
    cfg = UIConfig(title="My title", header="My header", buttons=[Button("Home", "/")])
    cfg.validate_and_set_defaults()
    assert cfg.title == "My title"
    assert cfg.header == "My header"


def test_validate_and_set_defaults_rejects_invalid_button():
    cfg = UIConfig(buttons=[Button("Home", "/"), Button("", "/x")])
    with pytest.raises(ButtonValidationError):
        cfg.validate_and_set_defaults()


@pytest.mark.parametrize(
    "name, link",
    [("", ""), ("", "link"), ("name", "")],
)
def test_button_validate_invalid(name, link):
    with pytest.raises(ButtonValidationError):
        Button(name=name, link=link).validate()


def test_button_validate_valid():
    assert Button(name="name", link="link").validate() is None


def test_button_error_message():
    with pytest.raises(ButtonValidationError, match="missing required name or link"):
        Button().validate()


def test_get_default_config():
    cfg = get_default_config()
    assert cfg.title == DEFAULT_TITLE
    assert cfg.logo == DEFAULT_LOGO
    assert cfg.title == "Health Dashboard | Gatus"
    assert cfg.header == "Health Status"
    assert cfg.buttons == []