"""Configuration of the status page's user interface."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_TITLE = "Health Dashboard | Gatus"
DEFAULT_DESCRIPTION = (
    "Gatus is an advanced automated status page that lets you monitor your applications "
    "and configure alerts to notify you if there's an issue"
)
DEFAULT_HEADER = "Health Status"
DEFAULT_LOGO = ""
DEFAULT_LINK = ""


class ButtonValidationError(ValueError):
    """A button is missing its name or its link."""

    def __init__(
        self, message: str = "invalid button configuration: missing required name or link"
    ) -> None:
        super().__init__(message)


@dataclass
class Button:
    """A link button displayed below the header."""

    name: str = ""
    link: str = ""

    def validate(self) -> None:
        if not self.name or not self.link:
            raise ButtonValidationError()


@dataclass
class UIConfig:
    """Title, description, header, logo and buttons of the page."""

    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    header: str = DEFAULT_HEADER
    logo: str = DEFAULT_LOGO
    link: str = DEFAULT_LINK
    buttons: list[Button] = field(default_factory=list)

    def validate_and_set_defaults(self) -> None:
        """Fill in empty texts with defaults and validate every button."""
        if not self.title:
            self.title = DEFAULT_TITLE
        if not self.description:
            self.description = DEFAULT_DESCRIPTION
        if not self.header:
            self.header = DEFAULT_HEADER
        for button in self.buttons:
            button.validate()


def get_default_config() -> UIConfig:
    """Return a configuration holding the default values."""
    return UIConfig()