"""Alert provider that posts message cards to a Microsoft Teams webhook."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .client import get_http_client

_RESOLVED_COLOR = "#36A64F"
_TRIGGERED_COLOR = "#DD0000"


class AlertSendError(RuntimeError):
    """An alert provider answered with an error status code."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"call to provider alert returned status code {status_code}: {body}")
        self.status_code = status_code
        self.body = body


@dataclass
class Override:
    """A webhook URL used instead of the default one for endpoints of a group."""

    group: str = ""
    webhook_url: str = ""


def _encode_json(payload: Any) -> bytes:
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    for char, escaped in (
        ("&", "\\u0026"),
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escaped)
    return text.encode("utf-8")


@dataclass
class TeamsAlertProvider:
    """Sends alerts to a Teams incoming webhook, optionally per endpoint group."""

    webhook_url: str = ""
    default_alert: Any = None
    overrides: list[Override] = field(default_factory=list)

    def is_valid(self) -> bool:
        registered: set[str] = set()
        for override in self.overrides:
            if override.group in registered or not override.group or not override.webhook_url:
                return False
            registered.add(override.group)
        return bool(self.webhook_url)

    def send(self, endpoint, alert, result, resolved: bool) -> None:
        """Post the alert; raise AlertSendError if the webhook answers with an error."""
        response = get_http_client(None).post(
            self.webhook_url_for_group(endpoint.group),
            data=self.build_request_body(endpoint, alert, result, resolved),
            headers={"Content-Type": "application/json"},
        )
        if response.status_code > 399:
            raise AlertSendError(response.status_code, response.text)

    def build_request_body(self, endpoint, alert, result, resolved: bool) -> bytes:
        name = endpoint.display_name()
        if resolved:
            message = (
                f"An alert for *{name}* has been resolved after passing successfully "
                f"{alert.success_threshold} time(s) in a row"
            )
            color = _RESOLVED_COLOR
        else:
            message = (
                f"An alert for *{name}* has been triggered due to having failed "
                f"{alert.failure_threshold} time(s) in a row"
            )
            color = _TRIGGERED_COLOR
        results = "".join(
            f"{'&#x2705;' if condition_result.success else '&#x274C;'} - "
            f"`{condition_result.condition}`<br/>"
            for condition_result in result.condition_results
        )
        description = alert.description or ""
        if description:
            message += ": " + description
        return _encode_json(
            {
                "@type": "MessageCard",
                "@context": "http://schema.org/extensions",
                "themeColor": color,
                "title": "&#x1F6A8; Gatus",
                "text": message,
                "sections": [{"activityTitle": "Condition results", "text": results}],
            }
        )

    def webhook_url_for_group(self, group: str) -> str:
        for override in self.overrides:
            if group == override.group:
                return override.webhook_url
        return self.webhook_url