"""Alert provider that sends messages through a Telegram bot."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .client import get_http_client
from .client_config import ClientConfig, get_default_config
from .teams import AlertSendError

DEFAULT_API_URL = "https://api.telegram.org"


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
class TelegramAlertProvider:
    """Sends alerts to a Telegram chat using a bot token."""

    token: str = ""
    id: str = ""
    api_url: str = ""
    client_config: ClientConfig | None = None
    default_alert: Any = None

    def is_valid(self) -> bool:
        if self.client_config is None:
            self.client_config = get_default_config()
        return bool(self.token and self.id)

    def send(self, endpoint, alert, result, resolved: bool) -> None:
        """Post the message; raise AlertSendError if the API answers with an error."""
        api_url = self.api_url or DEFAULT_API_URL
        response = get_http_client(self.client_config).post(
            f"{api_url}/bot{self.token}/sendMessage",
            data=self.build_request_body(endpoint, alert, result, resolved),
            headers={"Content-Type": "application/json"},
        )
        if response.status_code > 399:
            raise AlertSendError(response.status_code, response.text)

    def build_request_body(self, endpoint, alert, result, resolved: bool) -> bytes:
        name = endpoint.display_name()
        if resolved:
            message = (
                f"An alert for *{name}* has been resolved:\n—\n    "
                f"_healthcheck passing successfully {alert.failure_threshold} time(s) in a row_\n—  "
            )
        else:
            message = (
                f"An alert for *{name}* has been triggered:\n—\n    "
                f"_healthcheck failed {alert.failure_threshold} time(s) in a row_\n—  "
            )
        results = "".join(
            f"{'✅' if condition_result.success else '❌'} - `{condition_result.condition}`\n"
            for condition_result in result.condition_results
        )
        description = alert.description or ""
        if description:
            text = (
                f"⛑ *Gatus* \n{message} \n*Description* \n_{description}_  \n\n"
                f"*Condition results*\n{results}"
            )
        else:
            text = f"⛑ *Gatus* \n{message} \n*Condition results*\n{results}"
        return _encode_json({"chat_id": self.id, "text": text, "parse_mode": "MARKDOWN"})