"""Alert provider that sends text messages through Twilio."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from .client import get_http_client
from .teams import AlertSendError


@dataclass
class TwilioAlertProvider:
    """Sends alerts as SMS from one number to another."""

    sid: str = ""
    token: str = ""
    from_: str = ""
    to: str = ""
    default_alert: Any = None

    def is_valid(self) -> bool:
        return bool(self.token and self.sid and self.from_ and self.to)

    def send(self, endpoint, alert, result, resolved: bool) -> None:
        """Post the message; raise AlertSendError if the API answers with an error."""
        credentials = base64.b64encode(f"{self.sid}:{self.token}".encode()).decode("ascii")
        response = get_http_client(None).post(
            f"https://api.twilio.com/2010-04-01/Accounts/{self.sid}/Messages.json",
            data=self.build_request_body(endpoint, alert, result, resolved),
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Authorization": f"Basic {credentials}",
            },
        )
        if response.status_code > 399:
            raise AlertSendError(response.status_code, response.text)

    def build_request_body(self, endpoint, alert, result, resolved: bool) -> str:
        state = "RESOLVED" if resolved else "TRIGGERED"
        message = f"{state}: {endpoint.display_name()} - {alert.description or ''}"
        return urlencode(sorted({"To": self.to, "From": self.from_, "Body": message}.items()))