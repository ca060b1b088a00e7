# gatus

Building blocks for an automated status page and health monitor:

- **Client configuration and checks.** `gatus.client_config.ClientConfig` covers timeouts, TLS verification, redirect handling, a custom DNS resolver (`tcp://8.8.8.8:53`) and OAuth2 client credentials. `gatus.client` has connectivity checks: `can_create_tcp_connection`, `can_create_udp_connection`, `can_perform_tls` and `can_perform_starttls`.
- **Configuration sections.** These cover the web server (`gatus.web.WebConfig`), the dashboard UI (`gatus.ui.UIConfig`, `gatus.ui.Button`), maintenance windows (`gatus.maintenance.MaintenanceConfig`) and remote instances (`gatus.remote.RemoteConfig`).
- **Alert providers.** There are three: Microsoft Teams (`gatus.teams.TeamsAlertProvider`), Telegram (`gatus.telegram.TelegramAlertProvider`) and Twilio SMS (`gatus.twilio.TwilioAlertProvider`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

### Web and UI configuration

```python
from gatus.web import WebConfig

web = WebConfig(port=0)
web.validate_and_set_defaults()
print(web.socket_address())  # 0.0.0.0:8080
```

Invalid values raise an exception when `validate_and_set_defaults()` is called. Two examples are a port outside 0–65535 and a button without a name or a link.

### Maintenance windows

```python
from datetime import timedelta
from gatus.maintenance import MaintenanceConfig

maintenance = MaintenanceConfig(start="23:00", duration=timedelta(hours=1), every=["Monday"])
maintenance.validate_and_set_defaults()
if maintenance.is_under_maintenance():
    print("alerts are suppressed")
```

Times are in UTC.

### HTTP clients

```python
from gatus.client_config import ClientConfig
from gatus.client import get_http_client

config = ClientConfig(insecure=True)
config.validate_and_set_defaults()
session = get_http_client(config)
```

### Alerting

Each provider does three things:

- `is_valid()` checks its configuration.
- `build_request_body(...)` renders the payload.
- `send(endpoint, alert, result, resolved)` delivers it. A non-success response raises `gatus.teams.AlertSendError`.