from datetime import datetime, timedelta, timezone

import pytest

from gatus.maintenance import (
    InvalidDayNameError,
    InvalidMaintenanceDurationError,
    InvalidMaintenanceStartFormatError,
    MaintenanceConfig,
    get_default_config,
)

ALL_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

NOWS = [
    datetime(2023, 5, 10, 13, 27, tzinfo=timezone.utc),
    datetime(2023, 5, 10, 2, 15, tzinfo=timezone.utc),
    datetime(2023, 5, 14, 23, 59, tzinfo=timezone.utc),
]


def _hour(hour):
    return f"{hour % 24:02d}:00"


def test_get_default_config_is_disabled():
    cfg = get_default_config()
    assert cfg.enabled is False
    assert cfg.is_enabled() is False


def test_is_enabled_when_unset():
    assert MaintenanceConfig().is_enabled() is True


def test_disabled_skips_validation():
    cfg = MaintenanceConfig(enabled=False)
    assert cfg.validate_and_set_defaults() is None
    assert cfg.is_under_maintenance() is False


@pytest.mark.parametrize(
    "cfg, error",
    [
        (MaintenanceConfig(every=["invalid-day"]), InvalidDayNameError),
        (MaintenanceConfig(start="0000"), InvalidMaintenanceStartFormatError),
        (MaintenanceConfig(start="25:00"), InvalidMaintenanceStartFormatError),
        (MaintenanceConfig(start="0:61"), InvalidMaintenanceStartFormatError),
        (MaintenanceConfig(start="23:00", duration=timedelta(0)), InvalidMaintenanceDurationError),
        (MaintenanceConfig(start="23:00", duration=timedelta(hours=24)), InvalidMaintenanceDurationError),
    ],
)
def test_validate_errors(cfg, error):
    with pytest.raises(error):
        cfg.validate_and_set_defaults()


@pytest.mark.parametrize("start", ["00:zz", "zz:00"])
def test_validate_non_numerical_start(start):
    cfg = MaintenanceConfig(start=start)
    with pytest.raises(ValueError, match="invalid syntax"):
        cfg.validate_and_set_defaults()


def test_invalid_day_message_lists_days():
    with pytest.raises(InvalidDayNameError) as info:
        MaintenanceConfig(every=["Funday"]).validate_and_set_defaults()
    assert str(info.value) == (
        "invalid value specified for 'on'. supported values are "
        "[Sunday Monday Tuesday Wednesday Thursday Friday Saturday]"
    )


@pytest.mark.parametrize(
    "cfg",
    [
        MaintenanceConfig(start="23:00", duration=timedelta(hours=1)),
        MaintenanceConfig(start="23:00", duration=timedelta(hours=1), every=list(ALL_DAYS)),
        MaintenanceConfig(start="00:00", duration=timedelta(minutes=30), every=["Monday"]),
        MaintenanceConfig(
            enabled=True, start="08:00", duration=timedelta(hours=8), every=["Friday", "Sunday"]
        ),
    ],
)
def test_validate_valid(cfg):
    assert cfg.validate_and_set_defaults() is None
    assert cfg.is_enabled() is True


def _scenarios(now):
    h = now.hour
    later = ALL_DAYS[(now + timedelta(hours=48)).weekday()]
    return [
        (MaintenanceConfig(enabled=False), False),
        (MaintenanceConfig(enabled=True, start=_hour(h), duration=timedelta(hours=2)), True),
        (MaintenanceConfig(start=_hour(h), duration=timedelta(hours=2)), True),
        (MaintenanceConfig(start=_hour(h), duration=timedelta(hours=8)), True),
        (MaintenanceConfig(start=_hour(h), duration=timedelta(hours=8), every=list(ALL_DAYS)), True),
        (MaintenanceConfig(start=_hour(h), duration=timedelta(hours=23), every=list(ALL_DAYS)), True),
        (MaintenanceConfig(start=_hour(h - 4), duration=timedelta(hours=8)), True),
        (MaintenanceConfig(start=_hour(h - 22), duration=timedelta(hours=23)), True),
        (MaintenanceConfig(start=_hour(h - 4), duration=timedelta(hours=3)), False),
        (MaintenanceConfig(start=_hour(h - 5), duration=timedelta(hours=1)), False),
        (MaintenanceConfig(start=_hour(h), duration=timedelta(hours=1), every=[later]), False),
    ]


@pytest.mark.parametrize("now", NOWS)
def test_is_under_maintenance(now):
    for cfg, expected in _scenarios(now):
        cfg.validate_and_set_defaults()
        assert cfg.is_under_maintenance(now) is expected, (cfg, now)


def test_is_under_maintenance_naive_datetime_is_utc():
    cfg = MaintenanceConfig(start="13:00", duration=timedelta(hours=1))
    cfg.validate_and_set_defaults()
    assert cfg.is_under_maintenance(datetime(2023, 5, 10, 13, 30)) is True
    assert cfg.is_under_maintenance(datetime(2023, 5, 10, 14, 30)) is False


def test_is_under_maintenance_converts_other_timezones():
    cfg = MaintenanceConfig(start="13:00", duration=timedelta(hours=1))
    cfg.validate_and_set_defaults()
    plus_two = timezone(timedelta(hours=2))
    assert cfg.is_under_maintenance(datetime(2023, 5, 10, 15, 30, tzinfo=plus_two)) is True


def test_is_under_maintenance_respects_start_day_across_midnight():
    # Wednesday 22:00 for 4 hours: early Thursday is covered, early Wednesday is not.
    cfg = MaintenanceConfig(start="22:00", duration=timedelta(hours=4), every=["Wednesday"])
    cfg.validate_and_set_defaults()
    assert cfg.is_under_maintenance(datetime(2023, 5, 11, 1, 0, tzinfo=timezone.utc)) is True
    assert cfg.is_under_maintenance(datetime(2023, 5, 10, 1, 0, tzinfo=timezone.utc)) is False