"""Validation helpers for configuration values and command-line targets."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from .const import CONF_PASSWORD, CONF_POLL_INTERVAL, CONF_POLL_MAX, CONF_USERNAME
from .exceptions import ConfigError, ValidationError
from .models import BedPreset, PositionRequest, Side, TargetSelection

_LOGGER = logging.getLogger(__name__)

ARG_BED_NAME = "bed_name"
ARG_SIDE = "side"
ARG_POSITION = "position"


def _required(flag: str):
    """Build a validator rejecting missing, empty or zero parameter values."""

    def validator(value: Any) -> Any:
        if value is None or value == 0 or (isinstance(value, str) and not value.strip()):
            raise vol.Invalid(f"must specify {flag} parameter")
        return value

    return validator


def _side(value: str) -> Side:
    try:
        return Side.parse(value)
    except ValueError as err:
        raise vol.Invalid(f"side must be Left or Right, got {value!r}") from err


def _preset(value: int) -> BedPreset:
    try:
        return BedPreset(value)
    except ValueError as err:
        raise vol.Invalid(
            f"position must be 1-6 (1=Favorite, 2=Read, 3=WatchTV, 4=Flat, 5=ZeroG, 6=Snore), got {value}"
        ) from err


_credential = vol.All(vol.Any(str, int), vol.Coerce(str), vol.Length(min=1))
_duration = vol.All(
    vol.Coerce(float),
    vol.Range(min=0, min_included=False, msg="must be a positive number of seconds"),
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_USERNAME): _credential,
        vol.Required(CONF_PASSWORD): _credential,
        vol.Required(CONF_POLL_INTERVAL): _duration,
        vol.Required(CONF_POLL_MAX): _duration,
    },
    extra=vol.ALLOW_EXTRA,
)

REQUEST_SCHEMA = vol.Schema(
    {
        vol.Required(ARG_BED_NAME): vol.All(_required("bed-name"), str),
        vol.Required(ARG_SIDE): vol.All(_required("side"), str, _side),
        vol.Required(ARG_POSITION): vol.All(
            _required("position"),
            vol.Coerce(int, msg="position must be a whole number 1-6"),
            _required("position"),
            _preset,
        ),
    }
)


def validate_config_data(data: dict[str, Any]) -> dict[str, Any]:
    """Validate raw configuration values, returning the coerced mapping."""
    try:
        return CONFIG_SCHEMA(data)
    except vol.Invalid as err:
        raise ConfigError(f"invalid configuration: {err}") from err


def validate_position_request(bed_name: Any, side: Any, position: Any) -> PositionRequest:
    """Validate command-line target parameters before any network call."""
    try:
        data = REQUEST_SCHEMA(
            {ARG_BED_NAME: bed_name, ARG_SIDE: side, ARG_POSITION: position}
        )
    except vol.Invalid as err:
        raise ValidationError(err.msg) from err

    request = PositionRequest(
        bed_name=data[ARG_BED_NAME],
        side=data[ARG_SIDE],
        preset=data[ARG_POSITION],
    )
    _LOGGER.debug(
        "Validated target: bed=%s side=%s preset=%s",
        request.bed_name,
        request.side.value,
        request.preset.name,
    )
    return request


def validate_selection(selection: TargetSelection) -> None:
    """Check a resolved selection is safe to send to the bed."""
    if not isinstance(selection.bed_id, str) or not selection.bed_id:
        raise ValidationError("bed id must be a non-empty string")
    if not isinstance(selection.side, Side):
        raise ValidationError(f"unrecognized side {selection.side!r}")
    if not isinstance(selection.preset, BedPreset):
        raise ValidationError(f"unrecognized position {selection.preset!r}")
