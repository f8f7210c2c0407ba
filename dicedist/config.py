import dataclasses
import logging
import os
import typing

import yaml

from dicedist.evaluate import Mode

SIMULATION_COUNT_MIN = 100
SIMULATION_COUNT_MAX = 1_000_000
SETTINGS_FILE = "settings.yaml"

_default_settings_file = os.path.join(
    os.path.dirname(__file__), "settings.default.yaml"
)


class SettingsError(ValueError):
    pass


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclasses.dataclass(frozen=True)
class Settings:
    mode: Mode
    simulation_count: int
    max_exact_outcomes: typing.Optional[int]
    seed: typing.Optional[int]
    log_level: str

    @classmethod
    def from_dict(cls, raw: typing.Dict[str, typing.Any]) -> "Settings":
        fields = {field.name for field in dataclasses.fields(cls)}
        unknown = sorted(set(raw) - fields)
        if unknown:
            raise SettingsError("unknown setting %s" % ", ".join(unknown))
        missing = sorted(fields - set(raw))
        if missing:
            raise SettingsError("missing setting %s" % ", ".join(missing))

        try:
            mode = Mode(raw["mode"])
        except ValueError:
            raise SettingsError(
                "mode must be one of %s, got %s"
                % (", ".join(m.value for m in Mode), raw["mode"])
            )

        simulation_count = raw["simulation_count"]
        if not _is_int(simulation_count) or not (
            SIMULATION_COUNT_MIN <= simulation_count <= SIMULATION_COUNT_MAX
        ):
            raise SettingsError(
                "simulation_count must be an integer between %s and %s, got %s"
                % (SIMULATION_COUNT_MIN, SIMULATION_COUNT_MAX, simulation_count)
            )

        max_exact_outcomes = raw["max_exact_outcomes"]
        if max_exact_outcomes is not None and (
            not _is_int(max_exact_outcomes) or max_exact_outcomes < 1
        ):
            raise SettingsError(
                "max_exact_outcomes must be a positive integer or null, got %s"
                % max_exact_outcomes
            )

        seed = raw["seed"]
        if seed is not None and not _is_int(seed):
            raise SettingsError("seed must be an integer or null, got %s" % seed)

        log_level = str(raw["log_level"]).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise SettingsError("unknown log_level %s" % raw["log_level"])

        return cls(mode, simulation_count, max_exact_outcomes, seed, log_level)

    def replace(self, **changes: typing.Any) -> "Settings":
        raw = dataclasses.asdict(self)
        raw.update(changes)
        return Settings.from_dict(raw)


def _read(path: str) -> typing.Dict[str, typing.Any]:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError("%s is not valid YAML: %s" % (path, e))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SettingsError("%s must contain a mapping of settings" % path)
    return raw


def load_settings(path: typing.Optional[str] = None) -> Settings:
    """Load the packaged defaults, overridden by a user settings file.

    Without an explicit path, settings.yaml in the working directory is used
    when it exists.
    """
    raw = _read(_default_settings_file)
    if path is None:
        if os.path.exists(SETTINGS_FILE):
            raw.update(_read(SETTINGS_FILE))
    elif not os.path.exists(path):
        raise SettingsError("settings file %s not found" % path)
    else:
        raw.update(_read(path))
    return Settings.from_dict(raw)
