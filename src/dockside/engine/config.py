from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping


class Command(str, Enum):
    UP = "up"
    DOWN = "down"
    TOP = "top"
    BOTTOM = "bottom"
    SORT_NAME = "sort_name"
    SORT_DRIVER = "sort_driver"
    SORT_CREATED = "sort_created"
    SORT_MOUNTPOINT = "sort_mountpoint"
    DELETE = "delete"
    TOGGLE_DANGLING = "toggle_dangling"
    DESCRIBE = "describe"
    # Modal and describe-page keys, resolved separately from the page table.
    CONFIRM = "confirm"
    CANCEL = "cancel"
    BACK = "back"


PAGE_COMMANDS: frozenset[Command] = frozenset(Command) - {Command.CONFIRM, Command.CANCEL, Command.BACK}

DEFAULT_KEYS: dict[Command, tuple[str, ...]] = {
    Command.UP: ("up", "k"),
    Command.DOWN: ("down", "j"),
    Command.TOP: ("g",),
    Command.BOTTOM: ("G",),
    Command.SORT_NAME: ("N",),
    Command.SORT_DRIVER: ("D",),
    Command.SORT_CREATED: ("C",),
    Command.SORT_MOUNTPOINT: ("M",),
    Command.DELETE: ("ctrl+d",),
    Command.TOGGLE_DANGLING: ("alt+d",),
    Command.DESCRIBE: ("d",),
    Command.CONFIRM: ("enter", "y"),
    Command.CANCEL: ("escape", "n"),
    Command.BACK: ("escape",),
}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class KeyBindings:
    """Command -> key names, stored as pairs sorted by command."""

    keys: tuple[tuple[Command, tuple[str, ...]], ...] = field(
        default_factory=lambda: KeyBindings.pairs_from(DEFAULT_KEYS)
    )

    @staticmethod
    def pairs_from(mapping: Mapping[Command, tuple[str, ...]]) -> tuple[tuple[Command, tuple[str, ...]], ...]:
        pairs = ((command, tuple(keys)) for command, keys in mapping.items())
        return tuple(sorted(pairs, key=lambda pair: pair[0].value))

    @classmethod
    def from_mapping(cls, mapping: Mapping[Command, tuple[str, ...]]) -> "KeyBindings":
        return cls(keys=cls.pairs_from(mapping))

    def keys_for(self, command: Command) -> tuple[str, ...]:
        for bound, keys in self.keys:
            if bound == command:
                return keys
        return DEFAULT_KEYS[command]

    def label(self, command: Command) -> str:
        return "/".join(self.keys_for(command))

    def page_table(self) -> dict[str, Command]:
        """Key name -> page command, for the volumes page dispatch."""
        table: dict[str, Command] = {}
        for command in Command:
            if command not in PAGE_COMMANDS:
                continue
            for key in self.keys_for(command):
                table[key] = command
        return table


@dataclass(frozen=True)
class Config:
    docker_base_url: str | None = None
    docker_timeout: float = 30.0
    show_dangling: bool = True
    log_level: str = "WARNING"
    log_file: Path | None = None
    keys: KeyBindings = field(default_factory=KeyBindings)


def default_config_path() -> Path:
    return Path(__file__).resolve().parents[1] / "data" / "config.json"


def load_config(path: Path | None = None) -> Config:
    data = _load_json(path or default_config_path())
    if not isinstance(data, dict):
        raise ConfigError("Config root must be an object")

    docker_data = _optional_dict(data, "docker")
    base_url = docker_data.get("base_url")
    if base_url is not None and not isinstance(base_url, str):
        raise ConfigError("docker.base_url must be a string or null")
    timeout = docker_data.get("timeout", 30.0)
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
        raise ConfigError("docker.timeout must be a positive number")

    volumes_data = _optional_dict(data, "volumes")
    show_dangling = volumes_data.get("show_dangling", True)
    if not isinstance(show_dangling, bool):
        raise ConfigError("volumes.show_dangling must be a boolean")

    logging_data = _optional_dict(data, "logging")
    level = logging_data.get("level", "WARNING")
    if not isinstance(level, str) or level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigError("logging.level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
    log_file = logging_data.get("file")
    if log_file is not None and not isinstance(log_file, str):
        raise ConfigError("logging.file must be a string or null")

    return Config(
        docker_base_url=base_url,
        docker_timeout=float(timeout),
        show_dangling=show_dangling,
        log_level=level.upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
        keys=_parse_keys(_optional_dict(data, "keys")),
    )


def _parse_keys(data: dict) -> KeyBindings:
    keys = dict(DEFAULT_KEYS)
    for name, value in data.items():
        try:
            command = Command(name)
        except ValueError as exc:
            raise ConfigError(f"keys.{name} is not a known command") from exc
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not value or not all(isinstance(k, str) and k for k in value):
            raise ConfigError(f"keys.{name} must be a non-empty list of key names")
        keys[command] = tuple(value)

    seen: dict[str, Command] = {}
    for command in sorted(PAGE_COMMANDS, key=lambda c: c.value):
        for key in keys[command]:
            if key in seen:
                raise ConfigError(f"key {key!r} is bound to both {seen[key].value} and {command.value}")
            seen[key] = command
    return KeyBindings.from_mapping(keys)


def _load_json(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config: {exc}") from exc


def _optional_dict(data: dict, key: str) -> dict:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be an object")
    return value
