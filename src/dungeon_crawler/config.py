from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from dataclasses import dataclass, field, replace
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml
from jsonschema import Draft202012Validator, exceptions as js_exceptions, validators
from platformdirs import user_config_dir

from .errors import ConfigurationError
from .map.geometry import Size

logger = logging.getLogger(__name__)

APP_NAME = "dungeon-crawler"
SETTINGS_FILE = "settings.yaml"
SCHEMA_FILE = "settings.schema.json"
_DATA_PKG = "dungeon_crawler.data"

Range = Tuple[int, int]


@dataclass(frozen=True)
class GeneratorSettings:
    """Knobs for the rooms-and-corridors generator.

    - room_width_range / room_height_range are half-open: [min, max).
    - depth is the level ordinal; it is stored on the grid and selects the RNG
      stream, but does not change the layout rules.
    - seed is the master seed used when the caller does not inject an RNG.
    """

    map_size: Size = field(default_factory=lambda: Size(50, 50))
    room_count: int = 25
    room_width_range: Range = (4, 10)
    room_height_range: Range = (2, 8)
    depth: int = 0
    seed: Optional[Union[int, str]] = None

    def validate(self) -> None:
        """Raise ConfigurationError if rooms could never be placed on this map."""
        problems: List[str] = []
        if self.map_size.width < 3 or self.map_size.height < 3:
            problems.append(f"map_size must be at least 3x3, got {self.map_size.width}x{self.map_size.height}")
        if self.room_count <= 0:
            problems.append(f"room_count must be > 0, got {self.room_count}")
        if self.depth < 0:
            problems.append(f"depth must be >= 0, got {self.depth}")
        for name, rng, extent in (
            ("room_width_range", self.room_width_range, self.map_size.width),
            ("room_height_range", self.room_height_range, self.map_size.height),
        ):
            if len(rng) != 2:
                problems.append(f"{name} must be a (min, max) pair, got {rng!r}")
                continue
            lo, hi = rng
            if lo < 1 or hi <= lo:
                problems.append(f"{name} must satisfy 1 <= min < max, got [{lo}, {hi})")
            elif hi > extent - 2:
                # A room of size s occupies s + 1 tiles and needs a wall on both sides.
                problems.append(f"{name} max {hi} does not fit a map extent of {extent} (max allowed {extent - 2})")
        if problems:
            raise ConfigurationError("Invalid generator settings: " + "; ".join(problems))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "GeneratorSettings":
        size = raw.get("map_size", {})
        seed = raw.get("seed")
        return cls(
            map_size=Size(int(size.get("width", 50)), int(size.get("height", 50))),
            room_count=int(raw.get("room_count", 25)),
            room_width_range=_as_range(raw.get("room_width_range", (4, 10))),
            room_height_range=_as_range(raw.get("room_height_range", (2, 8))),
            depth=int(raw.get("depth", 0)),
            seed=seed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "map_size": {"width": self.map_size.width, "height": self.map_size.height},
            "room_count": self.room_count,
            "room_width_range": list(self.room_width_range),
            "room_height_range": list(self.room_height_range),
            "depth": self.depth,
            "seed": self.seed,
        }


@dataclass(frozen=True)
class FovSettings:
    view_range: int = 8
    global_vision: bool = False

    def __post_init__(self) -> None:
        if self.view_range < 0:
            raise ConfigurationError("view_range must be >= 0")


@dataclass(frozen=True)
class Settings:
    generator: GeneratorSettings = field(default_factory=GeneratorSettings)
    fov: FovSettings = field(default_factory=FovSettings)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Settings":
        fov = raw.get("fov", {})
        return cls(
            generator=GeneratorSettings.from_dict(raw.get("generator", {})),
            fov=FovSettings(
                view_range=int(fov.get("view_range", 8)),
                global_vision=bool(fov.get("global_vision", False)),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generator": self.generator.to_dict(),
            "fov": {"view_range": self.fov.view_range, "global_vision": self.fov.global_vision},
        }

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Default settings (user file or bundled) with DC_* environment overrides applied."""
        return apply_env(load_settings(), environ)


def _as_range(value: Sequence[int]) -> Range:
    values = tuple(int(v) for v in value)
    if len(values) != 2:
        raise ConfigurationError(f"Expected a (min, max) pair, got {value!r}")
    return values  # type: ignore[return-value]


# ---------------------------
# Schema validation
# ---------------------------

def _extend_with_default(validator_class):
    """Extend a jsonschema validator so missing properties receive their schema defaults."""

    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        if isinstance(instance, dict):
            for prop, subschema in properties.items():
                if "default" in subschema and prop not in instance:
                    instance[prop] = deepcopy(subschema["default"])
        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultingValidator = _extend_with_default(Draft202012Validator)


def load_schema() -> Dict[str, Any]:
    text = resources.files(_DATA_PKG).joinpath(SCHEMA_FILE).read_text(encoding="utf-8")
    return json.loads(text)


def _format_schema_errors(source: str, errors: Sequence[js_exceptions.ValidationError]) -> str:
    lines = [f"Schema validation failed for {source}:"]
    for err in errors:
        where = ".".join(str(p) for p in err.absolute_path) or "root"
        lines.append(f" - At {where}: {err.message}")
    return "\n".join(lines)


def validate_raw(data: Any, source: str = "<settings>") -> Dict[str, Any]:
    """Validate a raw settings mapping against the bundled schema, filling defaults in place."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings in {source} must be a mapping, got {type(data).__name__}")
    validator = DefaultingValidator(load_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        raise ConfigurationError(_format_schema_errors(source, errors))
    return data


# ---------------------------
# Loading
# ---------------------------

def user_settings_path() -> Path:
    return Path(user_config_dir(appname=APP_NAME)) / SETTINGS_FILE


def _read_text(path: Path, source: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {source}: {e}") from e


def _read_yaml(text: str, source: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML in {source}: {e}") from e


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from YAML.

    Resolution order: explicit ``path``; otherwise the user config file when it
    exists; otherwise the bundled defaults in ``dungeon_crawler/data``.
    """
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise ConfigurationError(f"Config file not found: {p}")
        source = str(p)
        text = _read_text(p, source)
    else:
        user_path = user_settings_path()
        if user_path.exists():
            source = str(user_path)
            text = _read_text(user_path, source)
        else:
            source = f"{_DATA_PKG}/{SETTINGS_FILE}"
            text = resources.files(_DATA_PKG).joinpath(SETTINGS_FILE).read_text(encoding="utf-8")

    raw = validate_raw(_read_yaml(text, source), source)
    settings = Settings.from_dict(raw)
    logger.info("Settings loaded from %s", source)
    return settings


_ENV_INT_FIELDS = {
    "DC_MAP_WIDTH": "width",
    "DC_MAP_HEIGHT": "height",
    "DC_ROOM_COUNT": "room_count",
    "DC_DEPTH": "depth",
    "DC_VIEW_RANGE": "view_range",
}


def parse_seed(text: str) -> Union[int, str]:
    """Seed given as text: decimal integers become ints, anything else stays a string."""
    try:
        return int(text)
    except ValueError:
        return text


def _env_int(environ: Mapping[str, str], key: str) -> Optional[int]:
    value = environ.get(key)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def apply_env(settings: Settings, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Return a copy of ``settings`` with DC_* environment variables applied."""
    env = os.environ if environ is None else environ
    values = {name: _env_int(env, key) for key, name in _ENV_INT_FIELDS.items()}

    gen = settings.generator
    size = Size(
        values["width"] if values["width"] is not None else gen.map_size.width,
        values["height"] if values["height"] is not None else gen.map_size.height,
    )
    gen = replace(gen, map_size=size)
    if values["room_count"] is not None:
        gen = replace(gen, room_count=values["room_count"])
    if values["depth"] is not None:
        gen = replace(gen, depth=values["depth"])
    seed = env.get("DC_SEED")
    if seed:
        gen = replace(gen, seed=parse_seed(seed))

    fov = settings.fov
    if values["view_range"] is not None:
        fov = replace(fov, view_range=values["view_range"])

    applied = sorted(key for key in list(_ENV_INT_FIELDS) + ["DC_SEED"] if env.get(key))
    if applied:
        logger.debug("Applied environment overrides: %s", ", ".join(applied))
    return Settings(generator=gen, fov=fov)
