from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
import json
from pathlib import Path
import tempfile
from typing import Any

CONFIG_DIR = Path.home() / ".pinanchor"
CONFIG_PATH = CONFIG_DIR / "config.json"

PREFERRED_ATTRIBUTES = (
    "data-testid",
    "data-test-id",
    "data-test",
    "data-cy",
    "data-id",
    "data-component",
    "data-automation-id",
    "name",
    "aria-label",
    "aria-labelledby",
    "role",
    "type",
    "placeholder",
    "title",
    "alt",
)


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunable limits of the selector engine.

    The defaults reproduce the reference behaviour; the caps are what keeps a
    single call bounded on very large pages, so lowering them is safe and
    raising them trades latency for recall.
    """

    candidate_limit: int = 100
    max_path_depth: int = 10
    class_combination_limit: int = 3
    short_selector_attribute_limit: int = 5
    path_part_attribute_limit: int = 3
    match_threshold: int = 50
    id_similarity_threshold: float = 0.7
    attribute_similarity_threshold: float = 0.7
    text_similarity_threshold: float = 0.8
    text_compare_length: int = 100
    max_selector_length: int = 1000
    preferred_attributes: tuple[str, ...] = PREFERRED_ATTRIBUTES


DEFAULT_CONFIG = EngineConfig()


def _coerce(name: str, raw: Any, default: Any) -> Any:
    if isinstance(default, tuple):
        if not isinstance(raw, (list, tuple)):
            raise TypeError(f"{name} must be a list")
        values = tuple(str(item).strip() for item in raw if str(item).strip())
        if not values:
            raise ValueError(f"{name} cannot be empty")
        return values
    if isinstance(default, int):
        value = int(raw)
        if value <= 0:
            raise ValueError(f"{name} must be positive")
        return value
    if isinstance(default, float):
        value = float(raw)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be within [0, 1]")
        return value
    return raw


def config_from_mapping(payload: dict[str, Any], base: EngineConfig | None = None) -> EngineConfig:
    config = base or DEFAULT_CONFIG
    updates: dict[str, Any] = {}
    for item in fields(EngineConfig):
        if item.name not in payload:
            continue
        default = getattr(config, item.name)
        try:
            updates[item.name] = _coerce(item.name, payload[item.name], default)
        except (TypeError, ValueError):
            continue
    return replace(config, **updates) if updates else config


def load_engine_config(config_path: Path | None = None) -> EngineConfig:
    path = config_path or CONFIG_PATH
    if not path.exists() or not path.is_file():
        return DEFAULT_CONFIG

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, TypeError):
        return DEFAULT_CONFIG

    if not isinstance(payload, dict):
        return DEFAULT_CONFIG

    return config_from_mapping(payload)


def save_engine_config(config: EngineConfig, config_path: Path | None = None) -> tuple[bool, str | None]:
    path = config_path or CONFIG_PATH

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return False, f"Could not create config folder: {exc}"

    data = asdict(config)
    data["preferred_attributes"] = list(config.preferred_attributes)
    payload = json.dumps(data, ensure_ascii=True, indent=2, sort_keys=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(payload)
            handle.flush()
            temp_path = Path(handle.name)

        if temp_path is None:
            return False, "Could not create temporary config file."
        temp_path.replace(path)
    except OSError as exc:
        if temp_path and temp_path.exists():
            temp_path.unlink(missing_ok=True)
        return False, f"Could not write engine config: {exc}"

    return True, None
