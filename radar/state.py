# radar/state.py
"""
Persisted scene state.

The on-disk document is YAML with an explicit schema version:

    schema_version: 1
    config:
      carrier_frequency: 24.0e9
      ...
    targets:
      - {name: Object 1, range: 10.0, velocity: 0.0, enabled: true, color: green}

Loading always goes through merge_with_defaults, so a document with
missing fields still produces a complete scene and unknown fields are
dropped (and logged) instead of failing.

Version 0 is the legacy layout where each target was a packed list
[range, velocity, color, enabled] under an "objects" key.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from radar.errors import StateError
from radar.scene import Scene, default_scene, generate_scene, scene_to_dict


logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_CONFIG_FIELDS = (
    "carrier_frequency",
    "bandwidth",
    "chirp_durations",
    "sampling_frequency",
    "sampling_duration",
)
_TARGET_FIELDS = ("name", "range", "velocity", "enabled", "color")


def default_state() -> Dict[str, Any]:
    scene_dict = scene_to_dict(default_scene())
    return {
        "schema_version": SCHEMA_VERSION,
        "config": scene_dict["radar"],
        "targets": scene_dict["targets"],
    }


def _legacy_color(value: Any) -> Any:
    """Legacy colours may be [r, g, b(, a)] byte lists; store them as #rrggbb."""
    if isinstance(value, (list, tuple)):
        if len(value) < 3:
            raise StateError(f"legacy colour needs at least 3 components, got {value!r}")
        try:
            rgb = [int(c) for c in value[:3]]
        except (TypeError, ValueError) as exc:
            raise StateError(f"legacy colour components must be integers, got {value!r}") from exc
        if any(c < 0 or c > 255 for c in rgb):
            raise StateError(f"legacy colour components must lie in 0..255, got {value!r}")
        return "#%02x%02x%02x" % tuple(rgb)
    return value


def _migrate_v0(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Unpack legacy [range, velocity, color, enabled] target tuples."""
    migrated = {k: v for k, v in raw.items() if k != "objects"}
    targets: List[Dict[str, Any]] = []
    for i, obj in enumerate(raw.get("objects") or []):
        if not isinstance(obj, (list, tuple)) or len(obj) < 2:
            raise StateError(f"legacy object #{i + 1} is not a [range, velocity, ...] list")
        entry: Dict[str, Any] = {"name": f"Object {i + 1}", "range": obj[0], "velocity": obj[1]}
        if len(obj) > 2:
            entry["color"] = _legacy_color(obj[2])
        if len(obj) > 3:
            entry["enabled"] = obj[3]
        targets.append(entry)
    if "objects" in raw:
        migrated["targets"] = targets
    migrated["schema_version"] = 1
    logger.info("migrated state from schema 0 to 1 (%d targets)", len(targets))
    return migrated


def _merge_mapping(defaults: Dict[str, Any], raw: Dict[str, Any], fields, where: str) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in raw.items():
        if key not in fields:
            logger.warning("ignoring unknown %s field %r", where, key)
            continue
        if value is None:
            continue
        merged[key] = value
    return merged


def merge_with_defaults(raw: Dict[str, Any] | None) -> Dict[str, Any]:
    """
    Complete a (possibly partial, possibly legacy) state document.

    Returns:
        a dict in the current schema with every field present

    Raises:
        StateError: unreadable shape or a schema newer than this code
    """
    if raw is None:
        return default_state()
    if not isinstance(raw, dict):
        raise StateError(f"state document must be a mapping, got {type(raw).__name__}")

    version = raw.get("schema_version", 0 if "objects" in raw else SCHEMA_VERSION)
    if not isinstance(version, int) or version < 0:
        raise StateError(f"invalid schema_version: {version!r}")
    if version > SCHEMA_VERSION:
        raise StateError(
            f"state schema {version} is newer than supported schema {SCHEMA_VERSION}"
        )
    if version == 0:
        raw = _migrate_v0(raw)

    defaults = default_state()

    for key in raw:
        if key not in ("schema_version", "config", "targets"):
            logger.warning("ignoring unknown state field %r", key)

    config_raw = raw.get("config") or {}
    if not isinstance(config_raw, dict):
        raise StateError("state 'config' must be a mapping")
    config = _merge_mapping(defaults["config"], config_raw, _CONFIG_FIELDS, "config")

    if "targets" in raw and raw["targets"] is not None:
        targets_raw = raw["targets"]
        if not isinstance(targets_raw, list):
            raise StateError("state 'targets' must be a list")
        targets = []
        for i, tgt in enumerate(targets_raw):
            if not isinstance(tgt, dict):
                raise StateError(f"target #{i + 1} must be a mapping")
            base = {
                "name": f"Object {i + 1}",
                "range": 0.0,
                "velocity": 0.0,
                "enabled": True,
                "color": "green",
            }
            targets.append(_merge_mapping(base, tgt, _TARGET_FIELDS, "target"))
    else:
        targets = defaults["targets"]

    return {"schema_version": SCHEMA_VERSION, "config": config, "targets": targets}


def scene_from_state(raw: Dict[str, Any] | None) -> Scene:
    state = merge_with_defaults(raw)
    return generate_scene({"radar": state["config"], "targets": state["targets"]})


def load_state(path) -> Scene:
    """
    Load a scene from a YAML state file.

    A missing or empty file gives the default scene.
    """
    path = Path(path)
    if not path.exists():
        logger.info("no state at %s, using defaults", path)
        return default_scene()

    with open(path, "r") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise StateError(f"cannot parse state file {path}: {exc}") from exc

    return scene_from_state(raw)


def save_state(scene: Scene, path) -> None:
    scene_dict = scene_to_dict(scene)
    doc = {
        "schema_version": SCHEMA_VERSION,
        "config": scene_dict["radar"],
        "targets": scene_dict["targets"],
    }
    path = Path(path)
    with open(path, "w") as f:
        yaml.safe_dump(doc, f, sort_keys=False)
