# radar/scene.py

from dataclasses import dataclass, field
import numpy as np
from typing import List, Dict, Tuple

from radar.errors import InvalidConfig


SPEED_OF_LIGHT = 3e8          # m/s, single literal used by every stage
VELOCITY_SEARCH_BOUNDS = (-50.0, 50.0)   # m/s, ambiguity-line search interval


@dataclass(frozen=True)
class RadarConfig:
    carrier_frequency: float = 24e9                  # Hz
    bandwidth: float = 1e9                           # Hz
    chirp_durations: Tuple[float, ...] = (40e-6, 60e-6)  # s, one entry per sawtooth ramp
    sampling_frequency: float = 20e6                 # Hz
    sampling_duration: float = 20e-6                 # s

    def __post_init__(self):
        # lists from callers are frozen into a tuple so the config stays hashable
        object.__setattr__(
            self, "chirp_durations", tuple(float(d) for d in self.chirp_durations)
        )

    @property
    def total_chirp_duration(self) -> float:
        return float(sum(self.chirp_durations))

    @property
    def chirp_starts(self) -> np.ndarray:
        """Start time of every chirp segment within one sequence."""
        durations = np.asarray(self.chirp_durations, dtype=float)
        return np.concatenate(([0.0], np.cumsum(durations)[:-1]))

    @property
    def sample_count(self) -> int:
        return int(round(self.sampling_duration * self.sampling_frequency))

    @property
    def frequency_resolution(self) -> float:
        return self.sampling_frequency / self.sample_count


@dataclass(frozen=True)
class Target:
    name: str                 # identity, keys the derived beat series
    range: float              # meters
    velocity: float           # m/s, positive = receding
    enabled: bool = True
    color: str = "green"      # display only


@dataclass(frozen=True)
class Scene:
    config: RadarConfig = field(default_factory=RadarConfig)
    targets: Tuple[Target, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "targets", tuple(self.targets))

    @property
    def enabled_targets(self) -> List[Target]:
        return [t for t in self.targets if t.enabled]


def default_targets() -> List[Target]:
    return [
        Target(name="Object 1", range=10.0, velocity=0.0, enabled=True, color="green"),
        Target(name="Object 2", range=30.0, velocity=20.0, enabled=False, color="blue"),
        Target(name="Object 3", range=40.0, velocity=-10.0, enabled=False, color="red"),
    ]


def default_scene() -> Scene:
    return Scene(config=RadarConfig(), targets=tuple(default_targets()))


def validate_config(config: RadarConfig) -> None:
    """
    Reject configurations that would make any stage produce NaN/Infinity.

    Raises:
        InvalidConfig
    """
    if len(config.chirp_durations) == 0:
        raise InvalidConfig("chirp_durations must not be empty")
    for d in config.chirp_durations:
        if not np.isfinite(d) or d <= 0:
            raise InvalidConfig(f"chirp durations must be positive, got {d!r}")

    for name in ("carrier_frequency", "bandwidth", "sampling_frequency", "sampling_duration"):
        value = getattr(config, name)
        if not np.isfinite(value) or value <= 0:
            raise InvalidConfig(f"{name} must be positive, got {value!r}")

    if config.sample_count < 2:
        raise InvalidConfig(
            f"sampling_duration * sampling_frequency must round to at least 2 samples "
            f"(got {config.sample_count})"
        )


def validate_scene(scene: Scene) -> None:
    """
    Validate configuration and targets before any computation runs.

    Velocities at or beyond the speed of light are rejected here so the
    Doppler term never meets its singularity.
    """
    validate_config(scene.config)

    seen = set()
    for tgt in scene.targets:
        if tgt.name in seen:
            raise InvalidConfig(f"duplicate target name: {tgt.name!r}")
        seen.add(tgt.name)

        if not np.isfinite(tgt.range) or tgt.range < 0:
            raise InvalidConfig(f"{tgt.name}: range must be >= 0, got {tgt.range!r}")
        if not np.isfinite(tgt.velocity) or abs(tgt.velocity) >= SPEED_OF_LIGHT:
            raise InvalidConfig(
                f"{tgt.name}: |velocity| must be below {SPEED_OF_LIGHT:g} m/s, got {tgt.velocity!r}"
            )


def validate_velocity_bounds(velocity_bounds) -> Tuple[float, float]:
    """
    Check an ambiguity-line velocity search interval.

    Returns:
        (v_min, v_max) as floats

    Raises:
        InvalidConfig: v_min >= v_max, or either bound at or beyond c
    """
    v_min, v_max = (float(v) for v in velocity_bounds)
    if not (np.isfinite(v_min) and np.isfinite(v_max)) or not v_min < v_max:
        raise InvalidConfig(f"velocity bounds must satisfy v_min < v_max, got {velocity_bounds!r}")
    if max(abs(v_min), abs(v_max)) >= SPEED_OF_LIGHT:
        raise InvalidConfig(
            f"velocity bounds must stay below {SPEED_OF_LIGHT:g} m/s in magnitude, got {velocity_bounds!r}"
        )
    return v_min, v_max


def generate_scene(config: Dict) -> Scene:
    """
    Builds a validated scene from a complete configuration dictionary.

    This function acts as the system boundary between configuration input
    and simulation execution. Missing keys are an error here; use
    radar.state.merge_with_defaults first when reading partial input.
    """
    radar_cfg = config["radar"]
    tgt_cfgs = config["targets"]

    radar_config = RadarConfig(
        carrier_frequency=float(radar_cfg["carrier_frequency"]),
        bandwidth=float(radar_cfg["bandwidth"]),
        chirp_durations=tuple(float(d) for d in radar_cfg["chirp_durations"]),
        sampling_frequency=float(radar_cfg["sampling_frequency"]),
        sampling_duration=float(radar_cfg["sampling_duration"]),
    )

    targets = []
    for i, tgt in enumerate(tgt_cfgs):
        targets.append(Target(
            name=str(tgt.get("name", f"Object {i + 1}")),
            range=float(tgt["range"]),
            velocity=float(tgt["velocity"]),
            enabled=bool(tgt.get("enabled", True)),
            color=str(tgt.get("color", "green")),
        ))

    scene = Scene(config=radar_config, targets=tuple(targets))
    validate_scene(scene)

    return scene


def scene_to_dict(scene: Scene) -> Dict:
    """Inverse of generate_scene."""
    cfg = scene.config
    return {
        "radar": {
            "carrier_frequency": cfg.carrier_frequency,
            "bandwidth": cfg.bandwidth,
            "chirp_durations": list(cfg.chirp_durations),
            "sampling_frequency": cfg.sampling_frequency,
            "sampling_duration": cfg.sampling_duration,
        },
        "targets": [
            {
                "name": t.name,
                "range": t.range,
                "velocity": t.velocity,
                "enabled": t.enabled,
                "color": t.color,
            }
            for t in scene.targets
        ],
    }
