from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml


@dataclass(frozen=True)
class FilterConfig:
    """Noise parameters of the histogram filter.

    Prefer overriding via a scenario YAML rather than editing code.
    """

    blurring: float = field(
        default=0.12,
        metadata={"help": "Fraction of probability spilled to neighbours on every move."},
    )
    p_hit: float = field(
        default=3.0,
        metadata={"help": "Relative likelihood of a sensed color matching the cell."},
    )
    p_miss: float = field(
        default=1.0,
        metadata={"help": "Relative likelihood of a sensed color not matching the cell."},
    )

    def __post_init__(self):
        if not 0.0 <= self.blurring <= 1.0:
            raise ValueError(f"blurring must be within [0, 1], got {self.blurring}")
        if self.p_hit < 0 or self.p_miss < 0:
            raise ValueError(f"p_hit and p_miss must be non-negative, got {self.p_hit}, {self.p_miss}")
        if self.p_hit == 0 and self.p_miss == 0:
            raise ValueError("p_hit and p_miss cannot both be zero")


@dataclass(frozen=True)
class Step:
    """One scripted step of a localization run: either a move or a sense."""

    kind: str
    dy: int = 0
    dx: int = 0
    color: Optional[str] = None
    # per-step overrides of the FilterConfig values
    blurring: Optional[float] = None
    p_hit: Optional[float] = None
    p_miss: Optional[float] = None

    def __post_init__(self):
        if self.kind not in ("move", "sense"):
            raise ValueError(f"Unknown step kind {self.kind!r}, expected 'move' or 'sense'")
        if self.kind == "sense" and (not isinstance(self.color, str) or len(self.color) != 1):
            raise ValueError(f"A sense step needs a single character color, got {self.color!r}")

    @property
    def action(self) -> Tuple[int, int]:
        return self.dy, self.dx


@dataclass(frozen=True)
class Scenario:
    map_path: Path
    filter: FilterConfig = field(default_factory=FilterConfig)
    steps: Tuple[Step, ...] = ()


_STEP_KEYS = {
    "move": {"move", "blurring"},
    "sense": {"sense", "p_hit", "p_miss"},
}


def _as_displacement(value):
    # bool is an int subclass, and floats would silently truncate
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"move displacements must be integers, got {value!r}")
    return value


def _parse_step(raw) -> Step:
    if not isinstance(raw, dict):
        raise ValueError(f"Each step must be a mapping, got {raw!r}")

    kinds = [kind for kind in _STEP_KEYS if kind in raw]
    if len(kinds) != 1:
        raise ValueError(f"Step {raw!r} must be exactly one of a move or a sense")
    kind = kinds[0]

    unknown = set(raw) - _STEP_KEYS[kind]
    if unknown:
        raise ValueError(f"Unexpected key(s) {sorted(unknown)} in {kind} step {raw!r}")

    overrides = {k: raw[k] for k in ("blurring", "p_hit", "p_miss") if k in raw}
    if kind == "move":
        motion = raw["move"]
        if not isinstance(motion, (list, tuple)) or len(motion) != 2:
            raise ValueError(f"move must be a [dy, dx] pair, got {motion!r}")
        dy, dx = motion
        return Step(kind="move", dy=_as_displacement(dy), dx=_as_displacement(dx), **overrides)
    return Step(kind="sense", color=str(raw["sense"]), **overrides)


def _parse_filter(raw) -> FilterConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"filter must be a mapping, got {raw!r}")
    unknown = set(raw) - {f.name for f in fields(FilterConfig)}
    if unknown:
        raise ValueError(f"Unexpected filter key(s) {sorted(unknown)}")
    return FilterConfig(**raw)


def load_scenario(path: Union[str, Path]) -> Scenario:
    """Read a scenario YAML file.

    Example::

        map: maps/m1.txt
        filter:
          blurring: 0.12
          p_hit: 3.0
          p_miss: 1.0
        steps:
          - sense: r
          - move: [0, 1]
    """
    path = Path(path)
    with open(path, 'r') as f:
        config = yaml.safe_load(f)
        if config is None: config = {}

    if "map" not in config:
        raise ValueError(f"Scenario {path} does not name a map")

    map_path = Path(config["map"])
    if not map_path.is_absolute():
        map_path = path.parent / map_path

    filter_config = _parse_filter(config.get("filter") or {})
    steps = tuple(_parse_step(raw) for raw in config.get("steps") or [])
    return Scenario(map_path=map_path, filter=filter_config, steps=steps)
