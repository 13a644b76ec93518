import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("memview")

CONFIG_ENV_VAR = "MEMVIEW_CONFIG"

# Physics defaults. Every one of them can be overridden in the "physics"
# section of the config file, under the key given in PHYSICS_KEYS.
DEFAULT_INITIAL_MASS = 1.0
DEFAULT_INITIAL_DAMPING = 0.95  # 0 < damping <= 1. 1 means no damping at all.
DEFAULT_INITIAL_CHARGE = 1.0
DEFAULT_COULOMB_CONSTANT = 20000.0
DEFAULT_SPRING_CONSTANT = 20.0  # N.px^-1
DEFAULT_NOMINAL_EDGE_LENGTH = 50.0  # px
DEFAULT_GRAVITY_CONSTANT = 10.0
DEFAULT_MIN_KINETIC_ENERGY = 30.0  # nodes below this energy do not move
DEFAULT_MAX_SPEED = 50.0
DEFAULT_MIN_DISTANCE = 1.0  # px, floor used for the repulsion denominator
DEFAULT_TICKLE_CHARGE = 4.0
DEFAULT_DECAY_DURATION = 2.0  # s
DEFAULT_SPAWN_RADIUS = 100.0
DEFAULT_NEIGHBOUR_SPAWN_RADIUS = 20.0

# View defaults
DEFAULT_MAX_TICK_RATE = 1.0 / 60.0  # min physics rate 60fps
DEFAULT_TIME_SCALE = 1.0
DEFAULT_TICKLE_THRESHOLD = 0.5

# config key -> PhysicsConfig attribute
PHYSICS_KEYS = {
    'mass': 'mass',
    'damping': 'damping',
    'repulsion': 'coulomb_constant',
    'maxspeed': 'max_speed',
    'charge': 'charge',
    'spring': 'spring_constant',
    'edge_length': 'nominal_edge_length',
    'gravity': 'gravity_constant',
    'min_energy': 'min_kinetic_energy',
    'min_distance': 'min_distance',
    'tickle_charge': 'tickle_charge',
    'decay_duration': 'decay_duration',
    'spawn_radius': 'spawn_radius',
    'neighbour_spawn_radius': 'neighbour_spawn_radius',
    'seed': 'seed',
}

VIEW_KEYS = {
    'max_tick_rate': 'max_tick_rate',
    'time_scale': 'time_scale',
    'tickle_threshold': 'tickle_threshold',
    'activate_on_hover': 'activate_on_hover',
}


class PhysicsConfig:
    """Tunable constants of the force simulation.

    One instance is handed to a Graph, which shares it with every Node it
    creates, so two graphs in the same process never see each other's
    settings.
    """

    def __init__(self, mass=DEFAULT_INITIAL_MASS, damping=DEFAULT_INITIAL_DAMPING,
                 coulomb_constant=DEFAULT_COULOMB_CONSTANT, max_speed=DEFAULT_MAX_SPEED,
                 charge=DEFAULT_INITIAL_CHARGE, spring_constant=DEFAULT_SPRING_CONSTANT,
                 nominal_edge_length=DEFAULT_NOMINAL_EDGE_LENGTH,
                 gravity_constant=DEFAULT_GRAVITY_CONSTANT,
                 min_kinetic_energy=DEFAULT_MIN_KINETIC_ENERGY,
                 min_distance=DEFAULT_MIN_DISTANCE, tickle_charge=DEFAULT_TICKLE_CHARGE,
                 decay_duration=DEFAULT_DECAY_DURATION, spawn_radius=DEFAULT_SPAWN_RADIUS,
                 neighbour_spawn_radius=DEFAULT_NEIGHBOUR_SPAWN_RADIUS, seed=None):
        self.mass = mass
        self.damping = damping
        self.coulomb_constant = coulomb_constant
        self.max_speed = max_speed
        self.charge = charge
        self.spring_constant = spring_constant
        self.nominal_edge_length = nominal_edge_length
        self.gravity_constant = gravity_constant
        self.min_kinetic_energy = min_kinetic_energy
        self.min_distance = min_distance
        self.tickle_charge = tickle_charge
        self.decay_duration = decay_duration
        self.spawn_radius = spawn_radius
        self.neighbour_spawn_radius = neighbour_spawn_radius
        self.seed = seed
        self.validate()

    def validate(self):
        if self.mass <= 0:
            raise ValueError(f"Physics 'mass' must be positive (got {self.mass}).")
        if not 0 < self.damping <= 1:
            raise ValueError(f"Physics 'damping' must be in ]0, 1] (got {self.damping}).")
        if self.max_speed <= 0:
            raise ValueError(f"Physics 'maxspeed' must be positive (got {self.max_speed}).")
        if self.min_distance <= 0:
            raise ValueError(f"Physics 'min_distance' must be positive (got {self.min_distance}).")
        if self.min_kinetic_energy < 0:
            raise ValueError(f"Physics 'min_energy' cannot be negative (got {self.min_kinetic_energy}).")
        if self.decay_duration <= 0:
            raise ValueError(f"Physics 'decay_duration' must be positive (got {self.decay_duration}).")

    @classmethod
    def from_dict(cls, physics: Optional[Dict[str, Any]]):
        if physics is None:
            return cls()  # uses defaults, as listed above

        kwargs = _read_section(physics, "physics", PHYSICS_KEYS, int_keys=("seed",))
        logger.info("Setting custom physics parameters from config file.")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in PHYSICS_KEYS.items()}


class ViewConfig:
    """Frame-loop settings of the MemoryView controller."""

    def __init__(self, max_tick_rate=DEFAULT_MAX_TICK_RATE, time_scale=DEFAULT_TIME_SCALE,
                 tickle_threshold=DEFAULT_TICKLE_THRESHOLD, activate_on_hover=False):
        if max_tick_rate <= 0:
            raise ValueError(f"View 'max_tick_rate' must be positive (got {max_tick_rate}).")
        if time_scale < 0:
            raise ValueError(f"View 'time_scale' cannot be negative (got {time_scale}).")
        self.max_tick_rate = max_tick_rate
        self.time_scale = time_scale
        self.tickle_threshold = tickle_threshold
        self.activate_on_hover = activate_on_hover

    @classmethod
    def from_dict(cls, view: Optional[Dict[str, Any]]):
        if view is None:
            return cls()
        return cls(**_read_section(view, "view", VIEW_KEYS, bool_keys=("activate_on_hover",)))


def _read_section(section, name, keys, int_keys=(), bool_keys=()):
    """
    Maps the keys of a config section to constructor arguments.

    Null values keep the default. Every other value must be a number, an
    integer for `int_keys` or a boolean for `bool_keys`.

    Raises:
        ValueError: the section is not an object or a value has the wrong type.
    """
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a JSON object.")

    unknown = set(section) - set(keys)
    if unknown:
        logger.warning(f"Ignoring unknown {name} parameters: {', '.join(sorted(unknown))}")

    kwargs = {}
    for key, value in section.items():
        if key not in keys or value is None:
            continue
        if key in bool_keys:
            if not isinstance(value, bool):
                raise ValueError(f"{name.capitalize()} '{key}' must be true or false (got {value!r}).")
        elif key in int_keys:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name.capitalize()} '{key}' must be an integer (got {value!r}).")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name.capitalize()} '{key}' must be a number (got {value!r}).")
        kwargs[keys[key]] = value
    return kwargs


class Config:
    def __init__(self, physics=None, view=None, source=None):
        self.physics = physics or PhysicsConfig()
        self.view = view or ViewConfig()
        self.source = source

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source=None):
        if not isinstance(data, dict):
            raise ValueError("Config root must be a JSON object.")
        return cls(PhysicsConfig.from_dict(data.get("physics")),
                   ViewConfig.from_dict(data.get("view")),
                   source=source)


def default_config_path() -> Optional[Path]:
    value = os.environ.get(CONFIG_ENV_VAR)
    return Path(value) if value else None


def load_config(path=None) -> Config:
    """
    Loads the JSON config file.

    Args:
        path (str/Path): Path of the config file. Falls back to the
            MEMVIEW_CONFIG environment variable, then to the defaults.

    Raises:
        FileNotFoundError: the given file does not exist.
        ValueError: the file is not valid JSON or holds invalid values.
    """
    path = Path(path) if path else default_config_path()
    if path is None:
        logger.debug("No config file given, using defaults.")
        return Config()

    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    config = Config.from_dict(data, source=path)
    logger.info(f"Loaded config from {path}")
    return config
