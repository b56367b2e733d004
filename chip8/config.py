"""Front-end configuration: display scale, cycle pacing, seed and key map."""

from dataclasses import dataclass, field
from typing import Dict, Optional
import json
import logging

from .errors import ConfigError
from .keypad import DEFAULT_KEY_MAP, KEY_COUNT

logger = logging.getLogger(__name__)


@dataclass
class EmulatorConfig:
    scale: int = 10               # screen pixels per CHIP-8 pixel
    cycle_delay_ms: int = 2       # pause between cycles when running
    seed: Optional[int] = None    # RND seed, None = from the clock
    key_map: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.scale, int) or not isinstance(self.cycle_delay_ms, int):
            raise ConfigError("scale and cycle_delay_ms must be integers")
        if self.seed is not None and (not isinstance(self.seed, int) or isinstance(self.seed, bool)):
            raise ConfigError(f"seed must be an integer or null, got {self.seed!r}")
        if not isinstance(self.key_map, dict):
            raise ConfigError(f"key_map must be a mapping, got {type(self.key_map).__name__}")
        if self.scale < 1:
            raise ConfigError(f"scale must be at least 1, got {self.scale}")
        if self.cycle_delay_ms < 0:
            raise ConfigError(f"cycle_delay_ms must not be negative, got {self.cycle_delay_ms}")
        for name, key in self.key_map.items():
            if not isinstance(key, int) or not 0 <= key < KEY_COUNT:
                raise ConfigError(f"key {name!r} maps to {key!r}, outside 0x0-0xF")

    def to_dict(self) -> dict:
        return {
            "scale": self.scale,
            "cycle_delay_ms": self.cycle_delay_ms,
            "seed": self.seed,
            "key_map": {name: f"0x{key:X}" for name, key in self.key_map.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'EmulatorConfig':
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a JSON object, got {type(data).__name__}")
        try:
            key_map = data.get("key_map")
            if key_map is None:
                key_map = dict(DEFAULT_KEY_MAP)
            elif not isinstance(key_map, dict):
                raise ConfigError("key_map must be an object of key name to index")
            else:
                key_map = {name.upper(): int(key, 16) if isinstance(key, str) else int(key)
                           for name, key in key_map.items()}
            return cls(
                scale=int(data.get("scale", 10)),
                cycle_delay_ms=int(data.get("cycle_delay_ms", 2)),
                seed=data.get("seed"),
                key_map=key_map,
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'EmulatorConfig':
        """Load configuration from JSON file."""
        with open(path, 'r') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"{path}: {e}") from e
        logger.debug("Loaded configuration from %s", path)
        return cls.from_dict(data)
