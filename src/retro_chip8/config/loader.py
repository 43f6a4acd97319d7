import yaml
from typing import Dict, Any

from retro_chip8.common.errors import ConfigError
from .models import MachineConfig, DEFAULT_KEYMAP

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file '{path}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in '{path}': {e}") from e
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping.")

        video_scale = self._parse_int(data.get("video_scale", 10))
        cycle_delay_ms = self._parse_int(data.get("cycle_delay_ms", 2))
        if video_scale <= 0:
            raise ConfigError(f"video_scale must be positive: {video_scale}")
        if cycle_delay_ms < 0:
            raise ConfigError(f"cycle_delay_ms must not be negative: {cycle_delay_ms}")

        seed = data.get("seed")
        if seed is not None:
            seed = self._parse_int(seed)

        # Parse Keymap (指定されたキーのみ既定値を上書き)
        keymap = dict(DEFAULT_KEYMAP)
        for key_name, value in (data.get("keymap") or {}).items():
            chip8_key = self._parse_int(value)
            if not 0 <= chip8_key <= 0xF:
                raise ConfigError(f"Keymap entry '{key_name}' maps to invalid key {chip8_key}")
            keymap[str(key_name).upper()] = chip8_key

        return MachineConfig(
            video_scale=video_scale,
            cycle_delay_ms=cycle_delay_ms,
            seed=seed,
            rom_path=data.get("rom"),
            keymap=keymap,
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")
