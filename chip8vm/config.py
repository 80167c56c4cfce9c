"""Engine configuration."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from omegaconf import DictConfig, OmegaConf

from chip8vm.logging import LOG_LEVELS


@dataclass
class EngineConfig:
    """Settings for :class:`chip8vm.engine.Chip8`.

    Attributes:
        seed: Seed for the random-number opcode. None draws one from OS entropy
        trace: Log every executed opcode and sound timer edge; forces DEBUG output
        log_level: Minimum level printed by the engine logger
        use_colors: Colorize log levels when stdout is a terminal
        show_timestamps: Prefix log lines with the time since engine creation
    """
    seed: Optional[int] = None
    trace: bool = False
    log_level: str = "WARNING"
    use_colors: bool = True
    show_timestamps: bool = True


def make_config(overrides: Union[None, Mapping[str, Any], DictConfig] = None) -> DictConfig:
    """Build a validated engine config, merging ``overrides`` over the defaults."""
    cfg = OmegaConf.structured(EngineConfig)
    if overrides is not None:
        cfg = OmegaConf.merge(cfg, overrides)

    if cfg.log_level.upper() not in LOG_LEVELS:
        raise ValueError(
            f"Unsupported log_level '{cfg.log_level}'. "
            f"Supported levels: {list(LOG_LEVELS)}"
        )
    return cfg
