"""
Preset configurations for the Vibecoin arena.
Named bundles of battle tuning values (ELO K-factor, matchmaking range,
rewards and expiries).
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Union

from .engine.battles import BattleConfig


@dataclass
class Preset:
    """A named set of overrides on top of the default BattleConfig."""
    name: str
    description: str
    config_overrides: dict = field(default_factory=dict)


# Built-in presets
PRESETS = {
    "standard": Preset(
        name="Standard",
        description="Default ratings and rewards",
    ),

    "casual": Preset(
        name="Casual",
        description="Slower rating movement, wide matchmaking",
        config_overrides={"k_factor": 16, "matchmaking_range": 400},
    ),

    "competitive": Preset(
        name="Competitive",
        description="Fast rating movement, tight matchmaking",
        config_overrides={"k_factor": 40, "matchmaking_range": 100, "win_points": 30},
    ),

    "blitz": Preset(
        name="Blitz",
        description="Short-lived battles and challenges",
        config_overrides={"battle_expiry_minutes": 5, "challenge_expiry_hours": 1,
                          "history_limit": 20, "event_limit": 80},
    ),
}


def get_preset(name: str) -> Optional[Preset]:
    """Get a preset by name."""
    return PRESETS.get(name.lower().replace(" ", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())


def get_preset_info(name: str) -> Optional[dict]:
    """Get info about a preset."""
    preset = get_preset(name)
    if preset:
        return {
            "name": preset.name,
            "description": preset.description,
            "overrides": dict(preset.config_overrides),
        }
    return None


def build_config(preset: Union[str, Preset] = "standard", **overrides) -> BattleConfig:
    """
    Build a BattleConfig from a preset plus keyword overrides.

    Unknown override keys are ignored.
    """
    if isinstance(preset, str):
        p = get_preset(preset)
        if p is None:
            raise ValueError(f"Unknown preset: {preset}. Available: {list_presets()}")
    else:
        p = preset

    config = BattleConfig()
    known = {f.name for f in fields(BattleConfig)}
    for key, value in {**p.config_overrides, **overrides}.items():
        if key in known:
            setattr(config, key, value)
    return config
