"""Synthetic test data generation for subpixreg."""

from .synthetic import (
    SyntheticConfig,
    create_ramp_image,
    create_shifted_stack,
    create_spot_image,
    generate_synthetic_stack,
    get_preset_config,
    random_shifts,
)

__all__ = [
    "SyntheticConfig",
    "get_preset_config",
    "create_ramp_image",
    "create_spot_image",
    "create_shifted_stack",
    "random_shifts",
    "generate_synthetic_stack",
]
