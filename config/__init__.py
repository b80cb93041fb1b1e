# RibForge Configuration Module
from .ribforge_config import (
    RibForgeConfig, config, DefaultWing, SheetDefaults,
    GeneratorTuning, ExportStyle
)

__all__ = [
    "RibForgeConfig", "config", "DefaultWing", "SheetDefaults",
    "GeneratorTuning", "ExportStyle"
]
