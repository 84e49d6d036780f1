"""Terminal mod manager: apply, remove and check game mods, and keep mod presets."""

__version__ = "1.0.0"