"""
Utility helpers for chatmod.

- **logger.py**: Centralized logging configuration with colored console output
  printed through prompt_toolkit, rotating per-session log files, and a global
  exception hook.
"""
