"""
Configuration management for chatmod.

- **app_configuration.py**: File-locked YAML loader for ``config/app_config.yml``
  exposing the server connection, declared channel settings, moderation
  tuning and the database path.
- **bot_config.py**: Validated connection settings (nickname, server, port,
  channels, TLS flag, auth token).
- **moderation_settings.py**: Timeout length and localized sanction reasons.
"""
