"""
Configuration management for OCRGuard.

- **app_configuration.py**: Loads ``config/app_config.yml`` under a file lock
  and exposes typed accessors for banned words, batching, channel filters and
  moderation behaviour. A module-level ``app_config`` instance is shared.

- **ocr_settings.py**: Accessors for the ``ocr`` section, including the
  remote vision backend and its API key from the environment.
"""
