"""
Utility functions and helpers for OCRGuard.

This package provides reusable utilities:

- **logger.py**: Centralized logging configuration with colored console output
  and rotating file handlers. Suppresses noise from verbose libraries (openai,
  httpx, Pillow, Discord internals). Uses prompt_toolkit for non-blocking
  console I/O.

- **discord_utils.py**: Stateless Discord helpers: member resolution, timeout
  permission checks, safe message deletion and duration parsing.

- **image_utils.py**: Image download and decoding via requests and Pillow,
  with HEIF support through pillow_heif.

- **media_extractor.py**: Finds image URLs in a message from attachments,
  linked files with image extensions, and links whose HEAD response is an image.
"""
