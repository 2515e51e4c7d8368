"""
Core data types shared across OCRGuard.

- **discord_datatypes.py**: ``UserID`` and ``ChannelID`` snowflake wrappers.
- **image_datatypes.py**: ``ImageURL`` with query-stripped normalization.
- **scan_datatypes.py**: OCR output, banned word matching and scan verdicts.
- **action_datatypes.py**: Violation hand-off and moderation action reports.
"""
