"""
Discord Cogs for OCRGuard.

- **message_listener.py**: Filters incoming guild messages by channel and
  author and queues them with the batch manager.
"""
