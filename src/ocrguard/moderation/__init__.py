"""
Moderation flow for OCRGuard.

- **message_batch_manager.py**: Per-author debounced batching. Each new message
  restarts the author's quiet-period timer; when it fires, the batch is
  detached and scanned in order until the first hit.
- **scam_action_executor.py**: Deletes the batch, times the author out once the
  trigger threshold is reached and posts an audit embed.
- **trigger_counter.py**: Bounded per-user trigger counts.
"""
