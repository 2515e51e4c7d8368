"""
Discord embeds for the audit log channel.
"""
