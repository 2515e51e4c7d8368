"""
Discord bot components for OCRGuard.
"""
