"""
OCRGuard: a Discord bot that reads text inside posted images and moderates scam spam.
"""
