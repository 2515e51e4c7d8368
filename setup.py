"""Setup configuration for OCRGuard Discord Bot."""

from setuptools import setup, find_packages

setup(
    name="ocrguard",
    version="0.0.1",
    description="A Discord bot that removes scam images using OCR",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord",
        "python-dotenv",
        "PyYAML",
        "Pillow",
        "pillow-heif",
        "requests",
        "prompt_toolkit",
        "openai",
        "pytesseract",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "ocrguard=ocrguard.main:main",
        ],
    },
)
