"""
Tiered OCR recognition pipeline.

- **base.py**: ``OCREngine`` interface and ``OCREngineError``.
- **tesseract_engine.py**: Fast local engine backed by pytesseract.
- **remote_engine.py**: Accurate remote vision engine using an
  OpenAI-compatible chat completions API via ``AsyncOpenAI``.
- **scan_cache.py**: Bounded verdict cache keyed by engine and normalized URL.
- **message_analyzer.py**: Runs the fast pass over every image and escalates
  to the remote engine when a message carries exactly four images.
- **ocr_lifecycle.py**: Builds the analyzer from configuration and manages
  engine startup and shutdown.
"""
