"""
Domain models — Pydantic types for the converter.

    from doc2quarto.core.models import ConversionConfig, FileReceipt
"""

from doc2quarto.core.models.conversion import ConversionConfig, FileReceipt

__all__ = [
    "ConversionConfig",
    "FileReceipt",
]
