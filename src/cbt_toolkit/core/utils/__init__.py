"""
Utils Package

Compact serialization of attempt records and performance indexes.
"""

from .serialization import (
    compress_performance,
    compress_result,
    decompress_performance,
    decompress_result,
    dumps_result,
    round_tenth,
)

__all__ = [
    "round_tenth",
    "compress_result",
    "decompress_result",
    "dumps_result",
    "compress_performance",
    "decompress_performance",
]
