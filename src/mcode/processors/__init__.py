"""Media processors built on the core pipeline."""

from .video_processor import ConversionObserver, Mp4Converter

__all__ = [
    "ConversionObserver",
    "Mp4Converter",
]
