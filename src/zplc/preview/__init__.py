"""Preview rendering through the Labelary API."""
from __future__ import annotations

from zplc.preview.labelary import LabelaryClient, PreviewError, dots_per_mm

__all__ = ["LabelaryClient", "PreviewError", "dots_per_mm"]
