"""Text preprocessing: control-code removal and record segmentation."""

from .sanitizer import sanitize
from .segmenter import build_record_set, segment

__all__ = ["sanitize", "segment", "build_record_set"]
