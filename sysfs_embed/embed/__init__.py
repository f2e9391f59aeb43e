from .transform import StaticEmbedTransform, TransformOptions, TransformResult, transform_module, serialize_embed
from .source_map import SourceMap

__all__ = [
    "StaticEmbedTransform",
    "TransformOptions",
    "TransformResult",
    "transform_module",
    "serialize_embed",
    "SourceMap",
]
