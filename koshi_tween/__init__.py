"""Koshi Tween Nodes - keyframe animation playback and baking."""

import logging

logger = logging.getLogger("koshi.tween")

NODE_CLASS_MAPPINGS = {}
NODE_DISPLAY_NAME_MAPPINGS = {}

try:
    from .tween import NODE_CLASS_MAPPINGS as tween_nodes
    from .tween import NODE_DISPLAY_NAME_MAPPINGS as tween_names
    NODE_CLASS_MAPPINGS.update(tween_nodes)
    NODE_DISPLAY_NAME_MAPPINGS.update(tween_names)
except ImportError as e:
    logger.debug(f"Failed to load tween nodes: {e}")

__all__ = ["NODE_CLASS_MAPPINGS", "NODE_DISPLAY_NAME_MAPPINGS"]
