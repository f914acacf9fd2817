"""
ComfyUI-Koshi-Tween
Keyframe tweening for ComfyUI: easing, repeat, direction and spring motion
baked into per-frame schedules.
"""

import importlib.util
import logging
import os
import sys

logger = logging.getLogger("Koshi")

NODE_CLASS_MAPPINGS = {}
NODE_DISPLAY_NAME_MAPPINGS = {}

NODE_CATEGORIES = [
    "koshi_tween",
]


def load_nodes():
    """Load node packages by file path so they never shadow ComfyUI's own modules."""
    base_path = os.path.dirname(__file__)

    for category in NODE_CATEGORIES:
        module_rel_path = category.replace(".", os.sep)
        module_path = os.path.join(base_path, module_rel_path, "__init__.py")

        if not os.path.exists(module_path):
            module_path = os.path.join(base_path, module_rel_path + ".py")
            if not os.path.exists(module_path):
                continue

        try:
            module_name = f"koshi_{category.replace('.', '_')}"
            spec = importlib.util.spec_from_file_location(
                module_name,
                module_path,
                submodule_search_locations=[os.path.dirname(module_path)],
            )
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)

            if hasattr(module, "NODE_CLASS_MAPPINGS"):
                NODE_CLASS_MAPPINGS.update(module.NODE_CLASS_MAPPINGS)
            if hasattr(module, "NODE_DISPLAY_NAME_MAPPINGS"):
                NODE_DISPLAY_NAME_MAPPINGS.update(module.NODE_DISPLAY_NAME_MAPPINGS)

        except Exception as e:
            logger.warning("Error loading %s: %s", category, e)


load_nodes()

__all__ = ["NODE_CLASS_MAPPINGS", "NODE_DISPLAY_NAME_MAPPINGS"]
