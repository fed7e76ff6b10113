"""Entry points for the tote vision loop."""

from .vision_node import VisionNode, main

__all__ = ['VisionNode', 'main']
