from regionmap.rendering.command_buffer import CommandBufferSurface
from regionmap.rendering.protocols import RenderSurface
from regionmap.rendering.styles import StyleClass, style_for, zone_style

__all__ = ["CommandBufferSurface", "RenderSurface", "StyleClass", "style_for", "zone_style"]
