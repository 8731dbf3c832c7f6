from .fog_of_war import FogOfWar, TilePaint
from .shadowcast import BlockedFov, ShadowBorder, compute_visible, rotate_for_octant

__all__ = ["FogOfWar", "TilePaint", "BlockedFov", "ShadowBorder", "compute_visible", "rotate_for_octant"]
