"""Mesh export utilities for transfinite surfaces."""

from .obj import write_obj
from .stl import write_stl
from .dxf import write_dxf

__all__ = ['write_obj', 'write_stl', 'write_dxf']
