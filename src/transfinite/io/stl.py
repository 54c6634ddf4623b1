"""STL export for sampled surface meshes."""

from __future__ import annotations

import logging
import struct
from typing import List

from transfinite.geometry_utils import Triangle, triangles_from_mesh

logger = logging.getLogger(__name__)

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')


def write_stl(mesh, path_or_file, *, binary: bool = True, name: str = 'transfinite') -> bool:
    """Write ``mesh`` (a :class:`~transfinite.mesh.TriMesh`) to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text
    stream.  Degenerate triangles are skipped.  Returns ``True`` on
    success, ``False`` (after logging) if a path cannot be opened.
    """

    triangles = list(triangles_from_mesh(mesh.triangle_view()))

    if hasattr(path_or_file, 'write'):
        if binary:
            _write_binary(triangles, path_or_file, name)
        else:
            _write_ascii(triangles, path_or_file, name)
        return True

    try:
        if binary:
            with open(path_or_file, 'wb') as stream:
                _write_binary(triangles, stream, name)
        else:
            with open(path_or_file, 'w', encoding='ascii') as stream:
                _write_ascii(triangles, stream, name)
    except OSError as exc:
        logger.error("unable to write STL file %s: %s", path_or_file, exc)
        return False
    return True


def _write_binary(triangles: List[Triangle], stream, name: str) -> None:
    header = (name[:_HEADER_SIZE]).encode('ascii', errors='replace')
    header = header.ljust(_HEADER_SIZE, b' ')
    stream.write(header)
    stream.write(struct.pack('<I', len(triangles)))

    for tri in triangles:
        data = _STRUCT_TRIANGLE.pack(
            *tri.normal,
            *tri.v0,
            *tri.v1,
            *tri.v2,
            0,
        )
        stream.write(data)


def _write_ascii(triangles: List[Triangle], stream, name: str) -> None:
    print(f"solid {name}", file=stream)
    for tri in triangles:
        print(f"  facet normal {tri.normal[0]:.6e} {tri.normal[1]:.6e} {tri.normal[2]:.6e}", file=stream)
        print("    outer loop", file=stream)
        print(f"      vertex {tri.v0[0]:.6e} {tri.v0[1]:.6e} {tri.v0[2]:.6e}", file=stream)
        print(f"      vertex {tri.v1[0]:.6e} {tri.v1[1]:.6e} {tri.v1[2]:.6e}", file=stream)
        print(f"      vertex {tri.v2[0]:.6e} {tri.v2[1]:.6e} {tri.v2[2]:.6e}", file=stream)
        print("    endloop", file=stream)
        print("  endfacet", file=stream)
    print(f"endsolid {name}", file=stream)


__all__ = ['write_stl']
