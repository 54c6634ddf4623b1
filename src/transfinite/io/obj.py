"""Wavefront OBJ export for sampled surface meshes."""

from __future__ import annotations

import logging
from typing import TextIO

logger = logging.getLogger(__name__)


def write_obj(mesh, path_or_file) -> bool:
    """Write ``mesh`` (a :class:`~transfinite.mesh.TriMesh`) as OBJ text.

    ``path_or_file`` can be a filesystem path or an open text stream.
    Returns ``True`` on success.  A target that cannot be opened is
    logged and reported by returning ``False``; the mesh is untouched.
    """

    if hasattr(path_or_file, 'write'):
        _write_obj(mesh, path_or_file)
        return True

    try:
        with open(path_or_file, 'w', encoding='ascii') as stream:
            _write_obj(mesh, stream)
    except OSError as exc:
        logger.error("unable to write OBJ file %s: %s", path_or_file, exc)
        return False
    return True


def _write_obj(mesh, stream: TextIO) -> None:
    for p in mesh.points():
        print(f"v {p[0]:.9g} {p[1]:.9g} {p[2]:.9g}", file=stream)
    # OBJ vertex indices are 1-based
    for a, b, c in mesh.triangles():
        print(f"f {a + 1} {b + 1} {c + 1}", file=stream)


__all__ = ['write_obj']
