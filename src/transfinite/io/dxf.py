"""DXF export for sampled surface meshes.

The mesh is written as a single DXF ``MESH`` entity using the ezdxf
library, so it can be opened by CAD packages that do not read OBJ/STL.
"""

from __future__ import annotations

import logging
from pathlib import Path

import ezdxf

logger = logging.getLogger(__name__)


def write_dxf(mesh, output_path, layer: str = 'SURFACE') -> bool:
    """Export ``mesh`` (a :class:`~transfinite.mesh.TriMesh`) to a DXF file.

    Args:
        mesh: the triangulated mesh to export
        output_path: Path to output DXF file (``.dxf`` is appended if missing)
        layer: DXF layer name (default 'SURFACE')

    Returns:
        True if export succeeded, False otherwise.
    """
    path = Path(output_path)
    if path.suffix.lower() != '.dxf':
        path = path.with_name(path.name + '.dxf')

    doc = ezdxf.new('R2000')
    msp = doc.modelspace()
    entity = msp.add_mesh(dxfattribs={'layer': layer})
    with entity.edit_data() as data:
        data.vertices = [tuple(p[:3]) for p in mesh.points()]
        data.faces = [tuple(t) for t in mesh.triangles()]

    try:
        doc.saveas(path)
    except OSError as exc:
        logger.error("unable to write DXF file %s: %s", path, exc)
        return False
    return True


__all__ = ['write_dxf']
