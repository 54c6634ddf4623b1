# -*- coding: utf-8 -*-
try:  # Python >= 3.8
    from importlib.metadata import PackageNotFoundError, version
except ModuleNotFoundError:  # pragma: no cover - for Python < 3.8
    from importlib_metadata import PackageNotFoundError, version


try:
    __version__ = version("transfinite")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from transfinite.config import SurfaceSettings, load_settings
from transfinite.curve import BSplineCurve, Curve, bezier_curve, line_curve
from transfinite.domain import Domain, RegularDomain
from transfinite.errors import (DegenerateGeometryError, IncompleteLoopError,
                                TransfiniteError)
from transfinite.mesh import TriMesh
from transfinite.parameterization import BilinearParameterization, Parameterization
from transfinite.ribbon import LinearRibbon, Ribbon
from transfinite.surface import (CornerBasedSurface, CornerData,
                                 SideBasedSurface, Surface)

__all__ = [
    '__version__',
    'SurfaceSettings',
    'load_settings',
    'Curve',
    'BSplineCurve',
    'bezier_curve',
    'line_curve',
    'Domain',
    'RegularDomain',
    'TransfiniteError',
    'IncompleteLoopError',
    'DegenerateGeometryError',
    'TriMesh',
    'Parameterization',
    'BilinearParameterization',
    'Ribbon',
    'LinearRibbon',
    'CornerData',
    'Surface',
    'SideBasedSurface',
    'CornerBasedSurface',
]
