## point and vector helpers for transfinite surface evaluation
## Copyright (c) 2020 Richard DeVaul

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""point and vector helpers for **transfinite**

====================
OVERVIEW
====================

Points and vectors are lists of four numbers, ``[x, y, z, w]``.  The
``w`` coordinate is a homogeneous normalization factor: points live in
the ``w=1`` hyperplane, and the R^3 operations below (``add``, ``sub``,
``scale3``, ...) ignore the incoming ``w`` and return ``w=1``.

Domain parameters are stored the same way, as ``point(u, v)`` with
``z=0``, and the per-side ribbon coordinates ``(s, d)`` are
``point(s, d)``, so ``sd[0]`` is the arc position and ``sd[1]`` the
distance from the side.

constants
=========

``epsilon`` is the geometric tolerance used for point coincidence and
degenerate-geometry tests.  The blend tolerance of the surface core is
configured separately (see :mod:`transfinite.config`).
"""

from math import isfinite, sqrt
import copy

## constants
epsilon=0.000005

## operations on scalars
## -----------------------

## booleans are ints to python, but never good coordinates
def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon

def clamp(x,lo=0.0,hi=1.0):
    """ clamp scalar ``x`` to the closed interval ``[lo, hi]``"""
    return min(max(x,lo),hi)


## operations on vectors
## ------------------------

def vect(a=False,b=False,c=False,d=False):
    """Convenience function for making a homogeneous coordinates 4 vector
from practically anything
    """
    r = [0,0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
                if isgoodnum(d):
                    r[3]=d
    elif isinstance(a,(tuple,list)):
        for i in range(min(4,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

def isvect(x):
    """
    check to see if argument is a proper vector for our purposes
    """
    return isinstance(x,list) and len(x) == 4 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2]) and isgoodnum(x[3])

def vclose(a,b):
    """ are two 3 vectors the same within epsilon"""
    return close(mag(sub(a,b)),0)

## R^3 -> R^3 functions: ignore w component
## ------------------------------------------------
def add(a,b):
    """ 3 vector, `a + b`"""
    return [a[0]+b[0],a[1]+b[1],a[2]+b[2],1.0]

def sub(a,b):
    """ 3 vector, `a - b`"""
    return [a[0]-b[0],a[1]-b[1],a[2]-b[2],1.0]

def scale3(a,c):
    """ 3 vector, vector ''a'' times scalar ``c``, `a * c`"""
    return [a[0]*c,a[1]*c,a[2]*c,1.0]

def neg(a):
    """ 3 vector, `-a`"""
    return [-a[0],-a[1],-a[2],1.0]

def lerp(a,b,t):
    """ linear interpolation between 3 vectors, `a + (b - a) * t`"""
    return [a[0]+(b[0]-a[0])*t,
            a[1]+(b[1]-a[1])*t,
            a[2]+(b[2]-a[2])*t,
            1.0]

## weighted sum of 3 vectors, the workhorse of every blend
def combine(vectors,weights):
    """ 3 vector, sum of ``vectors[i] * weights[i]``"""
    x = y = z = 0.0
    for v,w in zip(vectors,weights):
        x += v[0]*w
        y += v[1]*w
        z += v[2]*w
    return [x,y,z,1.0]

def cross(a,b):
    """Compute the cross generalized product of a x b, assuming that both
    fall into the w=1 hyperplane

    """
    return [ a[1]*b[2] - a[2]*b[1],
             a[2]*b[0] - a[0]*b[2],
             a[0]*b[1] - a[1]*b[0],
             1.0 ]

## R^3 -> R functions -- ignore w component
## ----------------------------------------
def dot(a,b):
    """ 3 vector ``a`` dot ``b`` """
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def mag(a):
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0]*a[0]+a[1]*a[1]+a[2]*a[2])

def dist(a,b):
    """ compute the euclidean distance between two 3 vector points ``a`` and ``b``"""
    return mag(sub(a,b))

def cross2(a,b):
    """ z component of the cross product of the XY parts of ``a`` and ``b``"""
    return a[0]*b[1] - a[1]*b[0]

def isfinite3(a):
    """ are all three coordinates of ``a`` finite (no NaN or infinity)?"""
    return isfinite(a[0]) and isfinite(a[1]) and isfinite(a[2])


## points
## --------------------

deepcopy = copy.deepcopy

def point(x=False,y=False,z=False,w=False):
    """Point creation from point or scalars"""
    if ispoint(x):
        return deepcopy(x)
    if isinstance(x,(tuple,list)):
        return point(*[float(c) for c in x[:3]])
    r = [0,0,0,1]
    if isgoodnum(x):
        r[0]=x
        if isgoodnum(y):
            r[1]=y
            if isgoodnum(z):
                r[2]=z
                if isgoodnum(w):
                    r[3]=w
    if r[3] > 0:
        return r
    else:
        raise ValueError('bad w argument to point()')

def ispoint(x):
    """ is it a point?"""
    if isvect(x) and x[3] > 0.0:
        return True
    return False

def pointbbox(points):
    """ compute the 3D bounding box ``[min, max]`` of a list of points"""
    if not points:
        raise ValueError('cannot compute the bounding box of no points')
    lo = [min(p[i] for p in points) for i in range(3)]
    hi = [max(p[i] for p in points) for i in range(3)]
    return [point(*lo),point(*hi)]

def vstr(a):
    """ format a point, leaving out the homogeneous coordinate"""
    if isvect(a):
        return "[{}, {}, {}]".format(a[0],a[1],a[2])
    return str(a)
