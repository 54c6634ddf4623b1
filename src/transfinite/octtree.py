## octree of triangle bounding boxes for closest-triangle queries
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

"""octree of triangle bounding boxes for transfinite meshes

The tree is stored as nested lists.  A leaf is ``['e', box, center,
idx0, idx1, ...]`` holding the indices of the triangles whose bounding
boxes overlap the leaf box; an interior node is ``['b', box, center,
child0, ..., child7]``, and an empty child is ``[]``.  Octants are
numbered ``x + 2*y + 4*z``, where each bit is set for the upper half
of the split along that axis.
"""

from transfinite.geom import (add, epsilon, isfinite3, point, pointbbox,
                              scale3, sub, vstr)
from transfinite.geometry_utils import point_triangle_distance

# two boxes overlap if and only if their extents overlap on every
# axis.  Touching boxes count as overlapping, so a point lying exactly
# on a box face is found in the boxes on both sides.

def boxoverlap(bbx1,bbx2):
    """Determine if two 3D bounding boxes overlap (boundaries included)"""
    for i in range(3):
        if bbx1[1][i] < bbx2[0][i] or bbx2[1][i] < bbx1[0][i]:
            return False
    return True

def bboxdim(box):
    """ return length, width, and height of a bounding box"""

    length = box[1][0] - box[0][0]
    width = box[1][1] - box[0][1]
    height = box[1][2] - box[0][2]
    return [length, width, height]

def boxmid(box):
    """ center point of a bounding box"""
    return scale3(add(box[0],box[1]),0.5)

def bbox2oct(bbx,center):
    """
    Utility function to take a bounding box and assign it to one or
    more octants of a box split at ``center``.

    returns list of octants, numbered 0 to 7
    """
    def halves(i):
        r = []
        if bbx[0][i] < center[i]:
            r.append(0)
        if bbx[1][i] >= center[i]:
            r.append(1)
        return r

    return [x + 2*y + 4*z
            for z in halves(2)
            for y in halves(1)
            for x in halves(0)]

def box2boxes(bbox,center):
    """Split a bounding box at ``center`` into eight octant boxes, in
    octant order.  Returns a list of ``[box, boxcenter]`` pairs.
    """
    lo = bbox[0]
    hi = bbox[1]
    result = []
    for o in range(8):
        bits = (o & 1, (o >> 1) & 1, (o >> 2) & 1)
        bmin = [lo[i] if bits[i] == 0 else center[i] for i in range(3)]
        bmax = [center[i] if bits[i] == 0 else hi[i] for i in range(3)]
        box = [point(*bmin), point(*bmax)]
        result.append([box, boxmid(box)])
    return result


class TriangleOctree():

    """Octree over the triangles of a mesh"""

    def __init__(self,points,triangles,mindim=None,maxdepth=7,leafsize=8):

        if not isinstance(maxdepth,int) or maxdepth < 1:
            raise ValueError('bad max depth value: '+str(maxdepth))
        if not isinstance(leafsize,int) or leafsize < 1:
            raise ValueError('bad leaf size value: '+str(leafsize))
        if mindim is not None and (not isinstance(mindim,(int,float))
                                   or mindim <= epsilon):
            raise ValueError('bad mindim value: '+str(mindim))

        self.__points = points
        self.__triangles = triangles
        self.__maxdepth = maxdepth
        self.__leafsize = leafsize
        self.__mindim = mindim
        self.__depth = 0
        self.__tree = []
        self.__boxes = []
        self.__bbox = None
        self.__update = True

    def __repr__(self):
        return 'TriangleOctree(triangles={},depth={},maxdepth={})'.format(
            len(self.__triangles),self.__depth,self.__maxdepth)

    @property
    def depth(self):
        if self.__update:
            self.updateTree()
        return self.__depth

    @property
    def bbox(self):
        if self.__update:
            self.updateTree()
        return self.__bbox

    def triangleBox(self,tri):
        """ bounding box of the triangle with vertex indices ``tri``"""
        return pointbbox([self.__points[k] for k in tri])

    def updateTree(self):
        """
        build the tree from the current points and triangles
        """
        if not self.__update:
            return
        self.__update = False
        self.__depth = 0
        self.__boxes = [self.triangleBox(t) for t in self.__triangles]
        if not self.__boxes:
            self.__tree = []
            self.__bbox = None
            return

        # pad the root box, so flat meshes still have volume
        box = pointbbox([b[0] for b in self.__boxes] +
                        [b[1] for b in self.__boxes])
        size = max(bboxdim(box))
        pad = size * 1.0e-3 + epsilon
        box = [sub(box[0],point(pad,pad,pad)),
               add(box[1],point(pad,pad,pad))]
        self.__bbox = box
        mindim = self.__mindim
        if mindim is None:
            mindim = max(bboxdim(box)) * 1.0e-3

        def recurse(box,center,elements,depth=0):
            if depth > self.__depth:
                self.__depth = depth
            if not elements:
                return []
            if (len(elements) <= self.__leafsize or
                depth >= self.__maxdepth or
                max(bboxdim(box)) < mindim):
                return ['e', box, center] + elements
            children = box2boxes(box,center)
            buckets = [[] for _ in range(8)]
            for idx in elements:
                for o in bbox2oct(self.__boxes[idx],center):
                    buckets[o].append(idx)
            node = ['b', box, center]
            for (cbox,ccenter),bucket in zip(children,buckets):
                node.append(recurse(cbox,ccenter,bucket,depth+1))
            return node

        self.__tree = recurse(box,boxmid(box),
                              list(range(len(self.__boxes))))

    def getElements(self,bbox):
        """return the sorted indices of triangles with bounding boxes that
        overlap the provided bounding box, or the empty list if none.

        """
        if self.__update:
            self.updateTree()

        found = set()

        def recurse(subtree):
            if not subtree or not boxoverlap(subtree[1],bbox):
                return
            if subtree[0] == 'e':
                for idx in subtree[3:]:
                    if boxoverlap(self.__boxes[idx],bbox):
                        found.add(idx)
            else:
                for child in subtree[3:]:
                    recurse(child)

        recurse(self.__tree)
        return sorted(found)

    def closest(self,p):
        """return ``(index, distance)`` of the triangle closest to point
        ``p``.

        Searches a cube around ``p`` that doubles in size until the best
        candidate lies within it.  Every triangle within distance ``r``
        of ``p`` has a bounding box overlapping the cube of half-size
        ``r``, so the first candidate closer than ``r`` is the answer.
        """
        if self.__update:
            self.updateTree()
        if not self.__boxes:
            raise ValueError('closest triangle query on an empty mesh')
        if not isfinite3(p):
            raise ValueError('bad query point: '+vstr(p))

        count = len(self.__boxes)
        radius = max(bboxdim(self.__bbox)) / 64.0
        while True:
            half = point(radius,radius,radius)
            candidates = self.getElements([sub(p,half),add(p,half)])
            if candidates:
                best = None
                bestdist = 0.0
                for idx in candidates:
                    a,b,c = [self.__points[k] for k in self.__triangles[idx]]
                    d = point_triangle_distance(p,a,b,c)
                    if best is None or d < bestdist:
                        best = idx
                        bestdist = d
                if bestdist <= radius or len(candidates) == count:
                    return best, bestdist
            radius *= 2.0
