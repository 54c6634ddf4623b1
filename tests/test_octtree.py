import random

import pytest
from transfinite.geom import *
from transfinite.geometry_utils import point_triangle_distance
from transfinite.octtree import *


def randomTriangles(bbox,count,size=0.5,seed=1):
    """Given a 3D bounding box and a number of triangles to generate,
    return ``(points, triangles)`` for small random triangles inside
    the box"""
    rng = random.Random(seed)
    points = []
    triangles = []
    lo = bbox[0]
    hi = bbox[1]
    for i in range(count):
        base = [rng.uniform(lo[k],hi[k]-size) for k in range(3)]
        idx = len(points)
        points.append(point(*base))
        points.append(point(base[0]+rng.uniform(0,size),base[1]+size,base[2]))
        points.append(point(base[0]+size,base[1]+rng.uniform(0,size),
                            base[2]+rng.uniform(0,size)))
        triangles.append((idx,idx+1,idx+2))
    return points,triangles


class TestBoxes:
    """ Test utility functions """

    b1 = [point(-10,-5,-5),point(-5,5,5)]
    b2 = [point(-2.5,-2.5,-2.5),point(2.5,2.5,2.5)]
    b3 = [point(5,-5,-5),point(10,5,5)]
    # a box that contains b2
    b10 = [point(-3,-3,-3),point(3,3,3)]
    # a box crossing b1, b2 and b3
    b20 = [point(-15,-1,-1),point(15,1,1)]
    # touches b3 on its face
    b30 = [point(2.5,-1,-1),point(5,1,1)]

    def test_boxoverlap(self):
        assert not boxoverlap(self.b1,self.b2)
        assert not boxoverlap(self.b2,self.b3)
        assert boxoverlap(self.b10,self.b2)
        assert boxoverlap(self.b2,self.b10)
        assert boxoverlap(self.b20,self.b1)
        assert boxoverlap(self.b20,self.b2)
        assert boxoverlap(self.b20,self.b3)
        assert boxoverlap(self.b30,self.b3)
        assert boxoverlap(self.b30,self.b2)

    def test_dims(self):
        assert bboxdim(self.b1) == [5,10,10]
        assert boxmid(self.b3) == [7.5,0,0,1.0]

    def test_bbox2oct(self):
        center = point(0,0,0)
        assert bbox2oct(self.b2,center) == list(range(8))
        assert bbox2oct(self.b1,center) == [0,2,4,6]
        assert bbox2oct(self.b3,center) == [1,3,5,7]
        assert bbox2oct([point(1,1,1),point(2,2,2)],center) == [7]

    def test_box2boxes(self):
        boxes = box2boxes(self.b2,point(0,0,0))
        assert len(boxes) == 8
        box,center = boxes[5]
        # octant 5 is the upper x, lower y, upper z box
        assert box == [[0,-2.5,0,1],[2.5,0,2.5,1]]
        assert center == [1.25,-1.25,1.25,1.0]


class TestTriangleOctree:

    bbox = [point(-10,-10,-10),point(10,10,10)]

    def test_bad_args(self):
        with pytest.raises(ValueError):
            TriangleOctree([],[],maxdepth=0)
        with pytest.raises(ValueError):
            TriangleOctree([],[],leafsize=0)
        with pytest.raises(ValueError):
            TriangleOctree([],[],mindim=-1)

    def test_build(self):
        points,triangles = randomTriangles(self.bbox,200)
        tree = TriangleOctree(points,triangles,leafsize=4)
        assert tree.depth > 0
        box = tree.bbox
        for p in points:
            for k in range(3):
                assert box[0][k] < p[k] < box[1][k]

    def test_get_elements(self):
        points,triangles = randomTriangles(self.bbox,200)
        tree = TriangleOctree(points,triangles,leafsize=4)
        query = [point(-2,-3,-1),point(4,2,5)]
        found = tree.getElements(query)
        expected = [i for i,t in enumerate(triangles)
                    if boxoverlap(pointbbox([points[k] for k in t]),query)]
        assert found == expected
        assert tree.getElements([point(20,20,20),point(30,30,30)]) == []

    def test_closest_brute_force(self):
        points,triangles = randomTriangles(self.bbox,150,seed=7)
        tree = TriangleOctree(points,triangles,leafsize=4)
        rng = random.Random(3)
        for i in range(25):
            p = point(rng.uniform(-14,14),rng.uniform(-14,14),rng.uniform(-14,14))
            idx,d = tree.closest(p)
            best = min(point_triangle_distance(p,*[points[k] for k in t])
                       for t in triangles)
            assert d == pytest.approx(best)
            a,b,c = [points[k] for k in triangles[idx]]
            assert point_triangle_distance(p,a,b,c) == pytest.approx(best)

    def test_closest_bad_point(self):
        points,triangles = randomTriangles(self.bbox,10)
        tree = TriangleOctree(points,triangles)
        with pytest.raises(ValueError):
            tree.closest([float('nan'),0,0,1])
