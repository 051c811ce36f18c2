# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import itertools
import math
import numpy as np
import pytest
from pytest import approx
import pdbkit.structure as struc

SAMPLE_CELLS = [
    ( 9,  5,  2,  90,  90,  90),
    ( 5,  5,  8,  90,  90, 120),
    ( 3,  2,  1,  10,  20,  20),
    ( 2,  4,  6, 100, 110, 120),
    ( 9,  9,  9,  90,  90, 170),
    ( 9,  8,  7,  50,  80,  50),
    (10, 12, 14,  80,  95, 100),
]  # fmt: skip

SAMPLE_COORD = [
    ( 1,  1,  1),
    ( 5, 10, 20),
    (-1,  5,  8),
    ( 3,  1, 54),
]  # fmt: skip


# A twofold rotation axis parallel to b
TWOFOLD = struc.Transform([[-1, 0, 0], [0, 1, 0], [0, 0, -1]])
# A twofold screw axis parallel to b
SCREW = struc.Transform([[-1, 0, 0], [0, 1, 0], [0, 0, -1]], [0, 0.5, 0])


@pytest.mark.parametrize("params", SAMPLE_CELLS)
def test_cell_vectors(params):
    """
    The orthogonalization matrix must reproduce the cell lengths and
    angles, with *a* along *x*.
    """
    a, b, c, alpha, beta, gamma = params
    cell = struc.UnitCell(*params)
    vec_a, vec_b, vec_c = cell.orth.mat.T
    assert vec_a[1:].tolist() == approx([0, 0], abs=1e-10)
    assert np.linalg.norm(vec_a) == approx(a)
    assert np.linalg.norm(vec_b) == approx(b)
    assert np.linalg.norm(vec_c) == approx(c)

    def angle(v1, v2):
        cos = np.dot(v1, v2) / (np.linalg.norm(v1) * np.linalg.norm(v2))
        return math.degrees(math.acos(cos))

    assert angle(vec_b, vec_c) == approx(alpha)
    assert angle(vec_a, vec_c) == approx(beta)
    assert angle(vec_a, vec_b) == approx(gamma)
    assert cell.volume == approx(abs(np.linalg.det(cell.orth.mat)))


@pytest.mark.parametrize("params, coord", itertools.product(SAMPLE_CELLS, SAMPLE_COORD))
def test_conversion(params, coord):
    cell = struc.UnitCell(*params)
    frac = cell.fractionalize(coord)
    assert cell.orthogonalize(frac).tolist() == approx(list(coord))


def test_conversion_of_multiple_coord():
    cell = struc.UnitCell(*SAMPLE_CELLS[3])
    coord = np.array(SAMPLE_COORD, dtype=float)
    frac = cell.fractionalize(coord)
    assert frac.shape == coord.shape
    assert cell.orthogonalize(frac).flatten().tolist() == approx(
        coord.flatten().tolist()
    )


def test_orthorhombic_cell():
    cell = struc.UnitCell(30, 40, 50, 90, 90, 90)
    assert cell.volume == approx(60000)
    # Right angles give exact zeros
    assert cell.orth.mat.tolist() == [
        [30.0, 0.0, 0.0],
        [0.0, 40.0, 0.0],
        [0.0, 0.0, 50.0],
    ]
    assert cell.ar == approx(1 / 30)
    assert cell.br == approx(1 / 40)
    assert cell.cr == approx(1 / 50)
    assert cell.cos_alphar == 0
    assert cell.is_crystal()
    assert cell.fractionalize([15, 20, 25]).tolist() == approx([0.5, 0.5, 0.5])


def test_default_cell():
    cell = struc.UnitCell()
    assert not cell.is_crystal()
    assert math.isnan(cell.volume_per_image())
    assert cell.orth.is_identity()
    assert cell.frac.is_identity()


@pytest.mark.parametrize("angles", [(0, 90, 90), (90, 0, 90), (90, 90, 0)])
def test_impossible_angle(angles):
    if angles[2] == 0:
        # A gamma of 0 is treated as missing cell
        cell = struc.UnitCell(10, 10, 10, *angles)
        assert not cell.is_crystal()
        return
    with pytest.raises(struc.ImpossibleAngleError):
        struc.UnitCell(10, 10, 10, *angles)


def test_impossible_angle_is_value_error():
    with pytest.raises(ValueError):
        struc.UnitCell(10, 10, 10, 0, 90, 90)


def test_set_keeps_images():
    cell = struc.UnitCell(10, 10, 10, 90, 90, 90)
    cell.images.append(TWOFOLD)
    cell.set(20, 20, 20, 90, 90, 90)
    assert cell.parameters() == (20.0, 20.0, 20.0, 90.0, 90.0, 90.0)
    assert cell.volume_per_image() == approx(4000)


def test_matching_scale_matrix():
    """
    A fractionalization matrix within the tolerance of the computed one
    is ignored.
    """
    cell = struc.UnitCell(30, 40, 50, 90, 90, 90)
    fract = struc.Transform(np.diag([0.033333, 0.025, 0.02]))
    cell.set_matrices_from_fract(fract)
    assert not cell.explicit_matrices
    assert cell.frac.mat[0, 0] == 1 / 30


def test_explicit_scale_matrix():
    cell = struc.UnitCell(30, 40, 50, 90, 90, 90)
    fract = struc.Transform(np.diag([0.05, 0.025, 0.02]), [0.1, 0, 0])
    cell.set_matrices_from_fract(fract)
    assert cell.explicit_matrices
    assert cell.frac == fract
    assert cell.orthogonalize([0.1, 0, 0]).tolist() == approx([0, 0, 0])
    # Changing the parameters keeps the explicit matrices
    cell.set(31, 40, 50, 90, 90, 90)
    assert cell.frac == fract
    assert cell.volume == approx(31 * 40 * 50)


@pytest.mark.parametrize("value", [0.0, 2.0])
def test_invalid_scale_matrix_for_fake_cell(value):
    cell = struc.UnitCell()
    cell.set_matrices_from_fract(struc.Transform(np.diag([value, 1, 1])))
    assert not cell.explicit_matrices
    assert cell.frac.is_identity()


def test_nearest_periodic_image():
    cell = struc.UnitCell(10, 10, 10, 90, 90, 90)
    image = cell.find_nearest_image([0.2, 0.2, 0.2], [9.9, 9.9, 9.9])
    assert image.dist_sq == approx(0.27)
    assert image.dist() == approx(math.sqrt(0.27))
    assert image.box == [1, 1, 1]
    assert image.sym_id == 0
    assert not image.same_image()
    assert image.pdb_symbol() == "1_666"
    assert image.pdb_symbol(underscore=False) == "1666"


def test_nearest_symmetry_image():
    cell = struc.UnitCell(10, 10, 10, 90, 90, 90)
    cell.images.append(TWOFOLD)
    image = cell.find_nearest_image([1, 3, 1], [-1, 3, -1.2])
    assert image.dist_sq == approx(0.04)
    assert image.sym_id == 1
    assert image.box == [0, 0, 0]
    assert image.pdb_symbol() == "2_555"


def test_nearest_image_modes():
    cell = struc.UnitCell(10, 10, 10, 90, 90, 90)
    ref = [1.0, 1.0, 1.0]
    image = cell.find_nearest_image(ref, [9.5, 1.0, 1.0], struc.SymmetryImage.SAME)
    assert image.dist_sq == approx(8.5**2)
    assert image.same_image()

    image = cell.find_nearest_image(ref, [9.5, 1.0, 1.0])
    assert image.dist_sq == approx(1.5**2)
    assert image.box == [1, 0, 0]

    # The position itself is excluded
    image = cell.find_nearest_image(ref, ref, struc.SymmetryImage.DIFFERENT)
    assert image.dist_sq == math.inf
    image = cell.find_nearest_image(ref, ref, struc.SymmetryImage.SAME)
    assert image.dist_sq == math.inf


def test_nearest_image_without_crystal():
    cell = struc.UnitCell()
    image = cell.find_nearest_image([0, 0, 0], [3, 4, 0])
    assert image.dist() == approx(5)
    assert image.same_image()


@pytest.mark.parametrize(
    "image, frac, expected",
    [
        (TWOFOLD, (0.0, 0.3, 0.0), 1),
        (TWOFOLD, (0.5, 0.3, 0.5), 1),
        (TWOFOLD, (0.2, 0.3, 0.1), 0),
        (SCREW, (0.0, 0.0, 0.0), 0),
    ],
)
def test_special_position(image, frac, expected):
    cell = struc.UnitCell(10, 10, 10, 90, 90, 90)
    cell.images.append(image)
    pos = cell.orthogonalize(frac)
    assert cell.is_special_position(pos) == expected


def test_special_position_threshold():
    cell = struc.UnitCell(10, 10, 10, 90, 90, 90)
    cell.images.append(TWOFOLD)
    # The image is 0.6 Å away
    pos = [0.3, 1.0, 0.0]
    assert cell.is_special_position(pos) == 1
    assert cell.is_special_position(pos, max_dist=0.5) == 0


def test_wrap_to_unit():
    assert struc.wrap_to_unit([-0.25, 1.5, 0.3]).tolist() == approx([0.75, 0.5, 0.3])


def test_move_toward_zero_by_one():
    assert struc.move_toward_zero_by_one([0.7, -0.8, 0.2]).tolist() == approx(
        [-0.3, 0.2, 0.2]
    )


def test_transform():
    transform = struc.Transform([[0, -1, 0], [1, 0, 0], [0, 0, 1]], [1, 2, 3])
    coord = np.array([1.0, 0.0, 0.0])
    assert transform.apply(coord).tolist() == approx([1, 3, 3])
    assert transform.inverse().apply(transform.apply(coord)).tolist() == approx(
        coord.tolist()
    )
    combined = transform.combine(transform.inverse())
    assert combined.approx(struc.Transform(), 1e-12)
    assert struc.Transform.from_matrix(transform.as_matrix()) == transform
    assert not transform.is_identity()
    assert struc.Transform().is_identity()


def test_copy():
    cell = struc.UnitCell(*SAMPLE_CELLS[3])
    cell.images.append(TWOFOLD)
    clone = cell.copy()
    assert clone == cell
    clone.images.clear()
    assert len(cell.images) == 1
    assert clone != cell
