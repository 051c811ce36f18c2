# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Functions and classes related to the crystallographic unit cell:
conversion between orthogonal (Cartesian) and fractional coordinates
and the search for the nearest periodic or symmetric image of a
position.
"""

__name__ = "pdbkit.structure"
__author__ = "The pdbkit developers"
__all__ = [
    "Transform",
    "SymmetryImage",
    "NearbyImage",
    "UnitCell",
    "wrap_to_unit",
    "move_toward_zero_by_one",
    "SCALE_MATRIX_TOLERANCE",
    "SCALE_VECTOR_TOLERANCE",
]

import math
from enum import Enum
import numpy as np
import numpy.linalg as linalg
from pdbkit.structure.error import ImpossibleAngleError

# SCALEn records usually have less significant digits than CRYST1
SCALE_MATRIX_TOLERANCE = 5e-6
SCALE_VECTOR_TOLERANCE = 1e-6

_DEG2RAD = math.pi / 180.0


class Transform:
    """
    An affine transformation, consisting of a 3x3 matrix and a
    translation vector, that is applied as ``mat @ x + vec``.

    Parameters
    ----------
    mat : array-like, shape=(3,3), dtype=float, optional
        The matrix.
        By default the identity matrix.
    vec : array-like, shape=(3,), dtype=float, optional
        The translation vector.
        By default the zero vector.

    Attributes
    ----------
    mat : ndarray, shape=(3,3), dtype=float
        The matrix.
    vec : ndarray, shape=(3,), dtype=float
        The translation vector.
    """

    def __init__(self, mat=None, vec=None):
        if mat is None:
            self.mat = np.identity(3)
        else:
            self.mat = np.array(mat, dtype=np.float64)
            if self.mat.shape != (3, 3):
                raise ValueError(
                    f"Expected a matrix of shape (3, 3), got {self.mat.shape}"
                )
        if vec is None:
            self.vec = np.zeros(3)
        else:
            self.vec = np.array(vec, dtype=np.float64)
            if self.vec.shape != (3,):
                raise ValueError(
                    f"Expected a vector of shape (3,), got {self.vec.shape}"
                )

    @staticmethod
    def from_matrix(matrix):
        """
        Create a transformation from a 4x4 (or 3x4) matrix in
        homogeneous coordinates.

        Parameters
        ----------
        matrix : array-like, shape=(4,4) or shape=(3,4), dtype=float
            The matrix.
            The last row of a 4x4 matrix is ignored.

        Returns
        -------
        transform : Transform
            The transformation.
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        return Transform(matrix[:3, :3], matrix[:3, 3])

    def as_matrix(self):
        """
        Get the transformation as 4x4 matrix in homogeneous coordinates.

        Returns
        -------
        matrix : ndarray, shape=(4,4), dtype=float
            The matrix.
        """
        matrix = np.identity(4)
        matrix[:3, :3] = self.mat
        matrix[:3, 3] = self.vec
        return matrix

    def apply(self, coord):
        """
        Apply this transformation on the given coordinates.

        Parameters
        ----------
        coord : array-like, shape=(3,) or shape=(n,3), dtype=float
            The coordinates.

        Returns
        -------
        transformed : ndarray, shape=(3,) or shape=(n,3), dtype=float
            The transformed coordinates.
        """
        coord = np.asarray(coord, dtype=np.float64)
        return np.matmul(coord, self.mat.T) + self.vec

    def inverse(self):
        inv = linalg.inv(self.mat)
        return Transform(inv, -np.matmul(inv, self.vec))

    def combine(self, other):
        """
        Combine two transformations.

        Parameters
        ----------
        other : Transform
            This transformation is applied first.

        Returns
        -------
        combined : Transform
            The transformation equivalent to applying `other` and then
            this transformation.
        """
        return Transform(
            np.matmul(self.mat, other.mat),
            np.matmul(self.mat, other.vec) + self.vec,
        )

    def is_identity(self):
        return bool(
            np.array_equal(self.mat, np.identity(3))
            and not np.any(self.vec)
        )

    def approx(self, other, epsilon):
        return bool(
            np.all(np.abs(self.mat - other.mat) <= epsilon)
            and np.all(np.abs(self.vec - other.vec) <= epsilon)
        )

    def copy(self):
        return Transform(self.mat, self.vec)

    def __eq__(self, item):
        if not isinstance(item, Transform):
            return False
        return bool(
            np.array_equal(self.mat, item.mat)
            and np.array_equal(self.vec, item.vec)
        )

    def __repr__(self):
        return f"Transform({self.mat.tolist()}, {self.vec.tolist()})"


def wrap_to_unit(frac):
    """
    Move fractional coordinates into the unit cell, i.e. into the
    interval *[0, 1)*.

    Parameters
    ----------
    frac : array-like, shape=(3,) or shape=(n,3), dtype=float
        Fractional coordinates.

    Returns
    -------
    wrapped : ndarray, shape=(3,) or shape=(n,3), dtype=float
        The wrapped fractional coordinates.
    """
    frac = np.asarray(frac, dtype=np.float64)
    return frac - np.floor(frac)


def move_toward_zero_by_one(frac):
    """
    Shift each fractional coordinate outside of *[-0.5, 0.5]* by one
    unit towards zero.
    """
    frac = np.array(frac, dtype=np.float64)
    frac[frac > 0.5] -= 1.0
    frac[frac < -0.5] += 1.0
    return frac


class SymmetryImage(Enum):
    """
    Restricts the images considered by
    :meth:`UnitCell.find_nearest_image()`.

    - ``SAME`` - Only the given position itself.
    - ``DIFFERENT`` - Only periodic or symmetric images, never the
      position itself.
    - ``UNSPECIFIED`` - Any image.
    """

    SAME = 0
    DIFFERENT = 1
    UNSPECIFIED = 2


class NearbyImage:
    """
    The result of :meth:`UnitCell.find_nearest_image()`.

    Attributes
    ----------
    dist_sq : float
        The squared distance to the image.
    box : list of int
        The unit cell offset of the image in fractional coordinates.
    sym_id : int
        The index of the symmetry image, 0 is the identity.
    """

    def __init__(self, dist_sq, box=(0, 0, 0), sym_id=0):
        self.dist_sq = dist_sq
        self.box = list(box)
        self.sym_id = sym_id

    def dist(self):
        return math.sqrt(self.dist_sq)

    def same_image(self):
        return self.box == [0, 0, 0] and self.sym_id == 0

    def pdb_symbol(self, underscore=True):
        """
        Get the symmetry operator in PDB notation, e.g. ``'1_555'``.

        Parameters
        ----------
        underscore : bool, optional
            Whether the operator number and the translation are
            separated by an underscore.

        Returns
        -------
        symbol : str
            The symmetry operator.
        """
        translation = "".join(str(5 + shift) for shift in self.box)
        separator = "_" if underscore else ""
        return f"{self.sym_id + 1}{separator}{translation}"

    def __repr__(self):
        return f"NearbyImage({self.dist_sq!r}, {self.box!r}, {self.sym_id!r})"


class UnitCell:
    """
    A crystallographic unit cell.

    The cell stores the lengths and angles of the cell, the derived
    reciprocal parameters and the transformations between orthogonal
    and fractional coordinates.
    The orthogonalization follows the convention of the PDB:
    the *a* axis is aligned with the Cartesian *x* axis and the
    reciprocal *c\\** axis with the Cartesian *z* axis.

    Non-crystalline (e.g. NMR) structures use the fake unit cell
    *1 x 1 x 1*, which is also the default.

    Parameters
    ----------
    a, b, c : float, optional
        The cell lengths in Å.
    alpha, beta, gamma : float, optional
        The cell angles in degrees.

    Attributes
    ----------
    a, b, c, alpha, beta, gamma : float
        The cell parameters.
    orth : Transform
        Transformation from fractional to orthogonal coordinates.
    frac : Transform
        Transformation from orthogonal to fractional coordinates.
    volume : float
        The cell volume in Å³.
    ar, br, cr : float
        The reciprocal cell lengths *a\\**, *b\\**, *c\\**.
    cos_alphar, cos_betar, cos_gammar : float
        The cosines of the reciprocal cell angles.
    explicit_matrices : bool
        True, if `orth` and `frac` were taken from a *SCALE* matrix
        instead of being computed from the cell parameters.
    images : list of Transform
        Symmetry operations (in fractional coordinates) besides the
        identity, that generate the images of the cell content.

    Examples
    --------

    >>> cell = UnitCell(30, 40, 50, 90, 90, 90)
    >>> print(cell.volume)
    60000.0
    >>> print(cell.orthogonalize([0.5, 0.5, 0.5]))
    [15. 20. 25.]
    """

    def __init__(self, a=1.0, b=1.0, c=1.0, alpha=90.0, beta=90.0, gamma=90.0):
        self.a = 1.0
        self.b = 1.0
        self.c = 1.0
        self.alpha = 90.0
        self.beta = 90.0
        self.gamma = 90.0
        self.orth = Transform()
        self.frac = Transform()
        self.volume = 1.0
        self.ar = 1.0
        self.br = 1.0
        self.cr = 1.0
        self.cos_alphar = 0.0
        self.cos_betar = 0.0
        self.cos_gammar = 0.0
        self.explicit_matrices = False
        self.images = []
        self.set(a, b, c, alpha, beta, gamma)

    def set(self, a, b, c, alpha, beta, gamma):
        """
        Set the cell parameters and recompute all derived properties.

        An angle *gamma* of 0 indicates an empty or partial *CRYST1*
        record, in this case the cell is left unchanged.

        Parameters
        ----------
        a, b, c : float
            The cell lengths in Å.
        alpha, beta, gamma : float
            The cell angles in degrees.
        """
        if gamma == 0.0:
            return
        self.a = float(a)
        self.b = float(b)
        self.c = float(c)
        self.alpha = float(alpha)
        self.beta = float(beta)
        self.gamma = float(gamma)
        self.calculate_properties()

    def calculate_properties(self):
        """
        Compute the volume, the reciprocal parameters and, unless the
        matrices were set explicitly, the orthogonalization and
        fractionalization matrices from the cell parameters.

        Raises
        ------
        ImpossibleAngleError
            If an angle is a multiple of 180°.
        """
        # Ensure exact values for right angles
        cos_alpha = _right_angle_cos(self.alpha)
        cos_beta = _right_angle_cos(self.beta)
        cos_gamma = _right_angle_cos(self.gamma)
        sin_alpha = _right_angle_sin(self.alpha)
        sin_beta = _right_angle_sin(self.beta)
        sin_gamma = _right_angle_sin(self.gamma)
        if sin_alpha == 0 or sin_beta == 0 or sin_gamma == 0:
            raise ImpossibleAngleError("Impossible angle - N*180deg.")

        # Volume, Giacovazzo p. 62
        self.volume = (
            self.a
            * self.b
            * self.c
            * math.sqrt(
                1
                - cos_alpha * cos_alpha
                - cos_beta * cos_beta
                - cos_gamma * cos_gamma
                + 2 * cos_alpha * cos_beta * cos_gamma
            )
        )

        # Reciprocal parameters, Giacovazzo p. 64
        self.ar = self.b * self.c * sin_alpha / self.volume
        self.br = self.a * self.c * sin_beta / self.volume
        self.cr = self.a * self.b * sin_gamma / self.volume
        cos_alphar_sin_beta = (cos_beta * cos_gamma - cos_alpha) / sin_gamma
        self.cos_alphar = cos_alphar_sin_beta / sin_beta
        self.cos_betar = (cos_alpha * cos_gamma - cos_beta) / (sin_alpha * sin_gamma)
        self.cos_gammar = (cos_alpha * cos_beta - cos_gamma) / (sin_alpha * sin_beta)

        if self.explicit_matrices:
            return

        # ITfC B p. 262: align a with X and c* with Z
        sin_alphar = math.sqrt(1.0 - self.cos_alphar * self.cos_alphar)
        self.orth = Transform(
            [
                [self.a, self.b * cos_gamma, self.c * cos_beta],
                [0.0, self.b * sin_gamma, -self.c * cos_alphar_sin_beta],
                [0.0, 0.0, self.c * sin_beta * sin_alphar],
            ]
        )

        o12 = -cos_gamma / (sin_gamma * self.a)
        o13 = -(cos_gamma * cos_alphar_sin_beta + cos_beta * sin_gamma) / (
            sin_alphar * sin_beta * sin_gamma * self.a
        )
        o23 = self.cos_alphar / (sin_alphar * sin_gamma * self.b)
        self.frac = Transform(
            [
                [1 / self.a, o12, o13],
                [0.0, 1 / self.orth.mat[1, 1], o23],
                [0.0, 0.0, 1 / self.orth.mat[2, 2]],
            ]
        )

    def set_matrices_from_fract(self, fract):
        """
        Use a fractionalization matrix, e.g. from *SCALEn* records, as
        authoritative transformation, if it differs from the one
        computed from the cell parameters.

        The matrix is ignored if it agrees with the computed one within
        :data:`SCALE_MATRIX_TOLERANCE` (matrix) and
        :data:`SCALE_VECTOR_TOLERANCE` (vector), or if the cell is the
        fake *1 x 1 x 1* cell and the matrix looks invalid.

        Parameters
        ----------
        fract : Transform
            The fractionalization transformation.
        """
        if np.all(
            np.abs(fract.mat - self.frac.mat) <= SCALE_MATRIX_TOLERANCE
        ) and np.all(np.abs(fract.vec - self.frac.vec) <= SCALE_VECTOR_TOLERANCE):
            return
        # SCALE is sometimes wrong in non-crystal entries
        if self.frac.mat[0, 0] == 1.0 and (
            fract.mat[0, 0] == 0.0 or fract.mat[0, 0] > 1.0
        ):
            return
        self.frac = fract.copy()
        self.orth = fract.inverse()
        self.explicit_matrices = True

    def is_crystal(self):
        """
        Check whether this is a real crystallographic cell.

        Both the cell length and the fractionalization matrix are
        checked, since non-crystalline entries often set only one of
        them to the fake cell.

        Returns
        -------
        is_crystal : bool
            True, if the cell is not the fake *1 x 1 x 1* cell.
        """
        return self.a != 1.0 and self.frac.mat[0, 0] != 1.0

    def orthogonalize(self, frac):
        """
        Convert fractional coordinates into orthogonal coordinates.

        Parameters
        ----------
        frac : array-like, shape=(3,) or shape=(n,3), dtype=float
            Fractional coordinates.

        Returns
        -------
        coord : ndarray, shape=(3,) or shape=(n,3), dtype=float
            Orthogonal coordinates in Å.
        """
        return self.orth.apply(frac)

    def fractionalize(self, coord):
        """
        Convert orthogonal coordinates into fractional coordinates.

        Parameters
        ----------
        coord : array-like, shape=(3,) or shape=(n,3), dtype=float
            Orthogonal coordinates in Å.

        Returns
        -------
        frac : ndarray, shape=(3,) or shape=(n,3), dtype=float
            Fractional coordinates.
        """
        return self.frac.apply(coord)

    def volume_per_image(self):
        if not self.is_crystal():
            return math.nan
        return self.volume / (1 + len(self.images))

    def find_nearest_image(self, ref, pos, mode=SymmetryImage.UNSPECIFIED):
        """
        Find the image of `pos` that is closest to `ref`.

        All symmetry images (the identity and :attr:`images`) are
        considered, each shifted into the periodic box closest to
        `ref`.

        Parameters
        ----------
        ref, pos : array-like, shape=(3,), dtype=float
            Orthogonal coordinates of the reference and the position
            whose images are searched.
        mode : SymmetryImage, optional
            Restricts the considered images.

        Returns
        -------
        image : NearbyImage
            The nearest image.
            The squared distance is infinite, if no allowed image
            exists.
        """
        ref = np.asarray(ref, dtype=np.float64)
        pos = np.asarray(pos, dtype=np.float64)
        diff = pos - ref
        image = NearbyImage(float(np.dot(diff, diff)))
        if mode == SymmetryImage.SAME or not self.is_crystal():
            if mode == SymmetryImage.DIFFERENT or image.dist_sq == 0.0:
                image.dist_sq = math.inf
            return image
        fpos = self.fractionalize(pos)
        fref = self.fractionalize(ref)
        self._search_pbc_images(fpos - fref, image)
        if (
            mode == SymmetryImage.DIFFERENT or image.dist_sq == 0.0
        ) and image.box == [0, 0, 0]:
            image.dist_sq = math.inf
        for i, transform in enumerate(self.images):
            if self._search_pbc_images(transform.apply(fpos) - fref, image):
                image.sym_id = i + 1
        return image

    def is_special_position(self, pos, max_dist=0.8):
        """
        Count the symmetry images of `pos` that lie (modulo lattice
        translations) within `max_dist` of `pos` itself.

        Parameters
        ----------
        pos : array-like, shape=(3,), dtype=float
            Orthogonal coordinates.
        max_dist : float, optional
            The distance threshold in Å.

        Returns
        -------
        count : int
            The number of nearby symmetry mates, e.g. 0 for a general
            position, 1 for a 2-fold axis, 3 for a 4-fold axis.
        """
        max_dist_sq = max_dist * max_dist
        fpos = self.fractionalize(pos)
        count = 0
        for transform in self.images:
            fdiff = transform.apply(fpos) - fpos
            fdiff -= [_iround(x) for x in fdiff]
            orth_diff = self.orth.mat @ fdiff
            if np.dot(orth_diff, orth_diff) < max_dist_sq:
                count += 1
        return count

    def _search_pbc_images(self, fdiff, image):
        # PBC = periodic boundary conditions
        box = [_iround(x) for x in fdiff]
        fdiff = fdiff - box
        orth_diff = self.orth.mat @ fdiff
        dist_sq = float(np.dot(orth_diff, orth_diff))
        if dist_sq < image.dist_sq:
            image.dist_sq = dist_sq
            image.box = box
            return True
        return False

    def copy(self):
        clone = UnitCell()
        clone.a, clone.b, clone.c = self.a, self.b, self.c
        clone.alpha, clone.beta, clone.gamma = self.alpha, self.beta, self.gamma
        clone.orth = self.orth.copy()
        clone.frac = self.frac.copy()
        clone.volume = self.volume
        clone.ar, clone.br, clone.cr = self.ar, self.br, self.cr
        clone.cos_alphar = self.cos_alphar
        clone.cos_betar = self.cos_betar
        clone.cos_gammar = self.cos_gammar
        clone.explicit_matrices = self.explicit_matrices
        clone.images = [transform.copy() for transform in self.images]
        return clone

    def parameters(self):
        return (self.a, self.b, self.c, self.alpha, self.beta, self.gamma)

    def __eq__(self, item):
        if not isinstance(item, UnitCell):
            return False
        return (
            self.parameters() == item.parameters()
            and self.frac == item.frac
            and self.images == item.images
        )

    def __repr__(self):
        return "UnitCell({}, {}, {}, {}, {}, {})".format(
            *[repr(param) for param in self.parameters()]
        )


def _right_angle_cos(angle):
    return 0.0 if angle == 90.0 else math.cos(_DEG2RAD * angle)


def _right_angle_sin(angle):
    return 1.0 if angle == 90.0 else math.sin(_DEG2RAD * angle)


def _iround(x):
    # Round half away from zero
    return int(math.copysign(math.floor(abs(x) + 0.5), x))
