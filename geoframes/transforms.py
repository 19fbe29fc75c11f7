"""
Rotation and rigid-transform primitives used to move between the ECEF frame
and a local East-North-Up frame.

Quaternions are unit, scalar-first ``[w, x, y, z]`` and follow the Hamilton
convention, so ``(q1 * q2).rotate(v) == q1.rotate(q2.rotate(v))``.
"""

from __future__ import annotations

__all__ = ['Quaternion', 'RigidTransform', 'UNIT_X', 'UNIT_Y', 'UNIT_Z']

import math
from typing import Optional, Sequence, Union

import numpy as np


UNIT_X = np.array([1.0, 0.0, 0.0])
UNIT_Y = np.array([0.0, 1.0, 0.0])
UNIT_Z = np.array([0.0, 0.0, 1.0])


def _as_vector(vector: Sequence[float]) -> np.ndarray:
    arr = np.asarray(vector, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f'Expected a 3-vector, got shape {arr.shape}')
    return arr


class Quaternion:
    """
    Unit quaternion representing a 3D rotation. Normalized on construction.

    Args:
        w: Scalar (real) component.
        x: First vector component.
        y: Second vector component.
        z: Third vector component.
    """

    def __init__(self, w: float, x: float, y: float, z: float):
        q = np.array([w, x, y, z], dtype=float)
        norm = np.linalg.norm(q)
        if norm == 0.0 or not np.isfinite(norm):
            raise ValueError('Quaternion must have a finite, non-zero norm')
        self._data = q / norm

    @classmethod
    def identity(cls) -> Quaternion:
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_axis_angle(cls, axis: Sequence[float], angle: float) -> Quaternion:
        """
        Creates the quaternion rotating by `angle` radians (right-handed) about `axis`.

        Args:
            axis:
                The rotation axis; need not be normalized

            angle:
                The rotation angle, in radians

        Returns:
            Quaternion
        """
        axis = _as_vector(axis)
        norm = np.linalg.norm(axis)
        if norm == 0.0:
            raise ValueError('Rotation axis must be non-zero')

        half = angle / 2.0
        v = axis / norm * math.sin(half)
        return cls(math.cos(half), v[0], v[1], v[2])

    @property
    def w(self) -> float:
        return float(self._data[0])

    @property
    def x(self) -> float:
        return float(self._data[1])

    @property
    def y(self) -> float:
        return float(self._data[2])

    @property
    def z(self) -> float:
        return float(self._data[3])

    def to_vector(self) -> np.ndarray:
        """Returns a copy of ``[w, x, y, z]``"""
        return self._data.copy()

    def conjugate(self) -> Quaternion:
        """For a unit quaternion the conjugate is also the inverse rotation"""
        w, x, y, z = self._data
        return Quaternion(w, -x, -y, -z)

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Hamilton product; the right-hand rotation is applied first"""
        if not isinstance(other, Quaternion):
            return NotImplemented

        w1, x1, y1, z1 = self._data
        w2, x2, y2, z2 = other._data
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Quaternion):
            return False

        # q and -q describe the same rotation
        return bool(
            np.allclose(self._data, other._data, rtol=0.0, atol=1e-12)
            or np.allclose(self._data, -other._data, rtol=0.0, atol=1e-12)
        )

    def __hash__(self):
        return hash(tuple(np.round(self._data, 12)))

    def __repr__(self):
        return f'<Quaternion({self.w}, {self.x}, {self.y}, {self.z})>'

    def to_rotation_matrix(self) -> np.ndarray:
        """Returns the equivalent 3x3 direction cosine matrix"""
        w, x, y, z = self._data
        return np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ])

    def rotate(self, vector: Sequence[float]) -> np.ndarray:
        """Rotates a 3-vector"""
        return self.to_rotation_matrix() @ _as_vector(vector)


class RigidTransform:
    """
    A rotation followed by a translation: ``p' = R p + t``.

    Args:
        rotation:
            The rotation part

        translation:
            The translation part, a 3-vector
    """

    def __init__(
        self,
        rotation: Optional[Quaternion] = None,
        translation: Sequence[float] = (0.0, 0.0, 0.0),
    ):
        self._rotation = Quaternion.identity() if rotation is None else rotation
        self._translation = _as_vector(translation).copy()

    @classmethod
    def identity(cls) -> RigidTransform:
        return cls()

    @classmethod
    def from_translation(cls, translation: Sequence[float]) -> RigidTransform:
        return cls(Quaternion.identity(), translation)

    @property
    def rotation(self) -> Quaternion:
        return self._rotation

    @property
    def rotation_matrix(self) -> np.ndarray:
        return self._rotation.to_rotation_matrix()

    @property
    def translation(self) -> np.ndarray:
        return self._translation.copy()

    def __repr__(self):
        return f'<RigidTransform({self._rotation!r}, {self._translation.tolist()})>'

    def __eq__(self, other) -> bool:
        if not isinstance(other, RigidTransform):
            return False

        return (
            self._rotation == other._rotation
            and bool(np.allclose(self._translation, other._translation, rtol=0.0, atol=1e-9))
        )

    def __mul__(
        self, other: Union[RigidTransform, Sequence[float]]
    ) -> Union[RigidTransform, np.ndarray]:
        """
        Composes with another transform (``other`` applied first) or, given a
        3-vector, applies this transform to it.
        """
        if isinstance(other, RigidTransform):
            return RigidTransform(
                self._rotation * other._rotation,
                self._rotation.rotate(other._translation) + self._translation,
            )

        if isinstance(other, Quaternion):
            return NotImplemented

        return self.apply(other)

    def apply(self, vector: Sequence[float]) -> np.ndarray:
        """Rotates then translates a point"""
        return self._rotation.rotate(vector) + self._translation

    def inverse(self) -> RigidTransform:
        inv_rotation = self._rotation.conjugate()
        return RigidTransform(inv_rotation, -inv_rotation.rotate(self._translation))

    def is_identity(self, atol: float = 1e-12) -> bool:
        return bool(
            np.allclose(self.rotation_matrix, np.eye(3), rtol=0.0, atol=atol)
            and np.allclose(self._translation, 0.0, rtol=0.0, atol=atol)
        )
