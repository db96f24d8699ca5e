from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Vector:
    """Immutable 3D vector. Every operation returns a new value."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def zero(cls) -> "Vector":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_iterable(cls, seq: Iterable[float]) -> "Vector":
        vals = [float(c) for c in seq]
        if len(vals) != 3:
            raise ValueError(f"Vector needs exactly 3 components, got {len(vals)}")
        return cls(*vals)

    def add(self, v: Vector) -> Vector:
        return Vector(self.x + v.x, self.y + v.y, self.z + v.z)

    def sub(self, v: Vector) -> Vector:
        return Vector(self.x - v.x, self.y - v.y, self.z - v.z)

    def mul(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    def add_mul(self, scalar: float, v: Vector) -> Vector:
        """self + scalar * v"""
        return Vector(self.x + scalar * v.x,
                      self.y + scalar * v.y,
                      self.z + scalar * v.z)

    def norm(self) -> float:
        return float(np.sqrt(self.x*self.x + self.y*self.y + self.z*self.z))

    def dist(self, v: Vector) -> float:
        return self.sub(v).norm()

    def to_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __add__(self, v: Vector) -> Vector:
        return self.add(v)

    def __sub__(self, v: Vector) -> Vector:
        return self.sub(v)

    def __mul__(self, scalar: float) -> Vector:
        return self.mul(scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vector:
        return self.mul(-1.0)

    def __str__(self) -> str:
        return f"({self.x},{self.y},{self.z})"
