"""Perspective projection of table coordinates to screen pixels."""

from __future__ import annotations

from typing import Sequence, Tuple

from .maths import Vector, magnitude

Matrix = Tuple[Tuple[float, float, float, float], ...]

_DEGENERATE_COEF = 999999.88


def matrix_vector_multiply(matrix: Sequence[Sequence[float]], vec: Vector) -> Vector:
    """Transform vec by the first three rows of a row-major 4x4 matrix."""
    x, y, z = vec.x, vec.y, vec.z
    row0, row1, row2 = matrix[0], matrix[1], matrix[2]
    return Vector(
        z * row0[2] + y * row0[1] + x * row0[0] + row0[3],
        z * row1[2] + y * row1[1] + x * row1[0] + row1[3],
        z * row2[2] + y * row2[1] + x * row2[0] + row2[3],
    )


class Projection:
    """Camera transform plus perspective divide onto a screen centre."""

    def __init__(self, mat4x3: Sequence[float], d: float, center_x: float, center_y: float):
        values = [float(v) for v in mat4x3]
        if len(values) < 12:
            raise ValueError("projection needs 12 matrix values")
        rows = tuple(tuple(values[i:i + 4]) for i in range(0, 12, 4))
        self.matrix: Matrix = rows + ((0.0, 0.0, 0.0, 1.0),)
        self.d = d
        self.center_x = center_x
        self.center_y = center_y

    def z_distance(self, vec: Vector) -> float:
        """Distance of vec from the camera."""
        return magnitude(matrix_vector_multiply(self.matrix, vec))

    def xform_to_2d(self, vec: Vector) -> Tuple[int, int]:
        """Project vec to integer screen coordinates."""
        transformed = matrix_vector_multiply(self.matrix, vec)
        if transformed.z == 0.0:
            coef = _DEGENERATE_COEF
        else:
            coef = self.d / transformed.z
        return (int(transformed.x * coef + self.center_x),
                int(transformed.y * coef + self.center_y))

    def recenter(self, center_x: float, center_y: float) -> None:
        self.center_x = center_x
        self.center_y = center_y