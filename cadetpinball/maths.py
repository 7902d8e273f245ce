"""Two-dimensional geometry and collision helpers used by the table physics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

NO_HIT = 1_000_000_000.0
"""Distance reported when a ray misses its target."""


@dataclass
class Vector:
    """A mutable three-component vector; most helpers only use x and y."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def copy(self) -> Vector:
        return Vector(self.x, self.y, self.z)


@dataclass
class Rectangle:
    """An integer rectangle given by its top-left corner and size."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass
class Circle:
    center: Vector = field(default_factory=Vector)
    radius_sq: float = 0.0


@dataclass
class Ray:
    origin: Vector = field(default_factory=Vector)
    direction: Vector = field(default_factory=Vector)
    max_distance: float = 0.0
    min_distance: float = 0.0
    time_now: float = 0.0
    time_delta: float = 0.0
    field_flag: int = 0


@dataclass
class Line:
    """A line segment prepared for fast ray intersection."""

    perpendicular: Vector = field(default_factory=Vector)
    direction: Vector = field(default_factory=Vector)
    pre_comp1: float = 0.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    ray_intersect: Vector = field(default_factory=Vector)

    @classmethod
    def from_points(cls, x0: float, y0: float, x1: float, y1: float) -> Line:
        """Build the segment from (x0, y0) to (x1, y1)."""
        line = cls()
        line.direction.x = x1 - x0
        line.direction.y = y1 - y0
        normalize_2d(line.direction)
        line.perpendicular.x = line.direction.y
        line.perpendicular.y = -line.direction.x
        line.pre_comp1 = -(line.direction.y * x0) + line.direction.x * y0
        if line.direction.x >= 0.000000001 or line.direction.x <= -0.000000001:
            end, start, reversed_ = x1, x0, x0 >= x1
        else:
            line.direction.x = 0.0
            end, start, reversed_ = y1, y0, y0 >= y1
        if reversed_:
            line.origin_x, line.origin_y = end, start
        else:
            line.origin_x, line.origin_y = start, end
        return line


@dataclass
class WallPoint:
    x0: float = 0.0
    y0: float = 0.0
    x1: float = 0.0
    y1: float = 0.0


@dataclass
class RampPlane:
    ball_collision_offset: Vector = field(default_factory=Vector)
    v1: Vector = field(default_factory=Vector)
    v2: Vector = field(default_factory=Vector)
    v3: Vector = field(default_factory=Vector)
    gravity_angle1: float = 0.0
    gravity_angle2: float = 0.0
    field_force: Vector = field(default_factory=Vector)


@dataclass
class BallState:
    """The part of a ball that collision response works on."""

    position: Vector = field(default_factory=Vector)
    acceleration: Vector = field(default_factory=Vector)
    speed: float = 0.0


@dataclass
class FlipperGeometry:
    """Edges and end caps of a flipper in its current position."""

    line_a: Line = field(default_factory=Line)
    line_b: Line = field(default_factory=Line)
    circle_base: Circle = field(default_factory=Circle)
    circle_t1: Circle = field(default_factory=Circle)


def enclosing_box(rect1: Rectangle, rect2: Rectangle) -> Rectangle:
    """Return the smallest rectangle containing both rectangles."""
    x, y, width, height = rect1.x, rect1.y, rect1.width, rect1.height
    if rect2.x < x:
        width += x - rect2.x
        x = rect2.x
    if rect2.y < y:
        height += y - rect2.y
        y = rect2.y
    if rect2.width + rect2.x > x + width:
        width = rect2.x + rect2.width - x
    if rect2.height + rect2.y > height + y:
        height = rect2.y + rect2.height - y
    return Rectangle(x, y, width, height)


def rectangle_clip(rect1: Rectangle, rect2: Rectangle) -> Optional[Rectangle]:
    """Clip rect1 to rect2; return None when nothing is left."""
    x, y = rect1.x, rect1.y
    width, height = rect1.width, rect1.height
    right2 = rect2.x + rect2.width
    bottom2 = rect2.y + rect2.height
    if x + width < rect2.x or x >= right2:
        return None
    if y + height < rect2.y or y >= bottom2:
        return None
    if x < rect2.x:
        width += x - rect2.x
        x = rect2.x
    if x + width > right2:
        width = right2 - x
    if y < rect2.y:
        height = y - rect2.y + height
        y = rect2.y
    if height + y > bottom2:
        height = bottom2 - y
    if not width or not height:
        return None
    return Rectangle(x, y, width, height)


def overlapping_box(rect1: Rectangle, rect2: Rectangle) -> Tuple[Rectangle, bool]:
    """Return the combined span of both rectangles and whether they overlap."""
    result = Rectangle()
    if rect1.x >= rect2.x:
        result.x = rect2.x
        result.width = rect1.width - rect2.x + rect1.x + 1
    else:
        result.x = rect1.x
        result.width = rect2.width - rect1.x + rect2.x + 1
    if rect1.y >= rect2.y:
        result.y = rect2.y
        result.height = rect1.height - rect2.y + rect1.y + 1
    else:
        result.y = rect1.y
        result.height = rect2.height - rect1.y + rect2.y + 1
    overlaps = (result.width <= rect2.width + rect1.width
                and result.height <= rect2.height + rect1.height)
    return result, overlaps


def ray_intersect_circle(ray: Ray, circle: Circle) -> float:
    """Distance along the ray to the circle, or NO_HIT."""
    lx = circle.center.x - ray.origin.x
    ly = circle.center.y - ray.origin.y
    tca = ly * ray.direction.y + lx * ray.direction.x
    if tca < 0.0:
        return NO_HIT
    l_mag_sq = ly * ly + lx * lx
    if l_mag_sq < circle.radius_sq:
        return tca - math.sqrt(circle.radius_sq - l_mag_sq + tca * tca)
    thc_sq = circle.radius_sq - l_mag_sq + tca * tca
    if thc_sq < 0.0:
        return NO_HIT
    t0 = tca - math.sqrt(thc_sq)
    if t0 < 0.0 or t0 > ray.max_distance:
        return NO_HIT
    return t0


def normalize_2d(vec: Vector) -> float:
    """Normalise x and y in place and return the previous length."""
    mag = math.sqrt(vec.x * vec.x + vec.y * vec.y)
    if mag != 0.0:
        vec.x = 1.0 / mag * vec.x
        vec.y = 1.0 / mag * vec.y
    return mag


def ray_intersect_line(ray: Ray, line: Line) -> float:
    """Distance along the ray to the segment, or NO_HIT.

    On a hit of the infinite line the point is stored in line.ray_intersect.
    """
    perp_dot = (line.perpendicular.y * ray.direction.y
                + ray.direction.x * line.perpendicular.x)
    if perp_dot >= 0.0:
        return NO_HIT
    result = -((ray.origin.x * line.perpendicular.x
                + ray.origin.y * line.perpendicular.y
                + line.pre_comp1) / perp_dot)
    if not (-ray.min_distance <= result <= ray.max_distance):
        return NO_HIT
    line.ray_intersect.x = result * ray.direction.x + ray.origin.x
    line.ray_intersect.y = result * ray.direction.y + ray.origin.y
    if line.direction.x == 0.0:
        along = line.ray_intersect.y
    else:
        along = line.ray_intersect.x
    if along >= line.origin_x:
        return result if along <= line.origin_y else NO_HIT
    return NO_HIT


def cross(vec1: Vector, vec2: Vector) -> Vector:
    return Vector(
        vec2.z * vec1.y - vec2.y * vec1.z,
        vec2.x * vec1.z - vec1.x * vec2.z,
        vec1.x * vec2.y - vec2.x * vec1.y,
    )


def magnitude(vec: Vector) -> float:
    mag_sq = vec.x * vec.x + vec.y * vec.y + vec.z * vec.z
    return 0.0 if mag_sq == 0.0 else math.sqrt(mag_sq)


def vector_add(vec1: Vector, vec2: Vector) -> Vector:
    """Add vec2's x and y to vec1 in place and return vec1."""
    vec1.x += vec2.x
    vec1.y += vec2.y
    return vec1


def basic_collision(ball: BallState, next_position: Vector, direction: Vector,
                    elasticity: float, smoothness: float, threshold: float,
                    boost: float) -> float:
    """Bounce the ball off a surface with the given normal; return impact speed."""
    ball.position.x = next_position.x
    ball.position.y = next_position.y
    proj = -(direction.y * ball.acceleration.y + direction.x * ball.acceleration.x)
    if proj < 0:
        proj = -proj
    else:
        dx1 = proj * direction.x
        dy1 = proj * direction.y
        ball.acceleration.x = (dx1 + ball.acceleration.x) * smoothness + dx1 * elasticity
        ball.acceleration.y = (dy1 + ball.acceleration.y) * smoothness + dy1 * elasticity
        normalize_2d(ball.acceleration)
    proj_speed = proj * ball.speed
    new_speed = ball.speed - (1.0 - elasticity) * proj_speed
    ball.speed = new_speed
    if proj_speed >= threshold:
        ball.acceleration.x = new_speed * ball.acceleration.x + direction.x * boost
        ball.acceleration.y = new_speed * ball.acceleration.y + direction.y * boost
        ball.speed = normalize_2d(ball.acceleration)
    return proj_speed


def distance_squared(vec1: Vector, vec2: Vector) -> float:
    return (vec1.y - vec2.y) * (vec1.y - vec2.y) + (vec1.x - vec2.x) * (vec1.x - vec2.x)


def dot_product(vec1: Vector, vec2: Vector) -> float:
    return vec1.y * vec2.y + vec1.x * vec2.x


def distance(vec1: Vector, vec2: Vector) -> float:
    dx = vec1.x - vec2.x
    dy = vec1.y - vec2.y
    return math.sqrt(dy * dy + dx * dx)


def rotate_point(point: Vector, sin: float, cos: float, origin: Vector) -> None:
    """Rotate point in place about origin by the angle with the given sine and cosine."""
    dir_x = point.x - origin.x
    dir_y = point.y - origin.y
    point.x = dir_x * cos - dir_y * sin + origin.x
    point.y = dir_x * sin + dir_y * cos + origin.y


def rotate_vector(vec: Vector, angle: float) -> None:
    """Rotate vec in place the way the table logic expects.

    The y component is computed from the already-rotated x, as the table's
    gameplay has always done.
    """
    s, c = math.sin(angle), math.cos(angle)
    vec.x = c * vec.x - s * vec.y
    vec.y = s * vec.x + c * vec.y


def distance_to_flipper(ray1: Ray, ray2: Optional[Ray], flipper: FlipperGeometry) -> float:
    """Distance along ray1 to the flipper.

    When ray2 is given and the flipper is hit, it receives the contact point
    and the surface normal there.
    """
    best = NO_HIT
    kind = -1
    candidate = ray_intersect_line(ray1, flipper.line_a)
    if candidate < NO_HIT:
        best, kind = candidate, 0
    candidate = ray_intersect_circle(ray1, flipper.circle_base)
    if candidate < best:
        best, kind = candidate, 2
    candidate = ray_intersect_circle(ray1, flipper.circle_t1)
    if candidate < best:
        best, kind = candidate, 3
    candidate = ray_intersect_line(ray1, flipper.line_b)
    if candidate < best:
        best, kind = candidate, 1
    if ray2 is None or best >= NO_HIT:
        return best
    if kind == -1:
        return NO_HIT

    if kind in (0, 1):
        line = flipper.line_a if kind == 0 else flipper.line_b
        ray2.direction = line.perpendicular.copy()
        ray2.origin = line.ray_intersect.copy()
        return best

    ray2.origin.x = best * ray1.direction.x + ray1.origin.x
    ray2.origin.y = best * ray1.direction.y + ray1.origin.y
    circle = flipper.circle_base if kind == 2 else flipper.circle_t1
    ray2.direction.x = ray2.origin.x - circle.center.x
    ray2.direction.y = ray2.origin.y - circle.center.y
    normalize_2d(ray2.direction)
    return best


def find_closest_edge(planes: Sequence[RampPlane],
                      wall: WallPoint) -> Tuple[Optional[Vector], Optional[Vector]]:
    """Find the plane edge that best matches the wall; return (line_end, line_start)."""
    wall_start = Vector(wall.x0, wall.y0)
    wall_end = Vector(wall.x1, wall.y1)
    best = NO_HIT
    line_end: Optional[Vector] = None
    line_start: Optional[Vector] = None
    for plane in planes:
        for first, second in ((plane.v1, plane.v2), (plane.v2, plane.v3), (plane.v3, plane.v1)):
            candidate = distance(wall_start, first) + distance(wall_end, second)
            if candidate < best:
                best = candidate
                line_end, line_start = first, second
    return line_end, line_start