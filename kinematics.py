# kinematics.py
import math
import weakref
from typing import NamedTuple, Union

from config import config

# Normalized angles are rounded to this many decimals so that a + 360 and a compare equal.
ANGLE_PRECISION = 10
# Normalized values within a micro-degree of a full turn are reported as 0.
ANGLE_EPSILON = 1e-6


class InvalidStateError(Exception):
    """Raised when a body is asked to do something its current state does not allow,
    e.g. rendering a satellite that was never attached to an orbit."""
    pass


def normalize(degrees: float) -> float:
    """Reduces an angle in degrees to the half-open range [0, 360)."""
    value = math.fmod(degrees, 360.0)
    if value < 0:
        value += 360.0
    value = round(value, ANGLE_PRECISION)
    if value >= 360.0 - ANGLE_EPSILON:
        value = 0.0
    return value


class Angle:
    """Immutable angle in degrees, always stored normalized to [0, 360)."""

    __slots__ = ('_degrees',)

    def __init__(self, degrees: float = 0.0):
        self._degrees = normalize(float(degrees))

    @property
    def degrees(self) -> float:
        return self._degrees

    def radians(self) -> float:
        return math.radians(self._degrees)

    def rotated(self, delta_degrees: float) -> 'Angle':
        """Returns a new angle advanced by `delta_degrees`."""
        return Angle(self._degrees + delta_degrees)

    def __eq__(self, other):
        if not isinstance(other, Angle):
            return NotImplemented
        return self._degrees == other._degrees

    def __hash__(self):
        return hash(self._degrees)

    def __repr__(self):
        return f"Angle({self._degrees!r})"


class Time:
    """A positive duration in seconds: one full rotation or revolution."""

    __slots__ = ('seconds',)

    def __init__(self, seconds: float):
        self.seconds = float(seconds)

    def __repr__(self):
        return f"Time({self.seconds!r})"


def rotation_delta(period: Time, frame_rate: float = None) -> float:
    """Degrees to turn per frame so that `period` seconds make one full turn.

    Assumes frames arrive at `frame_rate` (defaults to `config.Time.FRAME_RATE`);
    elapsed wall-clock time is never measured.
    """
    if frame_rate is None:
        frame_rate = config.Time.FRAME_RATE
    return 360.0 / (period.seconds * frame_rate)


class Point(NamedTuple):
    """Immutable 2D point in canvas (screen) space."""
    x: float
    y: float

    @staticmethod
    def polar(center: 'Point', radius: float, angle: Angle) -> 'Point':
        """Point at `radius` from `center` in direction `angle` (y axis points down)."""
        radians = angle.radians()
        return Point(center.x + radius * math.cos(radians), center.y + radius * math.sin(radians))


class BodyCenter:
    """Non-owning, read-only handle on another body's current center.

    Holds only a weak reference so that a parent body and the orbits of its
    children never form an ownership cycle.
    """

    __slots__ = ('_body_ref', 'name')

    def __init__(self, body):
        self._body_ref = weakref.ref(body)
        self.name = getattr(body, 'name', type(body).__name__)

    def __call__(self) -> Point:
        body = self._body_ref()
        if body is None:
            raise InvalidStateError(f"Center reference to '{self.name}' outlived its body.")
        return body.center

    def __repr__(self):
        return f"BodyCenter({self.name!r})"


CenterReference = Union[Point, BodyCenter]


class Orbit:
    """Circular path around a fixed point or around another body's current center.

    The radius is fixed for the lifetime of the orbit and the angle only changes
    through `advance()`. Negative radii and non-positive periods are caller bugs
    and are not checked.

    Attributes:
        radius (float): Distance from the center in pixels.
        angle (Angle): Current position on the orbit.
        delta (float): Degrees travelled per frame.
    """

    def __init__(self, center: CenterReference, radius: float, period: Time,
                 start_angle: float = 0.0, frame_rate: float = None):
        self._center_ref = center
        self.radius = float(radius)
        self.angle = Angle(start_angle)
        self.delta = rotation_delta(period, frame_rate)

    @property
    def center(self) -> Point:
        """The orbit center, resolved at call time."""
        if isinstance(self._center_ref, tuple):
            return Point(*self._center_ref)
        return self._center_ref()

    def set_center(self, center: CenterReference) -> None:
        self._center_ref = center

    def position(self) -> Point:
        return Point.polar(self.center, self.radius, self.angle)

    def advance(self) -> Point:
        """Moves one frame along the orbit and returns the new position."""
        self.angle = self.angle.rotated(self.delta)
        return self.position()

    def __repr__(self):
        return f"Orbit(center={self._center_ref!r}, radius={self.radius}, angle={self.angle.degrees:.3f})"
