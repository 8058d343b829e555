from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Transform2D:
    """2x3 affine transform mapping (x, y) to (a*x + c*y + e, b*x + d*y + f)."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Transform2D":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "Transform2D":
        return cls(1.0, 0.0, 0.0, 1.0, tx, ty)

    @classmethod
    def scaling(cls, sx: float, sy: float | None = None) -> "Transform2D":
        return cls(sx, 0.0, 0.0, sx if sy is None else sy, 0.0, 0.0)

    @classmethod
    def rotation(cls, angle: float) -> "Transform2D":
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return cls(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)

    @classmethod
    def around(cls, pivot: tuple[float, float], m: "Transform2D") -> "Transform2D":
        px, py = pivot
        return cls.translation(px, py).multiply(m).multiply(cls.translation(-px, -py))

    def multiply(self, m: "Transform2D") -> "Transform2D":
        """Compose so that `m` applies first, then `self`."""
        return Transform2D(
            self.a * m.a + self.c * m.b,
            self.b * m.a + self.d * m.b,
            self.a * m.c + self.c * m.d,
            self.b * m.c + self.d * m.d,
            self.a * m.e + self.c * m.f + self.e,
            self.b * m.e + self.d * m.f + self.f,
        )

    def apply(self, point: tuple[float, float]) -> tuple[float, float]:
        x, y = point
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    @property
    def is_identity(self) -> bool:
        return self == Transform2D()
