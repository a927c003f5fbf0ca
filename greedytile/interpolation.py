"""Natural cubic spline interpolation."""

from __future__ import annotations

from collections.abc import Sequence


class InterpolationError(ValueError):
    """Raised when a spline cannot be built or evaluated."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"Interpolation error: {self.message}"


class Cubic:
    """Piecewise cubic interpolation with zero second derivative at both ends."""

    def __init__(self, x_values: Sequence[float], y_values: Sequence[float]) -> None:
        xs = [float(v) for v in x_values]
        ys = [float(v) for v in y_values]
        if len(xs) != len(ys):
            raise InterpolationError("x_values and y_values must have the same length")
        n = len(xs)
        if n < 2:
            raise InterpolationError("Need at least 2 points for interpolation")

        second = [0.0] * n
        u = [0.0] * (n - 1)
        try:
            for i in range(1, n - 1):
                x_lo, x_i, x_hi = xs[i - 1], xs[i], xs[i + 1]
                y_lo, y_i, y_hi = ys[i - 1], ys[i], ys[i + 1]
                sig = (x_i - x_lo) / (x_hi - x_lo)
                p = sig * second[i - 1] + 2.0
                second[i] = (sig - 1.0) / p
                slope_change = (y_hi - y_i) / (x_hi - x_i) - (y_i - y_lo) / (x_i - x_lo)
                u[i] = (6.0 * slope_change / (x_hi - x_lo) - sig * u[i - 1]) / p
        except ZeroDivisionError as exc:
            raise InterpolationError("x values must be strictly increasing") from exc

        second[n - 1] = 0.0
        for k in range(n - 2, -1, -1):
            second[k] = second[k] * second[k + 1] + u[k]

        self._x = tuple(xs)
        self._y = tuple(ys)
        self._second = tuple(second)

    @property
    def x_values(self) -> tuple[float, ...]:
        return self._x

    @property
    def y_values(self) -> tuple[float, ...]:
        return self._y

    def _segment(self, x: float) -> tuple[int, int]:
        lo, hi = 0, len(self._x) - 1
        while hi - lo > 1:
            mid = (hi + lo) // 2
            if self._x[mid] > x:
                hi = mid
            else:
                lo = mid
        return lo, hi

    def evaluate(self, x: float) -> float:
        """Value of the spline at ``x``; outside the data the end value is returned."""
        if x <= self._x[0]:
            return self._y[0]
        if x >= self._x[-1]:
            return self._y[-1]

        lo, hi = self._segment(x)
        h = self._x[hi] - self._x[lo]
        if h <= 0.0:
            raise InterpolationError("x values must be strictly increasing")

        a = (self._x[hi] - x) / h
        b = (x - self._x[lo]) / h
        return (
            a * self._y[lo]
            + b * self._y[hi]
            + ((a**3 - a) * self._second[lo] + (b**3 - b) * self._second[hi]) * h**2 / 6.0
        )

    __call__ = evaluate