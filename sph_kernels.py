# sph_kernels.py
"""
Smoothing kernels for particle (SPH) fluids, Mueller et al. 2003, Sec. 3.5.

Each kernel has compact support h (the smoothing radius) and is evaluated
as a function of the particle distance r >= 0. grad_w returns the scalar
gradient factor; multiply by the separation vector to get the gradient.
A kernel that does not define a derivative raises NotImplementedError.
"""

import math

# below this radius the 1/r terms are treated as singular
RADIUS_EPS = 1e-5


class Kernel:
    def __init__(self, smoothing_radius: float):
        if smoothing_radius <= 0.0:
            raise ValueError(f"smoothing_radius must be > 0, got {smoothing_radius}")
        self.h = float(smoothing_radius)

    def w(self, radius: float) -> float:
        raise NotImplementedError(f"{type(self).__name__} does not define w")

    def grad_w(self, radius: float) -> float:
        raise NotImplementedError(f"{type(self).__name__} does not define grad_w")

    def laplace_w(self, radius: float) -> float:
        raise NotImplementedError(f"{type(self).__name__} does not define laplace_w")


class Poly6(Kernel):
    """W = 315 / (64 pi h^9) * (h^2 - r^2)^3"""
    def __init__(self, smoothing_radius: float):
        super().__init__(smoothing_radius)
        h9 = self.h**9
        self.w_const = 315.0 / 64.0 / (math.pi * h9)
        self.grad_w_const = -945.0 / 32.0 / (math.pi * h9)

    def w(self, radius: float) -> float:
        assert radius >= 0.0, "radius must be non-negative"
        if self.h <= radius:
            return 0.0
        diff = self.h**2 - radius**2
        return self.w_const * diff**3

    def grad_w(self, radius: float) -> float:
        assert radius >= 0.0, "radius must be non-negative"
        if self.h <= radius:
            return 0.0
        diff = self.h**2 - radius**2
        return self.grad_w_const * diff**2


class Spiky(Kernel):
    """W = 15 / (pi h^6) * (h - r)^3; gradient stays non-zero as r -> 0."""
    def __init__(self, smoothing_radius: float):
        super().__init__(smoothing_radius)
        h6 = self.h**6
        self.w_const = 15.0 / (math.pi * h6)
        self.grad_w_const = -45.0 / (math.pi * h6)

    def w(self, radius: float) -> float:
        assert radius >= 0.0, "radius must be non-negative"
        if self.h <= radius:
            return 0.0
        return self.w_const * (self.h - radius) ** 3

    def grad_w(self, radius: float) -> float:
        assert radius >= 0.0, "radius must be non-negative"
        if self.h <= radius or radius < RADIUS_EPS:
            return 0.0
        return self.grad_w_const * (self.h - radius) ** 2 / radius


class Viscosity(Kernel):
    """
    W = 15 / (2 pi h^3) * (-r^3 / (2 h^3) + r^2 / h^2 + h / (2 r) - 1)

    Used for its Laplacian 45 / (pi h^6) * (h - r), which is positive
    everywhere inside the support.
    """
    def __init__(self, smoothing_radius: float):
        super().__init__(smoothing_radius)
        self.w_const = 15.0 / 2.0 / (math.pi * self.h**3)
        self.laplace_w_const = 45.0 / (math.pi * self.h**6)

    def w(self, radius: float) -> float:
        assert radius >= 0.0, "radius must be non-negative"
        if self.h <= radius or radius < RADIUS_EPS:
            return 0.0
        h = self.h
        fac = -radius**3 / (2.0 * h**3) + (radius / h) ** 2 + h / (2.0 * radius) - 1.0
        return self.w_const * fac

    def laplace_w(self, radius: float) -> float:
        assert radius >= 0.0, "radius must be non-negative"
        if self.h <= radius:
            return 0.0
        return self.laplace_w_const * (self.h - radius)
