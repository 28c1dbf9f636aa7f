"""
Explicit Reaction-Diffusion Update

One step of

  d(rho)/dt = D * lap(rho) + rate(rho)

on the interior of a [k, j, i] array, using the unit-spacing 7-point
stencil:

  lap = sum(6 axis neighbours) - 6 * center

The physical cell size is not applied to the stencil.

update_slab() is the only place the formula is written. It fills the
interior cells whose k index lies in [k0, k1), reading only from `src`,
so disjoint slabs can be computed in any order or concurrently.
"""

import numpy as np

from .scalar import intrinsic_rate


def update_slab(src, dst, k0, k1, diffusion, dt, config):
    """Write the updated interior cells for k in [k0, k1) into dst.

    Args:
        src: Pre-step field, shape (res, res, res), never written
        dst: Next-step buffer, same shape
        k0, k1: Half-open k range, within [1, res - 1)
        diffusion: Diffusion coefficient D
        dt: Time step
        config: FieldConfig supplying the rate-law constants
    """
    if k0 >= k1:
        return
    center = src[k0:k1, 1:-1, 1:-1]

    lap = src[k0 - 1:k1 - 1, 1:-1, 1:-1] + src[k0 + 1:k1 + 1, 1:-1, 1:-1]
    lap += src[k0:k1, :-2, 1:-1]
    lap += src[k0:k1, 2:, 1:-1]
    lap += src[k0:k1, 1:-1, :-2]
    lap += src[k0:k1, 1:-1, 2:]
    lap -= 6.0 * center

    delta = diffusion * lap + intrinsic_rate(center, config)
    out = dst[k0:k1, 1:-1, 1:-1]
    np.add(center, dt * delta, out=out)
    np.clip(out, 0.0, config.max_value, out=out)


def copy_boundary(src, dst):
    """Copy the outermost shell of src into dst unchanged."""
    dst[0] = src[0]
    dst[-1] = src[-1]
    dst[:, 0] = src[:, 0]
    dst[:, -1] = src[:, -1]
    dst[:, :, 0] = src[:, :, 0]
    dst[:, :, -1] = src[:, :, -1]


def split_range(start, stop, parts):
    """Split [start, stop) into at most `parts` contiguous, non-empty ranges."""
    n = stop - start
    if n <= 0:
        return []
    parts = max(1, min(parts, n))
    edges = np.linspace(start, stop, parts + 1).round().astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]
