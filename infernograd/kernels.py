"""Element-wise and strided gradient kernels for activation, loss and indexing ops.

Tensors are flat sequences addressed through a shape, per-dimension strides
and a starting offset, so non-contiguous views can be read and written.
Kernels that take an ``out`` sequence write into it and also return it.
"""

from __future__ import annotations

import math
from collections.abc import MutableSequence, Sequence
from itertools import product
from numbers import Real

_SQRT_2_OVER_PI = 0.7978845608028654
_BETA = 0.044715


def _coords(shape: Sequence[int]):
    """Yield every multi-index of ``shape`` in row-major order."""
    return product(*(range(extent) for extent in shape))


def _flat_index(coords: Sequence[int], strides: Sequence[int], offset: int) -> int:
    return offset + sum(c * s for c, s in zip(coords, strides))


def _check_ranks(name: str, shape: Sequence[int], *strides: Sequence[int]) -> None:
    if any(len(s) != len(shape) for s in strides):
        raise ValueError(f"{name}: shape/stride rank mismatch")


def gelu_grad_tanh_approx(x: float) -> float:
    """Derivative of the tanh approximation of GELU at ``x``."""
    x = float(x)
    x2 = x * x
    t = math.tanh(_SQRT_2_OVER_PI * (x + _BETA * x2 * x))
    sech2 = 1.0 - t * t
    return 0.5 * (1.0 + t) + 0.5 * x * sech2 * _SQRT_2_OVER_PI * (1.0 + 3.0 * _BETA * x2)


def gelu_backward(a: Sequence[float], g: Sequence[float], offset: int = 0) -> list[float]:
    """Return ``g[i] * gelu'(a[offset + i])`` for every upstream gradient ``g[i]``."""
    inputs = a[offset:offset + len(g)]
    return [
        float(gi) * gelu_grad_tanh_approx(x)
        for x, gi in zip(inputs, g, strict=True)
    ]


def gelu_backward_strided(
    a: Sequence[float],
    g: Sequence[float],
    out: MutableSequence[float],
    shape: Sequence[int],
    astrides: Sequence[int],
    gstrides: Sequence[int],
    ostrides: Sequence[int],
    aoffset: int = 0,
    goffset: int = 0,
    ooffset: int = 0,
) -> MutableSequence[float]:
    """Write the GELU input gradient for strided views of ``a`` and ``g`` into ``out``."""
    _check_ranks("gelu_backward_strided", shape, astrides, gstrides, ostrides)
    for coords in _coords(shape):
        x = a[_flat_index(coords, astrides, aoffset)]
        grad = float(g[_flat_index(coords, gstrides, goffset)])
        out[_flat_index(coords, ostrides, ooffset)] = grad * gelu_grad_tanh_approx(x)
    return out


def sigmoid_backward(y: Sequence[float], g: Sequence[float]) -> list[float]:
    """Return ``g * y * (1 - y)`` where ``y`` is the saved sigmoid output."""
    return [float(gi) * float(yi) * (1.0 - float(yi)) for yi, gi in zip(y, g, strict=True)]


def mse_loss_backward(
    a: Sequence[float], b: Sequence[float], gout: float | Sequence[float]
) -> tuple[list[float], list[float]]:
    """Return the gradients of ``mean((a - b) ** 2)`` with respect to ``a`` and ``b``.

    ``gout`` is the upstream gradient of the scalar loss; if a sequence is
    given, its first element is used.
    """
    if len(a) != len(b):
        raise ValueError("mse_loss_backward: inputs differ in length")
    if not a:
        return [], []
    upstream = float(gout) if isinstance(gout, Real) else float(gout[0])
    scale = upstream * 2.0 / len(a)
    diffs = [float(x) - float(y) for x, y in zip(a, b)]
    return [scale * d for d in diffs], [-scale * d for d in diffs]


def normalize_softmax_axis(axis: int, ndim: int) -> int:
    """Map a possibly negative axis into ``[0, ndim)``, raising if it is out of range."""
    if axis < 0:
        axis += ndim
    if axis < 0 or axis >= ndim:
        raise ValueError("softmax backward: invalid axis")
    return axis


def softmax_groups_excluding_axis(shape: Sequence[int], axis: int) -> int:
    """Number of independent softmax rows: the product of all extents but ``axis``."""
    return math.prod(extent for d, extent in enumerate(shape) if d != axis)


def softmax_backward(
    y: Sequence[float],
    g: Sequence[float],
    out: MutableSequence[float],
    shape: Sequence[int],
    ystrides: Sequence[int],
    gstrides: Sequence[int],
    ostrides: Sequence[int],
    yoffset: int = 0,
    goffset: int = 0,
    ooffset: int = 0,
    axis: int = -1,
) -> MutableSequence[float]:
    """Write ``y * (g - sum(g * y))`` along ``axis`` into ``out``.

    ``y`` is the saved softmax output and ``g`` the upstream gradient.
    """
    _check_ranks("softmax backward", shape, ystrides, gstrides, ostrides)
    axis = normalize_softmax_axis(axis, len(shape))
    outer_shape = [extent for d, extent in enumerate(shape) if d != axis]
    ystep, gstep, ostep = ystrides[axis], gstrides[axis], ostrides[axis]

    def _without_axis(strides: Sequence[int]) -> list[int]:
        return [s for d, s in enumerate(strides) if d != axis]

    youter, gouter, oouter = map(_without_axis, (ystrides, gstrides, ostrides))
    axis_range = range(shape[axis])

    for coords in _coords(outer_shape):
        ybase = _flat_index(coords, youter, yoffset)
        gbase = _flat_index(coords, gouter, goffset)
        obase = _flat_index(coords, oouter, ooffset)

        row = [
            (float(y[ybase + k * ystep]), float(g[gbase + k * gstep]))
            for k in axis_range
        ]
        dot = sum(yk * gk for yk, gk in row)
        for k, (yk, gk) in zip(axis_range, row):
            out[obase + k * ostep] = yk * (gk - dot)
    return out


def select_backward_strided(
    g: Sequence[float],
    out: MutableSequence[float],
    out_shape: Sequence[int],
    gstrides: Sequence[int],
    parent_strides: Sequence[int],
    goffset: int = 0,
    poffset: int = 0,
    axis: int = 0,
    index: int = 0,
) -> MutableSequence[float]:
    """Scatter ``g`` back into slot ``index`` of dimension ``axis`` of the parent ``out``.

    ``out_shape`` and ``gstrides`` describe the selected (reduced) gradient;
    ``parent_strides`` has one more dimension. Other parent entries are left
    untouched, so ``out`` is normally zero-filled beforehand.
    """
    ndim_parent = len(out_shape) + 1
    if len(gstrides) != len(out_shape) or len(parent_strides) != ndim_parent:
        raise ValueError("select_backward_strided: shape/stride rank mismatch")
    if axis < 0:
        axis += ndim_parent
    if axis < 0 or axis >= ndim_parent:
        raise ValueError("select_backward_strided: invalid axis")

    for coords in _coords(out_shape):
        parent_coords = (*coords[:axis], index, *coords[axis:])
        value = g[_flat_index(coords, gstrides, goffset)]
        out[_flat_index(parent_coords, parent_strides, poffset)] = float(value)
    return out