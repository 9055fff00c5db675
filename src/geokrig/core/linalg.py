"""
Dense matrix inversion by Gauss-Jordan elimination.

The inverter works on an augmented ``[A | I]`` system and selects, for
each column, the row with the largest-magnitude pivot candidate. A pivot
smaller than the tolerance marks that elimination step as singular.
By default such steps are skipped and recorded so the caller can tell an
approximate inverse from an exact one; ``strict=True`` raises instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from geokrig.core.exceptions import SingularMatrixError

logger = logging.getLogger(__name__)

DEFAULT_PIVOT_TOLERANCE = 1e-10


@dataclass(frozen=True)
class InversionResult:
    """
    Result of a Gauss-Jordan inversion.

    Attributes
    ----------
    inverse : NDArray[np.float64]
        The (possibly approximate) inverse matrix.
    singular_steps : tuple[int, ...]
        Elimination steps (column indices) whose pivot fell below the
        tolerance and were skipped.
    """

    inverse: NDArray[np.float64]
    singular_steps: tuple[int, ...] = ()

    @property
    def is_exact(self) -> bool:
        """Return True if no elimination step was skipped."""
        return not self.singular_steps


def invert_matrix(
    matrix: NDArray,
    tol: float = DEFAULT_PIVOT_TOLERANCE,
    strict: bool = False,
) -> InversionResult:
    """
    Invert a square matrix with Gauss-Jordan elimination and partial pivoting.

    Parameters
    ----------
    matrix : NDArray
        Square ``(n, n)`` matrix of finite numbers. Not modified.
    tol : float
        Pivots with absolute value below this are treated as singular.
    strict : bool
        If True, raise on the first singular pivot instead of skipping it.

    Returns
    -------
    InversionResult
        Inverse matrix and the list of skipped elimination steps.

    Raises
    ------
    ValueError
        If the matrix is not square or contains non-finite values.
    SingularMatrixError
        If ``strict`` is True and a pivot falls below ``tol``.

    Examples
    --------
    >>> result = invert_matrix(np.array([[4.0, 7.0], [2.0, 6.0]]))
    >>> np.round(result.inverse, 2)
    array([[ 0.6, -0.7],
           [-0.2,  0.4]])
    >>> result.is_exact
    True
    """
    a = np.array(matrix, dtype=np.float64)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Matrix must be square, got shape {a.shape}")
    if not np.isfinite(a).all():
        raise ValueError("Matrix contains NaN or infinite values")

    n = a.shape[0]
    augmented = np.hstack([a, np.eye(n)])
    singular: list[int] = []

    for i in range(n):
        # Partial pivoting: largest magnitude at or below the diagonal
        max_row = i + int(np.argmax(np.abs(augmented[i:, i])))
        if max_row != i:
            augmented[[i, max_row]] = augmented[[max_row, i]]

        pivot = augmented[i, i]
        if abs(pivot) < tol:
            if strict:
                raise SingularMatrixError(
                    f"Pivot {pivot:.3e} below tolerance {tol:.1e} at step {i}", step=i
                )
            logger.warning(
                "Singular pivot %.3e at elimination step %d of %d; inverse will be approximate",
                pivot,
                i,
                n,
            )
            singular.append(i)
            continue

        augmented[i] /= pivot

        factors = augmented[:, i].copy()
        factors[i] = 0.0
        augmented -= np.outer(factors, augmented[i])

    return InversionResult(inverse=augmented[:, n:].copy(), singular_steps=tuple(singular))
