"""
Linear Algebra
==============

Dense matrix inversion used by the Newton update. When the Jacobian is square
(the number of variables equals the number of goals), the exact inverse is
computed. Otherwise the Moore-Penrose pseudo-inverse provides the least-squares
(more goals than variables) or minimum-norm (more variables than goals)
solution of the linearized targeting equations.

.. autosummary::
   inverse
   pseudoinverse
   invert

Both routines are thin wrappers around :mod:`scipy.linalg`; any failure to
invert the matrix, including ill-conditioning flagged by
:class:`scipy.linalg.LinAlgWarning`, is raised as a
:class:`~targeter.exceptions.NumericalError`.

Reference
-----------

.. autofunction:: inverse
.. autofunction:: pseudoinverse
.. autofunction:: invert
"""
import logging
import warnings

import numpy as np
import scipy.linalg

from targeter.exceptions import NumericalError
from targeter.typing import FloatArray, FloatMatrix

logger = logging.getLogger(__name__)


def _checkFinite(matrix: FloatMatrix) -> None:
    if not np.all(np.isfinite(matrix)):
        raise NumericalError(
            f"Cannot invert a matrix with non-finite entries:\n{matrix}"
        )


def inverse(matrix: FloatArray) -> FloatMatrix:
    """
    Compute the exact inverse of a square matrix

    Args:
        matrix: a square, two-dimensional matrix

    Returns:
        the inverse, :math:`\\mathbf{A}^{-1}`

    Raises:
        ValueError: if the matrix is not square
        NumericalError: if the matrix is singular, ill-conditioned, or
            contains non-finite values
    """
    mat = np.array(matrix, dtype=float, ndmin=2)
    if not mat.shape[0] == mat.shape[1]:
        raise ValueError(f"Cannot compute the inverse of a {mat.shape} matrix")

    _checkFinite(mat)
    with warnings.catch_warnings():
        warnings.simplefilter("error", scipy.linalg.LinAlgWarning)
        try:
            return scipy.linalg.inv(mat)
        except (scipy.linalg.LinAlgError, scipy.linalg.LinAlgWarning) as err:
            raise NumericalError(f"Matrix is singular; cannot invert: {err}") from err


def pseudoinverse(matrix: FloatArray, rtol: float = 1e-12) -> FloatMatrix:
    """
    Compute the Moore-Penrose pseudo-inverse of a matrix

    Args:
        matrix: a two-dimensional matrix of any shape
        rtol: relative tolerance on the singular values; values smaller than
            ``rtol`` times the largest singular value are considered zero.

    Returns:
        the pseudo-inverse, :math:`\\mathbf{A}^+`, with the transposed shape of
        the input

    Raises:
        NumericalError: if the matrix does not have full rank, i.e., its rank
            is less than the smaller of its dimensions, or contains non-finite
            values
    """
    mat = np.array(matrix, dtype=float, ndmin=2)
    _checkFinite(mat)

    # Rank-deficient matrices are treated as singular
    sv = scipy.linalg.svdvals(mat)
    rank = int(np.sum(sv > rtol * sv.max())) if sv.size and sv.max() > 0 else 0
    if rank < min(mat.shape):
        raise NumericalError(
            f"Matrix with shape {mat.shape} has rank {rank}; cannot compute a "
            "full-rank pseudo-inverse"
        )

    try:
        return scipy.linalg.pinv(mat, rtol=rtol)
    except scipy.linalg.LinAlgError as err:
        raise NumericalError(f"Pseudo-inverse failed: {err}") from err


def invert(matrix: FloatArray) -> FloatMatrix:
    """
    Invert a matrix, choosing the exact inverse for square matrices and the
    pseudo-inverse otherwise

    Args:
        matrix: a two-dimensional matrix

    Returns:
        the (pseudo-)inverse of the matrix

    Raises:
        NumericalError: if the inversion fails
    """
    mat = np.array(matrix, dtype=float, ndmin=2)
    if mat.shape[0] == mat.shape[1]:
        logger.debug(f"Inverting {mat.shape} matrix")
        return inverse(mat)
    else:
        logger.debug(f"Pseudo-inverting {mat.shape} matrix")
        return pseudoinverse(mat)
