"""
Utilities
=========

Helpers for normalizing inputs and formatting reports.

.. autosummary::
   toList
   toArray
   joinValues

Reference
-----------

.. autofunction:: toList
.. autofunction:: toArray
.. autofunction:: joinValues
"""
from collections.abc import Iterable, Sequence

import numpy as np


def toList(val: object) -> list:
    """
    Wrap a scalar or string in a list; other iterables are converted to lists

    Args:
        val: the input

    Returns:
        a list containing the input

    Examples:
        >>> toList("Sat.SMA")
            ['Sat.SMA']
        >>> toList(("x", "y"))
            ['x', 'y']
    """
    if isinstance(val, str) or not isinstance(val, Iterable):
        return [val]
    return list(val)


def toArray(val: object) -> np.ndarray:
    """
    Convert a scalar or array-like to a flat numpy array of floats

    Args:
        val: the input

    Returns:
        a one-dimensional array

    Examples:
        >>> toArray(1.23)
            ndarray([1.23])
    """
    return np.atleast_1d(np.asarray(val, dtype=float)).ravel()


def joinValues(names: Sequence[str], values: Sequence[float], sep: str = ", ") -> str:
    """
    Format ``name = value`` pairs into a single string

    Args:
        names: the labels
        values: the values, one per label
        sep: the separator placed between pairs

    Returns:
        the joined string, e.g., ``"x = 1.0, y = 2.5"``
    """
    return sep.join(f"{name} = {val:.12g}" for name, val in zip(names, values))


def repr(obj: object, *attributes: str) -> str:
    """
    Build a multi-line repr listing the named attributes of an object, e.g.,
    ``<Goal:\\n  name = 'g',\\n  desired = 1.0,\\n>``

    Args:
        obj: the object
        attributes: the names of the attributes to include

    Returns:
        the repr string
    """
    lines = [f"<{obj.__class__.__name__}:"]
    lines += [f"  {attr} = {getattr(obj, attr)!r}," for attr in attributes]
    lines.append(">")
    return "\n".join(lines)
