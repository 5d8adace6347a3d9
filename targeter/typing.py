"""
Array type aliases
"""
from collections.abc import Sequence
from typing import Union

import numpy as np
import numpy.typing as npT

#: An array-like object of floats
FloatArray = Union[Sequence[float], Sequence[np.double], npT.NDArray[np.double]]

#: A dense, two-dimensional matrix of floats, e.g., a Jacobian
FloatMatrix = npT.NDArray[np.double]
