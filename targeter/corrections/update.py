"""
Newton Update
=============

Given the Jacobian, :math:`\\mathbf{J}`, with one row per variable and one
column per goal, the linearized relationship between a change in the
variables, :math:`\\delta \\vec{x}`, and the change in the goals is

.. math::
   \\delta \\vec{g} = \\mathbf{J}^T \\delta \\vec{x}.

Setting :math:`\\delta \\vec{g}` to the goal error,
:math:`\\vec{g}^* - \\vec{g}(\\vec{x})`, and inverting the Jacobian yields the
Newton step,

.. math::
   \\delta x_i = \\sum_j \\mathbf{J}^{-1}_{j,i} (g_j^* - g_j).

When the number of variables differs from the number of goals, the
pseudo-inverse is used in place of the inverse (see :mod:`targeter.linalg`).

Step Limits
-----------

Each variable defines a maximum step. Rather than clip each component of the
step independently, the full step is scaled by a single multiplier,

.. math::
   m = \\min\\left(1, \\min_i \\frac{\\Delta_i}{|\\delta x_i|}\\right),

so that the direction of the multivariable step is preserved. The scaled step
is applied and each variable is then clamped into its bounds. A clamp that
actually triggers changes the direction of the step; this is a known rough
edge of the algorithm and is logged but otherwise accepted.

Reference
-----------

.. autoclass:: NewtonUpdate
   :members:
"""
from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from targeter import linalg
from targeter.corrections.variables import GoalSet, VariableSet
from targeter.exceptions import NumericalError
from targeter.typing import FloatArray

logger = logging.getLogger(__name__)

__all__ = ["NewtonUpdate"]


class NewtonUpdate:
    """
    Computes and applies a step-limited, bounded Newton update to the variables
    """

    def __init__(self) -> None:
        #: the inverse (or pseudo-inverse) of the most recent Jacobian, with
        #: one row per goal and one column per variable
        self.inverseJacobian: NDArray[np.double] = np.zeros((0, 0))

        #: the unscaled Newton step from the most recent update
        self.delta: NDArray[np.double] = np.zeros((0,))

        #: float: the step multiplier from the most recent update
        self.multiplier = 1.0

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: multiplier = {self.multiplier}>"

    @staticmethod
    def stepMultiplier(delta: FloatArray, maxStep: FloatArray) -> float:
        """
        Compute the multiplier that limits a step to the per-variable maxima

        Args:
            delta: the unscaled step
            maxStep: the maximum step magnitude for each variable

        Returns:
            the largest multiplier in (0, 1] such that no component of the
            scaled step exceeds its maximum in magnitude

        Examples:
            >>> NewtonUpdate.stepMultiplier([3.0, -1.0], [1.0, 1.0])
                0.3333333333333333
        """
        multiplier = 1.0
        for step, limit in zip(delta, maxStep):
            if abs(step) > limit:
                multiplier = min(multiplier, abs(limit / step))
        return multiplier

    def update(
        self,
        variables: VariableSet,
        goals: GoalSet,
        jacobian: NDArray[np.double],
        nominal: NDArray[np.double],
    ) -> NDArray[np.double]:
        """
        Compute a Newton step and apply it to the variables

        Args:
            variables: the variables to update; values are modified in place
            goals: the goals that define the desired values
            jacobian: the Jacobian with one row per variable and one column
                per goal
            nominal: the goal values achieved with the current variables

        Returns:
            the change that was applied to each variable, after scaling and
            clamping

        Raises:
            NumericalError: if the Jacobian cannot be inverted or the update
                produces a value that cannot be represented
        """
        self.inverseJacobian = linalg.invert(jacobian)

        residual = goals.desired() - np.asarray(nominal, dtype=float)
        old = variables.values()
        try:
            with np.errstate(over="raise", invalid="raise"):
                self.delta = self.inverseJacobian.T @ residual
                self.multiplier = self.stepMultiplier(self.delta, variables.maxSteps)
                new = old + self.delta * self.multiplier
        except FloatingPointError as err:
            raise NumericalError(f"Range error applying the Newton update: {err}") from err

        if not np.all(np.isfinite(new)):
            raise NumericalError(
                f"Range error applying the Newton update; new values = {new}"
            )

        logger.debug(f"Newton update multiplier = {self.multiplier:.15f}")

        clamped = np.clip(new, variables.minimums, variables.maximums)
        for ix in np.flatnonzero(clamped != new):
            logger.debug(
                f"Variable {variables[int(ix)].name} clamped from {new[ix]} to "
                f"{clamped[ix]}"
            )

        variables.setValues(clamped)
        return clamped - old
