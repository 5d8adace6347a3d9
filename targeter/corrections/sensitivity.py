"""
Sensitivity Estimation
======================

The Jacobian of the goals with respect to the variables is estimated by finite
differences. The :class:`SensitivityBuilder` walks through the variables one
at a time, displacing each by its perturbation so that the driver can evaluate
the goals, and collects the achieved values. After a full pass through the
variables, the Jacobian is assembled from the nominal and perturbed results.

The Jacobian is stored with one row per variable and one column per goal,

.. math::
   \\mathbf{J}_{i,j} = \\frac{\\partial g_j}{\\partial x_i}.

Three differencing schemes are available (see
:class:`~targeter.corrections.states.Differencing`):

- **Forward**: :math:`\\mathbf{J}_{i,j} = [g_j(x_i + h_i) - g_j(x_i)] / h_i`
- **Backward**: :math:`\\mathbf{J}_{i,j} = [g_j(x_i - h_i) - g_j(x_i)] / (-h_i)`
- **Central**: :math:`\\mathbf{J}_{i,j} = [g_j(x_i + h_i) - g_j(x_i - h_i)] / (2h_i)`

Bounds
------

A perturbation that would move a variable outside of its bounds is handled
according to the scheme. For forward and backward differences, the
perturbation is flipped to the opposite side of the nominal value so that the
displaced value stays feasible. If the bounds are narrower than the
perturbation, neither side is feasible; the flipped value is applied and a
warning is logged. For central differences, the symmetric pair is
required, so the out-of-bounds value is applied anyway and a warning is logged.

Reference
-----------

.. autoclass:: SensitivityBuilder
   :members:
"""
from __future__ import annotations

import logging
from typing import Union

import numpy as np
from numpy.typing import NDArray

from targeter.corrections.states import Differencing
from targeter.corrections.variables import GoalSet, VariableSet
from targeter.exceptions import StateError

logger = logging.getLogger(__name__)

__all__ = ["SensitivityBuilder"]


class SensitivityBuilder:
    """
    Sequences finite-difference perturbations and assembles the Jacobian

    Args:
        variables: the variables to perturb. The builder modifies the variable
            values while a perturbation is active and restores them afterwards.
        goals: the goals observed for each perturbation
        method: the differencing scheme
    """

    def __init__(
        self,
        variables: VariableSet,
        goals: GoalSet,
        method: Differencing = Differencing.FORWARD,
    ) -> None:
        self.variables = variables
        self.goals = goals

        #: Differencing: the differencing scheme
        self.method = method

        #: the goal values from the most recent nominal pass, one per goal
        self.nominal: NDArray[np.double] = np.zeros((0,))

        #: goal values from the forward (or only) perturbation of each variable;
        #: one row per variable, one column per goal
        self.achieved: NDArray[np.double] = np.zeros((0, 0))

        #: goal values from the backward half of a central-difference pair
        self.backAchieved: NDArray[np.double] = np.zeros((0, 0))

        #: the most recently assembled Jacobian
        self.jacobian: NDArray[np.double] = np.zeros((0, 0))

        self.reset()

    def __repr__(self) -> str:
        out = f"<{self.__class__.__name__}:"
        out += f"\n  method = {self.method.label},"
        out += f"\n  shape = ({len(self.variables)}, {len(self.goals)}),"
        out += f"\n  pertNumber = {self.pertNumber},"
        out += "\n>"
        return out

    def allocate(self) -> None:
        """
        Size the result tables to the current number of variables and goals.
        All tables are zeroed and the perturbation cursor is reset.
        """
        nVar, nGoal = len(self.variables), len(self.goals)
        self.nominal = np.zeros((nGoal,))
        self.achieved = np.zeros((nVar, nGoal))
        self.backAchieved = np.zeros((nVar, nGoal))
        self.jacobian = np.zeros((nVar, nGoal))
        self.reset()

    def reset(self) -> None:
        """
        Reset the perturbation cursor so that the next call to
        :func:`nextPerturbation` displaces the first variable. If a variable is
        currently displaced, it is restored first.
        """
        if getattr(self, "_lastUnperturbed", None) is not None:
            self.restore()

        #: int: id of the variable currently displaced; -1 if none
        self.pertNumber = -1

        #: bool: whether the active perturbation is the forward (or only) one;
        #: False for the backward half of a central-difference pair
        self.firstPert = True

        self._incrementPert = True
        self._lastUnperturbed: Union[float, None] = None

    @property
    def isPerturbing(self) -> bool:
        """Whether a variable is currently displaced from its nominal value"""
        return self._lastUnperturbed is not None

    def restore(self) -> None:
        """
        Restore the displaced variable, if any, to its pre-perturbation value
        """
        if self._lastUnperturbed is not None and self.pertNumber >= 0:
            self.variables[self.pertNumber].value = self._lastUnperturbed
        self._lastUnperturbed = None

    def nextPerturbation(self) -> bool:
        """
        Restore the previous perturbation and displace the next variable

        Returns:
            True if a variable has been displaced and must be evaluated, False
            if all variables have been perturbed for this pass. When False is
            returned, all variables hold their nominal values and the cursor
            is reset.
        """
        self.restore()

        if self._incrementPert:
            self.pertNumber += 1

        if self.pertNumber >= len(self.variables):
            self.pertNumber = -1
            self._incrementPert = True
            return False

        var = self.variables[self.pertNumber]
        self._lastUnperturbed = var.value

        if self.method == Differencing.FORWARD:
            self.firstPert = True
            direction = 1.0
        elif self.method == Differencing.BACKWARD:
            self.firstPert = True
            direction = -1.0
        elif self.method == Differencing.CENTRAL:
            # Alternate + then - on the same variable before advancing
            if self._incrementPert:
                self.firstPert, self._incrementPert = True, False
                direction = 1.0
            else:
                self.firstPert, self._incrementPert = False, True
                direction = -1.0
        else:
            raise StateError(f"Unsupported differencing scheme {self.method!r}")

        newVal = self._lastUnperturbed + direction * var.perturbation
        if not var.inBounds(newVal):
            bound = "maximum" if newVal > var.maximum else "minimum"
            if self.method == Differencing.CENTRAL:
                logger.warning(
                    f"Perturbation violates the {bound} value for variable "
                    f"{var.name}, but is being applied anyway to perform central "
                    "differencing"
                )
            else:
                direction *= -1.0
                newVal = self._lastUnperturbed + direction * var.perturbation
                if var.inBounds(newVal):
                    logger.debug(
                        f"Perturbation of {var.name} violates the {bound}; "
                        f"perturbing in the "
                        f"{'positive' if direction > 0 else 'negative'} direction instead"
                    )
                else:
                    logger.warning(
                        f"Perturbation violates both the minimum and maximum values "
                        f"for variable {var.name} (range [{var.minimum}, "
                        f"{var.maximum}] is narrower than the perturbation "
                        f"{var.perturbation}), but is being applied anyway"
                    )

        var.direction = direction
        var.value = newVal
        return True

    def recordNominal(self, goalId: int, value: float) -> None:
        """
        Store a goal value from a nominal pass

        Args:
            goalId: the goal id
            value: the achieved goal value
        """
        self.nominal[goalId] = value

    def recordPerturbed(self, goalId: int, value: float) -> None:
        """
        Store a goal value observed with the current perturbation applied

        Args:
            goalId: the goal id
            value: the achieved goal value

        Raises:
            StateError: if no perturbation is active
        """
        if self.pertNumber < 0:
            raise StateError("Cannot record a perturbed value; no variable is perturbed")

        if self.firstPert:
            self.achieved[self.pertNumber, goalId] = value
        else:
            self.backAchieved[self.pertNumber, goalId] = value

    def buildJacobian(self) -> NDArray[np.double]:
        """
        Assemble the Jacobian from the nominal and perturbed results

        Returns:
            the Jacobian with one row per variable and one column per goal. The
            result is also stored in :attr:`jacobian`.
        """
        perts = self.variables.perturbations

        if self.method in (Differencing.FORWARD, Differencing.BACKWARD):
            steps = self.variables.directions * perts
            self.jacobian = (self.achieved - self.nominal[np.newaxis, :]) / steps[
                :, np.newaxis
            ]
        elif self.method == Differencing.CENTRAL:
            self.jacobian = (self.achieved - self.backAchieved) / (
                2.0 * perts[:, np.newaxis]
            )
        else:
            raise StateError(f"Unsupported differencing scheme {self.method!r}")

        return self.jacobian
