"""
Convergence Monitor
===================

The targeting problem is converged when every goal is met within its own
tolerance,

.. math::
   |g_j - g_j^*| \\leq \\epsilon_j \\quad \\forall j.

Failing to converge within the iteration budget is a normal outcome,
reported as :attr:`~targeter.corrections.states.SolverStatus.EXCEEDED_ITERATIONS`
rather than raised.

.. autoclass:: ConvergenceMonitor
   :members:
"""
from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from targeter.corrections.states import SolverState, SolverStatus
from targeter.corrections.variables import GoalSet

logger = logging.getLogger(__name__)

__all__ = ["ConvergenceMonitor"]


class ConvergenceMonitor:
    """
    Evaluates goal residuals and the iteration budget
    """

    def residuals(self, goals: GoalSet, nominal: NDArray[np.double]) -> NDArray[np.double]:
        """
        Args:
            goals: the goals
            nominal: the achieved goal values, one per goal

        Returns:
            the goal errors, ``desired - achieved``
        """
        return goals.desired() - np.asarray(nominal, dtype=float)

    def isConverged(self, goals: GoalSet, nominal: NDArray[np.double]) -> bool:
        """
        Args:
            goals: the goals
            nominal: the achieved goal values, one per goal

        Returns:
            True if every goal error is less than or equal to the goal tolerance
        """
        return bool(np.all(np.abs(self.residuals(goals, nominal)) <= goals.tolerances()))

    def classify(
        self,
        goals: GoalSet,
        nominal: NDArray[np.double],
        iterationsTaken: int,
        maxIterations: int,
    ) -> tuple[SolverState, SolverStatus]:
        """
        Decide whether the corrector continues or terminates

        Args:
            goals: the goals
            nominal: the achieved goal values, one per goal
            iterationsTaken: the number of completed iterations, not counting
                the current one
            maxIterations: the iteration budget

        Returns:
            the next state and the status. The state is ``FINISHED`` with status
            ``CONVERGED`` if all goals are met; ``PERTURBING`` with status ``RUN``
            if another correction may be attempted; or ``FINISHED`` with status
            ``EXCEEDED_ITERATIONS`` if the budget is exhausted.
        """
        if self.isConverged(goals, nominal):
            return SolverState.FINISHED, SolverStatus.CONVERGED
        elif iterationsTaken < maxIterations - 1:
            return SolverState.PERTURBING, SolverStatus.RUN
        else:
            return SolverState.FINISHED, SolverStatus.EXCEEDED_ITERATIONS
