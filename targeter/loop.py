"""
Target Loop
===========

A :class:`~targeter.corrections.DifferentialCorrector` relies on an external
driver to run the evaluations it requests. When the goals can be computed by a
Python function, the :class:`TargetLoop` plays that role:

.. code-block:: python

   def evaluate(x):
       sol = prop.propagate(...)  # expensive simulation
       return [sol.y[0, -1], sol.y[1, -1]]

   loop = TargetLoop(dc, evaluate)
   status, log = loop.run()

The evaluation function accepts the vector of current variable values and
returns the achieved goal values, ordered by goal id. A second, optional
function may return updated desired goal values; it is called during every
nominal pass to support "floating" targets that depend on the run state.

Running a loop on a corrector that has already finished resets it first, so the
same loop can be run repeatedly, e.g., inside an outer script loop.

Reference
-----------

.. autoclass:: TargetLoop
   :members:
"""
from __future__ import annotations

import logging
from copy import copy
from typing import Callable, Union

import numpy as np
from numpy.typing import NDArray

from targeter import util
from targeter.corrections import DifferentialCorrector, SolverState, SolverStatus
from targeter.typing import FloatArray

logger = logging.getLogger(__name__)

__all__ = ["TargetLoop"]


class TargetLoop:
    """
    Drive a differential corrector with a Python evaluation function

    Args:
        corrector: the corrector to drive. If it has not been initialized,
            :func:`~targeter.corrections.DifferentialCorrector.initialize` is
            called when the loop is run.
        evaluate: a function that accepts the current variable values and
            returns the achieved goal values
        targets: an optional function that accepts the current variable values
            and returns the desired goal values. It is called during each
            nominal pass.
    """

    def __init__(
        self,
        corrector: DifferentialCorrector,
        evaluate: Callable[[NDArray[np.double]], FloatArray],
        targets: Union[Callable[[NDArray[np.double]], FloatArray], None] = None,
    ) -> None:
        if not callable(evaluate):
            raise TypeError("evaluate must be callable")
        if targets is not None and not callable(targets):
            raise TypeError("targets must be callable or None")

        #: DifferentialCorrector: the corrector
        self.corrector = corrector

        self.evaluate = evaluate
        self.targets = targets

        #: int: number of calls to :attr:`evaluate` during the most recent run
        self.numEvaluations = 0

    def __repr__(self) -> str:
        return util.repr(self, "corrector", "numEvaluations")

    def _evaluate(self, state: SolverState) -> None:
        dc = self.corrector
        values = dc.variables.values()

        if state == SolverState.NOMINAL and self.targets is not None:
            desired = util.toArray(self.targets(copy(values)))
            for goalId, val in enumerate(desired):
                dc.updateGoalTarget(goalId, float(val))

        dc.reportGoalValues(self.evaluate(values))
        self.numEvaluations += 1

    def run(self) -> tuple[SolverStatus, dict]:
        """
        Run the corrector until it finishes

        Returns:
            A tuple with two elements. The first is the final
            :class:`~targeter.corrections.SolverStatus`; the second is a copy of
            the corrector :attr:`~targeter.corrections.DifferentialCorrector.log`.

        Raises:
            NumericalError: if the corrector encounters a singular Jacobian or an
                unrepresentable update
        """
        dc = self.corrector
        if not dc.initialized:
            dc.initialize()
        elif not dc.currentState == SolverState.INITIALIZING:
            dc.takeAction("Reset")

        self.numEvaluations = 0
        state = dc.advanceState()
        while not state == SolverState.FINISHED:
            if state in (SolverState.NOMINAL, SolverState.PERTURBING):
                self._evaluate(state)
            state = dc.advanceState()

        # Final call lets the corrector write its completion report
        dc.advanceState()
        logger.debug(
            f"{dc.name} finished with status {dc.status.name} after "
            f"{self.numEvaluations} evaluations"
        )
        return dc.status, copy(dc.log)
