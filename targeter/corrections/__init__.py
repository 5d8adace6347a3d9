"""
Differential Corrections
========================

This module provides objects to define a black-box targeting problem and the
state machine that solves it.

Overview
------------------

At the simplest level, a targeting problem is composed of **variables** and
**goals**. The variables, :math:`\\vec{x}`, are scalar controls (e.g., the
components of a maneuver) that the corrector may adjust within bounds. The
goals, :math:`\\vec{g}(\\vec{x})`, are scalar quantities (e.g., the radius at
apoapsis) that can only be observed by running an external evaluation such as
a trajectory propagation. The problem is solved when every goal is within its
tolerance of a desired value, :math:`\\vec{g}^*`.

.. autosummary::
   :nosignatures:

   Variable
   Goal
   VariableSet
   GoalSet

An iterative Newton method is used to solve targeting problems. Expanding the
goals about the current variables in a Taylor series and ignoring the
higher-order terms yields the update equation,

.. math::
   \\vec{g}^* - \\vec{g}(\\vec{x}_n) = \\mathbf{J}^T (\\vec{x}_{n+1} - \\vec{x}_n),

where :math:`\\mathbf{J}` is the **Jacobian** matrix with elements
:math:`\\mathbf{J}_{i,j} = \\partial g_j / \\partial x_i`. Because the goals are
only available from the black-box evaluation, the Jacobian is estimated by
finite differences: each variable is perturbed in turn and the change in the
goals is recorded.

.. autosummary::
   :nosignatures:

   SensitivityBuilder
   NewtonUpdate
   ConvergenceMonitor

Solving Problems
----------------

The :class:`DifferentialCorrector` sequences the nominal evaluations, the
perturbations, the update calculation, and the convergence check as an explicit
state machine. The corrector never runs the evaluation itself; an external
driver calls :func:`DifferentialCorrector.advanceState`, runs the evaluation
that the returned :class:`SolverState` asks for, and reports the achieved goal
values back before calling again.

.. code-block:: python

   dc = DifferentialCorrector("DC1")
   dc.addVariable("x", 10.0, minimum=0.0, maximum=20.0, maxStep=5.0)
   dc.addGoal("g", 100.0, 1e-6)
   dc.initialize()

   state = dc.advanceState()
   while not state == SolverState.FINISHED:
       if state in (SolverState.NOMINAL, SolverState.PERTURBING):
           dc.reportGoalValues(evaluate(dc.variables.values()))
       state = dc.advanceState()

   print(dc.status)

The :class:`~targeter.loop.TargetLoop` implements this driver for goals that
are computed by a Python callable.

Options
^^^^^^^

.. autosummary::
   :nosignatures:

   SolverState
   SolverStatus
   SolverMode
   Differencing

Reference
==============

.. toctree::
   :maxdepth: 1

   corrections.corrector
   corrections.convergence
   corrections.sensitivity
   corrections.states
   corrections.update
   corrections.variables
"""
from targeter.corrections.convergence import ConvergenceMonitor
from targeter.corrections.corrector import DifferentialCorrector
from targeter.corrections.sensitivity import SensitivityBuilder
from targeter.corrections.states import (
    Differencing,
    SolverMode,
    SolverState,
    SolverStatus,
)
from targeter.corrections.update import NewtonUpdate
from targeter.corrections.variables import Goal, GoalSet, Variable, VariableSet

__all__ = [
    "ConvergenceMonitor",
    "DifferentialCorrector",
    "Differencing",
    "Goal",
    "GoalSet",
    "NewtonUpdate",
    "SensitivityBuilder",
    "SolverMode",
    "SolverState",
    "SolverStatus",
    "Variable",
    "VariableSet",
]
