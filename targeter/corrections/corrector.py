"""
Differential Corrector
======================

The :class:`DifferentialCorrector` is a cooperative state machine. It never
evaluates the goals itself; instead, an external driver repeatedly calls
:func:`~DifferentialCorrector.advanceState`, which performs the work for the
current state and returns the next state. The returned state tells the driver
what to do before calling again:

======================  ========================================================
Returned state          Driver action
======================  ========================================================
``NOMINAL``             Evaluate the goals with the current variable values and
                        report them via ``reportGoalValue``. Floating targets may
                        be updated via ``updateGoalTarget``/``updateGoalTolerance``
``PERTURBING``          Evaluate the goals with the current (displaced) variable
                        values and report them via ``reportGoalValue``
``CALCULATING``         Nothing; call ``advanceState`` again
``CHECKINGRUN``         Nothing; call ``advanceState`` again
``FINISHED``            Inspect :attr:`~DifferentialCorrector.status`
======================  ========================================================

The state sequence for the default ``SOLVE`` mode is::

    INITIALIZING -> NOMINAL -> CHECKINGRUN -> PERTURBING (x N) -> CALCULATING
                       ^                                               |
                       +-----------------------------------------------+

and ``CHECKINGRUN`` transitions to ``FINISHED`` once the goals are met or the
iteration budget is exhausted. In ``INITIAL_GUESS`` mode, the corrector
finishes after a single nominal pass.

Reference
-----------

.. autoclass:: DifferentialCorrector
   :members:
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from copy import copy
from typing import Union

import numpy as np
from numpy.typing import NDArray
from rich.table import Table

from targeter import console, util
from targeter.corrections.convergence import ConvergenceMonitor
from targeter.corrections.sensitivity import SensitivityBuilder
from targeter.corrections.states import (
    Differencing,
    SolverMode,
    SolverState,
    SolverStatus,
)
from targeter.corrections.update import NewtonUpdate
from targeter.corrections.variables import Goal, GoalSet, Variable, VariableSet
from targeter.exceptions import ConfigurationError, StateError, TargeterError

logger = logging.getLogger(__name__)

__all__ = ["DifferentialCorrector"]

_BANNER = "*" * 56


class DifferentialCorrector:
    """
    A Newton-Raphson targeter with a finite-difference Jacobian

    Args:
        name: the instance name, used in progress reports
    """

    #: The supported values of :attr:`reportStyle`, from least to most detail
    REPORT_STYLES = ("Concise", "Normal", "Verbose", "Debug")

    def __init__(self, name: str = "DefaultDC") -> None:
        #: str: the instance name
        self.name = name

        #: int: maximum number of iterations that can be attempted
        self.maxIterations = 25

        #: bool: whether or not progress reports are logged
        self.showProgress = True

        #: str: the level of detail in progress reports; one of
        #: :attr:`REPORT_STYLES`
        self.reportStyle = "Normal"

        #: VariableSet: the control variables
        self.variables = VariableSet()

        #: GoalSet: the goals
        self.goals = GoalSet()

        #: list[str]: goal names declared ahead of registration. If not empty,
        #: goals must be added in this order.
        self.goalNames: list[str] = []

        #: SensitivityBuilder: perturbation sequencing and Jacobian assembly
        self.sensitivity = SensitivityBuilder(self.variables, self.goals)

        #: NewtonUpdate: computes and applies the variable update
        self.updateGenerator = NewtonUpdate()

        #: ConvergenceMonitor: decides convergence and termination
        self.convergenceCheck = ConvergenceMonitor()

        #: SolverState: the current state
        self.currentState = SolverState.INITIALIZING

        #: SolverStatus: the run status
        self.status = SolverStatus.INITIALIZED

        #: int: number of iterations completed in the current run
        self.iterationsTaken = 0

        #: int: number of reused copies of this corrector; bookkeeping only
        self.instanceNumber = 0

        #: bool: whether :func:`initialize` has completed for the current
        #: configuration
        self.initialized = False

        #: A persistent log; reset when the state machine enters
        #: ``INITIALIZING`` and populated as the run proceeds.
        self.log: dict[str, object] = {"status": self.status, "iterations": []}

        self._mode = SolverMode.SOLVE

    def __repr__(self) -> str:
        return util.repr(
            self,
            "name",
            "derivativeMethod",
            "mode",
            "maxIterations",
            "currentState",
            "status",
            "variables",
            "goals",
        )

    # -------------------------------------------
    # Configuration

    @property
    def derivativeMethod(self) -> Differencing:
        """
        The differencing scheme. May be set with a :class:`Differencing`, a
        scheme name, or a legacy boolean "use central differences" flag; see
        :func:`Differencing.parse`.
        """
        return self.sensitivity.method

    @derivativeMethod.setter
    def derivativeMethod(self, value: Union[Differencing, str, bool]) -> None:
        self.sensitivity.method = Differencing.parse(value)

    @property
    def mode(self) -> SolverMode:
        """
        The operating mode. May be set with a :class:`SolverMode` or a string,
        ``"Solve"`` or ``"InitialGuess"``, while the corrector is in the
        ``INITIALIZING`` or ``FINISHED`` state. Use
        ``takeAction("SetMode", ...)`` to change the mode mid-run.
        """
        return self._mode

    @mode.setter
    def mode(self, value: Union[SolverMode, str]) -> None:
        mode = SolverMode.parse(value)
        if self.currentState not in (SolverState.INITIALIZING, SolverState.FINISHED):
            raise StateError(
                f"Cannot change the mode of {self.name} in state "
                f"{self.currentState.name}; use takeAction('SetMode', ...) instead"
            )
        self._mode = mode

    def addVariable(
        self,
        name: str,
        value: float,
        minimum: float = -np.inf,
        maximum: float = np.inf,
        maxStep: float = np.inf,
        perturbation: float = 1e-4,
    ) -> int:
        """
        Add a control variable

        Adding a variable invalidates any previous :func:`initialize` call.

        Args:
            name: the variable name
            value: the initial value
            minimum: the lower bound
            maximum: the upper bound
            maxStep: the maximum change applied by a single update
            perturbation: the finite-difference perturbation size

        Returns:
            the variable id

        Raises:
            ConfigurationError: if the variable is invalid or its name is taken
        """
        varId = self.variables.add(
            Variable(name, value, minimum, maximum, maxStep, perturbation)
        )
        self.initialized = False
        return varId

    def declareGoals(self, names: Union[str, Sequence[str]]) -> None:
        """
        Declare the goal names in the order they will be registered via
        :func:`addGoal`

        Args:
            names: one or more goal names; appended to :attr:`goalNames`
        """
        self.goalNames.extend(util.toList(names))
        self.initialized = False

    def addGoal(self, name: str, desired: float, tolerance: float) -> int:
        """
        Add a goal

        Adding a goal invalidates any previous :func:`initialize` call.

        Args:
            name: the goal name
            desired: the desired value
            tolerance: the convergence tolerance; must be positive

        Returns:
            the goal id

        Raises:
            ConfigurationError: if the goal is invalid, its name is taken, or it
                does not match the next name in :attr:`goalNames`
        """
        goalId = len(self.goals)
        if self.goalNames and (
            goalId >= len(self.goalNames) or not self.goalNames[goalId] == name
        ):
            expected = (
                self.goalNames[goalId] if goalId < len(self.goalNames) else "(none)"
            )
            raise ConfigurationError(
                f"Mismatch between parsed and configured goal: received '{name}', "
                f"expected '{expected}'"
            )

        goalId = self.goals.add(Goal(name, desired, tolerance))
        self.initialized = False
        return goalId

    def _validateArgs(self) -> None:
        """
        Check the types and values of class attributes so that useful errors
        can be thrown before those attributes are evaluated or used.

        Raises:
            TypeError: if any attribute type is incorrect
            ValueError: if any attribute value is invalid
            ConfigurationError: if the variables and goals are incomplete
        """
        # maxIterations
        if isinstance(self.maxIterations, bool) or not isinstance(
            self.maxIterations, int
        ):
            raise TypeError("maxIterations must be an integer")
        if not self.maxIterations > 0:
            raise ValueError("maxIterations must be positive")

        # reporting
        if not self.reportStyle in self.REPORT_STYLES:
            raise ValueError(
                f"reportStyle '{self.reportStyle}' is not one of {self.REPORT_STYLES}"
            )

        # Problem definition
        if len(self.variables) == 0 or len(self.goals) == 0:
            raise ConfigurationError(
                f"Targeter {self.name} cannot initialize: No goals or variables are set"
            )

        missing = self.goalNames[len(self.goals) :]
        if missing:
            raise ConfigurationError(
                f"Targeter {self.name} cannot initialize: goals {missing} were "
                "declared but never added"
            )

    def initialize(self) -> None:
        """
        Validate the configuration and size the result tables to the
        (now-fixed) numbers of variables and goals. The state machine is placed
        in the ``INITIALIZING`` state.

        Raises:
            ConfigurationError: if no variables or goals are defined, or declared
                goals were not added
            TypeError: if an attribute has the wrong type
            ValueError: if an attribute has an invalid value
        """
        self._validateArgs()

        self.sensitivity.allocate()
        self.updateGenerator = NewtonUpdate()
        self.currentState = SolverState.INITIALIZING
        self.status = SolverStatus.INITIALIZED
        self.iterationsTaken = 0
        self.log = {"status": self.status, "iterations": []}
        self.initialized = True

        logger.debug(
            f"Initialized {self.name} with {len(self.variables)} variables "
            f"and {len(self.goals)} goals"
        )

    # -------------------------------------------
    # Result data

    @property
    def nominal(self) -> NDArray[np.double]:
        """The goal values achieved in the most recent nominal pass"""
        return self.sensitivity.nominal

    @property
    def achieved(self) -> NDArray[np.double]:
        """Goal values from forward perturbations; one row per variable"""
        return self.sensitivity.achieved

    @property
    def backAchieved(self) -> NDArray[np.double]:
        """Goal values from backward central-difference perturbations"""
        return self.sensitivity.backAchieved

    @property
    def jacobian(self) -> NDArray[np.double]:
        """The most recent Jacobian; one row per variable, one column per goal"""
        return self.sensitivity.jacobian

    @property
    def inverseJacobian(self) -> NDArray[np.double]:
        """The most recent (pseudo-)inverse Jacobian; one row per goal"""
        return self.updateGenerator.inverseJacobian

    # -------------------------------------------
    # Per-cycle interface

    def _checkGoalId(self, goalId: int) -> None:
        if isinstance(goalId, bool) or not isinstance(goalId, (int, np.integer)):
            raise TypeError(f"Goal id must be an integer, not {goalId!r}")
        if not 0 <= goalId < len(self.goals):
            raise ConfigurationError(
                f"Goal id {goalId} is outside the range of the {len(self.goals)} "
                "configured goals"
            )

    def reportGoalValue(self, goalId: int, value: float) -> None:
        """
        Report an achieved goal value from the most recent evaluation

        The value is stored as a nominal result in the ``NOMINAL`` state and as
        a perturbed result in the ``PERTURBING`` state. In any other state the
        call is ignored.

        Args:
            goalId: the goal id returned by :func:`addGoal`
            value: the achieved value

        Raises:
            ConfigurationError: if the goal id is out of range while a value is
                expected
            TypeError: if the goal id is not an integer
        """
        if self.currentState == SolverState.NOMINAL:
            self._checkGoalId(goalId)
            self.sensitivity.recordNominal(goalId, value)
        elif self.currentState == SolverState.PERTURBING:
            self._checkGoalId(goalId)
            self.sensitivity.recordPerturbed(goalId, value)
        else:
            logger.debug(
                f"Ignoring value for goal {goalId} reported in state "
                f"{self.currentState.name}"
            )

    def reportGoalValues(self, values: Sequence[float]) -> None:
        """
        Report achieved values for all goals, ordered by goal id

        Args:
            values: the achieved values

        Raises:
            ValueError: if the number of values does not match the number of goals
        """
        values = util.toArray(values)
        if not values.size == len(self.goals):
            raise ValueError(
                f"Expected {len(self.goals)} goal values but received {values.size}"
            )
        for goalId, val in enumerate(values):
            self.reportGoalValue(goalId, float(val))

    def updateGoalTarget(self, goalId: int, value: float) -> bool:
        """
        Change the desired value of a goal, e.g., for a floating end point

        Args:
            goalId: the goal id
            value: the new desired value

        Returns:
            True if the update was applied; updates are only applied in the
            ``NOMINAL`` state and are otherwise ignored.

        Raises:
            ConfigurationError: if the goal id is out of range (``NOMINAL`` only)
            TypeError: if the goal id is not an integer (``NOMINAL`` only)
        """
        if not self.currentState == SolverState.NOMINAL:
            logger.debug(f"Ignoring goal update in state {self.currentState.name}")
            return False

        self._checkGoalId(goalId)
        self.goals[goalId].desired = value
        return True

    def updateGoalTolerance(self, goalId: int, value: float) -> bool:
        """
        Change the tolerance of a goal

        Args:
            goalId: the goal id
            value: the new tolerance; must be positive

        Returns:
            True if the update was applied; updates are only applied in the
            ``NOMINAL`` state and are otherwise ignored.

        Raises:
            ConfigurationError: if the goal id is out of range (``NOMINAL`` only)
                or the tolerance is not positive
            TypeError: if the goal id is not an integer (``NOMINAL`` only)
        """
        if not self.currentState == SolverState.NOMINAL:
            logger.debug(f"Ignoring tolerance update in state {self.currentState.name}")
            return False

        self._checkGoalId(goalId)
        self.goals[goalId].tolerance = value
        return True

    # -------------------------------------------
    # Lifecycle

    def takeAction(self, action: str, actionData: str = "") -> bool:
        """
        Perform a lifecycle action

        Args:
            action: the action name

                - ``"Reset"``: return to ``INITIALIZING`` with the nominal results
                  pushed outside of the goal tolerances so that a reused corrector
                  cannot report a stale convergence
                - ``"SetMode"``: set :attr:`mode` to ``actionData`` (if provided),
                  then reset
                - ``"IncrementInstanceCount"``: increment :attr:`instanceNumber`
                - ``"ResetInstanceCount"``: zero :attr:`instanceNumber`
            actionData: data for the action

        Returns:
            True when the action has been performed

        Raises:
            ValueError: if the action is not recognized
        """
        if action == "ResetInstanceCount":
            self.instanceNumber = 0
        elif action == "IncrementInstanceCount":
            self.instanceNumber += 1
        elif action == "Reset":
            self._reset()
        elif action == "SetMode":
            if actionData:
                self._mode = SolverMode.parse(actionData)
            self._reset()
        else:
            raise ValueError(f"Unknown action '{action}' for {self.name}")

        return True

    def _reset(self) -> None:
        self.sensitivity.reset()
        self.currentState = SolverState.INITIALIZING

        if self.nominal.size == len(self.goals):
            self.sensitivity.nominal[:] = self.goals.desired() + 10.0 * self.goals.tolerances()

        logger.debug(f"Reset {self.name}")

    # -------------------------------------------
    # State machine

    def advanceState(self) -> SolverState:
        """
        Perform the work for the current state and move to the next state

        Returns:
            the new current state

        Raises:
            StateError: if the corrector has not been initialized or enters a
                state it does not support
            NumericalError: if the Jacobian cannot be inverted or the update
                cannot be applied. The corrector must be re-initialized after a
                numerical error.
        """
        if not self.initialized:
            raise StateError(
                f"Targeter {self.name} must be initialized before it is run"
            )

        logger.debug(f"{self.name} entered state machine; {self.currentState.name}")
        try:
            if self._mode == SolverMode.INITIAL_GUESS:
                self._advanceInitialGuess()
            else:
                self._advanceSolve()
        except TargeterError:
            self.initialized = False
            raise

        return self.currentState

    def _advanceInitialGuess(self) -> None:
        if self.currentState == SolverState.INITIALIZING:
            self._runInitializing()
        elif self.currentState == SolverState.NOMINAL:
            self._reportProgress()
            self.currentState = SolverState.FINISHED
            self.status = SolverStatus.RUN
        elif self.currentState == SolverState.FINISHED:
            self._runComplete()
        else:
            raise StateError(
                f"Solver state {self.currentState.name} not supported for an "
                "initial guess run"
            )

    def _advanceSolve(self) -> None:
        state = self.currentState
        if state == SolverState.INITIALIZING:
            self._runInitializing()
        elif state == SolverState.NOMINAL:
            self._reportProgress()
            self.currentState = SolverState.CHECKINGRUN
            self.status = SolverStatus.RUN
            self._reportProgress()
        elif state == SolverState.PERTURBING:
            self._reportProgress()
            self._runPerturbation()
        elif state == SolverState.CALCULATING:
            self._calculateParameters()
        elif state == SolverState.CHECKINGRUN:
            self._checkCompletion()
            self.iterationsTaken += 1
            if self.iterationsTaken >= self.maxIterations:
                self.currentState = SolverState.FINISHED
        elif state == SolverState.FINISHED:
            self._runComplete()
        else:
            raise StateError(
                f"Solver state {state.name} not supported for the targeter"
            )

    def _runInitializing(self) -> None:
        self.iterationsTaken = 0
        self.status = SolverStatus.INITIALIZED
        self.log = {"status": self.status, "iterations": []}
        self.sensitivity.reset()
        self._reportProgress()
        self.currentState = SolverState.NOMINAL

    def _runPerturbation(self) -> None:
        if not self.sensitivity.nextPerturbation():
            self.currentState = SolverState.CALCULATING
            return

        if self.showProgress and self.reportStyle == "Debug":
            logger.info(
                "Perturbing with variable values:\n   "
                + util.joinValues(
                    self.variables.names, self.variables.values(), sep="\n   "
                )
            )

    def _calculateParameters(self) -> None:
        jacobian = self.sensitivity.buildJacobian()
        step = self.updateGenerator.update(
            self.variables, self.goals, jacobian, self.sensitivity.nominal
        )

        iterations = self.log["iterations"]
        if iterations:
            iterations[-1].update(  # type: ignore
                {
                    "jacobian": copy(jacobian),
                    "inverseJacobian": copy(self.updateGenerator.inverseJacobian),
                    "delta": copy(self.updateGenerator.delta),
                    "multiplier": self.updateGenerator.multiplier,
                    "step": step,
                }
            )

        if self.showProgress and self.reportStyle in ("Verbose", "Debug"):
            logger.info(self._calculationString())

        self.currentState = SolverState.NOMINAL

    def _checkCompletion(self) -> None:
        self.log["iterations"].append(  # type: ignore
            {
                "variables": self.variables.values(),
                "achieved": copy(self.sensitivity.nominal),
                "residuals": self.convergenceCheck.residuals(
                    self.goals, self.sensitivity.nominal
                ),
            }
        )

        nextState, status = self.convergenceCheck.classify(
            self.goals,
            self.sensitivity.nominal,
            self.iterationsTaken,
            self.maxIterations,
        )
        self.status = status

        if nextState == SolverState.PERTURBING:
            self.sensitivity.reset()
            self.currentState = SolverState.PERTURBING
            self._runPerturbation()
        else:
            self.currentState = nextState
            if status == SolverStatus.EXCEEDED_ITERATIONS:
                logger.warning(
                    f"Differential corrector {self.name} has exceeded the maximum "
                    "number of allowed iterations."
                )

    def _runComplete(self) -> None:
        self.log["status"] = self.status
        self._reportProgress()

    # -------------------------------------------
    # Reporting

    def _reportProgress(self) -> None:
        if not self.showProgress:
            return
        if self.reportStyle == "Concise" and self.currentState not in (
            SolverState.INITIALIZING,
            SolverState.FINISHED,
        ):
            return

        progress = self.progressString()
        if progress:
            logger.info(progress)

    def progressString(self) -> str:
        """
        Generate a human-readable report for the current state

        Returns:
            the report; empty for states that have nothing to report

        Raises:
            StateError: if the current state is not supported
        """
        if not self.initialized:
            return f"Targeter {self.name} is not initialized"

        varNames, goalNames = self.variables.names, self.goals.names
        state = self.currentState

        if state == SolverState.INITIALIZING:
            progress = (
                f"{_BANNER}\n"
                f'*** Performing Differential Correction (using "{self.name}")\n'
                f"*** {len(varNames)} variables; {len(goalNames)} goals\n"
                f"   Variables:  {', '.join(varNames)}\n"
                f"   Goals:  {', '.join(goalNames)}\n"
                f"   SolverMode:  {self._mode.value}\n"
                f"   DerivativeMethod:  {self.derivativeMethod.label}\n"
                f"{_BANNER}"
            )
        elif state == SolverState.NOMINAL:
            progress = (
                f"{self.name} Iteration {self.iterationsTaken + 1}; Nominal Pass\n"
                "   Variables:  "
                + util.joinValues(varNames, self.variables.values())
            )
        elif state == SolverState.PERTURBING:
            ix = self.sensitivity.pertNumber
            if ix < 0:
                return ""
            progress = (
                f"   Completed iteration {self.iterationsTaken}, pert {ix + 1} "
                f"({varNames[ix]} = {self.variables[ix].value:.12g})"
            )
        elif state == SolverState.CALCULATING:
            progress = ""
        elif state == SolverState.CHECKINGRUN:
            progress = "   Goals and achieved values:\n" + self._goalString()
        elif state == SolverState.FINISHED:
            if self._mode == SolverMode.INITIAL_GUESS:
                progress = (
                    "\n*** Targeting Completed Initial Guess Run\n***\n"
                    "   Variable Values:\n      "
                    + util.joinValues(varNames, self.variables.values(), sep="\n      ")
                    + "\n\n   Goal Values:\n"
                    + self._goalString()
                )
            else:
                progress = (
                    f"\n*** Targeting Completed in {self.iterationsTaken} iterations"
                )
                if self.status == SolverStatus.EXCEEDED_ITERATIONS:
                    progress += (
                        "\n" + "!" * 60 + "\n"
                        "!!! WARNING: Targeter did NOT converge!\n" + "!" * 60
                    )
                progress += "\nFinal Variable values:\n   " + util.joinValues(
                    varNames, self.variables.values(), sep="\n   "
                )
        else:
            raise StateError(
                f"Solver state {state.name} not supported for the targeter"
            )

        return progress

    def _goalString(self) -> str:
        lines = []
        for goal, achieved in zip(self.goals, self.sensitivity.nominal):
            lines.append(
                f"      {goal.name}  Desired: {goal.desired:.12g}  "
                f"Achieved: {achieved:.12g}  Variance: {goal.desired - achieved:.12g}"
            )
        return "\n".join(lines)

    def _calculationString(self) -> str:
        def fmtMatrix(mat):
            return "\n".join(
                "   " + "   ".join(f"{val:.12g}" for val in row) for row in mat
            )

        return (
            "Jacobian (Sensitivity matrix):\n"
            + fmtMatrix(self.jacobian)
            + "\n\nInverse Jacobian:\n"
            + fmtMatrix(self.inverseJacobian)
            + "\n\nNew variable estimates:\n   "
            + util.joinValues(self.variables.names, self.variables.values(), sep="\n   ")
        )

    # -------------------------------------------
    # Printing

    def printVariables(self) -> None:
        """
        Print the variables to the screen
        """
        table = Table(
            "Id",
            "Variable",
            "Value",
            "Minimum",
            "Maximum",
            "Max Step",
            "Perturbation",
            title="Variables",
        )
        for ix, var in enumerate(self.variables):
            table.add_row(
                f"{ix}",
                var.name,
                f"{var.value:.8e}",
                f"{var.minimum:.4e}",
                f"{var.maximum:.4e}",
                f"{var.maxStep:.4e}",
                f"{var.perturbation:.4e}",
            )
        console.print(table)

    def printGoals(self) -> None:
        """
        Print the goals and the most recent nominal results to the screen
        """
        table = Table(
            "Status",
            "Id",
            "Goal",
            "Desired",
            "Achieved",
            "Variance",
            "Tolerance",
            title="Goals",
        )
        nominal = self.nominal if self.nominal.size == len(self.goals) else None
        for ix, goal in enumerate(self.goals):
            if nominal is None:
                table.add_row("--", f"{ix}", goal.name, f"{goal.desired:.8e}", "", "", "")
                continue

            met = goal.isMet(nominal[ix])
            table.add_row(
                "OK" if met else "ERR",
                f"{ix}",
                goal.name,
                f"{goal.desired:.8e}",
                f"{nominal[ix]:.8e}",
                f"{goal.desired - nominal[ix]:.4e}",
                f"{goal.tolerance:.4e}",
                style="blue" if met else "red",
            )
        console.print(table)

    def printJacobian(self) -> None:
        """
        Print the most recent Jacobian matrix to the screen
        """
        table = Table("", *self.goals.names, title="Jacobian")
        for var, row in zip(self.variables, self.jacobian):
            rowText = [f"[bold]{var.name}[/bold]"]
            for val in row:
                if val == 0.0:
                    rowText.append("[gray50]0[/gray50]")
                elif np.isnan(val):
                    rowText.append("[red]NaN[/red]")
                elif abs(np.log10(abs(val))) < 3:
                    rowText.append(f"[blue]{val:.4f}[/blue]")
                else:
                    rowText.append(f"[blue]{val:.4e}[/blue]")
            table.add_row(*rowText)
        console.print(table)
