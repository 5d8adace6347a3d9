"""
Solver States and Options
=========================

Enumerations shared by the differential corrector and its components.

.. autosummary::
   :nosignatures:

   SolverState
   SolverStatus
   SolverMode
   Differencing
"""
from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Union

logger = logging.getLogger(__name__)

__all__ = ["SolverState", "SolverStatus", "SolverMode", "Differencing"]


class SolverState(IntEnum):
    """
    The states of the differential corrector state machine. The state returned
    by :func:`~targeter.corrections.DifferentialCorrector.advanceState` tells the
    driver what to evaluate next.
    """

    INITIALIZING = 0
    """Reset the iteration counter; the next state is ``NOMINAL``"""

    NOMINAL = 1
    """Evaluate the goals with the current, unperturbed variables"""

    PERTURBING = 2
    """Evaluate the goals with one variable displaced by its perturbation"""

    ITERATING = 3
    """Not used by the differential corrector; reaching it is an error"""

    CALCULATING = 4
    """Build the Jacobian and apply a Newton update; no evaluation required"""

    CHECKINGRUN = 5
    """Compare the nominal results to the goals; no evaluation required"""

    FINISHED = 6
    """Terminal state; inspect the status"""


class SolverStatus(IntEnum):
    """
    The outcome of a targeting run
    """

    INITIALIZED = 0
    """The state machine has been initialized but no evaluations were processed"""

    RUN = 1
    """At least one nominal pass has been processed"""

    CONVERGED = 2
    """All goals are satisfied within their tolerances"""

    EXCEEDED_ITERATIONS = 3
    """The iteration budget was exhausted before convergence"""


class SolverMode(Enum):
    """
    Operating mode that determines the transition taken after a nominal pass
    """

    SOLVE = "Solve"
    """Iterate until convergence or the iteration budget is exhausted"""

    INITIAL_GUESS = "InitialGuess"
    """Run a single nominal pass and finish"""

    @classmethod
    def parse(cls, value: Union[SolverMode, str]) -> SolverMode:
        """
        Convert an input into a solver mode

        Args:
            value: a :class:`SolverMode` or one of the strings ``"Solve"``,
                ``"InitialGuess"`` (case-insensitive; underscores are ignored)

        Returns:
            the solver mode

        Raises:
            ValueError: if the string does not name a mode
            TypeError: if the input is neither a string nor a mode
        """
        if isinstance(value, SolverMode):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Cannot convert {value!r} to a SolverMode")

        key = value.replace("_", "").lower()
        for mode in cls:
            if mode.value.lower() == key:
                return mode

        raise ValueError(
            f"Unknown solver mode '{value}'; use one of "
            f"{[m.value for m in cls]}"
        )


class Differencing(IntEnum):
    """
    Finite-difference scheme used to estimate the Jacobian. The integer value
    is the sign of the (first) perturbation applied to each variable; zero
    indicates that both signs are used.
    """

    FORWARD = 1
    """Perturb each variable in the positive direction"""

    CENTRAL = 0
    """Perturb each variable in both directions"""

    BACKWARD = -1
    """Perturb each variable in the negative direction"""

    @property
    def label(self) -> str:
        """The long-form name of the scheme, e.g., ``"ForwardDifference"``"""
        return f"{self.name.title()}Difference"

    @classmethod
    def parse(cls, value: Union[Differencing, str, bool]) -> Differencing:
        """
        Convert an input into a differencing scheme

        Args:
            value: a :class:`Differencing`, a scheme name
                (``"ForwardDifference"``, ``"CentralDifference"``,
                ``"BackwardDifference"``, or the short forms ``"Forward"``,
                ``"Central"``, ``"Backward"``), or a legacy
                "use central differences" flag (``True``/``"true"`` selects
                central, ``False``/``"false"`` selects forward).

        Returns:
            the differencing scheme

        Raises:
            ValueError: if the string does not name a scheme
            TypeError: if the input type is not supported
        """
        if isinstance(value, Differencing):
            return value

        if isinstance(value, bool):
            return cls.CENTRAL if value else cls.FORWARD

        if not isinstance(value, str):
            raise TypeError(f"Cannot convert {value!r} to a Differencing scheme")

        key = value.lower()
        if key in ("true", "false"):
            logger.debug(
                f"Boolean central-difference flag '{value}' is deprecated; "
                "use a DerivativeMethod name instead"
            )
            return cls.CENTRAL if key == "true" else cls.FORWARD

        for scheme in cls:
            if key in (scheme.name.lower(), scheme.label.lower()):
                return scheme

        raise ValueError(
            f"Unknown differencing scheme '{value}'; use one of "
            f"{[s.label for s in cls]}"
        )
