"""
Exceptions
==========

Errors raised by the targeter. Non-convergence is *not* an error; it is
reported via :attr:`~targeter.corrections.SolverStatus.EXCEEDED_ITERATIONS`.

.. autosummary::
   :nosignatures:

   TargeterError
   ConfigurationError
   NumericalError
   StateError
"""


class TargeterError(Exception):
    """
    Base exception for targeter errors

    Args:
        message: the error message
    """

    def __init__(self, message: str):
        super().__init__(message)


class ConfigurationError(TargeterError, ValueError):
    """
    Raised when the variables and goals do not describe a usable problem, e.g.,
    when no goals are defined or goals are registered in the wrong order.
    The session cannot be used until it is reconfigured.
    """


class NumericalError(TargeterError, ArithmeticError):
    """
    Raised when the Jacobian cannot be inverted or the Newton update yields a
    value that cannot be represented. The session is dead after this error.
    """


class StateError(TargeterError, RuntimeError):
    """
    Raised when the state machine is driven incorrectly, e.g., stepped before
    it is initialized, or enters a state it does not support.
    """
