"""
Pytest Configuration
"""
import logging

import numpy as np
import pytest
from rich.logging import RichHandler

from targeter.corrections import DifferentialCorrector, SolverState


def drive(dc, func, maxCalls=1000):
    """
    Run a corrector to completion against a black-box function

    Args:
        dc (DifferentialCorrector): an initialized corrector
        func (callable): accepts the variable vector, returns the goal vector
        maxCalls (int): guard against a runaway state machine

    Returns:
        list[SolverState]: the sequence of states returned by ``advanceState``
    """
    states = [dc.advanceState()]
    while not states[-1] == SolverState.FINISHED:
        if states[-1] in (SolverState.NOMINAL, SolverState.PERTURBING):
            dc.reportGoalValues(np.atleast_1d(func(dc.variables.values())))
        states.append(dc.advanceState())
        assert len(states) < maxCalls, "state machine did not finish"
    return states


@pytest.fixture
def makeCorrector():
    """
    Factory for a single-variable, single-goal corrector
    """

    def _make(value=10.0, desired=100.0, tol=1e-6, method="Forward", **varKwargs):
        dc = DifferentialCorrector("TestDC")
        dc.derivativeMethod = method
        kwargs = dict(minimum=0.0, maximum=20.0, maxStep=5.0, perturbation=1e-3)
        kwargs.update(varKwargs)
        dc.addVariable("x", value, **kwargs)
        dc.addGoal("g", desired, tol)
        dc.initialize()
        return dc

    return _make


@pytest.fixture(scope="session", autouse=True)
def logger():
    """
    Configure the logger for unit test output
    """
    logger = logging.getLogger("targeter")
    logger.handlers.clear()
    logger.addHandler(RichHandler(show_time=False, enable_link_path=False))
    logger.setLevel(logging.DEBUG)
    return logger.name
