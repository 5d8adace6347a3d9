#!/usr/bin/env python3
"""
Drive a differential corrector by hand through its state machine. The goal has
a "floating" target: the desired value depends on the current variable, so it is
refreshed during each nominal pass.

Solve x**3 = 2 + 10 * sin(x) by targeting g(x) = x**3 with the desired value
2 + 10 * sin(x).
"""
import logging

import numpy as np
from rich.logging import RichHandler

from targeter.corrections import DifferentialCorrector, SolverState

logger = logging.getLogger("targeter")
logger.addHandler(RichHandler(show_time=False, show_path=False, enable_link_path=False))
logger.setLevel(logging.INFO)

dc = DifferentialCorrector("FloatingDC")
dc.reportStyle = "Verbose"
dc.maxIterations = 50
dc.addVariable("x", 2.0, minimum=0.0, maximum=4.0, maxStep=0.5, perturbation=1e-6)
dc.declareGoals("Cube")
goalId = dc.addGoal("Cube", 2.0, 1e-8)

# Preview the initial guess, then solve
for mode in ("InitialGuess", "Solve"):
    dc.initialize()
    dc.takeAction("SetMode", mode)

    state = dc.advanceState()
    while not state == SolverState.FINISHED:
        x = dc.variables["x"].value
        if state == SolverState.NOMINAL:
            # Only accepted while in NOMINAL
            dc.updateGoalTarget(goalId, 2.0 + 10.0 * np.sin(x))
        if state in (SolverState.NOMINAL, SolverState.PERTURBING):
            dc.reportGoalValue(goalId, x**3)
        state = dc.advanceState()

    dc.advanceState()
    logger.info(f"{mode}: status = {dc.status.name}, x = {dc.variables['x'].value}")
