#!/usr/bin/env python3
"""
Target the range and apex height of a projectile with quadratic drag by varying
the launch speed and elevation angle. Each evaluation integrates the equations
of motion until ground impact.
"""
import logging

import numpy as np
from rich.logging import RichHandler
from scipy.integrate import solve_ivp

from targeter.corrections import DifferentialCorrector
from targeter.loop import TargetLoop

logger = logging.getLogger("targeter")
logger.addHandler(RichHandler(show_time=False, show_path=False, enable_link_path=False))
logger.setLevel(logging.INFO)

GRAV = 9.81  # m/s**2
DRAG = 1.5e-4  # 1/m


def eom(t, q):
    x, y, vx, vy = q
    speed = np.hypot(vx, vy)
    return [vx, vy, -DRAG * speed * vx, -GRAV - DRAG * speed * vy]


def impact(t, q):
    return q[1]


impact.terminal = True
impact.direction = -1


def flight(params):
    """Return the range and apex height for a launch speed and elevation (deg)"""
    speed, elevation = params
    angle = np.radians(elevation)
    q0 = [0.0, 0.0, speed * np.cos(angle), speed * np.sin(angle)]
    sol = solve_ivp(eom, [0, 200], q0, events=impact, rtol=1e-10, atol=1e-10)
    return [sol.y[0, -1], sol.y[1].max()]


dc = DifferentialCorrector("ProjectileDC")
dc.derivativeMethod = "CentralDifference"
dc.maxIterations = 15
dc.addVariable("Speed", 90.0, minimum=1.0, maximum=300.0, maxStep=20.0, perturbation=1e-4)
dc.addVariable(
    "Elevation", 35.0, minimum=1.0, maximum=89.0, maxStep=5.0, perturbation=1e-5
)
dc.addGoal("Range", 1000.0, 1e-6)
dc.addGoal("ApexHeight", 200.0, 1e-6)

loop = TargetLoop(dc, flight)
status, log = loop.run()

logger.info(f"Status: {status.name} after {loop.numEvaluations} evaluations")
dc.printVariables()
dc.printGoals()
dc.printJacobian()
