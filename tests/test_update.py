"""
Test the Newton update
"""
import numpy as np
import pytest

from targeter.corrections import Goal, GoalSet, NewtonUpdate, Variable, VariableSet
from targeter.exceptions import NumericalError


def makeSets(values, desired, maxStep=np.inf, bounds=(-np.inf, np.inf)):
    variables = VariableSet()
    for ix, val in enumerate(values):
        variables.add(Variable(f"x{ix}", val, *bounds, maxStep=maxStep))
    goals = GoalSet()
    for ix, val in enumerate(desired):
        goals.add(Goal(f"g{ix}", val, 1e-8))
    return variables, goals


class TestStepMultiplier:
    @pytest.mark.parametrize(
        "delta, maxStep, expected",
        [
            [[3.0, -1.0], [1.0, 1.0], 1.0 / 3.0],
            [[0.5, -0.5], [1.0, 1.0], 1.0],
            [[2.0, -8.0], [1.0, 2.0], 0.25],
            [[1.0, 1.0], [np.inf, np.inf], 1.0],
            [[0.0, 0.0], [1.0, 1.0], 1.0],
        ],
    )
    def test_multiplier(self, delta, maxStep, expected):
        assert NewtonUpdate.stepMultiplier(delta, maxStep) == pytest.approx(expected)

    def test_preservesDirection(self):
        # Identity Jacobian: the step equals the goal error
        variables, goals = makeSets([0.0, 0.0], [3.0, -1.0], maxStep=1.0)
        step = NewtonUpdate().update(variables, goals, np.eye(2), np.zeros(2))
        np.testing.assert_allclose(step, [1.0, -1.0 / 3.0])
        np.testing.assert_allclose(variables.values(), [1.0, -1.0 / 3.0])


class TestUpdate:
    def test_scalar(self):
        variables, goals = makeSets([10.0], [100.0])
        updater = NewtonUpdate()
        step = updater.update(variables, goals, np.array([[5.0]]), np.array([50.0]))
        assert step[0] == pytest.approx(10.0)
        assert variables[0].value == pytest.approx(20.0)
        assert updater.multiplier == 1.0
        np.testing.assert_allclose(updater.inverseJacobian, [[0.2]])
        np.testing.assert_allclose(updater.delta, [10.0])

    def test_transposedJacobian(self):
        # Rows are variables, columns are goals; g0 = x0 + 2 x1, g1 = 3 x1
        jac = np.array([[1.0, 0.0], [2.0, 3.0]])
        variables, goals = makeSets([0.0, 0.0], [5.0, 3.0])
        NewtonUpdate().update(variables, goals, jac, np.zeros(2))
        np.testing.assert_allclose(variables.values(), [3.0, 1.0])

    def test_clamped(self):
        variables, goals = makeSets([10.0], [200.0], bounds=(0.0, 20.0))
        step = NewtonUpdate().update(variables, goals, np.array([[5.0]]), np.array([50.0]))
        assert variables[0].value == 20.0
        assert step[0] == pytest.approx(10.0)
        assert variables[0].inBounds()

    def test_clampedAfterScaling(self):
        # Scaled step of 5 would land at 13, past the maximum of 12
        variables, goals = makeSets([8.0], [100.0], maxStep=5.0, bounds=(0.0, 12.0))
        updater = NewtonUpdate()
        updater.update(variables, goals, np.array([[1.0]]), np.array([8.0]))
        assert updater.multiplier == pytest.approx(5.0 / 92.0)
        assert variables[0].value == 12.0

    def test_clampedMinimum(self):
        variables, goals = makeSets([1.0], [-100.0], bounds=(0.0, 20.0))
        NewtonUpdate().update(variables, goals, np.array([[1.0]]), np.array([1.0]))
        assert variables[0].value == 0.0

    def test_pseudoinverse(self):
        # Three variables, one goal: g = x0 + x1 + x2
        jac = np.ones((3, 1))
        variables, goals = makeSets([0.0, 0.0, 0.0], [3.0])
        updater = NewtonUpdate()
        updater.update(variables, goals, jac, np.zeros(1))
        assert updater.inverseJacobian.shape == (1, 3)

        # Minimum-norm step spreads the change evenly
        np.testing.assert_allclose(variables.values(), [1.0, 1.0, 1.0])

    def test_singular(self):
        variables, goals = makeSets([1.0, 2.0], [1.0, 1.0])
        jac = np.array([[1.0, 2.0], [2.0, 4.0]])
        with pytest.raises(NumericalError):
            NewtonUpdate().update(variables, goals, jac, np.zeros(2))

        # Variables are not modified
        np.testing.assert_array_equal(variables.values(), [1.0, 2.0])

    def test_zeroSensitivity(self):
        variables, goals = makeSets([1.0], [2.0])
        with pytest.raises(NumericalError):
            NewtonUpdate().update(variables, goals, np.zeros((1, 1)), np.zeros(1))

    def test_overflow(self):
        variables, goals = makeSets([1.0], [1e300])
        with pytest.raises(NumericalError):
            NewtonUpdate().update(variables, goals, np.array([[1e-300]]), np.zeros(1))
