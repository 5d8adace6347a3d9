"""
Test linear algebra module
"""
import numpy as np
import pytest

from targeter import linalg
from targeter.exceptions import NumericalError


class TestInverse:
    @pytest.mark.parametrize(
        "mat",
        [
            [[2.0]],
            [[1.0, 2.0], [3.0, 4.0]],
            [[4.0, -2.0, 1.0], [0.5, 3.0, 0.0], [1.0, 1.0, 5.0]],
        ],
    )
    def test_identity(self, mat):
        inv = linalg.inverse(mat)
        assert isinstance(inv, np.ndarray)
        assert inv.shape == np.shape(mat)
        np.testing.assert_allclose(np.asarray(mat) @ inv, np.eye(len(mat)), atol=1e-12)

    @pytest.mark.parametrize("mat", [[[0.0]], [[1.0, 2.0], [2.0, 4.0]], np.zeros((3, 3))])
    def test_singular(self, mat):
        with pytest.raises(NumericalError):
            linalg.inverse(mat)

    def test_nonSquare(self):
        with pytest.raises(ValueError):
            linalg.inverse(np.ones((2, 3)))

    @pytest.mark.parametrize("bad", [np.nan, np.inf])
    def test_nonFinite(self, bad):
        with pytest.raises(NumericalError):
            linalg.inverse([[1.0, bad], [0.0, 1.0]])

    def test_singularIsArithmeticError(self):
        with pytest.raises(ArithmeticError):
            linalg.inverse([[0.0]])


class TestPseudoinverse:
    def test_tall(self):
        # 3 variables, 1 goal: minimum-norm solution
        jac = np.array([[1.0], [2.0], [-2.0]])
        pinv = linalg.pseudoinverse(jac)
        assert pinv.shape == (1, 3)

        residual = np.array([4.5])
        step = pinv.T @ residual
        # The step satisfies the linearized goal equation ...
        np.testing.assert_allclose(jac.T @ step, residual)
        # ... and is parallel to the gradient, i.e., it has the minimum norm
        np.testing.assert_allclose(step, jac[:, 0] * 4.5 / 9.0)

    def test_wide(self):
        # 1 variable, 2 goals: least-squares solution
        jac = np.array([[1.0, 3.0]])
        pinv = linalg.pseudoinverse(jac)
        residual = np.array([1.0, 2.0])
        step = pinv.T @ residual

        lstsq = np.linalg.lstsq(jac.T, residual, rcond=None)[0]
        np.testing.assert_allclose(step, lstsq)

        # Perturbing the least-squares step increases the residual norm
        best = np.linalg.norm(jac.T @ step - residual)
        for dx in (-1e-3, 1e-3):
            assert np.linalg.norm(jac.T @ (step + dx) - residual) > best

    @pytest.mark.parametrize(
        "mat", [np.zeros((3, 1)), [[1.0, 2.0], [2.0, 4.0], [3.0, 6.0]]]
    )
    def test_rankDeficient(self, mat):
        with pytest.raises(NumericalError):
            linalg.pseudoinverse(mat)

    def test_nonFinite(self):
        with pytest.raises(NumericalError):
            linalg.pseudoinverse([[np.nan], [1.0]])


class TestInvert:
    def test_square(self, mocker):
        spy = mocker.spy(linalg, "inverse")
        jac = np.array([[1.0, 2.0], [0.5, 3.0]])
        inv = linalg.invert(jac)
        spy.assert_called_once()
        np.testing.assert_allclose(jac @ inv, np.eye(2), atol=1e-12)

    def test_nonSquare(self, mocker):
        spy = mocker.spy(linalg, "pseudoinverse")
        inv = linalg.invert(np.array([[1.0], [2.0], [3.0]]))
        spy.assert_called_once()
        assert inv.shape == (1, 3)
