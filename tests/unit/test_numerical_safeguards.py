"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. NaN/Inf проверки (скаляры и массивы)
2. Epsilon-сравнения float
3. Валидацию параметров
"""

import math

import numpy as np
import pytest

from src.core.math.numerical_safeguards import (
    EPS_CALC,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_MONEY,
    all_finite,
    is_close,
    is_valid_float,
    validate_finite,
    validate_non_negative,
    validate_positive,
)


class TestEpsilonConstants:
    """Epsilon-параметры положительны и упорядочены"""

    def test_all_positive(self) -> None:
        for eps in (EPS_CALC, EPS_FLOAT_COMPARE_ABS, EPS_FLOAT_COMPARE_REL, EPS_MONEY):
            assert eps > 0

    def test_money_eps_coarser_than_calc(self) -> None:
        assert EPS_MONEY > EPS_CALC


class TestFiniteChecks:
    """Тесты NaN/Inf проверок"""

    def test_valid_float(self) -> None:
        assert is_valid_float(0.0)
        assert is_valid_float(-1e300)

    def test_nan_inf_invalid(self) -> None:
        assert not is_valid_float(float("nan"))
        assert not is_valid_float(float("inf"))
        assert not is_valid_float(float("-inf"))

    def test_all_finite_array(self) -> None:
        assert all_finite(np.array([[1.0, 2.0], [3.0, 4.0]]))
        assert all_finite([])
        assert not all_finite(np.array([1.0, math.inf]))
        assert not all_finite([1.0, float("nan")])


class TestIsClose:
    """Тесты epsilon-сравнений"""

    def test_solver_precision_values_close(self) -> None:
        assert is_close(1224489.7959183673, 1_200_000.0 / 0.98)

    def test_different_values_not_close(self) -> None:
        assert not is_close(1.0, 1.1)

    def test_near_zero_uses_abs_tol(self) -> None:
        assert is_close(0.0, 1e-13)


class TestValidation:
    """Тесты валидации параметров"""

    def test_validate_positive_accepts(self) -> None:
        validate_positive(100.0, "leader_value_share")

    @pytest.mark.parametrize("value", [0.0, -1.0, float("nan"), float("inf")])
    def test_validate_positive_rejects(self, value: float) -> None:
        with pytest.raises(ValueError, match="leader_value_share"):
            validate_positive(value, "leader_value_share")

    def test_validate_non_negative(self) -> None:
        validate_non_negative(0.0, "ask_floor")
        with pytest.raises(ValueError, match="non-negative"):
            validate_non_negative(-0.01, "ask_floor")

    def test_validate_finite_allows_negative(self) -> None:
        validate_finite(-5.0, "cash")
        with pytest.raises(ValueError, match="NaN/Inf"):
            validate_finite(float("nan"), "cash")
