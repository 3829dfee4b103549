"""
Numerical Safeguards — базовые проверки для valuation-расчётов

Модуль содержит примитивы численной устойчивости, которые используются
при построении и решении линейных систем оценки leader-инструментов:
- Epsilon-параметры для денежных величин и сравнений float
- Проверки конечности (NaN/Inf) для скаляров и массивов
- Валидация конфигурационных параметров

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf никогда не попадают в запись результатов (проверяются до записи)
2. Float сравнения всегда учитывают машинную точность
3. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final, Iterable

import numpy as np

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для денежных величин (cash, provisions, net worth)
EPS_MONEY: Final[float] = 1e-6

# Epsilon для общих вычислений
EPS_CALC: Final[float] = 1e-12

# Относительная толерантность сравнения float (результаты solver-а)
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Абсолютная толерантность сравнения float
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


def all_finite(values: "np.ndarray | Iterable[float]") -> bool:
    """
    Проверка, что все элементы массива конечны.

    Используется для проверки решения линейной системы перед записью.

    Examples:
        >>> all_finite([1.0, 2.0])
        True
        >>> all_finite([1.0, float('nan')])
        False
    """
    arr = np.asarray(values, dtype=float)
    return bool(np.isfinite(arr).all())


# =============================================================================
# EPSILON-СРАВНЕНИЯ FLOAT
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    Алгоритм:
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Examples:
        >>> is_close(1.0, 1.0 + 1e-10)
        True
        >>> is_close(1224489.7959183673, 1224489.79591837)
        True
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_positive(value: float, name: str, eps: float = EPS_CALC) -> None:
    """
    Валидация, что значение положительное.

    Raises:
        ValueError: Если value <= eps или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= eps:
        raise ValueError(f"{name} must be positive (> {eps}), got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_finite(value: float, name: str) -> None:
    """Валидация, что значение конечно (допускаются отрицательные)."""
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")
