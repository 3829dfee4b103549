"""
Linear System — плотный solver с общей факторизацией

Решение A·X = [b_1, ..., b_m] для нескольких правых частей через одну
LU-факторизацию с частичным выбором ведущего элемента (LAPACK gesv через
numpy.linalg.solve). Матрица общего вида: не предполагается ни симметрия,
ни диагональное преобладание.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все правые части решаются против одной факторизации A
2. Вырожденная A (нулевой ведущий элемент LU) → SingularSystemError
3. Решение, содержащее NaN/Inf, никогда не возвращается
"""

from typing import Sequence

import numpy as np

from src.core.math.numerical_safeguards import all_finite


# =============================================================================
# EXCEPTIONS
# =============================================================================


class SingularSystemError(ArithmeticError):
    """
    Система не имеет конечного однозначного решения.

    Возникает при точной вырожденности (LU обнулила ведущий элемент),
    при non-finite решении или, если задан condition_limit, при числе
    обусловленности выше порога.
    """

    def __init__(self, message: str, size: int, condition: float | None = None):
        super().__init__(message)
        self.size = size
        self.condition = condition


# =============================================================================
# SOLVER
# =============================================================================


def identity_system(n: int, rhs_count: int = 2) -> tuple[np.ndarray, np.ndarray]:
    """
    Заготовка системы размера n: A = I (n×n), B = 0 (n×rhs_count).

    Examples:
        >>> A, B = identity_system(2)
        >>> A.tolist(), B.shape
        ([[1.0, 0.0], [0.0, 1.0]], (2, 2))
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return np.eye(n, dtype=float), np.zeros((n, rhs_count), dtype=float)


def solve_shared(
    A: np.ndarray,
    rhs: Sequence[np.ndarray] | np.ndarray,
    condition_limit: float | None = None,
) -> list[np.ndarray]:
    """
    Решение A·x_i = b_i для всех правых частей через одну факторизацию.

    Args:
        A: Квадратная матрица коэффициентов (n×n)
        rhs: Последовательность векторов длины n, либо матрица n×m
             (столбцы = правые части)
        condition_limit: Максимально допустимое число обусловленности A;
            None — проверка отключена (ациклические компоненты с крупными
            долями имеют огромное cond при точном решении)

    Returns:
        Список решений x_i (по одному на каждую правую часть, в том же порядке)

    Raises:
        ValueError: Если размерности не согласованы
        SingularSystemError: Если A вырождена, решение содержит NaN/Inf
            или cond(A) > condition_limit

    Examples:
        >>> A = np.array([[1.0, -0.1], [-0.2, 1.0]])
        >>> x_bid, x_ask = solve_shared(A, [np.array([1e6, 2e6]), np.array([1e6, 2e6])])
        >>> round(float(x_bid[0]), 2), round(float(x_bid[1]), 2)
        (1224489.8, 2244897.96)
    """
    A = np.asarray(A, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"A must be square, got shape {A.shape}")

    n = A.shape[0]

    if isinstance(rhs, np.ndarray) and rhs.ndim == 2:
        B = rhs.astype(float, copy=False)
    elif len(rhs) == 0:
        B = np.zeros((n, 0))
    else:
        B = np.column_stack([np.asarray(b, dtype=float) for b in rhs])

    if B.shape[0] != n:
        raise ValueError(f"rhs length {B.shape[0]} does not match matrix size {n}")

    if n == 0:
        return [np.zeros(0) for _ in range(B.shape[1])]

    if not all_finite(A) or not all_finite(B):
        raise SingularSystemError("system contains NaN/Inf coefficients", size=n)

    try:
        # gesv: одна LU-факторизация, затем forward/back substitution по всем столбцам
        X = np.linalg.solve(A, B)
    except np.linalg.LinAlgError as e:
        raise SingularSystemError(f"singular matrix of size {n}: {e}", size=n) from e

    if not all_finite(X):
        raise SingularSystemError(f"non-finite solution for system of size {n}", size=n)

    if condition_limit is not None:
        with np.errstate(divide="ignore", invalid="ignore"):
            condition = float(np.linalg.cond(A))
        if not np.isfinite(condition) or condition > condition_limit:
            raise SingularSystemError(
                f"ill-conditioned matrix of size {n}: "
                f"cond={condition:.3e} > {condition_limit:.3e}",
                size=n,
                condition=condition,
            )

    return [X[:, j].copy() for j in range(X.shape[1])]
