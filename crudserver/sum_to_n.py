"""
前 n 个自然数求和的三种实现

n <= 0 时均返回 0
"""


def sum_to_n_a(n: int) -> int:
    """循环累加"""
    if n <= 0:
        return 0
    total = 0
    for i in range(1, n + 1):
        total += i
    return total


def sum_to_n_b(n: int) -> int:
    """公式 n(n+1)/2"""
    if n <= 0:
        return 0
    return n * (n + 1) // 2


def sum_to_n_c(n: int) -> int:
    """递归，n 受解释器递归深度限制"""
    if n <= 0:
        return 0
    if n == 1:
        return 1
    return n + sum_to_n_c(n - 1)


__all__ = ["sum_to_n_a", "sum_to_n_b", "sum_to_n_c"]
