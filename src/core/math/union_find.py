"""
Union-Find — disjoint set на массивах (arena-indexed)

Используется для разбиения графа владения (follower → leader) на
компоненты связности. Элементы — плотные индексы 0..n-1, состояние хранится
в двух списках (parent, size), без объектного графа.

Сложность: O((V + E) · α(V)) при path compression + union-by-size.
"""


class DisjointSet:
    """
    Disjoint set с path compression (halving) и union-by-size.

    Examples:
        >>> ds = DisjointSet(4)
        >>> ds.union(0, 1)
        True
        >>> ds.connected(0, 1)
        True
        >>> ds.connected(0, 2)
        False
    """

    __slots__ = ("_parent", "_size")

    def __init__(self, n: int):
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")

        self._parent: list[int] = list(range(n))
        self._size: list[int] = [1] * n

    def __len__(self) -> int:
        return len(self._parent)

    def find(self, x: int) -> int:
        """
        Представитель множества, содержащего x.

        Path halving: каждый пройденный узел перевешивается на деда.
        """
        parent = self._parent
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(self, a: int, b: int) -> bool:
        """
        Объединение множеств a и b.

        Returns:
            True если множества были различны (произошло слияние)
        """
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False

        # Меньшее дерево подвешивается под большее
        if self._size[ra] < self._size[rb]:
            ra, rb = rb, ra

        self._parent[rb] = ra
        self._size[ra] += self._size[rb]
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def set_size(self, x: int) -> int:
        """Размер множества, содержащего x."""
        return self._size[self.find(x)]

    def groups(self) -> list[list[int]]:
        """
        Разбиение всех элементов на множества.

        Порядок групп — по первому вхождению (наименьший индекс группы),
        элементы внутри группы отсортированы по возрастанию.
        """
        by_root: dict[int, list[int]] = {}
        for i in range(len(self._parent)):
            by_root.setdefault(self.find(i), []).append(i)
        return list(by_root.values())
