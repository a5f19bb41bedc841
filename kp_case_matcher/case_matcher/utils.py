from typing import Any, Iterable, List


def set_difference(set_a: Iterable[Any], set_b: Iterable[Any]) -> List[Any]:
    """
    Elementos de `set_a` que no aparecen en `set_b`, preservando orden y
    multiplicidad de `set_a`. Compara por igualdad (sirve para no-hashables).

        set_difference([1, 2, 3], [4, 3, 8, 1])  -> [2]
        set_difference([1, 1, 1, 1, 3], [1, 1])  -> [3]
        set_difference([2, 2], [])               -> [2, 2]
    """
    b = list(set_b)
    return [elem for elem in set_a if elem not in b]
