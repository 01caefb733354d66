# physics/tensor.py
"""Second-order tensor holding the outer product of two vectors."""
from utils.layers import layer_for


class Tensor:
    """3x3 tensor in canonical components, numeric or symbolic."""

    __slots__ = ("_m",)

    def __init__(self, m) -> None:
        layer = layer_for(m)
        self._m = layer.simplify(layer.matrix(m))

    @property
    def is_symbolic(self) -> bool:
        return layer_for(self._m).symbolic

    def components(self):
        """Canonical 3x3 components."""
        return self._m if self.is_symbolic else self._m.copy()

    def __repr__(self) -> str:
        return f"Tensor({self._m.tolist()})"
