"""
Named strategy registry for interchangeable geometric algorithms.

Two families of algorithms exist in more than one form (spherical patch area
and the near-tangency "kiss" test). Each family keeps all its variants under
a registry so callers select one by name, and the registry remembers which
variant is the primary one.

Usage
-----
    area_methods = MethodRegistry("area", default="refinement")

    @area_methods.register("refinement")
    def refined_area(curves, radius, **kwargs):
        ...

    fn = area_methods["refinement"]
    fn = area_methods.get()          # the default
    area_methods.available()         # ["refinement"]
"""

from typing import Callable, Optional


class MethodRegistry:
    """Registry for pluggable computational methods.

    Parameters
    ----------
    name : str
        Human-readable family name used in error messages (e.g., "area").
    default : str or None
        Key returned by :meth:`get` when no key is given.
    """

    def __init__(self, name: str, default: Optional[str] = None):
        self.name = name
        self.default = default
        self._methods: dict[str, Callable] = {}

    def register(self, key: str, fn: Optional[Callable] = None):
        """Register ``fn`` under ``key``.

        When ``fn`` is omitted a decorator is returned, so the registry can
        annotate the function definition directly.
        """
        if fn is None:
            def decorator(func: Callable) -> Callable:
                self._methods[key] = func
                return func
            return decorator
        self._methods[key] = fn
        return fn

    def get(self, key: Optional[str] = None) -> Callable:
        """Look up ``key``, falling back to the registry default."""
        if key is None:
            if self.default is None:
                raise KeyError(f"No default {self.name} method configured")
            key = self.default
        return self[key]

    def __getitem__(self, key: str) -> Callable:
        if key not in self._methods:
            raise KeyError(
                f"Unknown {self.name} method: {key!r}. "
                f"Available: {list(self._methods.keys())}"
            )
        return self._methods[key]

    def __contains__(self, key: str) -> bool:
        return key in self._methods

    def available(self) -> list[str]:
        """Return list of registered method names."""
        return list(self._methods.keys())
