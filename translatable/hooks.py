"""Filter pipelines wrapped around model operations."""

import typing


Next = typing.Callable[[typing.Any], typing.Any]
"""The handler a filter delegates to; takes the (possibly rewritten) request."""

Filter = typing.Callable[[typing.Any, typing.Any, Next], typing.Any]
"""A filter: ``filter(model, request, next_)`` returning the operation result."""


class Filters:
    """Ordered, named filters for each operation of a model.

    Filters registered first run outermost. Registering a filter under a
    name already used for that operation replaces it in place, so binding a
    behavior twice does not stack its filters.
    """

    def __init__(self) -> None:
        self._filters: dict[str, dict[str, Filter]] = {}

    def apply(self, method: str, name: str, filter: Filter) -> None:
        """Register ``filter`` for ``method`` under ``name``."""
        self._filters.setdefault(method, {})[name] = filter

    def remove(self, method: str, name: str) -> None:
        """Unregister a filter; missing names are ignored."""
        self._filters.get(method, {}).pop(name, None)

    def names(self, method: str) -> list[str]:
        """Names of the filters registered for ``method``, outermost first."""
        return list(self._filters.get(method, {}))

    def run(
        self,
        method: str,
        model: typing.Any,
        request: typing.Any,
        implementation: Next,
    ) -> typing.Any:
        """Run ``request`` through the filters for ``method``.

        Args:
            method: Operation name (``"save"``, ``"find"``, ...)
            model: Model passed to every filter
            request: The request the outermost filter receives
            implementation: Core operation called after the last filter

        Returns:
            Whatever the outermost filter returns
        """
        chain = list(self._filters.get(method, {}).values())

        def call(index: int, current: typing.Any) -> typing.Any:
            if index == len(chain):
                return implementation(current)
            return chain[index](
                model, current, lambda request: call(index + 1, request)
            )

        return call(0, request)
