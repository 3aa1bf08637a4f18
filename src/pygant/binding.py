"""The binding: the name -> value mapping build scripts are evaluated in."""

from __future__ import annotations

from typing import Any, Iterator, Optional

from pygant.errors import MissingVariable


class Binding:
    """Variables visible to a build script and its target bodies.

    The underlying dict doubles as the globals of the evaluated script, so
    top-level assignments in the script land here too. Lookups are exact; there
    is no removal.

    The task builder is stored under both ``ant`` and ``Ant``. ``Ant`` is kept
    only for older scripts and is deprecated.
    """

    TASK_BUILDER_NAMES = ("ant", "Ant")

    def __init__(self, builder: Optional[Any] = None) -> None:
        self._variables: dict[str, Any] = {}
        if builder is not None:
            self.set_builder(builder)

    def get(self, name: str) -> Any:
        """Get a variable.

        Raises:
            MissingVariable: If the name is not bound
        """
        try:
            return self._variables[name]
        except KeyError:
            raise MissingVariable(name) from None

    def set(self, name: str, value: Any) -> None:
        self._variables[name] = value

    def set_builder(self, builder: Any) -> None:
        """Bind the task builder under all of its names."""
        for name in self.TASK_BUILDER_NAMES:
            self._variables[name] = builder

    @property
    def builder(self) -> Any:
        return self.get("ant")

    @property
    def namespace(self) -> dict[str, Any]:
        """The live dict used as globals when evaluating the script."""
        return self._variables

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._variables))

    def __repr__(self) -> str:
        names = sorted(k for k in self._variables if not k.startswith("__"))
        return f"Binding({', '.join(names)})"
