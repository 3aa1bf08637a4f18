"""Target records and the registration primitive used by build scripts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from pygant.binding import Binding
from pygant.logging import Logger

Body = Callable[[], Any]


@dataclass
class Target:
    """A named, parameterless unit of work."""

    name: str
    body: Body
    description: str = ""


class TargetRegistry:
    """Index of the targets a script registered, with their descriptions.

    Bodies are stored in the binding under the target name, so they are visible
    to depends() and to the script itself.
    """

    def __init__(self, binding: Binding, logger: Optional[Logger] = None) -> None:
        self._binding = binding
        self._logger = logger
        self._targets: dict[str, Target] = {}

    def register(self, name: str, body: Body, description: str = "") -> Target:
        """Register (or replace) a target.

        Raises:
            TypeError: If the name is not a string or the body is not callable
        """
        if not isinstance(name, str) or not name:
            raise TypeError(f"Target name must be a non-empty string, got {name!r}")
        if not callable(body):
            raise TypeError(f"Body of target '{name}' is not callable")
        if name in self._targets and self._logger is not None:
            self._logger.warn(f"Target '{name}' redefined", markup=False)
        target = Target(name=name, body=body, description=description or "")
        self._targets[name] = target
        self._binding.set(name, body)
        return target

    def get(self, name: str) -> Optional[Target]:
        return self._targets.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def names(self) -> list[str]:
        return list(self._targets)

    def descriptions(self) -> list[tuple[str, str]]:
        """(name, description) pairs sorted by target name."""
        return [(name, self._targets[name].description) for name in sorted(self._targets)]

    def target_function(self) -> Callable[..., Any]:
        """Build the ``target`` function scripts use to register targets.

        All of these register a target named "compile":

            @target("compile", "Compile the sources")
            def compile_(): ...

            @target(name="compile", description="Compile the sources")
            def compile_(): ...

            target({"compile": "Compile the sources"}, body=compile_)

            @target
            def compile(): ...
        """
        registry = self

        def target(name: Any = None, description: str = "", body: Optional[Body] = None) -> Any:
            if callable(name) and body is None and not isinstance(name, Mapping):
                fn = name
                registry.register(fn.__name__, fn, (fn.__doc__ or "").strip())
                return fn

            if isinstance(name, Mapping):
                if len(name) != 1:
                    raise TypeError("target() mapping must have exactly one name: description entry")
                ((name, description),) = name.items()

            if body is not None:
                registry.register(name, body, description)
                return body

            def decorator(fn: Body) -> Body:
                registry.register(name, fn, description)
                return fn

            return decorator

        return target
