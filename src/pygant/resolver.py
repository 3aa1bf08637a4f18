"""Target resolution: depends(), at-most-once execution and task fallback.

Calls made from a target body through the build context are resolved here:

1. ``depends(...)`` runs the named targets, each at most once per run.
2. A name bound in the binding to a callable is called directly; if it is a
   registered target its body is then recorded as executed.
3. Anything else is handed to the task builder bound as ``ant``. If the task
   engine has no such task, the original MissingMethod is raised.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from pygant.binding import Binding
from pygant.builder import pack_arguments
from pygant.errors import MissingMethod, TaskNotFound, UnknownDependency
from pygant.logging import Logger
from pygant.target import TargetRegistry

DEPENDS = "depends"


class TargetResolver:
    """Resolves names used inside target bodies.

    Owns the executed-set for one run. Not thread-safe.
    """

    def __init__(self, binding: Binding, registry: TargetRegistry, logger: Optional[Logger] = None) -> None:
        self.binding = binding
        self.registry = registry
        self.logger = logger
        self.executed: set[Callable[[], Any]] = set()

    def run_once(self, body: Callable[[], Any]) -> Any:
        """Invoke a target body unless it already ran in this run.

        The body is recorded before it is invoked, so a dependency cycle stops at
        the first back-edge, and a body that raised is not retried.

        Returns:
            The body's result, or None if it was skipped
        """
        if body in self.executed:
            if self.logger is not None:
                self.logger.debug(f"Skipping {_body_name(body)}: already executed", markup=False)
            return None
        self.executed.add(body)
        if self.logger is not None:
            self.logger.debug(f"Executing {_body_name(body)}", markup=False)
        return body()

    def process_dependencies(self, arguments: Iterable[Any]) -> Any:
        """Run each dependency in order, depth-first.

        Args:
            arguments: Target names, target bodies, or lists/tuples of those

        Returns:
            The last non-None result, or None

        Raises:
            UnknownDependency: For anything that is not a target
        """
        result = None
        for argument in arguments:
            if isinstance(argument, (list, tuple)):
                value = self.process_dependencies(argument)
            else:
                value = self._process_dependency(argument)
            if value is not None:
                result = value
        return result

    def _process_dependency(self, argument: Any) -> Any:
        if isinstance(argument, str):
            if argument in self.binding:
                entry = self.binding.get(argument)
                if callable(entry):
                    return self.run_once(entry)
            raise UnknownDependency(argument)
        if callable(argument):
            return self.run_once(argument)
        raise UnknownDependency(argument)

    def invoke_in_target_context(
        self,
        name: str,
        args: Iterable[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Dispatch a call to `name` made from inside a target body.

        Raises:
            UnknownDependency: From depends()
            MissingMethod: If `name` is neither bound nor a task
            TaskFailure: If the task fell through to the task engine and failed
        """
        args = tuple(args)
        kwargs = dict(kwargs or {})

        if name == DEPENDS:
            if kwargs:
                raise UnknownDependency(kwargs)
            return self.process_dependencies(args)

        fn = self.binding.get(name) if name in self.binding else None
        if not callable(fn):
            return self._forward_to_builder(name, args, kwargs)

        result = fn(*args, **kwargs)
        target = self.registry.get(name)
        if target is not None and target.body is fn:
            # Called by name: later depends() on it must not run it again
            self.executed.add(fn)
        return result

    def _forward_to_builder(self, name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        missing = MissingMethod(name, args)
        if "ant" not in self.binding:
            raise missing
        try:
            return self.binding.get("ant").invoke(name, pack_arguments(args, kwargs))
        except TaskNotFound:
            raise missing from None


class BuildContext:
    """What target bodies see as ``build``.

    ``build.depends("init")`` declares dependencies, ``build.ant`` is the task
    builder, and any other attribute resolves through the target resolver:
    ``build.compile()`` runs the target "compile" if there is one and otherwise
    the task of that name. Non-callable binding values are returned as-is.
    """

    def __init__(self, resolver: TargetResolver) -> None:
        self._resolver = resolver

    def depends(self, *targets: Any) -> Any:
        return self._resolver.invoke_in_target_context(DEPENDS, targets)

    @property
    def ant(self) -> Any:
        return self._resolver.binding.get("ant")

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        binding = self._resolver.binding
        if name in binding:
            value = binding.get(name)
            if not callable(value):
                return value

        def dispatch(*args: Any, **kwargs: Any) -> Any:
            return self._resolver.invoke_in_target_context(name, args, kwargs)

        dispatch.__name__ = name
        return dispatch

    def __repr__(self) -> str:
        return f"BuildContext({self._resolver.binding!r})"


def _body_name(body: Callable[[], Any]) -> str:
    return getattr(body, "__name__", repr(body))
