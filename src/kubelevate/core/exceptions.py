from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class KubelevateError(Exception):
    """Base exception for kubelevate."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigLoadError(KubelevateError):
    """Raised when the kubeconfig cannot be read or parsed."""


class AnnotationError(KubelevateError, ValueError):
    """Raised when a kubeconfig cannot carry an elevation reason."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        KubelevateError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class NoCurrentContextError(AnnotationError):
    """Raised when the current-context is empty or does not resolve."""


class NoAuthInfoError(AnnotationError):
    """Raised when the current context has no resolvable user entry."""


class PersistError(KubelevateError):
    """Raised when the annotated kubeconfig cannot be written to disk."""


class CommandExecutionError(KubelevateError, RuntimeError):
    """Raised when the wrapped command fails to start or exits non-zero."""

    def __init__(
        self,
        message: str,
        *,
        argv: Optional[list[str]] = None,
        returncode: Optional[int] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if argv is not None:
            ctx["argv"] = list(argv)
        if returncode is not None:
            ctx["returncode"] = returncode
        KubelevateError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)
        self.argv = list(argv) if argv is not None else []
        self.returncode = returncode


class SettingsError(KubelevateError, ValueError):
    """Raised when layered kubelevate settings are malformed."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        KubelevateError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "KubelevateError",
    "ConfigLoadError",
    "AnnotationError",
    "NoCurrentContextError",
    "NoAuthInfoError",
    "PersistError",
    "CommandExecutionError",
    "SettingsError",
]
