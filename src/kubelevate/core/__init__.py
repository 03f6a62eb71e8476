"""kubelevate core library: kubeconfig model, elevation, settings."""

from . import exceptions  # noqa: F401
