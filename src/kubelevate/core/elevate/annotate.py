"""Attach an elevation reason to the identity of the current context."""
from __future__ import annotations

import copy
import dataclasses

from kubelevate.core.config.templating import render_placeholders
from kubelevate.core.exceptions import NoAuthInfoError, NoCurrentContextError
from kubelevate.core.kubeconfig import AuthInfo, Context, KubeConfig

REASON_KEY = "reason"


def elevation_reasons(auth: AuthInfo) -> list[str]:
    """Return the reasons already recorded on ``auth``."""
    value = auth.extra.get(REASON_KEY)
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [] if value is None else [str(value)]


def current_context(config: KubeConfig) -> Context:
    """Return the context selected by ``current-context``.

    Raises:
        NoCurrentContextError: If the selector is empty or does not resolve
    """
    name = config.current_context
    ctx = config.contexts.get(name) if name else None
    if ctx is None:
        raise NoCurrentContextError(
            "no current kubeconfig context",
            context={"current_context": name},
        )
    return ctx


def current_auth_info_name(config: KubeConfig) -> str:
    """Return the user entry name bound to the current context.

    Raises:
        NoCurrentContextError: If the selector is empty or does not resolve
        NoAuthInfoError: If the context's user is empty or does not resolve
    """
    ctx = current_context(config)
    user = ctx.auth_info
    if not user or user not in config.auth_infos:
        raise NoAuthInfoError(
            "no current user information in kubeconfig",
            context={"current_context": config.current_context, "user": user},
        )
    return user


def render_elevation_reason(config: KubeConfig, template: str) -> str:
    """Fill ``{context}``, ``{user}`` and ``{cluster}`` in ``template`` from ``config``."""
    ctx = config.contexts.get(config.current_context)
    return render_placeholders(
        template,
        context=config.current_context,
        user=ctx.auth_info if ctx else "",
        cluster=ctx.cluster if ctx else "",
    )


def add_elevation_reason(config: KubeConfig, reason: str) -> KubeConfig:
    """Return a copy of ``config`` whose current user carries ``reason``.

    The reason is appended to the user's ``as-user-extra`` ``reason`` list.
    Nothing else changes, and ``config`` itself is never modified.

    Raises:
        NoCurrentContextError: If the current-context is empty or unresolved
        NoAuthInfoError: If the current context has no resolvable user
    """
    user = current_auth_info_name(config)
    auth = config.auth_infos[user]

    extra = copy.deepcopy(auth.extra)
    extra[REASON_KEY] = [*elevation_reasons(auth), reason]

    auth_infos = dict(config.auth_infos)
    auth_infos[user] = dataclasses.replace(auth, extra=extra)
    return dataclasses.replace(config, auth_infos=auth_infos)


__all__ = [
    "REASON_KEY",
    "current_context",
    "current_auth_info_name",
    "add_elevation_reason",
    "elevation_reasons",
    "render_elevation_reason",
]
