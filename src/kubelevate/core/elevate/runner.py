"""Run a command against a kubeconfig annotated with an elevation reason.

Flow: load the kubeconfig, annotate the current user, write the result to a
private temp file, run the command with the locator variable pointing at it,
then remove the file. The parent's own environment is never written; the
child gets an explicit environment map instead.
"""
from __future__ import annotations

import functools
import logging
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, Mapping, MutableMapping, Optional, Sequence

import yaml

from kubelevate.core.config.domains.elevate import DEFAULT_REASON, DEFAULT_TEMP_PREFIX, ElevateConfig
from kubelevate.core.exceptions import CommandExecutionError, ConfigLoadError, PersistError
from kubelevate.core.kubeconfig import RECOMMENDED_CONFIG_PATH_ENV_VAR, KubeConfig, read_kubeconfig_raw
from kubelevate.core.utils.io import dump_yaml, write_private_tempfile

from .annotate import add_elevation_reason, current_auth_info_name, render_elevation_reason

logger = logging.getLogger(__name__)

Loader = Callable[[], KubeConfig]
Spawner = Callable[[Sequence[str], Mapping[str, str]], int]
Remover = Callable[[str], None]


def spawn_process(argv: Sequence[str], env: Mapping[str, str]) -> int:
    """Run ``argv`` with inherited stdio and return its exit code."""
    proc = subprocess.run(list(argv), env=dict(env))
    return int(proc.returncode)


@contextmanager
def transient_kubeconfig(
    config: KubeConfig,
    *,
    remover: Remover = os.remove,
    directory: Optional[Path] = None,
    prefix: str = DEFAULT_TEMP_PREFIX,
) -> Iterator[Path]:
    """Write ``config`` to a private temp file for the duration of the block.

    Raises:
        PersistError: If the file cannot be written (nothing is left behind)
    """
    try:
        path = write_private_tempfile(
            lambda f: dump_yaml(config.to_dict(), f),
            prefix=prefix,
            suffix=".yaml",
            directory=directory,
        )
    except (OSError, yaml.YAMLError) as exc:
        raise PersistError(
            f"cannot write temporary kubeconfig: {exc}",
            context={"directory": str(directory) if directory else ""},
        ) from exc

    logger.debug("Wrote transient kubeconfig %s", path)
    try:
        yield path
    finally:
        try:
            remover(str(path))
        except OSError as exc:
            logger.warning("Could not remove temporary kubeconfig %s: %s", path, exc)


@contextmanager
def preserved_env_var(environ: MutableMapping[str, str], name: str) -> Iterator[Optional[str]]:
    """Capture ``name`` in ``environ`` and put it back (or unset it) on exit."""
    had_value = name in environ
    prior = environ.get(name)
    try:
        yield prior
    finally:
        if had_value:
            if environ.get(name) != prior:
                environ[name] = prior  # type: ignore[assignment]
        elif name in environ:
            del environ[name]


def child_environment(environ: Mapping[str, str], name: str, path: Path) -> Dict[str, str]:
    """Copy ``environ`` with ``name`` pointing at ``path``."""
    env = dict(environ)
    env[name] = str(path)
    return env


class ElevationRunner:
    """Wrap a cluster CLI invocation with an elevation reason.

    Collaborators are injected so tests can swap them:

    - ``loader``: returns the raw kubeconfig
    - ``spawner``: runs argv with an environment map, returns the exit code
    - ``remover``: deletes the transient file
    - ``environ``: the process environment to read (and guard)
    """

    def __init__(
        self,
        *,
        loader: Optional[Loader] = None,
        spawner: Spawner = spawn_process,
        remover: Remover = os.remove,
        environ: Optional[MutableMapping[str, str]] = None,
        reason: str = DEFAULT_REASON,
        env_var: str = RECOMMENDED_CONFIG_PATH_ENV_VAR,
        temp_dir: Optional[Path] = None,
        temp_prefix: str = DEFAULT_TEMP_PREFIX,
    ) -> None:
        self.environ: MutableMapping[str, str] = os.environ if environ is None else environ
        self.env_var = env_var
        self.loader: Loader = loader or functools.partial(
            read_kubeconfig_raw, self.environ, env_var=env_var
        )
        self.spawner = spawner
        self.remover = remover
        self.reason = reason
        self.temp_dir = temp_dir
        self.temp_prefix = temp_prefix

    def _load(self) -> KubeConfig:
        try:
            return self.loader()
        except ConfigLoadError:
            raise
        except Exception as exc:
            raise ConfigLoadError(f"cannot load kubeconfig: {exc}") from exc

    def run(self, argv: Sequence[str]) -> None:
        """Run ``argv`` against the annotated kubeconfig.

        Raises:
            ConfigLoadError: The loader failed
            NoCurrentContextError: The kubeconfig has no usable current context
            NoAuthInfoError: The current context has no usable user
            PersistError: The temporary kubeconfig could not be written
            CommandExecutionError: The command could not start or exited non-zero
        """
        argv = [str(a) for a in argv]

        config = self._load()
        annotated = add_elevation_reason(config, render_elevation_reason(config, self.reason))
        if not argv:
            raise CommandExecutionError("no command given to run", argv=argv)

        logger.info(
            "Elevating %r for user %s in context %s",
            argv,
            current_auth_info_name(annotated),
            annotated.current_context,
        )

        with transient_kubeconfig(
            annotated,
            remover=self.remover,
            directory=self.temp_dir,
            prefix=self.temp_prefix,
        ) as path:
            with preserved_env_var(self.environ, self.env_var):
                env = child_environment(self.environ, self.env_var, path)
                self._execute(argv, env)

    def _execute(self, argv: list[str], env: Mapping[str, str]) -> None:
        try:
            code = self.spawner(argv, env)
        except (OSError, ValueError) as exc:
            raise CommandExecutionError(
                f"cannot run {argv[0]}: {exc}",
                argv=argv,
            ) from exc

        if code < 0:
            raise CommandExecutionError(
                f"{argv[0]} was terminated by signal {-code}",
                argv=argv,
                returncode=code,
            )
        if code != 0:
            raise CommandExecutionError(
                f"{argv[0]} exited with status {code}",
                argv=argv,
                returncode=code,
            )
        logger.debug("%s exited cleanly", argv[0])


def run_elevate(
    argv: Sequence[str],
    *,
    reason: Optional[str] = None,
    config_dir: Optional[Path] = None,
    **collaborators,
) -> None:
    """Build an :class:`ElevationRunner` from settings and run ``argv``.

    ``reason`` overrides the configured reason template; ``collaborators``
    are passed through to the runner (``loader``, ``spawner``, ...).
    """
    settings = ElevateConfig(config_dir=config_dir)
    runner = ElevationRunner(
        reason=reason or settings.reason_template,
        env_var=settings.env_var,
        temp_dir=settings.temp_dir,
        temp_prefix=settings.temp_prefix,
        **collaborators,
    )
    runner.run(argv)


__all__ = [
    "DEFAULT_REASON",
    "ElevationRunner",
    "Loader",
    "Remover",
    "Spawner",
    "child_environment",
    "preserved_env_var",
    "run_elevate",
    "spawn_process",
    "transient_kubeconfig",
]
