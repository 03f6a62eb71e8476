"""
kubelevate context command.

SUMMARY: Show the kubeconfig context and user an elevation would annotate
"""

from __future__ import annotations

import argparse
import sys

from kubelevate.cli import OutputFormatter, add_json_flag
from kubelevate.cli._utils import get_config_dir
from kubelevate.core.config.domains import ElevateConfig
from kubelevate.core.elevate import (
    current_auth_info_name,
    current_context,
    elevation_reasons,
    render_elevation_reason,
)
from kubelevate.core.exceptions import KubelevateError
from kubelevate.core.kubeconfig import read_kubeconfig_raw

SUMMARY = "Show the kubeconfig context and user an elevation would annotate"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        settings = ElevateConfig(config_dir=get_config_dir(args))
        config = read_kubeconfig_raw(env_var=settings.env_var)
        ctx = current_context(config)
        user = current_auth_info_name(config)
    except KubelevateError as exc:
        formatter.error(exc, error_code=exc.__class__.__name__)
        return 1

    cluster = config.clusters.get(ctx.cluster)
    payload = {
        "context": config.current_context,
        "cluster": ctx.cluster,
        "server": cluster.server if cluster else "",
        "user": user,
        "namespace": ctx.namespace,
        "reasons": elevation_reasons(config.auth_infos[user]),
        "reason": render_elevation_reason(config, settings.reason_template),
    }

    if formatter.json_mode:
        formatter.json_output(payload)
        return 0

    formatter.text(f"Current context: {payload['context']}")
    formatter.text_kv("cluster", payload["cluster"] or "-")
    formatter.text_kv("server", payload["server"] or "-")
    formatter.text_kv("user", payload["user"])
    formatter.text_kv("namespace", payload["namespace"] or "-")
    formatter.text_kv("elevation reason", payload["reason"])
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
