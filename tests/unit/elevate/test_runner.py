"""Tests for the elevation runner (load, annotate, persist, run, clean up)."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from helpers.fakes import RecordingRemover, RecordingSpawner
from helpers.kubeconfigs import CONTEXT, USER, sample_kubeconfig, sample_kubeconfig_dict, write_kubeconfig
from kubelevate.core.elevate import ElevationRunner, run_elevate, spawn_process
from kubelevate.core.exceptions import (
    CommandExecutionError,
    ConfigLoadError,
    NoCurrentContextError,
    PersistError,
)
from kubelevate.core.kubeconfig import KubeConfig, new_config

MOCK_KUBECONFIG = "/tmp/dummy_kubeconfig"


def _runner(tmp_path: Path, **kwargs) -> ElevationRunner:
    kwargs.setdefault("loader", sample_kubeconfig)
    kwargs.setdefault("spawner", RecordingSpawner())
    kwargs.setdefault("remover", RecordingRemover())
    kwargs.setdefault("temp_dir", tmp_path / "transient")
    return ElevationRunner(**kwargs)


def _transient_files(tmp_path: Path) -> list[Path]:
    d = tmp_path / "transient"
    return sorted(d.iterdir()) if d.exists() else []


def test_loader_failure_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBECONFIG", MOCK_KUBECONFIG)
    spawner = RecordingSpawner()

    def failing_loader() -> KubeConfig:
        raise ConfigLoadError("cannot load kfg")

    runner = _runner(tmp_path, loader=failing_loader, spawner=spawner)
    with pytest.raises(ConfigLoadError, match="cannot load kfg"):
        runner.run([])

    assert spawner.calls == []
    assert _transient_files(tmp_path) == []
    assert os.environ["KUBECONFIG"] == MOCK_KUBECONFIG


def test_unexpected_loader_error_is_wrapped(tmp_path: Path) -> None:
    def broken_loader() -> KubeConfig:
        raise ValueError("bad yaml")

    with pytest.raises(ConfigLoadError) as excinfo:
        _runner(tmp_path, loader=broken_loader).run(["oc", "get pods"])
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_config_without_current_context_fails_before_spawning(tmp_path: Path) -> None:
    spawner = RecordingSpawner()

    with pytest.raises(NoCurrentContextError):
        _runner(tmp_path, loader=new_config, spawner=spawner).run(["oc", "get pods"])

    assert spawner.calls == []
    assert _transient_files(tmp_path) == []


def test_empty_command_is_rejected_without_writing(tmp_path: Path) -> None:
    with pytest.raises(CommandExecutionError):
        _runner(tmp_path).run([])
    assert _transient_files(tmp_path) == []


def test_failing_command_cleans_up_and_restores(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBECONFIG", MOCK_KUBECONFIG)
    spawner = RecordingSpawner(returncode=1)
    remover = RecordingRemover()

    with pytest.raises(CommandExecutionError) as excinfo:
        _runner(tmp_path, spawner=spawner, remover=remover).run(["oc", "get pods"])

    assert excinfo.value.returncode == 1
    assert excinfo.value.argv == ["oc", "get pods"]
    assert remover.paths == [spawner.last["kubeconfig_path"]]
    assert not Path(spawner.last["kubeconfig_path"]).exists()
    assert os.environ["KUBECONFIG"] == MOCK_KUBECONFIG


def test_spawn_failure_carries_cause(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KUBECONFIG", raising=False)
    spawner = RecordingSpawner(error=FileNotFoundError("no such file: oc"))
    remover = RecordingRemover()

    with pytest.raises(CommandExecutionError) as excinfo:
        _runner(tmp_path, spawner=spawner, remover=remover).run(["oc", "get pods"])

    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert excinfo.value.returncode is None
    assert len(remover.paths) == 1
    assert _transient_files(tmp_path) == []
    assert "KUBECONFIG" not in os.environ


def test_success_keeps_previous_kubeconfig_value(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBECONFIG", MOCK_KUBECONFIG)
    spawner = RecordingSpawner()

    _runner(tmp_path, spawner=spawner, remover=lambda name: None).run(["oc", "get pods"])

    assert os.environ["KUBECONFIG"] == MOCK_KUBECONFIG
    assert spawner.last["parent_env_value"] == MOCK_KUBECONFIG


def test_success_keeps_kubeconfig_unset(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KUBECONFIG", raising=False)

    _runner(tmp_path, remover=lambda name: None).run(["oc", "get pods"])

    assert "KUBECONFIG" not in os.environ


def test_child_sees_annotated_transient_kubeconfig(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBECONFIG", MOCK_KUBECONFIG)
    spawner = RecordingSpawner()

    _runner(tmp_path, spawner=spawner, reason="on-call for {context} as {user}").run(
        ["kubectl", "get", "pods", "-n", "default"]
    )

    call = spawner.last
    assert call["argv"] == ["kubectl", "get", "pods", "-n", "default"]
    assert call["kubeconfig_path"] != MOCK_KUBECONFIG
    assert Path(call["kubeconfig_path"]).parent == tmp_path / "transient"

    doc = call["kubeconfig"]
    assert doc["current-context"] == CONTEXT
    users = {u["name"]: u["user"] for u in doc["users"]}
    assert users[USER]["as-user-extra"] == {"reason": [f"on-call for {CONTEXT} as {USER}"]}
    assert users[USER]["token"] == "sha256~secret"

    assert _transient_files(tmp_path) == []


def test_transient_file_is_private(tmp_path: Path) -> None:
    modes: list[int] = []

    def spawner(argv, env) -> int:
        modes.append(os.stat(env["KUBECONFIG"]).st_mode & 0o777)
        return 0

    _runner(tmp_path, spawner=spawner).run(["oc", "whoami"])
    assert modes == [0o600]


def test_remover_failure_is_only_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    remover = RecordingRemover(error=PermissionError("read-only"))

    with caplog.at_level("WARNING", logger="kubelevate"):
        _runner(tmp_path, remover=remover).run(["oc", "whoami"])

    assert len(remover.paths) == 1
    assert "Could not remove temporary kubeconfig" in caplog.text


def test_remover_failure_does_not_mask_command_error(tmp_path: Path) -> None:
    remover = RecordingRemover(error=PermissionError("read-only"))

    with pytest.raises(CommandExecutionError):
        _runner(tmp_path, spawner=RecordingSpawner(returncode=3), remover=remover).run(["oc", "whoami"])


def test_persist_failure_spawns_nothing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBECONFIG", MOCK_KUBECONFIG)
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    spawner = RecordingSpawner()

    with pytest.raises(PersistError):
        _runner(tmp_path, spawner=spawner, temp_dir=blocker).run(["oc", "whoami"])

    assert spawner.calls == []
    assert os.environ["KUBECONFIG"] == MOCK_KUBECONFIG


def test_custom_locator_variable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OC_KUBECONFIG", raising=False)
    spawner = RecordingSpawner(env_var="OC_KUBECONFIG")

    _runner(tmp_path, spawner=spawner, env_var="OC_KUBECONFIG").run(["oc", "whoami"])

    assert spawner.last["kubeconfig"]["current-context"] == CONTEXT
    assert "OC_KUBECONFIG" not in os.environ


def test_environment_is_guarded_against_in_process_changes(tmp_path: Path) -> None:
    environ = {"KUBECONFIG": MOCK_KUBECONFIG}

    def meddling_spawner(argv, env) -> int:
        environ["KUBECONFIG"] = env["KUBECONFIG"]
        return 0

    _runner(tmp_path, spawner=meddling_spawner, environ=environ).run(["oc", "whoami"])

    assert environ == {"KUBECONFIG": MOCK_KUBECONFIG}


def test_run_elevate_uses_settings(
    tmp_path: Path,
    settings_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    (settings_dir / "elevate.yaml").write_text(
        "elevate:\n"
        "  reason: 'ticket for {cluster}'\n"
        f"  temp_dir: '{tmp_path / 'transient'}'\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("KUBECONFIG", raising=False)
    spawner = RecordingSpawner()

    run_elevate(["oc", "whoami"], loader=sample_kubeconfig, spawner=spawner)

    users = {u["name"]: u["user"] for u in spawner.last["kubeconfig"]["users"]}
    assert users[USER]["as-user-extra"]["reason"] == ["ticket for dummy_cluster"]
    assert Path(spawner.last["kubeconfig_path"]).parent == tmp_path / "transient"


def test_run_elevate_reason_argument_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("KUBECONFIG", raising=False)
    spawner = RecordingSpawner()

    run_elevate(["oc", "whoami"], reason="explicit", loader=sample_kubeconfig, spawner=spawner)

    users = {u["name"]: u["user"] for u in spawner.last["kubeconfig"]["users"]}
    assert users[USER]["as-user-extra"]["reason"] == ["explicit"]


def test_relative_certificate_paths_still_resolve_for_the_child(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    data = sample_kubeconfig_dict()
    data["clusters"][0]["cluster"]["certificate-authority"] = "ca.crt"
    kubeconfig = write_kubeconfig(tmp_path / "kube" / "config", data)
    (kubeconfig.parent / "ca.crt").write_text("-----BEGIN CERTIFICATE-----\n", encoding="utf-8")
    monkeypatch.setenv("KUBECONFIG", str(kubeconfig))
    spawner = RecordingSpawner()

    _runner(tmp_path, loader=None, spawner=spawner).run(["oc", "whoami"])

    clusters = {c["name"]: c["cluster"] for c in spawner.last["kubeconfig"]["clusters"]}
    ca = clusters["dummy_cluster"]["certificate-authority"]
    assert Path(ca).is_absolute()
    assert Path(ca).is_file()


def test_argv_rejected_by_subprocess_is_a_command_error(tmp_path: Path) -> None:
    with pytest.raises(CommandExecutionError) as excinfo:
        _runner(tmp_path, spawner=spawn_process).run(["oc\0", "whoami"])

    assert isinstance(excinfo.value.__cause__, ValueError)
    assert _transient_files(tmp_path) == []


def test_signal_termination_is_reported(tmp_path: Path) -> None:
    with pytest.raises(CommandExecutionError, match="terminated by signal 15") as excinfo:
        _runner(tmp_path, spawner=RecordingSpawner(returncode=-15)).run(["oc", "whoami"])

    assert excinfo.value.returncode == -15
