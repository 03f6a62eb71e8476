"""Typed view of a kubeconfig document.

Each entry dataclass maps its attributes to the on-disk kubeconfig keys via
field metadata. Keys the model does not know about are kept in ``unknown``
so a load/dump cycle never drops data.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Type, TypeVar

from kubelevate.core.exceptions import ConfigLoadError

_E = TypeVar("_E", bound="_Entry")


def _key(name: str) -> Dict[str, str]:
    return {"key": name}


class _Entry:
    """Mapping <-> dataclass conversion shared by kubeconfig entries."""

    unknown: Dict[str, Any]

    @classmethod
    def _key_map(cls) -> Dict[str, str]:
        return {f.metadata["key"]: f.name for f in fields(cls) if "key" in f.metadata}  # type: ignore[arg-type]

    @classmethod
    def from_dict(cls: Type[_E], data: Mapping[str, Any] | None) -> _E:
        data = dict(data or {})
        key_map = cls._key_map()
        known: Dict[str, Any] = {}
        unknown: Dict[str, Any] = {}
        for k, v in data.items():
            if k in key_map:
                known[key_map[k]] = copy.deepcopy(v)
            else:
                unknown[k] = copy.deepcopy(v)
        return cls(**known, unknown=unknown)  # type: ignore[call-arg]

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            if "key" not in f.metadata:
                continue
            value = getattr(self, f.name)
            # omitempty, as the kubeconfig writers do
            if value in (None, "", False, [], {}):
                continue
            out[f.metadata["key"]] = copy.deepcopy(value)
        out.update(copy.deepcopy(self.unknown))
        return out


@dataclass
class Cluster(_Entry):
    server: str = field(default="", metadata=_key("server"))
    tls_server_name: str = field(default="", metadata=_key("tls-server-name"))
    insecure_skip_tls_verify: bool = field(default=False, metadata=_key("insecure-skip-tls-verify"))
    certificate_authority: str = field(default="", metadata=_key("certificate-authority"))
    certificate_authority_data: str = field(default="", metadata=_key("certificate-authority-data"))
    proxy_url: str = field(default="", metadata=_key("proxy-url"))
    unknown: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthInfo(_Entry):
    """A kubeconfig user entry.

    ``extra`` holds the impersonation extras (``as-user-extra``). Tools forward
    each key as an ``Impersonate-Extra-<key>`` header, which makes it the
    notes field that carries the elevation reason.
    """

    client_certificate: str = field(default="", metadata=_key("client-certificate"))
    client_certificate_data: str = field(default="", metadata=_key("client-certificate-data"))
    client_key: str = field(default="", metadata=_key("client-key"))
    client_key_data: str = field(default="", metadata=_key("client-key-data"))
    token: str = field(default="", metadata=_key("token"))
    token_file: str = field(default="", metadata=_key("tokenFile"))
    impersonate: str = field(default="", metadata=_key("as"))
    impersonate_uid: str = field(default="", metadata=_key("as-uid"))
    impersonate_groups: List[str] = field(default_factory=list, metadata=_key("as-groups"))
    extra: Dict[str, List[str]] = field(default_factory=dict, metadata=_key("as-user-extra"))
    username: str = field(default="", metadata=_key("username"))
    password: str = field(default="", metadata=_key("password"))
    auth_provider: Dict[str, Any] = field(default_factory=dict, metadata=_key("auth-provider"))
    exec_config: Dict[str, Any] = field(default_factory=dict, metadata=_key("exec"))
    unknown: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Context(_Entry):
    cluster: str = field(default="", metadata=_key("cluster"))
    auth_info: str = field(default="", metadata=_key("user"))
    namespace: str = field(default="", metadata=_key("namespace"))
    unknown: Dict[str, Any] = field(default_factory=dict)


def _named_entries(raw: Any, section: str, inner: str, entry_cls: Type[_E]) -> Dict[str, _E]:
    if raw is None:
        return {}
    if not isinstance(raw, list):
        raise ConfigLoadError(
            f"kubeconfig '{section}' must be a list",
            context={"section": section},
        )
    out: Dict[str, _E] = {}
    for item in raw:
        if not isinstance(item, dict) or not item.get("name"):
            raise ConfigLoadError(
                f"kubeconfig '{section}' entries need a name",
                context={"section": section},
            )
        name = str(item["name"])
        body = item.get(inner)
        if body is not None and not isinstance(body, dict):
            raise ConfigLoadError(
                f"kubeconfig {section} entry '{name}' has a malformed '{inner}' block",
                context={"section": section, "name": name},
            )
        # Duplicate names: the first definition wins.
        out.setdefault(name, entry_cls.from_dict(body))
    return out


@dataclass
class KubeConfig:
    """In-memory kubeconfig: named clusters, users and contexts plus the selector."""

    SECTIONS: ClassVar[tuple[tuple[str, str, str], ...]] = (
        ("clusters", "cluster", "clusters"),
        ("users", "user", "auth_infos"),
        ("contexts", "context", "contexts"),
    )

    api_version: str = "v1"
    kind: str = "Config"
    preferences: Dict[str, Any] = field(default_factory=dict)
    clusters: Dict[str, Cluster] = field(default_factory=dict)
    auth_infos: Dict[str, AuthInfo] = field(default_factory=dict)
    contexts: Dict[str, Context] = field(default_factory=dict)
    current_context: str = ""
    unknown: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "KubeConfig":
        """Build a config from a parsed kubeconfig document.

        Raises:
            ConfigLoadError: If the document is not shaped like a kubeconfig
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigLoadError("kubeconfig must be a mapping")

        consumed = {"apiVersion", "kind", "preferences", "current-context"}
        kwargs: Dict[str, Any] = {}
        entry_types = {"clusters": Cluster, "users": AuthInfo, "contexts": Context}
        for section, inner, attr in cls.SECTIONS:
            kwargs[attr] = _named_entries(data.get(section), section, inner, entry_types[section])
            consumed.add(section)

        preferences = data.get("preferences") or {}
        if not isinstance(preferences, dict):
            raise ConfigLoadError("kubeconfig 'preferences' must be a mapping")

        return cls(
            api_version=str(data.get("apiVersion") or "v1"),
            kind=str(data.get("kind") or "Config"),
            preferences=copy.deepcopy(preferences),
            current_context=str(data.get("current-context") or ""),
            unknown={k: copy.deepcopy(v) for k, v in data.items() if k not in consumed},
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Render the on-disk kubeconfig structure."""
        out: Dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "preferences": copy.deepcopy(self.preferences),
        }
        for section, inner, attr in self.SECTIONS:
            entries: Dict[str, _Entry] = getattr(self, attr)
            out[section] = [
                {"name": name, inner: entry.to_dict()} for name, entry in sorted(entries.items())
            ]
        out["current-context"] = self.current_context
        out.update(copy.deepcopy(self.unknown))
        return out

    def deep_copy(self) -> "KubeConfig":
        return copy.deepcopy(self)


def new_config() -> KubeConfig:
    """Return an empty kubeconfig."""
    return KubeConfig()


__all__ = ["Cluster", "AuthInfo", "Context", "KubeConfig", "new_config"]
