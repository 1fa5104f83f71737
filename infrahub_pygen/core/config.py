"""Configuration for the generator and for the runtime client."""

from dataclasses import dataclass, field
from typing import Any

import httpx

from .. import __version__
from .errors import ConfigError

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"infrahub-pygen/{__version__} (Python)"


@dataclass
class GeneratorConfig:
    """Options for a code generation run.

    Args:
        package_name: Emit a pyproject.toml and place modules under the
            package's import directory. Without it, modules land at the root
            of the output.
        base_path: Local path of this library, referenced from the generated
            pyproject.toml instead of the index release.
        template_dir: Directory whose templates override the bundled ones.
    """
    package_name: str | None = None
    base_path: str | None = None
    template_dir: str | None = None

    @property
    def import_name(self) -> str | None:
        if not self.package_name:
            return None
        return self.package_name.replace("-", "_")


@dataclass
class ClientConfig:
    """Connection settings for an Infrahub instance.

    Examples:
        config = ClientConfig("https://infrahub.example.com", token)
        config = ClientConfig("infrahub.local", token, default_branch="main")
    """
    base_url: str
    token: str
    default_branch: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    extra_headers: dict[str, str] = field(default_factory=dict)
    # Takes precedence over the settings above when building the client
    http_client: httpx.AsyncClient | None = None

    def __post_init__(self):
        normalized = self.base_url.rstrip("/")
        try:
            if "://" not in normalized:
                normalized = f"https://{normalized}"
            url = httpx.URL(normalized)
        except httpx.InvalidURL:
            url = None
        if url is not None and not url.host:
            url = None
        self._url = url

    def __repr__(self) -> str:
        return (
            f"ClientConfig(base_url={self.base_url!r}, token='<redacted>', "
            f"default_branch={self.default_branch!r}, timeout={self.timeout!r}, "
            f"user_agent={self.user_agent!r}, verify_ssl={self.verify_ssl!r}, "
            f"extra_headers={len(self.extra_headers)}, "
            f"http_client={self.http_client is not None})"
        )

    def validate(self):
        """Raise ConfigError unless the settings can build a client."""
        if self._url is None:
            raise ConfigError(f"invalid base url: {self.base_url}")
        if self._url.scheme not in ("http", "https"):
            raise ConfigError(f"invalid url scheme: {self._url.scheme}. must be http or https")
        if self.http_client is None and not self.token:
            raise ConfigError("api token cannot be empty")

    def _base(self) -> str:
        if self._url is None:
            raise ConfigError(f"invalid base url: {self.base_url}")
        return str(self._url).rstrip("/")

    def _branch(self, branch: str | None) -> str | None:
        branch = branch if branch is not None else self.default_branch
        return branch or None

    def graphql_url(self, branch: str | None = None) -> str:
        """``<base>/graphql``, or ``<base>/graphql/<branch>`` on a branch."""
        branch = self._branch(branch)
        if branch:
            return f"{self._base()}/graphql/{branch}"
        return f"{self._base()}/graphql"

    def schema_url(self, branch: str | None = None) -> str:
        """``<base>/schema.graphql``, with a ``branch`` query parameter on a branch."""
        branch = self._branch(branch)
        if branch:
            return f"{self._base()}/schema.graphql?branch={branch}"
        return f"{self._base()}/schema.graphql"

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the httpx.AsyncClient these settings describe."""
        headers = {"X-INFRAHUB-KEY": self.token, "User-Agent": self.user_agent}
        headers.update(self.extra_headers)
        return {
            "headers": headers,
            "timeout": self.timeout,
            "verify": self.verify_ssl,
        }
