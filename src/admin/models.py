"""Data models for the admin service surface."""

from dataclasses import dataclass, field


def coerce_padtxt_length(value) -> int:
    """Padding length as a non-negative int; anything invalid becomes 0."""
    if isinstance(value, bool):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number >= 0 else 0


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """A fully populated copy of the service's settings."""

    api_keys: list[str]
    admin_api_keys: list[str]
    claude_ai_url: str
    claude_api_baseurl: str
    proxy_url: str | None
    custom_prompt: str | None
    human_name: str
    assistant_name: str
    padtxt_length: int
    use_real_roles: bool
    allow_external_images: bool
    preserve_chats: bool

    @classmethod
    def from_dict(cls, data: dict) -> "ConfigurationSnapshot":
        return cls(
            api_keys=list(data["api_keys"]),
            admin_api_keys=list(data["admin_api_keys"]),
            claude_ai_url=data["claude_ai_url"],
            claude_api_baseurl=data["claude_api_baseurl"],
            proxy_url=data.get("proxy_url") or None,
            custom_prompt=data.get("custom_prompt") or None,
            human_name=data["human_name"],
            assistant_name=data["assistant_name"],
            padtxt_length=coerce_padtxt_length(data.get("padtxt_length")),
            use_real_roles=bool(data["use_real_roles"]),
            allow_external_images=bool(data["allow_external_images"]),
            preserve_chats=bool(data["preserve_chats"]),
        )

    def to_dict(self) -> dict:
        return {
            "api_keys": list(self.api_keys),
            "admin_api_keys": list(self.admin_api_keys),
            "claude_ai_url": self.claude_ai_url,
            "claude_api_baseurl": self.claude_api_baseurl,
            "proxy_url": self.proxy_url,
            "custom_prompt": self.custom_prompt,
            "human_name": self.human_name,
            "assistant_name": self.assistant_name,
            "padtxt_length": self.padtxt_length,
            "use_real_roles": self.use_real_roles,
            "allow_external_images": self.allow_external_images,
            "preserve_chats": self.preserve_chats,
        }


@dataclass
class OAuthToken:
    access_token: str
    refresh_token: str
    expires_at: float


@dataclass
class AccountResponse:
    organization_uuid: str
    capabilities: list[str] = field(default_factory=list)
    cookie_value: str | None = None
    status: str = "valid"  # "valid" | "invalid" | "rate_limited"
    auth_type: str = "cookie_only"  # "cookie_only" | "oauth_only" | "both"
    is_pro: bool = False
    is_max: bool = False
    last_used: str | None = None
    resets_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "AccountResponse":
        return cls(
            organization_uuid=data["organization_uuid"],
            capabilities=list(data.get("capabilities") or []),
            cookie_value=data.get("cookie_value"),
            status=data.get("status", "valid"),
            auth_type=data.get("auth_type", "cookie_only"),
            is_pro=bool(data.get("is_pro", False)),
            is_max=bool(data.get("is_max", False)),
            last_used=data.get("last_used"),
            resets_at=data.get("resets_at"),
        )


@dataclass
class StatisticsResponse:
    status: str  # "healthy" | "degraded"
    total_accounts: int = 0
    valid_accounts: int = 0
    rate_limited_accounts: int = 0
    invalid_accounts: int = 0
    active_sessions: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "StatisticsResponse":
        accounts = data.get("accounts") or {}
        return cls(
            status=data.get("status", "degraded"),
            total_accounts=int(accounts.get("total_accounts", 0)),
            valid_accounts=int(accounts.get("valid_accounts", 0)),
            rate_limited_accounts=int(accounts.get("rate_limited_accounts", 0)),
            invalid_accounts=int(accounts.get("invalid_accounts", 0)),
            active_sessions=int(accounts.get("active_sessions", 0)),
        )
