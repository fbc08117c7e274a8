"""Builds create/update payloads for /admin/accounts from an edit form."""

from dataclasses import dataclass

from src.accounts.tiers import AccountTier, capabilities_of, tier_of
from src.admin.models import AccountResponse


@dataclass
class AccountForm:
    cookie_value: str = ""
    oauth_access_token: str = ""
    oauth_refresh_token: str = ""
    oauth_expires_at: str = ""  # epoch seconds as typed
    organization_uuid: str = ""
    tier: AccountTier = AccountTier.NONE


def initial_form(account: AccountResponse | None) -> AccountForm:
    """Form state for editing `account`, or a blank form for a new one.

    Secrets are never prefilled.
    """
    if account is None:
        return AccountForm()
    return AccountForm(
        organization_uuid=account.organization_uuid,
        tier=tier_of(account.capabilities),
    )


def build_account_payload(form: AccountForm, existing: AccountResponse | None = None) -> dict:
    """Only the fields the form actually sets.

    With `existing` the payload is an update: the organization id is never
    sent and an unchanged cookie is omitted.
    """
    payload: dict = {}

    if form.cookie_value and (existing is None or form.cookie_value != existing.cookie_value):
        payload["cookie_value"] = form.cookie_value

    if form.oauth_access_token and form.oauth_refresh_token and form.oauth_expires_at:
        payload["oauth_token"] = {
            "access_token": form.oauth_access_token,
            "refresh_token": form.oauth_refresh_token,
            "expires_at": float(form.oauth_expires_at),
        }

    if existing is None and form.organization_uuid:
        payload["organization_uuid"] = form.organization_uuid

    capabilities = capabilities_of(form.tier)
    if capabilities is not None:
        payload["capabilities"] = capabilities

    return payload
