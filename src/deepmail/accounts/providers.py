"""Email provider catalog and provider selection state."""

import logging

from pydantic import BaseModel, ConfigDict

from deepmail.exceptions import UnknownProviderError

logger = logging.getLogger(__name__)


class EmailProvider(BaseModel):
    """A preset email provider offered on the connect screen.

    Providers compare equal when their ids match.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    logo: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EmailProvider):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


PROVIDERS: tuple[EmailProvider, ...] = (
    EmailProvider(id="gmail", name="Gmail", logo="gmail-logo"),
    EmailProvider(id="outlook", name="Outlook", logo="outlook-logo"),
    EmailProvider(id="icloud", name="iCloud", logo="icloud-logo"),
)


def get_provider(provider_id: str) -> EmailProvider:
    """Look up a provider by id (case-insensitive).

    Raises:
        UnknownProviderError: If no provider has this id.
    """
    for provider in PROVIDERS:
        if provider.id == provider_id.lower():
            return provider
    raise UnknownProviderError(provider_id)


def list_providers() -> list[EmailProvider]:
    """Return the providers in display order."""
    return list(PROVIDERS)


class ProviderSelection:
    """Which provider the user picked on the connect screen."""

    def __init__(self) -> None:
        self._selected: EmailProvider | None = None

    @property
    def selected(self) -> EmailProvider | None:
        return self._selected

    @property
    def can_continue(self) -> bool:
        """Continue is only available once a provider is selected."""
        return self._selected is not None

    def select(self, provider_id: str) -> EmailProvider:
        """Select a provider by id and return it.

        Raises:
            UnknownProviderError: If no provider has this id.
        """
        provider = get_provider(provider_id)
        if provider != self._selected:
            logger.debug("Provider selected (provider=%s)", provider.id)
        self._selected = provider
        return provider

    def clear(self) -> None:
        self._selected = None
