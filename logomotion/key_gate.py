"""API key gate: decides whether the workspace may be opened.

The gate never owns a key itself. It asks a host capability, which is any
object offering some of:

    async has_selected_api_key() -> bool
    async open_select_key() -> None
    api_key: the selected key, read once the gate is open

A missing host, or a host missing one of these, simply reads as "no key".
"""

import getpass
import logging
from typing import Callable, Optional

from logomotion.config import GEMINI_API_KEY
from logomotion.errors import GateCheckFailure

logger = logging.getLogger(__name__)


class SessionKeyHost:
    """Key host for the web page: the browser offers a key, selection commits it."""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else GEMINI_API_KEY
        self._offered: Optional[str] = None

    def offer_key(self, api_key: Optional[str]) -> None:
        self._offered = api_key.strip() if api_key else None

    async def has_selected_api_key(self) -> bool:
        return bool(self.api_key)

    async def open_select_key(self) -> None:
        if self._offered:
            self.api_key = self._offered
        self._offered = None


class TerminalKeyHost:
    """Key host for the CLI: selection prompts for the key without echoing it."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        prompt: Callable[[str], str] = getpass.getpass,
    ):
        self.api_key = api_key if api_key is not None else GEMINI_API_KEY
        self._prompt = prompt

    async def has_selected_api_key(self) -> bool:
        return bool(self.api_key)

    async def open_select_key(self) -> None:
        answer = self._prompt("Gemini API key: ").strip()
        if answer:
            self.api_key = answer


class ApiKeyGate:
    """Checks the host for a usable key and unlocks once one is found."""

    def __init__(self, host=None):
        self.host = host
        self.checking = False
        self.unlocked = False
        self.last_failure: Optional[GateCheckFailure] = None

    @property
    def selected_api_key(self) -> Optional[str]:
        return getattr(self.host, "api_key", None)

    async def has_credential(self) -> bool:
        """Ask the host whether a key is selected. Never raises."""
        check = getattr(self.host, "has_selected_api_key", None)
        if check is None:
            return False

        try:
            return bool(await check())
        except Exception as e:
            self.last_failure = GateCheckFailure(f"Error checking API key: {e}")
            logger.error(f"Error checking API key: {e}")
            return False

    async def request_selection(self) -> None:
        """Run the host's key selection flow. The caller re-checks afterwards."""
        opener = getattr(self.host, "open_select_key", None)
        if opener is None:
            logger.debug("Host has no key selection flow")
            return

        try:
            await opener()
        except Exception as e:
            self.last_failure = GateCheckFailure(f"Failed to select key: {e}")
            logger.error(f"Failed to select key: {e}")

    async def verify(self) -> bool:
        """Check the host and unlock the gate if a key is selected."""
        self.checking = True
        try:
            if await self.has_credential():
                self.unlocked = True
                logger.info("API key verified, workspace unlocked")
        finally:
            self.checking = False
        return self.unlocked

    async def connect(self) -> bool:
        """Open the selection flow, then check again."""
        await self.request_selection()
        return await self.verify()
