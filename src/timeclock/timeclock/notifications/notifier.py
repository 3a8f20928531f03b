from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

import requests

from ..common.datetime_utils import format_display, now_utc
from ..core.enums import Action
from ..records.model import EventRecord

logger = logging.getLogger(__name__)

FOOTER_TEXT = "Employee Time Clock"

_GREEN = 3066993
_RED = 15158332
_GREY = 9807270

# action -> (emoji, embed colour, verb)
_ACTION_STYLE: dict[Action, tuple[str, int, str]] = {
    Action.CLOCK_IN: ("\U0001F7E2", _GREEN, "clocked in"),
    Action.CLOCK_OUT: ("\U0001F534", _RED, "clocked out"),
    Action.START_BREAK: ("☕", 10181046, "started break"),
    Action.END_BREAK: ("✅", _GREEN, "ended break"),
    Action.START_RESTROOM: ("\U0001F6BB", _GREY, "started restroom break"),
    Action.END_RESTROOM: ("✅", _GREEN, "ended restroom break"),
    Action.START_LUNCH: ("\U0001F354", 15844367, "started lunch"),
    Action.END_LUNCH: ("✅", _GREEN, "ended lunch"),
    Action.START_IT_ISSUE: ("\U0001F4BB", _RED, "reported IT issue"),
    Action.END_IT_ISSUE: ("✅", _GREEN, "resolved IT issue"),
    Action.START_MEETING: ("\U0001F4CA", 3447003, "started meeting"),
    Action.END_MEETING: ("✅", _GREEN, "ended meeting"),
}
_DEFAULT_EMOJI = "⚪"
_ADMIN_EMOJI = "\U0001F527"


class Notifier(Protocol):
    def notify(self, record: EventRecord) -> None:
        raise NotImplementedError


class DiscordNotifier:
    """Posts one embed per appended record to a Discord webhook.

    Fire-and-forget: delivery runs on a daemon thread, is never retried, and
    failures are only logged.
    """

    def __init__(
        self,
        webhook_url: Optional[str],
        *,
        tz: ZoneInfo,
        timeout: float = 5.0,
        background: bool = True,
    ):
        self._url = (webhook_url or "").strip() or None
        self._tz = tz
        self._timeout = timeout
        self._background = background

    @property
    def enabled(self) -> bool:
        return self._url is not None

    def build_payload(self, record: EventRecord) -> dict:
        emoji, color, verb = _ACTION_STYLE.get(
            record.action, (_DEFAULT_EMOJI, _GREY, record.action.value.lower())
        )

        title = f"{emoji} {record.name} {verb}"
        description = f"**Time:** {format_display(record.time, self._tz)}"
        if record.admin_action:
            title = f"{_ADMIN_EMOJI} {title} (Admin)"
            if record.note:
                description += f"\n**Note:** {record.note}"

        return {
            "embeds": [
                {
                    "title": title,
                    "description": description,
                    "color": color,
                    "timestamp": now_utc().isoformat(),
                    "footer": {"text": FOOTER_TEXT},
                }
            ]
        }

    def notify(self, record: EventRecord) -> None:
        if not self.enabled:
            logger.info("Discord webhook not configured, skipping notification")
            return

        payload = self.build_payload(record)
        if not self._background:
            self._post(payload)
            return

        threading.Thread(target=self._post, args=(payload,), name="discord-notify", daemon=True).start()

    def _post(self, payload: dict) -> None:
        try:
            response = requests.post(self._url, json=payload, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("Error sending Discord notification: %s", exc)
            return

        if not response.ok:
            logger.warning(
                "Failed to send Discord notification: %s %s", response.status_code, response.reason
            )
