"""Alert reference tokens linking a notification to later feedback.

A notification carries an encoded :class:`AlertReference` so that a
feedback callback can recover the exact ``source_key`` (and the alert
excerpt) without any server-side lookup. The token is JSON, gzip
compressed and URL-safe base64 encoded. Slack caps a button ``value``
at 2000 characters, so excerpts are truncated before encoding.
"""

import base64
import binascii
import gzip
import json
import zlib

from pydantic import Field, ValidationError

from alert_filter.common.errors import UnresolvableSource
from alert_filter.common.models import FrozenModel

MAX_EXCERPT_CHARS = 1000
MAX_TOKEN_CHARS = 2000


def truncate_excerpt(text: str, limit: int = MAX_EXCERPT_CHARS) -> str:
    if len(text) <= limit:
        return text
    if limit <= 0:
        return ""
    return text[: limit - 1] + "…"


def _pack(data: dict) -> str:
    raw = json.dumps(data, ensure_ascii=False)
    return base64.urlsafe_b64encode(gzip.compress(raw.encode("utf-8"))).decode("ascii")


class AlertReference(FrozenModel):
    """Reference to the alert a notification was sent for."""

    source_key: str = Field(min_length=1)
    excerpt: str = Field(default="")
    channel_id: str | None = Field(default=None, description="Channel of the notification")
    message_ts: str | None = Field(default=None, description="Timestamp of the notification")

    def encode(self) -> str:
        token = ""
        # Incompressible excerpts are cut further; the source key is never cut
        for limit in (MAX_EXCERPT_CHARS, 200, 0):
            payload = self.model_copy(update={"excerpt": truncate_excerpt(self.excerpt, limit)})
            token = _pack(payload.model_dump(exclude_none=True))
            if len(token) <= MAX_TOKEN_CHARS:
                break
        return token

    @classmethod
    def decode(cls, token: str | None) -> "AlertReference":
        """Decode a token produced by :meth:`encode`.

        Raises:
            UnresolvableSource: if the token is missing or corrupt
        """
        if not token:
            raise UnresolvableSource("alert reference is missing")

        try:
            raw = gzip.decompress(base64.urlsafe_b64decode(token.encode("ascii")))
            return cls.model_validate(json.loads(raw.decode("utf-8")))
        except (
            binascii.Error,
            zlib.error,
            OSError,
            EOFError,
            UnicodeError,
            json.JSONDecodeError,
            ValidationError,
        ) as e:
            raise UnresolvableSource(f"alert reference cannot be decoded: {e}") from e
