# src/sharing/affiliate_link.py

"""Affiliate tagging of product permalinks.

Two schemes are supported:

* plain: ``ML_AFFILIATE_TAG=promo123`` → ``?tag=promo123``
* composite: ``ML_AFFILIATE_TAG=matt:<word>:<tool>`` →
  ``?matt_word=<word>&matt_tool=<tool>``
"""

import logging
import warnings
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.models.errors import MalformedTagWarning

logger = logging.getLogger("ml_afiliados.sharing")

COMPOSITE_PREFIX = "matt:"


@dataclass(frozen=True)
class AffiliateTag:
    """Parsed affiliate tag: the query parameters it sets on a URL."""

    raw: str
    params: tuple[tuple[str, str], ...] = ()

    @property
    def is_valid(self) -> bool:
        return bool(self.params)


def parse_affiliate_tag(tag: str | None) -> AffiliateTag | None:
    """Parse a configured tag; ``None`` when no tag is configured.

    A composite tag with fewer than three segments yields an AffiliateTag
    with no parameters and emits a MalformedTagWarning.
    """
    if not tag:
        return None
    if not tag.startswith(COMPOSITE_PREFIX):
        return AffiliateTag(raw=tag, params=(("tag", tag),))

    parts = tag.split(":")
    if len(parts) < 3:
        logger.debug("Malformed composite affiliate tag: %r", tag)
        warnings.warn(
            f"Affiliate tag {tag!r} needs the form matt:<word>:<tool>; "
            "links are left untagged",
            MalformedTagWarning,
            stacklevel=3,
        )
        return AffiliateTag(raw=tag)
    return AffiliateTag(
        raw=tag,
        params=(("matt_word", parts[1]), ("matt_tool", parts[2])),
    )


def _set_param(
    pairs: list[tuple[str, str]], name: str, value: str
) -> list[tuple[str, str]]:
    """Replace the first ``name`` in place, drop the rest, else append."""
    result: list[tuple[str, str]] = []
    replaced = False
    for key, current in pairs:
        if key != name:
            result.append((key, current))
        elif not replaced:
            result.append((name, value))
            replaced = True
    if not replaced:
        result.append((name, value))
    return result


def generate_affiliate_link(product_url: str, tag: str | None) -> str:
    """Return ``product_url`` tagged with the affiliate parameters.

    Never raises: no tag, a malformed tag or an unparseable URL all return
    the URL unchanged.
    """
    affiliate = parse_affiliate_tag(tag)
    if affiliate is None or not affiliate.is_valid:
        return product_url

    try:
        parts = urlsplit(product_url)
    except ValueError:
        logger.warning("Could not parse product URL: %r", product_url)
        return product_url
    if not parts.scheme or not parts.netloc:
        logger.warning("Not an absolute URL: %r", product_url)
        return product_url

    pairs = parse_qsl(parts.query, keep_blank_values=True)
    for name, value in affiliate.params:
        pairs = _set_param(pairs, name, value)

    return urlunsplit(
        (
            parts.scheme,
            parts.netloc,
            parts.path,
            urlencode(pairs),
            parts.fragment,
        )
    )
