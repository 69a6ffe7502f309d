import re

from screenshot_action.errors import ConfigurationError
from screenshot_action.models import CaptureTarget

SEPARATORS = re.compile(r"[,\n]")


def parse_targets(raw: str) -> list[CaptureTarget]:
    """Parse a screenshots mapping into targets, keeping the input order.

    Items are separated by commas and/or newlines and look like
    ``<source>=<destination>``, e.g.::

        /index.html=out/home.webp,
        https://example.com/=out/example.png

    The destination is what follows the last ``=``, so query strings in a
    source url are kept. Blank items are skipped. Raises ``ConfigurationError``
    when an item has no ``=`` or when nothing is left to capture.
    """
    targets = []
    for item in SEPARATORS.split(raw or ""):
        item = item.strip()
        if not item:
            continue
        if "=" not in item:
            raise ConfigurationError(
                f"invalid screenshot item {item!r}, expected <source>=<destination>"
            )
        source, destination = (part.strip() for part in item.rsplit("=", 1))
        if not source or not destination:
            raise ConfigurationError(
                f"invalid screenshot item {item!r}, source and destination are required"
            )
        targets.append(CaptureTarget(source=source, destination=destination))

    if not targets:
        raise ConfigurationError("no screenshots configured")
    return targets
