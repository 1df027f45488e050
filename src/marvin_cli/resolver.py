"""Pick the ordered list of base URLs an API call should try.

The desktop app and the public host serve the same path surface, so a
request can go to either. :func:`candidates` decides which ones are
eligible and in what order; :class:`~marvin_cli.dispatcher.ApiDispatcher`
then walks the list, moving on only when a host cannot be reached.
"""

from __future__ import annotations

from marvin_cli.models import Capability, OptionConfig, Target


def candidates(options: OptionConfig, capability: Capability) -> tuple[str, ...]:
    """Return the base URLs to try for an operation, in order.

    * Desktop-only operations always get just the desktop URL.
    * ``--desktop`` / ``--public`` pin a single host.
    * ``auto`` yields the desktop URL first, then the public URL.

    ``capability.requires_full_access`` is deliberately ignored here; it
    only selects the credential header (see :mod:`marvin_cli.auth`).

    Args:
        options: The effective options for this invocation.
        capability: The operation's endpoint requirements.

    Returns:
        A tuple of one or two base URLs.
    """
    if capability.desktop_only or options.target == Target.DESKTOP:
        return (options.desktop_url,)
    if options.target == Target.PUBLIC:
        return (options.public_url,)
    return (options.desktop_url, options.public_url)
