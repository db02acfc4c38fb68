"""Bridge between :class:`httpx.Response` objects and the output system.

:meth:`centry.client.Centry.request` hands back raw responses. The CLI
uses :func:`format_api_response` to print the status line to stderr and the
body to stdout in the selected ``--json`` / ``--plain`` / Rich format.
"""

from __future__ import annotations

from typing import Any

import httpx

from centry.output import format_response, info, warning


def format_api_response(response: httpx.Response) -> None:
    """Print the status line of *response* to stderr and its body to stdout.

    Non-2xx statuses are reported with :meth:`~centry.output.OutputManager.warning`
    so that they stay visible under ``--quiet``.
    """
    status_line = f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip()
    if response.is_success:
        info(status_line)
    else:
        warning(status_line)

    content_type = response.headers.get("content-type", "application/json")
    data = extract_response_data(response)
    if data is not None:
        format_response(data, content_type)


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Returns:
        The JSON-decoded body, the raw text when the body is not JSON, or
        ``None`` for an empty body.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text
