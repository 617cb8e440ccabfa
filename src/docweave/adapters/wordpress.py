"""WordPress publishing through the REST API."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any

from bs4 import BeautifulSoup, NavigableString
import requests

from docweave.core.exceptions import PublishError


logger = logging.getLogger(__name__)

_NO_HIGHLIGHT = "no-highlight"


def _shortcode_flags(shortcode: bool | Sequence[bool]) -> tuple[bool, bool]:
    if isinstance(shortcode, bool):
        return shortcode, shortcode
    flags = list(shortcode)
    if not flags:
        return False, False
    if len(flags) == 1:
        return bool(flags[0]), bool(flags[0])
    return bool(flags[0]), bool(flags[1])


def _code_language(code: Any) -> str | None:
    classes = code.get("class") or []
    for name in classes:
        if name == _NO_HIGHLIGHT:
            return None
        language = name.removeprefix("language-")
        if language.isalpha():
            return language
    return None


def apply_shortcodes(html: str, shortcode: bool | Sequence[bool] = False) -> str:
    """Rewrite ``<pre><code>`` blocks into WordPress ``[sourcecode]`` shortcodes.

    ``shortcode`` is a pair of flags: the first applies to highlighted source
    blocks (``class="language-x"``), the second to plain output blocks. A
    single boolean applies to both. Plain blocks that are not turned into
    shortcodes lose their ``<code>`` wrapper.
    """
    use_source, use_output = _shortcode_flags(shortcode)
    soup = BeautifulSoup(html, "html.parser")
    replacements: dict[str, str] = {}

    for index, pre in enumerate(soup.find_all("pre")):
        children = [child for child in pre.contents if not _is_blank(child)]
        if len(children) != 1 or getattr(children[0], "name", None) != "code":
            continue
        code = children[0]
        body = code.decode_contents()
        language = _code_language(code)
        classes = code.get("class") or []

        if language is not None:
            if not use_source:
                continue
            rendered = f'[sourcecode language="{language}"]{body}[/sourcecode]'
        elif classes and _NO_HIGHLIGHT not in classes:
            continue
        elif use_output:
            rendered = f"[sourcecode]{body}[/sourcecode]"
        else:
            rendered = f"<pre>{body}</pre>"

        token = f"\x00docweave-shortcode-{index}\x00"
        replacements[token] = rendered
        pre.replace_with(NavigableString(token))

    output = str(soup)
    for token, rendered in replacements.items():
        output = output.replace(token, rendered)
    return output


def _is_blank(node: Any) -> bool:
    return isinstance(node, NavigableString) and not node.strip()


class WordPressClient:
    """Minimal client for the WordPress ``wp/v2`` REST endpoints."""

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        if not url:
            raise PublishError("A WordPress site URL is required.")
        self.base_url = url.rstrip("/") + "/wp-json/wp/v2/"
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.auth = (username, password)

    def new_post(self, content: Mapping[str, Any], *, publish: bool = True) -> int:
        """Create a post and return its identifier."""
        return self._submit("posts", content, publish=publish)

    def edit_post(self, post_id: int, content: Mapping[str, Any], *, publish: bool = True) -> int:
        """Update an existing post and return its identifier."""
        return self._submit(f"posts/{int(post_id)}", content, publish=publish)

    def new_page(self, content: Mapping[str, Any], *, publish: bool = True) -> int:
        """Create a page and return its identifier."""
        return self._submit("pages", content, publish=publish)

    def _submit(self, endpoint: str, content: Mapping[str, Any], *, publish: bool) -> int:
        payload = dict(content)
        payload["status"] = "publish" if publish else "draft"
        url = self.base_url + endpoint
        logger.debug("POST %s", url)
        try:
            response = self._session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PublishError(f"Unable to reach WordPress at {url}: {exc}") from exc

        if response.status_code >= 400:
            raise PublishError(
                f"WordPress rejected the request ({response.status_code}): "
                f"{_error_message(response)}"
            )
        try:
            return int(response.json()["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise PublishError("WordPress returned an unexpected response.") from exc


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or response.reason or "unknown error"
    if isinstance(data, Mapping) and data.get("message"):
        return str(data["message"])
    return response.reason or "unknown error"


__all__ = ["WordPressClient", "apply_shortcodes"]
