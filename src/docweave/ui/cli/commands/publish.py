"""Implementation of the `docweave post` command."""

from __future__ import annotations

from typing import Annotated

import typer

from docweave.adapters.wordpress import WordPressClient
from docweave.api import publish_post
from docweave.core.exceptions import DocweaveError

from .._options import PUBLISH_PANEL, InputArgument
from ..state import emit_error, get_cli_state


_ACTIONS = ("new_post", "edit_post", "new_page")


def post(
    input: InputArgument,
    url: Annotated[
        str | None,
        typer.Option("--url", help="WordPress site URL.", rich_help_panel=PUBLISH_PANEL),
    ] = None,
    user: Annotated[
        str | None,
        typer.Option("--user", help="WordPress user name.", rich_help_panel=PUBLISH_PANEL),
    ] = None,
    password: Annotated[
        str | None,
        typer.Option(
            "--password",
            help="Application password (or set DOCWEAVE_WP_PASSWORD).",
            rich_help_panel=PUBLISH_PANEL,
        ),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", help="Post title (defaults to the front matter title)."),
    ] = None,
    shortcode: Annotated[
        bool,
        typer.Option(
            "--shortcode/--no-shortcode",
            help="Wrap code blocks in [sourcecode] shortcodes.",
        ),
    ] = False,
    action: Annotated[
        str,
        typer.Option("--action", help="One of new_post, edit_post or new_page."),
    ] = "new_post",
    post_id: Annotated[
        int | None,
        typer.Option("--post-id", help="Identifier of the post to edit."),
    ] = None,
    draft: Annotated[
        bool,
        typer.Option("--draft", help="Save as draft instead of publishing."),
    ] = False,
) -> None:
    """Render a Markdown document and post it to WordPress."""
    state = get_cli_state()
    settings = state.resolved_config().wordpress

    if action not in _ACTIONS:
        raise typer.BadParameter(f"--action must be one of {', '.join(_ACTIONS)}.")
    if action == "edit_post" and post_id is None:
        raise typer.BadParameter("--post-id is required with --action edit_post.")

    site = url or settings.url
    username = user or settings.username
    secret = password or settings.password
    if not site or not username or not secret:
        emit_error("A site URL, user name and password are required to publish.")
        raise typer.Exit(code=1)

    publish = settings.publish and not draft
    try:
        client = WordPressClient(site, username, secret)
        identifier = publish_post(
            input,
            client,
            title,
            shortcode=shortcode,
            action=action,  # type: ignore[arg-type]
            post_id=post_id,
            publish=publish,
        )
    except DocweaveError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    status = "published" if publish else "saved as draft"
    state.console.print(f"Post {identifier} {status}.", highlight=False)


__all__ = ["post"]
