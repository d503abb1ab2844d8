"""Command-line interface for vaulthunter."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from vaulthunter.config import AppPaths, ConfigError, HunterSettings, load_settings
from vaulthunter.export import ExportError, entries_to_xml, export_passwords, write_export
from vaulthunter.hunter import reveal, search_reveal
from vaulthunter.integrations.clipboard import ClipboardCopier, ClipboardError
from vaulthunter.output.rich import console, print_error, print_success, print_warning
from vaulthunter.vault import VaultError, VaultHunterClient, get_client

app = typer.Typer(
    name="vaulthunter",
    help="Personal password manager on top of HashiCorp Vault.",
    no_args_is_help=True,
)


@dataclass
class AppState:
    """Settings resolved once per invocation."""

    settings: HunterSettings
    paths: AppPaths


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def prompt_password(text: str) -> str:
    """Ask for the password without echo; EOF means no input is available."""
    try:
        return typer.prompt(text.rstrip(": "), hide_input=True)
    except typer.Abort as e:
        raise EOFError("No password entered") from e


def ask(text: str) -> str:
    return typer.prompt(text.rstrip(), prompt_suffix=" ")


@contextmanager
def open_client(ctx: typer.Context) -> Iterator[VaultHunterClient]:
    """Create a client and turn vault failures into a clean exit."""
    state: AppState = ctx.obj
    try:
        with get_client(state.settings, state.paths, prompt=prompt_password) as client:
            yield client
    except (VaultError, ClipboardError, ExportError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Config file (default: ~/.config/vaulthunter/config.toml)"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Personal password manager on top of HashiCorp Vault."""
    _configure_logging(verbose)
    paths = AppPaths.from_env()
    try:
        settings = load_settings(config, paths)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    ctx.obj = AppState(settings=settings, paths=paths)


@app.command()
def find(
    ctx: typer.Context,
    pattern: Annotated[str, typer.Argument(help="Part of the entry name, case-insensitive")],
) -> None:
    """Search for an entry and reveal it."""
    settings: HunterSettings = ctx.obj.settings
    with open_client(ctx) as client:
        client.login()
        try:
            written = export_passwords(client, settings)
        except ExportError as e:
            print_warning(f"Local export failed: {e}")
        else:
            if written:
                print_success(f"Refreshed local export {written}")
        clipboard = ClipboardCopier(settings.effective_clipboard_prog())
        search_reveal(client, pattern, clipboard, ask)


@app.command()
def get(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Full path of the entry, e.g. web/github")],
) -> None:
    """Reveal the entry at an exact path."""
    settings: HunterSettings = ctx.obj.settings
    with open_client(ctx) as client:
        client.login()
        reveal(client.get(path), ClipboardCopier(settings.effective_clipboard_prog()))


@app.command("ls")
def list_entries(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to list")] = "",
) -> None:
    """List the entries of a directory."""
    with open_client(ctx) as client:
        client.login()
        for entry in client.list(path):
            suffix = "/" if entry.is_dir else ""
            console.print(f"{entry.name}{suffix}", markup=False, highlight=False)


@app.command()
def export(
    ctx: typer.Context,
    output: Annotated[Path, typer.Argument(help="File to write")],
    no_encrypt: Annotated[
        bool, typer.Option("--no-encrypt", help="Write plain XML even if gpg_recipient is set")
    ] = False,
) -> None:
    """Export every entry to an XML file, encrypted with gpg when configured."""
    settings: HunterSettings = ctx.obj.settings
    recipient = None if no_encrypt else settings.gpg_recipient
    with open_client(ctx) as client:
        client.login()
        entries = client.export_all()
        write_export(entries_to_xml(entries), output, recipient)
        print_success(f"Exported {len(entries)} entries to {output}")


@app.command()
def login(ctx: typer.Context) -> None:
    """Log in, reusing the cached token when it is still valid."""
    with open_client(ctx) as client:
        client.login()
        print_success(f"Logged in as {client.session.username}")


@app.command()
def logout(ctx: typer.Context) -> None:
    """Revoke the cached token and clear it."""
    with open_client(ctx) as client:
        if client.load_cached_token():
            client.logout()
            print_success("Logged out")
        else:
            console.print("Not logged in")


@app.command("token-info")
def token_info(ctx: typer.Context) -> None:
    """Print information about the cached token."""
    with open_client(ctx) as client:
        if not client.load_cached_token():
            print_error("No cached token. Run `vaulthunter login` first.")
            raise typer.Exit(code=1)
        console.print_json(data=client.token_info())


@app.command()
def mounts(ctx: typer.Context) -> None:
    """List the secret engines mounted on the server."""
    with open_client(ctx) as client:
        client.login()
        console.print_json(data=client.list_mounts())


@app.command()
def health(ctx: typer.Context) -> None:
    """Show the server health status."""
    with open_client(ctx) as client:
        console.print(f"Vault is [bold]{client.health()}[/bold]")


@app.command()
def version() -> None:
    """Show vaulthunter version."""
    from vaulthunter import __version__

    console.print(f"vaulthunter [bold green]{__version__}[/bold green]")


if __name__ == "__main__":
    app()
