"""
kmedit - Keymap Editor Command-Line Interface
=============================================

Inspect and edit the KEYMAP(...) layers of a keyboard firmware source
without reformatting it.

Usage Examples
--------------
List layers:
    $ kmedit show keymap.c

Dump syntax trees:
    $ kmedit show keymap.c --ast

Change layer 1, key 12 and write the result to a new file:
    $ kmedit set keymap.c 1 12 "LT(2, KC_SPC)" -o keymap_new.c

Append a transparent layer in place:
    $ kmedit add-layer keymap.c --in-place

Defaults can be set through KMEDIT_* environment variables; see
keymap_edit.config.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from keymap_edit import __version__
from keymap_edit.ast import ASTPrinter
from keymap_edit.cli.errors import handle_cli_exception
from keymap_edit.config import EditorConfig
from keymap_edit.editor import append_layer, set_key
from keymap_edit.parser import KeymapParser

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores verbosity and the editor configuration read from the environment.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: EditorConfig = EditorConfig.from_env()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def read_source(source: Path) -> str:
    """Read SOURCE as UTF-8 with its line endings untouched."""
    with open(source, encoding="utf-8", newline="") as f:
        return f.read()


def write_result(
    source: Path,
    text: str,
    output: Optional[Path],
    in_place: bool,
) -> None:
    """Write edited text to output, back to source, or to stdout."""
    if output is not None and in_place:
        raise click.BadParameter("use either --output or --in-place, not both")

    target = source if in_place else output
    if target is None:
        click.echo(text, nl=False)
        return

    with open(target, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    click.echo(f"Wrote {target}", err=True)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="kmedit")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Inspect and edit KEYMAP(...) layers in keyboard firmware sources.

    Edits only touch the characters of the changed key or the added
    layer; comments and formatting elsewhere are preserved.
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Show Command
# =============================================================================

@main.command()
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-k", "--key-count",
    type=int,
    default=None,
    help="Expected number of keys per layer",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print syntax trees instead of key lists",
)
@pass_context
def show(ctx: Context, source: Path, key_count: Optional[int], ast: bool) -> None:
    """
    List the layers found in SOURCE.
    """
    try:
        text = read_source(source)
        parser = KeymapParser(
            text,
            key_count if key_count is not None else ctx.config.key_count,
            ctx.config.macro,
        )
        result = parser.parse()

        if ast:
            click.echo(ASTPrinter().print(result))
            return

        for index, layer in enumerate(result.layers):
            keys = ", ".join(node.content for node in layer)
            click.echo(f"Layer {index}: {keys}")

        if ctx.verbose:
            click.echo(
                f"{result.layer_count} layers, {result.key_count} keys each",
                err=True,
            )
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Set Command
# =============================================================================

@main.command(name="set")
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument("layer", type=int)
@click.argument("key", type=int)
@click.argument("value")
@click.option(
    "-k", "--key-count",
    type=int,
    default=None,
    help="Expected number of keys per layer",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-i", "--in-place",
    is_flag=True,
    help="Overwrite SOURCE with the edited text",
)
@pass_context
def set_command(
    ctx: Context,
    source: Path,
    layer: int,
    key: int,
    value: str,
    key_count: Optional[int],
    output: Optional[Path],
    in_place: bool,
) -> None:
    """
    Set key KEY of layer LAYER in SOURCE to VALUE.

    \b
    Examples:
        kmedit set keymap.c 0 5 KC_ESC
        kmedit set keymap.c 1 12 "LT(2, KC_SPC)" --in-place

    Selecting a key that does not exist leaves the text unchanged.
    """
    try:
        text = read_source(source)
        edited = set_key(
            text,
            layer,
            key,
            value,
            key_count if key_count is not None else ctx.config.key_count,
            ctx.config.macro,
        )
        if edited == text:
            logger.info(f"No key {key} on layer {layer}; nothing changed")
        write_result(source, edited, output, in_place)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Add-Layer Command
# =============================================================================

@main.command(name="add-layer")
@click.argument(
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-p", "--placeholder",
    default=None,
    help="Key used to fill the new layer (default: KC_TRANSPARENT)",
)
@click.option(
    "--validate/--no-validate",
    default=None,
    help="Re-parse the result and fail if it is not valid",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-i", "--in-place",
    is_flag=True,
    help="Overwrite SOURCE with the edited text",
)
@pass_context
def add_layer(
    ctx: Context,
    source: Path,
    placeholder: Optional[str],
    validate: Optional[bool],
    output: Optional[Path],
    in_place: bool,
) -> None:
    """
    Append a layer of placeholder keys to SOURCE.

    If SOURCE cannot be parsed it is written back unchanged.
    """
    try:
        if placeholder:
            ctx.config.placeholder = placeholder
        if validate is not None:
            ctx.config.validate_append = validate

        text = read_source(source)
        edited = append_layer(
            text,
            ctx.config.layer_template(),
            validate=ctx.config.validate_append,
        )
        if edited == text:
            click.echo(f"Warning: no layer added, {source} does not parse", err=True)
        write_result(source, edited, output, in_place)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


if __name__ == "__main__":
    main()
