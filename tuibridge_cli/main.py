import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml

from tuibridge.attributes import ATTRIBUTE_NAMES, PROPERTY_KINDS
from tuibridge.config import Config, RendererConfig
from tuibridge.factory import CONSTRUCTION_DEFAULTS, RENDERABLES
from tuibridge.listeners import EMITTER_EVENTS, KEYBOARD_EVENT_SLOTS, MOUSE_EVENT_SLOTS, PROPERTY_EVENT_SLOTS, PASTE_SLOT


# Create the main Typer application object
app = typer.Typer(
    name="tuibridge",
    help="Developer tools for tuibridge terminal applications.",
    add_completion=False,
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log bridge diagnostics to stderr.")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# --- CLI Commands ---

@app.command()
def run(
    file_path: str = typer.Argument(
        "main.py",
        help="The path to the application script to run.",
        show_default=True,
    ),
):
    """
    Runs a tuibridge application script in a child process and forwards its exit code.
    """
    target_file = Path(file_path)
    if not target_file.exists():
        typer.echo(f"Error: Application file not found at '{file_path}'", err=True)
        raise typer.Exit(code=1)

    command = [sys.executable, "-u", str(target_file.resolve())]
    logging.getLogger(__name__).debug("Launching %s", command)
    process = subprocess.run(command)
    raise typer.Exit(code=process.returncode)


@app.command()
def config(
    config_file: str = typer.Option("config.yaml", "--file", "-f", help="YAML file holding a `renderer` section."),
):
    """
    Prints the renderer options the platform would start with.
    """
    cfg = Config(config_file=config_file)
    options = RendererConfig.from_config(cfg).to_engine_options()
    typer.echo(f"# source: {cfg.source or 'defaults'}")
    typer.echo(yaml.safe_dump(options, sort_keys=True).rstrip())


@app.command()
def tags():
    """
    Lists the element tags the host factory knows, with their construction defaults.
    """
    for tag, cls in sorted(RENDERABLES.items()):
        defaults = CONSTRUCTION_DEFAULTS.get(tag)
        suffix = f"  {defaults}" if defaults else ""
        typer.echo(f"{tag:<12} {cls.__name__}{suffix}")


@app.command()
def attributes(name: Optional[str] = typer.Argument(None, help="Show a single attribute.")):
    """
    Lists attribute names, the host property each maps to and how values are typed.
    """
    names = [name] if name else sorted(ATTRIBUTE_NAMES)
    for attr in names:
        prop = ATTRIBUTE_NAMES.get(attr, attr)
        kind = PROPERTY_KINDS.get(prop)
        typer.echo(f"{attr:<28} {prop:<28} {kind.value if kind else 'passthrough'}")


@app.command()
def events():
    """
    Lists every event name and the host mechanism that delivers it.
    """
    typer.echo(f"{'paste':<14} paste      {PASTE_SLOT}")
    for table, mechanism in (
        (MOUSE_EVENT_SLOTS, "mouse"),
        (KEYBOARD_EVENT_SLOTS, "keyboard"),
        (PROPERTY_EVENT_SLOTS, "property"),
        (EMITTER_EVENTS, "emitter"),
    ):
        for event, target in table.items():
            typer.echo(f"{event:<14} {mechanism:<10} {target}")


if __name__ == "__main__":
    app()
