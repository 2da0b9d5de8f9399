"""Command-line interface for wikipull."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .core.service import PageService
from .errors import WikipullError
from .logging_config import setup_logging
from .models.config import WikipullConfig
from .models.document import OutputFormat, PageInfo, RenderedOutput

SUFFIXES = {"json": ".json", "html": ".html", "markdown": ".md"}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="wikipull",
        description="Convert saved MediaWiki pages to clean HTML and Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Markdown to stdout
  wikipull Creeper.html --format markdown

  # Everything as JSON, written next to each other in out/
  wikipull Creeper.html Zombie.html --format both --json -o out/

  # Another wiki, keeping small icons
  wikipull Page.html --base-url https://en.wikipedia.org --keep-small-images
        """,
    )

    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        metavar="FILE",
        help="Saved wiki page(s) to convert",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="YAML",
        help="Load settings from a YAML file (requires wikipull[yaml])",
    )

    # Conversion
    conversion_group = parser.add_argument_group("conversion")
    conversion_group.add_argument(
        "--format",
        "-f",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.MARKDOWN.value,
        help="Artifacts to produce (default: markdown)",
    )
    conversion_group.add_argument(
        "--title",
        type=str,
        default=None,
        help="Page title (default: file name without extension)",
    )
    conversion_group.add_argument(
        "--base-url",
        type=str,
        default=None,
        metavar="URL",
        help="Wiki origin for resolving relative links",
    )
    conversion_group.add_argument(
        "--min-image-size",
        type=int,
        default=None,
        metavar="PX",
        help="Drop images whose declared width or height is below this",
    )
    conversion_group.add_argument(
        "--keep-small-images",
        action="store_true",
        help="Do not drop small images",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--json",
        action="store_true",
        help="Write the full result (content, components, stats) as JSON",
    )
    output_group.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file, or directory when converting several files (default: stdout)",
    )
    output_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress progress and summary output",
    )

    return parser


def build_config(args: argparse.Namespace) -> WikipullConfig:
    """Merge an optional YAML config with command-line overrides."""
    data: dict[str, Any] = {}
    if args.config:
        data = WikipullConfig.from_yaml_file(args.config).model_dump()

    if args.base_url:
        data["base_url"] = args.base_url

    images: dict[str, Any] = data.setdefault("images", {})
    if args.min_image_size is not None:
        images["min_width"] = args.min_image_size
        images["min_height"] = args.min_image_size
    if args.keep_small_images:
        images["remove_small_images"] = False

    if args.log_level:
        data["log_level"] = args.log_level

    return WikipullConfig.model_validate(data)


def render_artifact(output: RenderedOutput, as_json: bool) -> tuple[str, str]:
    """Pick the text to write for one result; returns (kind, text)."""
    if as_json:
        return "json", json.dumps(output.to_dict(), ensure_ascii=False, indent=2) + "\n"
    if output.format == OutputFormat.HTML:
        return "html", output.html + "\n"
    return "markdown", output.markdown or ""


def output_path(target: Optional[Path], source: Path, kind: str, many: bool) -> Optional[Path]:
    if target is None:
        return None
    if many or target.is_dir():
        return target / (source.stem + SUFFIXES[kind])
    return target


def run_conversion(args: argparse.Namespace) -> int:
    """Convert every file given on the command line."""
    console = Console(stderr=True)

    try:
        config = build_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(level=config.log_level, log_file=config.log_file, quiet=args.quiet)

    many = len(args.files) > 1
    if many and args.output is not None:
        args.output.mkdir(parents=True, exist_ok=True)

    service = PageService(config)
    failed = 0
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
            disable=args.quiet,
        ) as progress:
            task = progress.add_task("Starting...", total=None)

            for path in args.files:
                progress.update(task, description=f"[cyan]Converting {path.name}")
                title = args.title if args.title and not many else path.stem
                try:
                    raw = path.read_bytes()
                    output = service.process(raw, PageInfo(title=title), args.format)
                except OSError as e:
                    console.print(f"[red]Failed:[/red] {path} - {e}")
                    failed += 1
                    continue
                except WikipullError as e:
                    console.print(f"[red]Failed:[/red] {path} - {e.code}: {e}")
                    failed += 1
                    continue

                kind, text = render_artifact(output, args.json)
                destination = output_path(args.output, path, kind, many)
                if destination is None:
                    sys.stdout.write(text)
                else:
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    destination.write_text(text, encoding="utf-8")
                    if not args.quiet:
                        console.print(f"[green]Wrote[/green] {destination}")
    finally:
        service.close()

    if not args.quiet:
        stats = service.stats
        console.print()
        console.print("[bold]Results:[/bold]")
        console.print(f"  Pages converted: {stats.pages_processed}")
        console.print(f"  Pages failed: {failed}")

    return 0 if failed == 0 else 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_conversion(args)


if __name__ == "__main__":
    sys.exit(main())
