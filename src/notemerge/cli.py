"""CLI for notemerge - merge notes and keep their links intact."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.scan_index import iter_note_files
from .core.errors import MergeError, PreconditionError
from .core.model import FormatKind, MergeReport, Region
from .merge import REGION_WRAPPERS
from .runtime import build_runtime


def _resolve_note(ref: str, rt: Any) -> Path:
    """Accept a path, or an identifier looked up in the vault."""
    path = Path(ref)
    if path.exists():
        return path
    vault = rt.index.root
    if (vault / ref).exists():
        return vault / ref
    matches = [
        p for p in iter_note_files(vault)
        if rt.naming.extract_identifier_or_none(p) == ref
    ]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise PreconditionError(f"Identifier {ref} matches several files")
    raise PreconditionError(f"Note {ref} not found")


def _parse_region(args: argparse.Namespace, path: Path) -> Region:
    if args.lines:
        first, _, last = args.lines.partition(":")
        try:
            first_no = int(first)
            last_no = int(last) if last else first_no
        except ValueError:
            raise PreconditionError(f"Invalid line range: {args.lines}") from None
        if first_no < 1 or last_no < first_no:
            raise PreconditionError(f"Invalid line range: {args.lines}")
        lines = path.read_text(encoding="utf-8").splitlines(keepends=True)
        if last_no > len(lines):
            raise PreconditionError(f"{path.name} has only {len(lines)} lines")
        start = sum(len(ln) for ln in lines[: first_no - 1])
        end = start + sum(len(ln) for ln in lines[first_no - 1 : last_no])
        return Region(start, end)
    if args.start is None or args.end is None:
        raise PreconditionError("Select a region with --lines or --start/--end")
    return Region(args.start, args.end)


def _ask(prompt: str) -> bool:
    try:
        response = input(prompt)
    except (EOFError, KeyboardInterrupt):
        return False
    return response.lower() in ("y", "yes")


def _confirm_rewrite(path: Path) -> bool:
    return _ask(f"Update links in {path.name}? [y/N] ")


def _finish(args: argparse.Namespace, rt: Any, report: MergeReport) -> int:
    """Save what the merge left in buffers and print the outcome."""
    # Buffers do not outlive the process. The destination goes first so a
    # failed write leaves the source as it is on disk.
    saved: list[Path] = []
    dst_buf = rt.buffers.get(report.destination)
    if dst_buf is not None and dst_buf.modified:
        rt.buffers.persist(dst_buf)
        saved.append(dst_buf.path)
    saved += rt.buffers.save_all()
    report.saved = True

    if args.json:
        print(json.dumps({
            "operation": report.operation,
            "source": str(report.source),
            "destination": str(report.destination),
            "rewritten": [str(p) for p in report.rewritten],
            "failed": {str(p): reason for p, reason in report.failed.items()},
            "saved": [str(p) for p in saved],
        }, indent=2))
    elif not args.quiet:
        print(report.message)
        for path in saved:
            print(f"Saved: {path}")

    # 2 signals a merge that left some backlinks untouched
    return 2 if report.partial else 0


def cmd_merge_file(args: argparse.Namespace, rt: Any) -> int:
    """Merge SOURCE into DESTINATION and delete SOURCE."""
    destination = _resolve_note(args.destination, rt)
    source = _resolve_note(args.source, rt)
    report = rt.merger.merge_file(
        destination,
        source,
        confirm=_confirm_rewrite if args.confirm else None,
    )
    return _finish(args, rt, report)


def cmd_merge_region(args: argparse.Namespace, rt: Any) -> int:
    """Move a region of SOURCE to the end of DESTINATION."""
    destination = _resolve_note(args.destination, rt)
    source = _resolve_note(args.source, rt)
    region = _parse_region(args, source)
    if args.cmd in REGION_WRAPPERS:
        merge = rt.merger.region_wrapper(args.cmd)
        report = merge(destination, source, region)
    else:
        report = rt.merger.merge_region(destination, source, region, kind=args.kind)
    return _finish(args, rt, report)


def cmd_backlinks(args: argparse.Namespace, rt: Any) -> int:
    """List files linking to a note."""
    ref = args.note
    if Path(ref).exists() or (rt.index.root / ref).exists():
        identifier = rt.naming.extract_identifier(_resolve_note(ref, rt))
    else:
        identifier = ref
    files = sorted(rt.index.backlink_files(identifier))
    if args.json:
        print(json.dumps([str(p) for p in files], indent=2))
    else:
        for path in files:
            print(path)
    return 0


def _add_region_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("destination", help="Note receiving the region (path or ID)")
    parser.add_argument("source", help="Note the region is taken from (path or ID)")
    parser.add_argument("--lines", default=None, help="Line range A:B (1-based, inclusive)")
    parser.add_argument("--start", type=int, default=None, help="Start character offset")
    parser.add_argument("--end", type=int, default=None, help="End character offset")


def _configure_logging(verbose: int, level: str) -> None:
    if verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="notemerge", description="Merge notes and keep links intact"
    )
    parser.add_argument(
        "--version", action="version", version=f"notemerge {__version__}"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/notemerge.toml, vault/notemerge.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to notes directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More log output (repeatable)"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # merge-file command
    parser_file = subparsers.add_parser("merge-file", help="Merge one note into another")
    parser_file.add_argument("destination", help="Note that receives the contents (path or ID)")
    parser_file.add_argument("source", help="Note that is merged and deleted (path or ID)")
    parser_file.add_argument(
        "--confirm", action="store_true", help="Ask before updating links in each file"
    )

    # merge-region command
    parser_region = subparsers.add_parser(
        "merge-region", help="Move a region of one note into another"
    )
    _add_region_args(parser_region)
    parser_region.add_argument(
        "--kind",
        default=FormatKind.PLAIN.value,
        help="Format kind: " + ", ".join(k.value for k in FormatKind),
    )

    # merge-region shortcuts with a fixed format kind
    for name, kind in REGION_WRAPPERS.items():
        parser_wrapper = subparsers.add_parser(
            name, help=f"merge-region with --kind {kind.value}"
        )
        _add_region_args(parser_wrapper)

    # backlinks command
    parser_backlinks = subparsers.add_parser("backlinks", help="List files linking to a note")
    parser_backlinks.add_argument("note", help="Note path or identifier")

    args = parser.parse_args()

    rt = build_runtime(vault_path=args.vault, config_path=args.config)
    _configure_logging(args.verbose, rt.config.logging.level)

    handlers = {
        "merge-file": cmd_merge_file,
        "merge-region": cmd_merge_region,
        "backlinks": cmd_backlinks,
    }
    handlers.update({name: cmd_merge_region for name in REGION_WRAPPERS})

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except MergeError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except Exception as e:
            logging.getLogger(__name__).debug("Unhandled error", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
