#!/usr/bin/env python3
"""
AliasKit CLI
============
Command-line interface for inspecting a corpus and trying out allocations.

Usage:
    aliaskit corpus --list
    aliaskit allocate --exclude Aster Wren -n 3
    aliaskit allocate --exclude-file used.txt --json
    aliaskit bucket --excluded 40
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from aliaskit import __version__

# =============================================================================
# Constants
# =============================================================================

EXCLUSION_MODE_CHOICES = ['strict', 'normalize', 'trust']

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def result(self, *args, **kwargs):
        """Print command results, even in quiet mode."""
        print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def table(self, headers: list, rows: list, col_widths: list = None):
        """Print a formatted table."""
        if self.quiet:
            return

        if not col_widths:
            col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                         for i, h in enumerate(headers)]

        header_line = ''.join(str(h).ljust(w) for h, w in zip(headers, col_widths))
        print(header_line)
        print('-' * len(header_line))

        for row in rows:
            print(''.join(str(c).ljust(w) for c, w in zip(row, col_widths)))


def configure_logging(verbose: bool = False):
    """Set up root logging from app.yaml (``-v`` forces DEBUG)."""
    from aliaskit.settings import get_setting

    level_name = 'DEBUG' if verbose else str(get_setting('logging.level', 'WARNING')).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=get_setting('logging.format', '%(levelname)s %(name)s: %(message)s'),
        stream=sys.stderr,
    )


def read_exclude_file(path: str) -> list:
    """Read excluded names from a JSON array or a one-name-per-line text file."""
    text = Path(path).expanduser().read_text(encoding='utf-8')
    if text.lstrip().startswith('['):
        data = json.loads(text)
        if not isinstance(data, list):
            raise ValueError(f"{path} must hold a JSON array of names")
        return [str(n) for n in data]
    return [line.strip() for line in text.splitlines() if line.strip()]


def load_cli_corpus(args):
    from aliaskit.corpus import load_corpus, default_corpus

    if getattr(args, 'source', None):
        return load_corpus(Path(args.source))
    return default_corpus()


# =============================================================================
# Commands
# =============================================================================

def cmd_corpus(args, out: Output):
    """Show corpus statistics."""
    from aliaskit.allocator import AllocatorConfig

    corpus = load_cli_corpus(args)
    divisor = int(AllocatorConfig().sparse_divisor)

    out.print("Corpus")
    out.print("=" * 50)
    out.result(f"Names: {corpus.size}")
    out.print(f"First: {corpus.entries[0]}")
    out.print(f"Last:  {corpus.entries[-1]}")
    out.print(f"\nSparse below {corpus.size / divisor:g} excluded names, "
              f"exhausted at {corpus.size}")

    if args.list:
        out.print()
        rows = [(i, name) for i, name in enumerate(corpus.entries)]
        out.table(['#', 'Name'], rows)

    return 0


def cmd_allocate(args, out: Output):
    """Allocate names against an exclusion list."""
    from aliaskit.allocator import Allocator, AllocatorConfig, prepare_exclusion
    from aliaskit.entropy import NameRandom

    corpus = load_cli_corpus(args)

    excluded = list(args.exclude or [])
    if args.exclude_file:
        excluded.extend(read_exclude_file(args.exclude_file))

    config = AllocatorConfig(exclusion_mode=args.mode)
    rng = NameRandom(args.seed) if args.seed is not None else None
    allocator = Allocator(corpus, config=config, rng=rng)

    # Report on the sequence the allocator actually sees
    excluded = list(prepare_exclusion(excluded, config.exclusion_mode))
    bucket = allocator.bucket_for(excluded)
    names = allocator.allocate_many(excluded, count=args.count)

    if args.json:
        out.result(json.dumps({
            'names': names,
            'excluded': len(excluded),
            'corpus_size': corpus.size,
            'bucket': bucket.value,
        }, indent=2))
        return 0

    out.print(f"{len(excluded)}/{corpus.size} excluded ({bucket.value})")
    for name in names:
        out.result(name)
    return 0


def cmd_bucket(args, out: Output):
    """Report the strategy for a given exclusion count."""
    from aliaskit.allocator import AllocatorConfig, density_bucket

    if args.excluded < 0:
        out.error("--excluded must be non-negative")
        return 1

    corpus = load_cli_corpus(args)
    divisor = int(AllocatorConfig().sparse_divisor)
    bucket = density_bucket(args.excluded, corpus.size, divisor)

    out.print(f"{args.excluded}/{corpus.size} excluded:")
    out.result(bucket.value)
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='aliaskit',
        description='AliasKit - Unique Pseudonym Allocator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s corpus --list
  %(prog)s allocate --exclude Aster Wren -n 3
  %(prog)s allocate --exclude-file used.json --mode strict --json
  %(prog)s bucket --excluded 40
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only print results')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- corpus ---
    p = subparsers.add_parser('corpus', help='Show corpus statistics')
    p.add_argument('--source', '-s', help='Corpus file (JSON or YAML); default: bundled')
    p.add_argument('--list', '-l', action='store_true', help='List every name')

    # --- allocate ---
    p = subparsers.add_parser('allocate', aliases=['alloc', 'a'], help='Allocate unused names')
    p.add_argument('--source', '-s', help='Corpus file (JSON or YAML); default: bundled')
    p.add_argument('--exclude', '-x', nargs='*', metavar='NAME', help='Names already in use')
    p.add_argument('--exclude-file', '-f', help='File of names in use (JSON array or one per line)')
    p.add_argument('-n', '--count', type=int, default=1, help='Number of names (default: 1)')
    p.add_argument('--mode', choices=EXCLUSION_MODE_CHOICES, default='normalize',
                   help='How to treat the exclusion list (default: normalize)')
    p.add_argument('--seed', type=int, help='Seed for reproducible output')
    p.add_argument('--json', action='store_true', help='Output as JSON')

    # --- bucket ---
    p = subparsers.add_parser('bucket', help='Show which strategy an exclusion count selects')
    p.add_argument('--source', '-s', help='Corpus file (JSON or YAML); default: bundled')
    p.add_argument('--excluded', '-k', type=int, required=True, help='Number of excluded names')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cmd_map = {
        'alloc': 'allocate', 'a': 'allocate',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)
    configure_logging(args.verbose)

    commands = {
        'corpus': cmd_corpus,
        'allocate': cmd_allocate,
        'bucket': cmd_bucket,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
