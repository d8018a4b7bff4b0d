#!/usr/bin/env python3
"""
translator-helper 命令列介面

使用方式：
    translator-helper resources/views/welcome.blade.php --match "Hello world" --path messages.php
    translator-helper resources/views/welcome.blade.php --selection 12:9-12:20

位置為 1-based 的「行:欄」，結束欄不包含在選取範圍內。
"""

import re
import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .command import HandleTextCommand
from .config import load_config
from .document import Position, Range, TextDocument
from .errors import ConfigurationError
from .i18n import init_i18n, safe_t
from .notifier import Notifier
from .selection_replacer import Selection

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_USAGE = 2

_SELECTION_RE = re.compile(r'^(\d+):(\d+)-(\d+):(\d+)$')


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """配置全局 logging 使用 Rich"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )],
        force=True,
    )
    # 降低第三方模組的日誌級別以減少噪音
    for name in ('google', 'google_genai', 'urllib3', 'httpx'):
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_selection(value: str) -> Range:
    """
    "12:9-12:20"（1-based）→ Range（0-based）

    Raises:
        ValueError: 格式錯誤
    """
    match = _SELECTION_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid selection '{value}', expected LINE:COL-LINE:COL")
    start_line, start_col, end_line, end_col = (int(g) for g in match.groups())
    if min(start_line, start_col, end_line, end_col) < 1:
        raise ValueError("Lines and columns are 1-based")
    return Range(Position(start_line - 1, start_col - 1), Position(end_line - 1, end_col - 1))


def find_match(document: TextDocument, text: str, occurrence: int = 1) -> Range:
    """
    第 N 次出現的文字範圍

    Raises:
        ValueError: 找不到
    """
    offset = -1
    for _ in range(occurrence):
        offset = document.text.find(text, offset + 1)
        if offset < 0:
            raise ValueError(f"'{text}' occurs fewer than {occurrence} time(s) in {document.path}")
    return Range(document.position_at(offset), document.position_at(offset + len(text)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='translator-helper',
        description='Replace selected text with a Laravel translation key and add it to every locale file',
    )
    parser.add_argument('source', help='Source file containing the selection')
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument('--selection', help='Selection range LINE:COL-LINE:COL (1-based, end exclusive)')
    target.add_argument('--match', help='Select the given text')
    parser.add_argument('--occurrence', type=int, default=1, help='Which occurrence of --match to select')
    parser.add_argument('--path', help='Translation file path relative to each locale, e.g. admin/users.php')
    parser.add_argument('--workspace', default='.', help='Workspace root (default: current directory)')
    parser.add_argument('--config', type=Path, help='Settings file (default: <workspace>/.translator-helper.yaml)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def prompt_for_path(console: Console) -> str:
    from rich.prompt import Prompt

    try:
        return Prompt.ask(safe_t('command.path_prompt', fallback='Translation file path (e.g. messages.php)'),
                          console=console)
    except EOFError:
        return ""


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    err_console = Console(stderr=True)
    setup_logging(args.verbose, err_console)

    if args.occurrence < 1:
        parser.error("--occurrence must be >= 1")

    workspace = Path(args.workspace).resolve()
    try:
        config = load_config(workspace, args.config)
    except ConfigurationError as e:
        err_console.print(f"[bold red]✗[/bold red] {e.message}")
        return EXIT_USAGE

    init_i18n(config.message_language)

    try:
        document = TextDocument.open(args.source)
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(f"[bold red]✗[/bold red] Cannot open {args.source}: {e}")
        return EXIT_USAGE

    try:
        rng = parse_selection(args.selection) if args.selection else find_match(document, args.match, args.occurrence)
    except ValueError as e:
        parser.error(str(e))

    command = HandleTextCommand(
        workspace, config, Notifier(err_console),
        path_prompt=lambda: prompt_for_path(err_console),
    )
    result = command.run(Selection(document, rng), args.path)

    if result.wrapped_text:
        Console(highlight=False).print(result.wrapped_text, markup=False)
    return EXIT_OK if result.completed else EXIT_ABORTED


if __name__ == "__main__":
    sys.exit(main())
