"""Entry point for the vm-health command line tool."""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from typing import List, NoReturn, Optional

from rich.console import Console

from .diagnostics import Level, Verdict, classify
from .formatting import render_explain, render_json, render_summary
from .system_state import Sample, gather_sample

logger = logging.getLogger(__name__)

EXPLAIN = "explain"
PROMPT = "需要详细解释吗？(Y/n) "
NEGATIVE_ANSWERS = {"n", "no"}
HELP_FLAGS = {"-h", "--help"}
KNOWN_TOKENS = {EXPLAIN, "--json"} | HELP_FLAGS
LEVEL_STYLES = {
    Level.HEALTHY: "bold green",
    Level.WARNING: "bold yellow",
    Level.CRITICAL: "bold red",
}

USAGE = """用法：
  vm-health             # 交互式检查
  vm-health explain     # 解释性摘要
  vm-health --help      # 查看帮助
  vm-health --json      # JSON 输出"""


class UsageError(Exception):
    """Raised for any command line the tool does not understand."""

    def __init__(self, argument: str) -> None:
        super().__init__(argument)
        self.argument = argument


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="vm-health", add_help=False, allow_abbrev=False)
    parser.add_argument("mode", nargs="?", help="explain 输出解释性摘要")
    parser.add_argument("--json", action="store_true", help="以 JSON 输出")
    parser.add_argument("-h", "--help", action="store_true", help="查看帮助")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        mode = _parse_mode(argv)
    except UsageError as exc:
        print(f"未知参数：{exc.argument}")
        print(USAGE)
        return 1

    if mode == "help":
        print(USAGE)
        return 0

    sample = gather_sample()
    verdict = classify(sample)
    logger.debug("sample=%s verdict=%s", sample, verdict)

    if mode == "json":
        print(render_json(sample, verdict, platform.system()))
    elif mode == EXPLAIN:
        print(render_explain(sample, verdict))
    else:
        _interactive(sample, verdict, Console())
    return 0


def _parse_mode(argv: Optional[List[str]]) -> str:
    # An empty argument counts as no argument at all.
    tokens = [token for token in (sys.argv[1:] if argv is None else argv) if token != ""]
    try:
        args, extras = build_parser().parse_known_args(tokens)
    except UsageError:
        if HELP_FLAGS.intersection(tokens):
            return "help"
        raise UsageError(_first_unknown(tokens)) from None
    if args.help:
        return "help"
    if extras:
        raise UsageError(extras[0])
    if args.mode is not None and args.mode != EXPLAIN:
        raise UsageError(args.mode)
    if args.json and args.mode is not None:
        raise UsageError("--json")
    if args.json:
        return "json"
    return args.mode or "interactive"


def _first_unknown(tokens: List[str]) -> str:
    for token in tokens:
        if token not in KNOWN_TOKENS:
            return token
    return " ".join(tokens)


def _interactive(sample: Sample, verdict: Verdict, console: Console) -> None:
    console.print(
        render_summary(sample, verdict),
        style=LEVEL_STYLES[verdict.level],
        markup=False,
        highlight=False,
        soft_wrap=True,
    )
    try:
        answer = console.input(PROMPT)
    except EOFError:
        answer = ""
    if answer.strip().lower() not in NEGATIVE_ANSWERS:
        console.print(render_explain(sample, verdict), markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    sys.exit(main())
