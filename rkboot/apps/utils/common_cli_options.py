#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI helper for Click."""

import functools
import logging
import sys
from gettext import gettext
from typing import Any, Callable, Optional, Sequence, TypeVar, Union

import click
from click_command_tree import _build_command_tree, _CommandWrapper

from rkboot import __version__ as rkboot_version
from rkboot.apps.utils.utils import INT
from rkboot.rkusb.interfaces.usb import RkUsbInterface

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])
logger = logging.getLogger(__name__)


def rkboot_use_json_option(options: FC) -> FC:
    """Use json click option decorator.

    Provides: `use_json: bool` a use_json flag.

    :return: Click decorator
    """
    return click.option(
        "-j",
        "--json",
        "use_json",
        is_flag=True,
        help="Use JSON output",
    )(options)


def timeout_option(timeout: int = 5000) -> Callable[[FC], FC]:
    """Get the timeout option.

    :param timeout: Default timeout in milliseconds
    :return: click decorator
    """
    return click.option(
        "-t",
        "--timeout",
        metavar="<ms>",
        type=INT(),
        default=timeout,
        help=f"Timeout of a single bulk transfer. The default is {timeout} milliseconds.",
    )


def rkboot_apps_common_options(options: FC) -> FC:
    """Common click options.

    Sets --help, --version; provides: `log_level: int` for logging.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(rkboot_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Display more debugging information.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print more detailed information",
    )(options)
    return options


def rkboot_rkusb_interface(timeout: int = 5000) -> Callable:
    """Click decorator looking up the Rockusb device.

    Provides: `interface: RkUsbInterface` of the first connected RK3366 device.

    :param timeout: Default bulk transfer timeout in milliseconds
    :return: Click decorator.
    """

    def decorator(func: Callable[[FC], FC]) -> Callable:
        @functools.wraps(func)
        @click.pass_context
        def wrapper(ctx: click.Context, timeout: int, *args: Any, **kwargs: Any) -> Any:
            # if --help is provided anywhere on command line, skip interface lookup
            if is_click_help(ctx, sys.argv):
                return None
            kwargs["interface"] = RkUsbInterface.scan_first(timeout=timeout)
            return func(*args, **kwargs)

        return timeout_option(timeout)(wrapper)

    return decorator


class CommandsTreeGroup(click.Group):
    """Click group printing its commands as a tree in the help."""

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add the command tree after the options.

        :param ctx: click Context
        :param formatter: click HelpFormatter
        """
        root_cmd = _build_command_tree(ctx.find_root().command)
        rows = _get_tree(root_cmd)

        with formatter.section(gettext("Commands")):
            formatter.width = 160
            formatter.write_dl(rows, col_max=80)


def _get_tree(
    command: _CommandWrapper,
    rows: Optional[list] = None,
    depth: int = 0,
    is_last_item: bool = False,
    is_last_parent: bool = False,
    parent_prefix: str = "",
) -> Sequence[tuple[str, str]]:
    """Generate tree of commands to be used with Click HelpFormatter.

    :param command: command wrapper
    :param rows: list of str lines to be printed, defaults to None
    :param depth: tree depth, defaults to 0
    :param is_last_item: last item has different formatting, defaults to False
    :param is_last_parent: last parent item, defaults to False
    :param parent_prefix: visual prefix used by parent node
    :return: definition list to be used with click HelpFormatter
    """
    rows = [] if rows is None else rows
    prefix = ("    " if is_last_parent else "│   ") if depth > 1 else ""
    tree_item = ("└── " if is_last_item else "├── ") if depth else ""

    parent_prefix += prefix
    summary = (command.command.__doc__ or "").partition("\n")[0]
    rows.append((parent_prefix + tree_item + command.name, summary[:78] + (summary[78:] and "..")))

    children = sorted(command.children, key=lambda x: x.name)
    for i, child in enumerate(children):
        _get_tree(
            child,
            rows,
            depth=depth + 1,
            is_last_item=i == len(children) - 1,
            is_last_parent=is_last_item,
            parent_prefix=parent_prefix,
        )
    return rows


def is_click_help(ctx: click.Context, argv: list[str]) -> bool:
    """Is help command?

    :param ctx: Click content
    :param argv: Command line arguments
    :return: True if this command is just for help, False otherwise
    """

    def check_commands(argv: list[str], cmd: click.Command) -> bool:
        if len(argv) == 0:
            return getattr(cmd, "no_args_is_help", False)

        commands: dict[str, click.Command] = getattr(ctx.command, "commands", {})
        for index, arg in enumerate(argv):
            if arg in commands:
                return check_commands(argv[index + 1 :], commands[arg])
        return False

    if ctx is None or argv is None:
        return False
    if "--help" in argv[1:]:
        return True
    if ctx.command.name and ctx.command.name not in argv[0]:
        return False
    return check_commands(argv[1:], ctx.command)
