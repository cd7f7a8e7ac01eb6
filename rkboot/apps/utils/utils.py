#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2019-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Module for general utilities used by applications."""

import contextlib
import logging
import sys
from functools import wraps
from typing import Any, Callable, Iterator, Optional, Union

import click
import hexdump

from rkboot import RKBOOT_DEBUG_LOG_FILE, RKBOOT_DEBUG_LOGGING_DISABLED
from rkboot.exceptions import RKBootError

logger = logging.getLogger(__name__)


class RKBootAppError(RKBootError):
    """Non-fatal application error, exits with its own error code.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "{description}"

    def __init__(self, desc: Optional[str] = None, error_code: int = 1) -> None:
        """Initialize the AppError.

        :param desc: Description to print out on command line, defaults to None
        :param error_code: Error code passed to OS, defaults to 1
        """
        super().__init__(desc)
        self.description = desc
        self.error_code = error_code


class INT(click.ParamType):
    """Click parameter type accepting integers in any Python literal base (0x, 0b, 0o)."""

    name = "integer"

    def __init__(self, base: int = 0) -> None:
        super().__init__()
        self.base = base

    # pylint: disable=inconsistent-return-statements
    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter] = None,
        ctx: Optional[click.Context] = None,
    ) -> int:
        """Perform the conversion str -> int.

        :param value: value to convert
        :param param: Click parameter, defaults to None
        :param ctx: Click context, defaults to None
        :return: value as integer
        """
        if isinstance(value, int):
            return value
        try:
            return int(value, self.base)
        except TypeError:
            self.fail(
                "expected string for int() conversion, got "
                f"{value!r} of type {type(value).__name__}",
                param,
                ctx,
            )
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


def format_raw_data(data: bytes, use_hexdump: bool = False, line_length: int = 16) -> str:
    """Format bytes data into human-readable form.

    :param data: Data to format
    :param use_hexdump: Use hexdump with addresses and ASCII, defaults to False
    :param line_length: bytes per line, defaults to 16
    :return: formatted string (multilined if necessary)
    """
    if use_hexdump:
        return hexdump.hexdump(data, result="return")
    lines = [data[i : i + line_length] for i in range(0, len(data), line_length)]
    return "\n".join(" ".join(f"{b:02x}" for b in line) for line in lines)


def catch_rkboot_error(function: Callable) -> Callable:
    """Catch RKBootError and other exceptions and turn them into an exit code.

    RKBootAppError exits with its own code (1 by default), any other RKBootError
    with 2 and unexpected exceptions with 3.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return function(*args, **kwargs)
        except RKBootAppError as app_exc:
            if app_exc.description:
                click.echo(f"{app_exc.__class__.__name__}: {app_exc}", err=True)
            if 0 < app_exc.error_code < 256:
                sys.exit(app_exc.error_code)
            sys.exit(1)
        except (AssertionError, RKBootError) as rk_exc:
            click.echo(f"{rk_exc.__class__.__name__}: {rk_exc}", err=True)
            logger.debug(str(rk_exc), exc_info=True)
            if not RKBOOT_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {RKBOOT_DEBUG_LOG_FILE} for more info", fg="yellow"
                )
            sys.exit(2)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            if not RKBOOT_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {RKBOOT_DEBUG_LOG_FILE} for more info.", fg="yellow"
                )
            sys.exit(3)

    return wrapper


@contextlib.contextmanager
def progress_bar(
    suppress: bool = False, **progress_bar_params: Union[str, int]
) -> Iterator[Callable[[int, int], None]]:
    """Create a progress bar and return callback for updating it.

    :param suppress: Return an empty callback instead, defaults to False
    :param progress_bar_params: Standard parameters for click.progressbar
    :yield: Callback taking (done, total)
    """
    if suppress:
        yield lambda _x, _y: None
    else:
        with click.progressbar(length=100, **progress_bar_params) as p_bar:  # type: ignore

            def progress(step: int, total_steps: int) -> None:
                increment = step * 100 / total_steps - p_bar.pos
                p_bar.update(round(increment))

            yield progress
