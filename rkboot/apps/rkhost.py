#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2020-2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Console script for Rockusb module aka RKHost."""

import json
import sys
from typing import Any

import click

from rkboot import RKBOOT_LOG_LEVEL
from rkboot.apps.utils import rk_logger
from rkboot.apps.utils.common_cli_options import (
    CommandsTreeGroup,
    rkboot_apps_common_options,
    rkboot_rkusb_interface,
    rkboot_use_json_option,
)
from rkboot.apps.utils.utils import (
    RKBootAppError,
    catch_rkboot_error,
    format_raw_data,
    progress_bar,
)
from rkboot.rkusb.commands import MemoryRegion
from rkboot.rkusb.protocol.base import RkUsbProtocolBase
from rkboot.rkusb.rockusb import RockUsb
from rkboot.utils.misc import load_binary, size_fmt


@click.group(name="rkhost", no_args_is_help=True, cls=CommandsTreeGroup)
@rkboot_rkusb_interface()
@rkboot_use_json_option
@rkboot_apps_common_options
@click.pass_context
def main(
    ctx: click.Context,
    interface: RkUsbProtocolBase,
    use_json: bool,
    log_level: int,
) -> int:
    """Utility for communication with the boot ROM of Rockchip RK3366 over USB."""
    rk_logger.install(level=log_level or RKBOOT_LOG_LEVEL)
    ctx.obj = {
        "interface": interface,
        "use_json": use_json,
    }
    return 0


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Reads the chip identifier (requires USB-Plug mode)."""
    with RockUsb(ctx.obj["interface"]) as rockusb:
        chip_info = rockusb.chip_info()
    display_output("info", chip_info.chip_id, ctx.obj["use_json"])


@main.command()
@click.option(
    "-r",
    "--region",
    type=click.Choice(MemoryRegion.labels(), case_sensitive=False),
    default=MemoryRegion.SRAM.label,
    show_default=True,
    help="Memory the code is loaded to.",
)
@click.argument("bin_file", metavar="FILE", type=click.Path(dir_okay=False), required=True)
@click.pass_context
def run(ctx: click.Context, region: str, bin_file: str) -> None:
    """Uploads code into SRAM or DRAM and runs it.

    \b
    FILE - binary file with the code
    """
    data = load_binary(bin_file)
    if not data:
        raise RKBootAppError(f"File {bin_file} is empty, there is no code to run")
    memory = MemoryRegion.from_label(region.lower())
    use_json = ctx.obj["use_json"]
    with RockUsb(ctx.obj["interface"]) as rockusb:
        with progress_bar(suppress=use_json, label=f"Uploading to {memory.label}") as callback:
            rockusb.run_code(data, memory, progress_callback=callback)
    display_output("run", f"{size_fmt(len(data))} uploaded to {memory.label}", use_json)


@main.command()
@click.option("-h", "--use-hexdump", is_flag=True, default=False, help="Use hexdump format")
@click.pass_context
def capability(ctx: click.Context, use_hexdump: bool) -> None:
    """Reads capability bytes of the loader (requires USB-Plug mode)."""
    with RockUsb(ctx.obj["interface"]) as rockusb:
        response = rockusb.read_capability()
    if ctx.obj["use_json"]:
        display_output("capability", response.hex(), True)
    else:
        display_output("capability", format_raw_data(response, use_hexdump=use_hexdump), False)


@main.command(name="test-unit-ready")
@click.pass_context
def test_unit_ready(ctx: click.Context) -> None:
    """Checks that the device answers commands."""
    with RockUsb(ctx.obj["interface"]) as rockusb:
        rockusb.test_unit_ready()
    display_output("test-unit-ready", "Ready", ctx.obj["use_json"])


def display_output(command: str, response: Any, use_json: bool = False) -> None:
    """Print the command result.

    :param command: Name of the executed command
    :param response: Result of the command
    :param use_json: Format output as JSON
    """
    if use_json:
        click.echo(json.dumps({"command": command, "response": response}, indent=3))
    else:
        click.echo(response)


@catch_rkboot_error
def safe_main() -> None:
    """Calls the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
