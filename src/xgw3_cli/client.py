#!/usr/bin/env python3
"""A CLI for the xgw3_rf library."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Final

import click
import paho.mqtt.client as mqtt
import voluptuous as vol
import yaml
from colorama import Fore, Style, init as colorama_init

from xgw3_rf import Gateway, GracefulExit, bluetooth, exceptions as exc, zigbee
from xgw3_rf.const import SZ_MODEL, SZ_NAME, SZ_SPEC
from xgw3_rf.schemas import SCH_GLOBAL_CONFIG, SZ_CONFIG
from xgw3_tx.logger import CONSOLE_COLS, DEFAULT_DATEFMT, DEFAULT_FMT

SZ_DEBUG_MODE: Final = "debug_mode"
SZ_DEVICES_FILE: Final = "devices_file"
SZ_INPUT_FILE: Final = "input_file"
SZ_LONG_FORMAT: Final = "long_format"

DEFAULT_MQTT_PORT: Final = 1883

# this is called after import colorlog to ensure its handlers wrap the correct streams
logging.basicConfig(level=logging.WARNING, format=DEFAULT_FMT, datefmt=DEFAULT_DATEFMT)


LOOKUP: Final = "lookup"
MONITOR: Final = "monitor"
PARSE: Final = "parse"


COLORS = {
    bool: Fore.GREEN,
    int: Fore.CYAN,
    float: Fore.CYAN,
    str: Style.BRIGHT + Fore.MAGENTA,
}

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

LIB_KEYS = tuple(SCH_GLOBAL_CONFIG({}).keys())


def load_config_file(config_file: Any) -> dict[str, Any]:
    """Load a config file (YAML, or JSON), and check that it is valid."""

    try:
        config: dict[str, Any] = yaml.safe_load(config_file) or {}
        SCH_GLOBAL_CONFIG(config)
        return config
    except (yaml.YAMLError, vol.Invalid) as err:
        raise click.BadParameter(f"{err}", param_hint="config-file") from err


def split_kwargs(obj: tuple[dict, dict], kwargs: dict) -> tuple[dict, dict]:
    """Split kwargs into cli/library kwargs."""
    cli_kwargs, lib_kwargs = obj

    cli_kwargs.update({k: v for k, v in kwargs.items() if k not in LIB_KEYS})
    lib_kwargs.update(
        {k: v for k, v in kwargs.items() if k in LIB_KEYS and v is not None}
    )

    return cli_kwargs, lib_kwargs


# Args/Params for all commands
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-z", "--debug-mode", count=True, help="enable debug logging")
@click.option("-c", "--config-file", type=click.File("r"), help="YAML (or JSON)")
@click.option("-d", "--devices-file", type=click.File("r"), help="device enumeration")
@click.option("-lf", "--long-format", is_flag=True, help="dont truncate STDOUT")
@click.pass_context
def cli(ctx: click.Context, config_file: Any = None, **kwargs: Any) -> None:
    """A CLI for the xgw3_rf library."""

    if kwargs[SZ_DEBUG_MODE] > 0:  # Do first
        logging.getLogger().setLevel(logging.DEBUG)

    lib_kwargs = load_config_file(config_file) if config_file else {SZ_CONFIG: {}}

    if kwargs[SZ_DEVICES_FILE]:
        kwargs[SZ_DEVICES_FILE] = yaml.safe_load(kwargs[SZ_DEVICES_FILE]) or []

    ctx.obj = split_kwargs(({}, lib_kwargs), kwargs)


# Args/Params for a message log only
class FileCommand(click.Command):  # client.py parse <file>
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.params.insert(  # input_file
            0, click.Argument(("input-file",), type=click.File("r"), default=sys.stdin)
        )


# Args/Params for the gateway's broker only
class HostCommand(click.Command):  # client.py monitor <host> --port xxx
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.params.insert(0, click.Argument(("host",)))
        self.params.insert(
            1,
            click.Option(
                ("-p", "--port"),
                type=click.INT,
                default=DEFAULT_MQTT_PORT,
                help="the broker's port",
            ),
        )
        self.params.insert(  # --message-log
            2,
            click.Option(
                ("-o", "--message-log"),
                type=click.Path(),
                help="Log all messages to this file",
            ),
        )


#
# 1/3: PARSE (a file of 'topic payload' lines, e.g. from mosquitto_sub -v)
@click.command(cls=FileCommand)
@click.pass_obj
def parse(obj: tuple[dict, dict], **kwargs: Any) -> tuple[str, dict, dict]:
    """Parse a file of bus messages, one 'topic payload' per line."""
    config, lib_config = split_kwargs(obj, kwargs)
    return PARSE, lib_config, config


#
# 2/3: MONITOR (subscribe to the gateway's own broker)
@click.command(cls=HostCommand)
@click.pass_obj
def monitor(obj: tuple[dict, dict], **kwargs: Any) -> tuple[str, dict, dict]:
    """Monitor the bus of a gateway (its mosquitto must be listening publicly)."""
    config, lib_config = split_kwargs(obj, kwargs)
    return MONITOR, lib_config, config


#
# 3/3: LOOKUP (print the resolved spec of a model)
@click.command()
@click.argument("model")
@click.pass_obj
def lookup(obj: tuple[dict, dict], **kwargs: Any) -> tuple[str, dict, dict]:
    """Print the resolved spec of a model (a zigbee model, or a bluetooth pdid)."""
    config, lib_config = split_kwargs(obj, kwargs)
    return LOOKUP, lib_config, config


def print_lookup(lib_kwargs: dict, model: str) -> None:
    if model.isdigit():
        desc = bluetooth.get_device(int(model))
    else:
        external = zigbee.external_families(lib_kwargs.get("external_devices"))
        desc = zigbee.get_device(model, external)

    if not desc:
        print(f"{Fore.YELLOW}Unsupported model: {model}")
        return

    print(f"{Style.BRIGHT}{desc[SZ_MODEL]}: {desc.get(SZ_NAME)}")
    for resource, prop, state in desc[SZ_SPEC] or []:
        key = f"0x{resource:04X}" if isinstance(resource, int) else resource
        print(f"  {str(key):>10} {str(prop or ''):<16} {state.name:<20}", end=" ")
        print(json.dumps({k: v for k, v in state.state_object.items() if v}))


async def async_main(command: str, lib_kwargs: dict, **kwargs: Any) -> None:
    """Do certain things."""

    def print_state(did: str, name: str, value: Any) -> None:
        """Print a new value of a device's state (a callback)."""

        line = f"{did} {name} = {value}"
        if not kwargs[SZ_LONG_FORMAT]:
            line = line[:CONSOLE_COLS]
        print(f"{COLORS.get(type(value), '')}{line}")

    def publish(topic: str, payload: str) -> None:
        print(f"{Fore.YELLOW}{topic} {payload}")

    colorama_init(autoreset=True)

    gwy = Gateway(
        lib_kwargs.pop(SZ_CONFIG, {}), emit=print_state, publish=publish, **lib_kwargs
    )
    gwy.add_devices(kwargs[SZ_DEVICES_FILE] or [])

    print("\r\nclient.py: Starting gateway...")

    try:  # main code here
        await gwy.start()

        if command == PARSE:
            for line in kwargs[SZ_INPUT_FILE]:
                if not (line := line.strip()) or " " not in line:
                    continue
                topic, payload = line.split(" ", 1)
                gwy.handle_message(topic, payload)

        elif command == MONITOR:
            await _monitor(gwy, kwargs["host"], kwargs["port"])

    except asyncio.CancelledError:
        msg = "ended via: CancelledError (e.g. SIGINT)"
    except GracefulExit:
        msg = "ended via: GracefulExit"
    except exc.Gw3Exception as err:
        msg = f"ended via: Gw3Exception: {err}"
    else:  # if no Exceptions raised, e.g. EOF when parsing
        msg = "ended without error (e.g. EOF)"
    finally:
        await gwy.stop()

    print(f"\r\nclient.py: Gateway stopped: {msg}")


async def _monitor(gwy: Gateway, host: str, port: int) -> None:
    """Subscribe to all the topics of the gateway's broker, until disconnected."""

    loop = asyncio.get_running_loop()
    disconnected: asyncio.Future[None] = loop.create_future()

    def on_connect(client: mqtt.Client, userdata: Any, *args: Any) -> None:
        client.subscribe("#")

    def on_message(client: mqtt.Client, userdata: Any, msg: mqtt.MQTTMessage) -> None:
        loop.call_soon_threadsafe(gwy.handle_message, msg.topic, msg.payload)

    def on_disconnect(client: mqtt.Client, *args: Any) -> None:
        loop.call_soon_threadsafe(
            lambda: disconnected.done() or disconnected.set_result(None)
        )

    client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
    client.on_connect = on_connect
    client.on_message = on_message
    client.on_disconnect = on_disconnect

    client.connect_async(host, port)
    client.loop_start()
    try:
        await disconnected
    finally:
        client.disconnect()
        client.loop_stop()


cli.add_command(parse)
cli.add_command(monitor)
cli.add_command(lookup)


def main() -> None:
    try:
        result = cli(standalone_mode=False)
    except click.ClickException as err:
        print(f"Error: {err}")
        sys.exit(-1)

    if isinstance(result, int):
        sys.exit(result)

    (command, lib_kwargs, kwargs) = result

    if command == LOOKUP:
        print_lookup(lib_kwargs, kwargs["model"])
        return

    print("\r\nclient.py: Starting xgw3_rf...")

    try:
        asyncio.run(async_main(command, lib_kwargs, **kwargs))
    except KeyboardInterrupt:
        print("\r\nclient.py: Gateway stopped: ended via: KeyboardInterrupt")

    print(" - finished xgw3_rf.\r\n")


if __name__ == "__main__":
    main()
