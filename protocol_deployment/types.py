import click
from eth_utils import is_hex, to_checksum_address
from hexbytes import HexBytes


class MinInt(click.ParamType):
    name = "minint"

    def __init__(self, min_value):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            ivalue = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return ivalue


class ChecksumAddress(click.ParamType):
    name = "checksum_address"

    def convert(self, value, param, ctx):
        try:
            return to_checksum_address(value=value)
        except ValueError:
            self.fail(f"Invalid ethereum address: {value}", param, ctx)


class HexData(click.ParamType):
    name = "hex_data"

    def convert(self, value, param, ctx):
        if isinstance(value, bytes):
            return HexBytes(value)
        if not is_hex(value) or len(value.removeprefix("0x")) % 2:
            self.fail(f"{value} is not valid hex encoded data", param, ctx)
        return HexBytes(value)
