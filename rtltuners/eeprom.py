"""Layout of the RTL2832 dongle EEPROM: header, IDs and USB string descriptors."""

from __future__ import annotations

from dataclasses import dataclass

EEPROM_SIZE = 256
STR_OFFSET = 0x09
HEADER = b"\x28\x32"
STRING_DESCRIPTOR = 0x03


class EepromError(ValueError):
    """Raised when EEPROM contents cannot be parsed or built."""


@dataclass(frozen=True)
class EepromInfo:
    """Identity a dongle carries in its EEPROM."""

    vid: int
    pid: int
    manufacturer: str
    product: str
    serial: str


def read_string_descriptor(data: bytes, pos: int) -> tuple[str, int]:
    """Read a USB string descriptor at pos; return the text and the next position."""
    if pos + 1 >= len(data):
        raise EepromError("string descriptor past the end of the EEPROM data")
    size = data[pos]
    if pos + size > len(data):
        raise EepromError("string descriptor past the end of the EEPROM data")
    if data[pos + 1] != STRING_DESCRIPTOR:
        raise EepromError(f"invalid string descriptor type {data[pos + 1]:#04x}")
    count = max(size // 2 - 1, 0)
    start = pos + 2
    text = bytes(data[start:start + 2 * count:2]).decode("latin-1")
    return text, start + 2 * count


def parse_strings(data: bytes) -> tuple[str, str, str]:
    """Manufacturer, product and serial strings stored in an EEPROM image."""
    pos = STR_OFFSET
    strings = []
    for _ in range(3):
        text, pos = read_string_descriptor(data, pos)
        strings.append(text)
    manufacturer, product, serial = strings
    return manufacturer, product, serial


def parse_eeprom(data: bytes) -> EepromInfo:
    """Decode the vendor and product IDs and strings of an EEPROM image."""
    if bytes(data[:2]) != HEADER:
        raise EepromError("invalid RTL2832 EEPROM header")
    if len(data) < STR_OFFSET:
        raise EepromError("EEPROM data too short")
    vid = data[2] | data[3] << 8
    pid = data[4] | data[5] << 8
    manufacturer, product, serial = parse_strings(data)
    return EepromInfo(vid, pid, manufacturer, product, serial)


def _descriptor(text: str) -> bytes:
    encoded = text.encode("utf-16-le")
    size = len(encoded) + 2
    if size > 0xFF:
        raise EepromError(f"string {text!r} is too long for a descriptor")
    return bytes((size, STRING_DESCRIPTOR)) + encoded


def build_eeprom_image(
    vid: int, pid: int, manufacturer: str, product: str, serial: str
) -> bytes:
    """Build a full EEPROM image holding the given IDs and strings."""
    image = bytearray(EEPROM_SIZE)
    image[0:2] = HEADER
    image[2:6] = bytes((vid & 0xFF, (vid >> 8) & 0xFF, pid & 0xFF, (pid >> 8) & 0xFF))

    pos = STR_OFFSET
    # Each check leaves room for the empty descriptors still to come.
    for text, reserve in ((manufacturer, 4), (product, 2), (serial, 0)):
        descriptor = _descriptor(text)
        if pos + len(descriptor) + reserve > EEPROM_SIZE:
            raise EepromError("strings do not fit in the EEPROM")
        image[pos:pos + len(descriptor)] = descriptor
        pos += len(descriptor)
    return bytes(image)