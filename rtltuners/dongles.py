"""Catalog of known RTL2832 dongles: identity, lookup, merging and persistence."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path

from .eeprom import build_eeprom_image

MAX_USB_PATH = 7
PPM_MARKER = "ppm"
BUSY_PREFIX = "* "


@dataclass
class Dongle:
    """One dongle: its USB identity, where it is plugged in and its current state."""

    vid: int
    pid: int
    manufacturer: str = ""
    product: str = ""
    serial: str = ""
    usbpath: tuple[int, ...] = field(default=())
    found: int = -1
    busy: bool = False
    duplicated: bool = False

    def __post_init__(self) -> None:
        path = tuple(int(p) for p in self.usbpath)
        if len(path) > MAX_USB_PATH:
            raise ValueError(f"USB path {path} is longer than {MAX_USB_PATH} ports")
        if any(not 0 <= p <= 0xFF for p in path):
            raise ValueError(f"USB path {path} holds a value outside 0..255")
        self.usbpath = path + (0,) * (MAX_USB_PATH - len(path))

    def id_string(self) -> str:
        """Manufacturer, product and serial joined as "manf, prod, serial"."""
        return f"{self.manufacturer}, {self.product}, {self.serial}"

    def same_identity(self, other: Dongle) -> bool:
        """True if both carry the same IDs and strings, wherever they are plugged in."""
        return (
            self.vid == other.vid
            and self.pid == other.pid
            and self.manufacturer == other.manufacturer
            and self.product == other.product
            and self.serial == other.serial
        )

    def _to_record(self) -> dict:
        return {
            "vid": self.vid,
            "pid": self.pid,
            "manufacturer": self.manufacturer,
            "product": self.product,
            "serial": self.serial,
            "usbpath": list(self.usbpath),
        }

    @classmethod
    def _from_record(cls, record: dict) -> Dongle:
        return cls(
            vid=int(record["vid"]),
            pid=int(record["pid"]),
            manufacturer=str(record.get("manufacturer", "")),
            product=str(record.get("product", "")),
            serial=str(record.get("serial", "")),
            usbpath=tuple(record.get("usbpath", ())),
        )


class DongleCatalog:
    """The ordered list of every dongle ever seen, including absent ones."""

    def __init__(self, dongles: Iterable[Dongle] = ()) -> None:
        self._dongles: list[Dongle] = [replace(d) for d in dongles]
        self.last_catalog = 0

    def __len__(self) -> int:
        return len(self._dongles)

    def __iter__(self) -> Iterator[Dongle]:
        return iter(self._dongles)

    # Persistence

    @classmethod
    def load(cls, path: str | Path) -> DongleCatalog:
        """Read a catalog file; a missing file gives an empty catalog."""
        path = Path(path)
        catalog = cls()
        if not path.exists():
            return catalog
        document = json.loads(path.read_text(encoding="utf-8"))
        for record in document.get("dongles", []):
            dongle = Dongle._from_record(record)
            # Guards against a damaged catalog.
            if dongle.pid != dongle.vid:
                catalog._dongles.append(dongle)
        last = document.get("last_catalog")
        catalog.last_catalog = max(int(last), 1) if isinstance(last, int) else 1
        return catalog

    def save(self, path: str | Path) -> None:
        """Write the catalog to a file."""
        document = {
            "last_catalog": self.last_catalog,
            "dongles": [d._to_record() for d in self._dongles],
        }
        Path(path).write_text(json.dumps(document, indent=2), encoding="utf-8")

    # Updating

    def merge(self, dongle: Dongle) -> int:
        """Fold a freshly seen dongle into the catalog; return its index."""
        for index, entry in enumerate(self._dongles):
            if not dongle.same_identity(entry):
                continue
            if dongle.duplicated and entry.usbpath != dongle.usbpath:
                continue
            entry.busy = dongle.busy
            entry.found = dongle.found
            if not dongle.duplicated:
                entry.usbpath = dongle.usbpath
            return index
        self._dongles.append(replace(dongle))
        return len(self._dongles) - 1

    # Lookup

    def find(self, dongle: Dongle, exact: bool = False) -> int | None:
        """Index of the entry matching IDs and strings, and the USB path if exact."""
        for index, entry in enumerate(self._dongles):
            if dongle.same_identity(entry) and (
                not exact or dongle.usbpath == entry.usbpath
            ):
                return index
        return None

    def find_guess(self, dongle: Dongle) -> int | None:
        """Index of the entry with the same vendor, product and USB path."""
        for index, entry in enumerate(self._dongles):
            if (
                dongle.vid == entry.vid
                and dongle.pid == entry.pid
                and dongle.usbpath == entry.usbpath
            ):
                return index
        return None

    def find_by_names(self, manufacturer: str, product: str, serial: str) -> int | None:
        """Index of the entry carrying these three strings."""
        for index, entry in enumerate(self._dongles):
            if (entry.manufacturer, entry.product, entry.serial) == (
                manufacturer,
                product,
                serial,
            ):
                return index
        return None

    def find_not_busy(self, dongle: Dongle) -> int | None:
        """Index of the entry matching a dongle whatever the entry's busy flag."""
        for index, entry in enumerate(self._dongles):
            if dongle.same_identity(replace(entry, busy=False)):
                return index
        return None

    def id_string(self, devindex: int) -> str | None:
        """Identification string of the dongle found as device devindex."""
        if not 0 <= devindex < len(self._dongles):
            return None
        for entry in self._dongles:
            if entry.found == devindex:
                return entry.id_string()
        return None

    def find_by_id_string(self, source: str) -> int | None:
        """Device index of the dongle named by a display or id string."""
        test = source[2:] if source.startswith("*") else source
        loc = test.find(PPM_MARKER)
        if loc > 0:
            test = test[:loc]
        for devindex, entry in enumerate(self._dongles):
            candidate = self.id_string(devindex) or ""
            loc = candidate.find(PPM_MARKER)
            if loc < 0 and candidate == test:
                return entry.found
            prefix = candidate[:loc] if loc >= 0 else ""
            if prefix == test:
                return entry.found
        return None

    def index_by_serial(self, serial: str) -> int:
        """Device index of the present dongle with a serial number."""
        if serial is None:
            raise ValueError("no serial number given")
        present = self.present()
        if not present:
            raise LookupError("no dongles are present")
        for entry in sorted(present, key=lambda d: d.found):
            if entry.serial == serial:
                return entry.found
        raise KeyError(serial)

    # Listing

    def present(self) -> list[Dongle]:
        """The dongles currently plugged in, in catalog order."""
        return [d for d in self._dongles if d.found >= 0]

    def display_names(self) -> list[str]:
        """Names of the present dongles for a selection list; busy ones marked."""
        names = []
        for d in self.present():
            if d.busy:
                names.append(f"{BUSY_PREFIX}{d.manufacturer},{d.product},sn {d.serial}")
            else:
                names.append(f"{d.manufacturer}, {d.product}, sn {d.serial}")
        return names

    def eeprom_image(self, index: int) -> bytes:
        """An EEPROM image holding the identity of a catalog entry."""
        entry = self._dongles[index]
        return build_eeprom_image(
            entry.vid, entry.pid, entry.manufacturer, entry.product, entry.serial
        )