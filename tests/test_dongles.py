import json

import pytest

from rtltuners.dongles import Dongle, DongleCatalog
from rtltuners.eeprom import parse_eeprom


def _dongle(serial="00000001", found=-1, busy=False, usbpath=(1, 2), **kw):
    return Dongle(
        vid=0x0BDA,
        pid=0x2838,
        manufacturer="Realtek",
        product="RTL2838UHIDIR",
        serial=serial,
        usbpath=usbpath,
        found=found,
        busy=busy,
        **kw,
    )


def test_usbpath_padded_and_validated():
    d = _dongle(usbpath=(3,))
    assert d.usbpath == (3, 0, 0, 0, 0, 0, 0)
    with pytest.raises(ValueError):
        _dongle(usbpath=(1,) * 8)
    with pytest.raises(ValueError):
        _dongle(usbpath=(256,))


def test_dongle_id_string():
    assert _dongle().id_string() == "Realtek, RTL2838UHIDIR, 00000001"


def test_same_identity_ignores_path_and_state():
    a = _dongle(usbpath=(1,), busy=True, found=2)
    b = _dongle(usbpath=(4,))
    assert a.same_identity(b)
    assert not a.same_identity(_dongle(serial="00000002"))


def test_merge_updates_existing_entry():
    catalog = DongleCatalog([_dongle(usbpath=(1,))])
    index = catalog.merge(_dongle(usbpath=(5,), found=0, busy=True))
    assert index == 0
    assert len(catalog) == 1
    entry = list(catalog)[0]
    assert entry.found == 0
    assert entry.busy is True
    assert entry.usbpath[0] == 5


def test_merge_duplicate_with_other_path_appends():
    catalog = DongleCatalog([_dongle(usbpath=(1,))])
    index = catalog.merge(_dongle(usbpath=(2,), duplicated=True))
    assert index == 1
    assert len(catalog) == 2


def test_merge_new_dongle_appends():
    catalog = DongleCatalog()
    assert catalog.merge(_dongle()) == 0
    assert catalog.merge(_dongle(serial="00000002")) == 1
    assert [d.serial for d in catalog] == ["00000001", "00000002"]


def test_find_exact_and_guess():
    catalog = DongleCatalog([_dongle(usbpath=(1,)), _dongle(serial="00000002", usbpath=(2,))])
    probe = _dongle(usbpath=(9,))
    assert catalog.find(probe, False) == 0
    assert catalog.find(probe, True) is None
    guess = _dongle(serial="unknown", usbpath=(2,))
    assert catalog.find_guess(guess) == 1
    assert catalog.find_guess(_dongle(usbpath=(7,))) is None


def test_find_by_names_and_not_busy():
    catalog = DongleCatalog([_dongle(busy=True), _dongle(serial="00000002")])
    assert catalog.find_by_names("Realtek", "RTL2838UHIDIR", "00000002") == 1
    assert catalog.find_by_names("Realtek", "RTL2838UHIDIR", "nope") is None
    assert catalog.find_not_busy(_dongle()) == 0


def test_id_string_by_device_index():
    catalog = DongleCatalog([_dongle(found=1), _dongle(serial="00000002", found=0)])
    assert catalog.id_string(0) == "Realtek, RTL2838UHIDIR, 00000002"
    assert catalog.id_string(5) is None


def test_find_by_id_string_strips_busy_marker():
    catalog = DongleCatalog([_dongle(found=0), _dongle(serial="00000002", found=1)])
    name = "Realtek, RTL2838UHIDIR, 00000002"
    assert catalog.find_by_id_string(name) == 1
    assert catalog.find_by_id_string("* " + name) == 1


def test_index_by_serial():
    catalog = DongleCatalog([_dongle(found=1), _dongle(serial="00000002", found=0)])
    assert catalog.index_by_serial("00000001") == 1
    with pytest.raises(KeyError):
        catalog.index_by_serial("missing")
    with pytest.raises(LookupError):
        DongleCatalog([_dongle()]).index_by_serial("00000001")


def test_present_and_display_names():
    catalog = DongleCatalog(
        [_dongle(found=0), _dongle(serial="00000002"), _dongle(serial="00000003", found=1, busy=True)]
    )
    assert [d.serial for d in catalog.present()] == ["00000001", "00000003"]
    assert catalog.display_names() == [
        "Realtek, RTL2838UHIDIR, sn 00000001",
        "* Realtek,RTL2838UHIDIR,sn 00000003",
    ]


def test_save_load_round_trip(tmp_path):
    path = tmp_path / "catalog.json"
    catalog = DongleCatalog([_dongle(usbpath=(1, 3)), _dongle(serial="00000002")])
    catalog.last_catalog = 42
    catalog.save(path)
    loaded = DongleCatalog.load(path)
    assert [(d.serial, d.usbpath) for d in loaded] == [(d.serial, d.usbpath) for d in catalog]
    assert loaded.last_catalog == 42


def test_load_skips_bad_entries_and_defaults(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"dongles": [{"vid": 5, "pid": 5}, {"vid": 1, "pid": 2}]}))
    loaded = DongleCatalog.load(path)
    assert len(loaded) == 1
    assert loaded.last_catalog == 1
    assert len(DongleCatalog.load(tmp_path / "missing.json")) == 0


def test_eeprom_image_round_trip():
    catalog = DongleCatalog([_dongle()])
    info = parse_eeprom(catalog.eeprom_image(0))
    assert (info.vid, info.pid) == (0x0BDA, 0x2838)
    assert (info.manufacturer, info.product, info.serial) == (
        "Realtek",
        "RTL2838UHIDIR",
        "00000001",
    )
    with pytest.raises(IndexError):
        catalog.eeprom_image(3)