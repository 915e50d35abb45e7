"""NBT codec and ``servers.dat`` persistence tests."""

from __future__ import annotations

import gzip
import struct
import tempfile
import unittest
from pathlib import Path

from prismtui.data import nbt
from prismtui.data.servers import load_servers, save_servers
from prismtui.data.types import Server
from prismtui.errors import DataLoadError


def _servers_payload(entries: list[dict[str, nbt.Tag]]) -> bytes:
    return nbt.encode({"servers": nbt.Tag(nbt.TAG_LIST, nbt.TagList(nbt.TAG_COMPOUND, entries))})


class NbtCodecTests(unittest.TestCase):
    def test_encode_writes_expected_bytes_for_small_compound(self) -> None:
        data = nbt.encode({"ip": nbt.string_tag("a")})
        expected = (
            b"\x0a\x00\x00"  # root compound, empty name
            + b"\x08\x00\x02ip\x00\x01a"
            + b"\x00"
        )
        self.assertEqual(data, expected)

    def test_decode_accepts_gzip_input_and_preserves_tag_kinds(self) -> None:
        entries = {
            "flag": nbt.Tag(nbt.TAG_BYTE, 1),
            "count": nbt.Tag(nbt.TAG_INT, -7),
            "stamp": nbt.Tag(nbt.TAG_LONG, 2**40),
            "scale": nbt.Tag(nbt.TAG_DOUBLE, 0.5),
            "ids": nbt.Tag(nbt.TAG_INT_ARRAY, [1, 2, 3]),
            "nested": nbt.compound_tag({"name": nbt.string_tag("x")}),
        }
        name, decoded = nbt.decode(gzip.compress(nbt.encode(entries, root_name="root")))

        self.assertEqual(name, "root")
        self.assertEqual(decoded, entries)

    def test_truncated_data_raises(self) -> None:
        data = nbt.encode({"ip": nbt.string_tag("example.org")})
        with self.assertRaises(nbt.NbtError):
            nbt.decode(data[:-4])

    def test_non_compound_root_raises(self) -> None:
        with self.assertRaises(nbt.NbtError):
            nbt.decode(b"\x08\x00\x00\x00\x01a")

    def test_excessive_nesting_raises(self) -> None:
        depth = nbt.MAX_DEPTH + 2
        body = b"".join(b"\x0a\x00\x01n" for _ in range(depth)) + b"\x00" * (depth + 1)
        with self.assertRaises(nbt.NbtError):
            nbt.decode(b"\x0a\x00\x00" + body)

    def test_empty_list_is_written_with_end_element_kind(self) -> None:
        data = nbt.encode({"servers": nbt.Tag(nbt.TAG_LIST, nbt.TagList(nbt.TAG_COMPOUND, []))})
        offset = 3 + 1 + 2 + len("servers")
        self.assertEqual(data[offset], nbt.TAG_END)
        self.assertEqual(struct.unpack(">i", data[offset + 1 : offset + 5])[0], 0)


class ServersFileTests(unittest.TestCase):
    def test_load_skips_entries_without_ip_and_defaults_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "servers.dat"
            path.write_bytes(
                _servers_payload(
                    [
                        {"name": nbt.string_tag("Hub"), "ip": nbt.string_tag("hub.example.org")},
                        {"name": nbt.string_tag("No address")},
                        {"ip": nbt.string_tag("10.0.0.2:25566")},
                    ]
                )
            )

            servers = load_servers(path)

        self.assertEqual(
            servers,
            [Server(name="Hub", ip="hub.example.org"), Server(name="Unknown", ip="10.0.0.2:25566")],
        )

    def test_save_keeps_extra_fields_and_creates_parent(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / ".minecraft" / "servers.dat"
            icon = nbt.string_tag("iVBORw0KGgo=")
            servers = [
                Server(name="Hub", ip="hub.example.org", extra={"icon": icon, "acceptTextures": nbt.Tag(nbt.TAG_BYTE, 1)}),
                Server(name="Local", ip="localhost"),
            ]

            save_servers(path, servers)
            loaded = load_servers(path)

        self.assertEqual([(s.name, s.ip) for s in loaded], [("Hub", "hub.example.org"), ("Local", "localhost")])
        self.assertEqual(loaded[0].extra["icon"], icon)
        self.assertEqual(loaded[0].extra["acceptTextures"], nbt.Tag(nbt.TAG_BYTE, 1))
        self.assertEqual(loaded[1].extra, {})

    def test_missing_file_is_empty_and_corrupt_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "servers.dat"
            self.assertEqual(load_servers(path), [])
            path.write_bytes(b"\x0a\x00")
            with self.assertRaises(DataLoadError):
                load_servers(path)


if __name__ == "__main__":
    unittest.main()
