import tempfile
import unittest
from pathlib import Path

from crate_support.domain import Blacklist
from crate_support.errors import ConfigError
from pipeline.blacklist import load_blacklist, normalize_identifier, write_blacklist


class TestBlacklist(unittest.TestCase):
    def test_load_collapses_duplicates_and_ignores_order(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "global_blacklist.csv"
            p.write_text("b::two\na::one\nb::two\n\n", encoding="utf-8")

            bl = load_blacklist(p)

            self.assertEqual(2, len(bl))
            self.assertIn("a::one", bl)
            self.assertIn("b::two", bl)
            self.assertNotIn("c::three", bl)
            self.assertEqual(p, bl.source)

    def test_quoted_and_comment_lines(self) -> None:
        self.assertEqual("a::foo", normalize_identifier('"a::foo"\n'))
        self.assertEqual("a::foo", normalize_identifier("  a::foo  "))
        self.assertIsNone(normalize_identifier("# comment"))
        self.assertIsNone(normalize_identifier("   "))
        self.assertIsNone(normalize_identifier('""'))

    def test_missing_file_is_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_blacklist(Path(td) / "nope.csv")

    def test_directory_is_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_blacklist(Path(td))

    def test_write_is_sorted(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "sorted.csv"
            write_blacklist(out, Blacklist.of(["z::a", "a::z", "m::m"]))
            self.assertEqual("a::z\nm::m\nz::a\n", out.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
