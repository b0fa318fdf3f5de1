"""
Module 05 - CLI Unit Tests
Tests for nmerkle_cli/main.py and its subcommands.

Every test runs in an empty working directory with NMERKLE_* variables
cleared so no local config file or environment leaks in.
"""
import hashlib
import json

import pytest

from fixtures import KNOWN_ROOTS
from nmerkle_cli.main import create_parser, main


DIGITS_8 = [str(i) for i in range(8)]
DIGITS_9 = [str(i) for i in range(9)]


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, clean_env):
    clean_env.chdir(tmp_path)
    return tmp_path


def run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_prints_help(self, capsys):
        code, out, _ = run(capsys)

        assert code == 1
        assert "usage" in out.lower()

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "nmerkle" in capsys.readouterr().out

    def test_tree_options(self):
        args = create_parser().parse_args(
            ["root", "a", "b", "--arity", "2", "--hash", "md5", "--hex", "--json"]
        )

        assert args.leaves == ["a", "b"]
        assert args.arity == 2
        assert args.hash_algorithm == "md5"
        assert args.hex and args.json


class TestRootCommand:
    """Tests for `nmerkle root`."""

    @pytest.mark.parametrize("hash_name", ["sha256", "md5", "blake2b-224"])
    def test_binary_root(self, capsys, hash_name):
        code, out, _ = run(capsys, "root", *DIGITS_8, "--hash", hash_name)

        assert code == 0
        assert out.strip() == KNOWN_ROOTS[(2, 8)][hash_name]

    def test_ternary_root(self, capsys):
        code, out, _ = run(capsys, "root", *DIGITS_9, "--arity", "3")

        assert code == 0
        assert out.strip() == KNOWN_ROOTS[(3, 9)]["sha256"]

    def test_json_summary(self, capsys):
        code, out, _ = run(capsys, "root", *DIGITS_9, "-a", "3", "--json")
        data = json.loads(out)

        assert code == 0
        assert data == {
            "hash_algorithm": "sha256",
            "arity": 3,
            "leaf_count": 9,
            "row_count": 3,
            "node_count": 13,
            "root": KNOWN_ROOTS[(3, 9)]["sha256"],
        }

    def test_hex_leaves(self, capsys):
        code, out, _ = run(capsys, "root", "--hex", "0x00", "01")

        expected = hashlib.sha256(
            hashlib.sha256(b"\x00").digest() + hashlib.sha256(b"\x01").digest()
        ).hexdigest()
        assert code == 0
        assert out.strip() == expected

    def test_leaves_from_file(self, capsys, isolated_cwd):
        (isolated_cwd / "leaves.txt").write_text("\n".join(DIGITS_8[4:]) + "\n")

        code, out, _ = run(capsys, "root", *DIGITS_8[:4], "--file", "leaves.txt")

        assert code == 0
        assert out.strip() == KNOWN_ROOTS[(2, 8)]["sha256"]

    def test_invalid_leaf_count(self, capsys):
        code, out, err = run(capsys, "root", "0", "1", "2")

        assert code == 1
        assert out == ""
        assert "Error:" in err

    def test_unknown_hash(self, capsys):
        code, _, err = run(capsys, "root", "0", "1", "--hash", "sha1024")

        assert code == 1
        assert "sha1024" in err

    def test_env_default_arity(self, capsys, clean_env):
        clean_env.setenv("NMERKLE_ARITY", "3")

        code, out, _ = run(capsys, "root", *DIGITS_9)

        assert code == 0
        assert out.strip() == KNOWN_ROOTS[(3, 9)]["sha256"]

    def test_config_file_hash(self, capsys, isolated_cwd):
        (isolated_cwd / "nmerkle.json").write_text('{"tree": {"hash_algorithm": "md5"}}')

        code, out, _ = run(capsys, "root", *DIGITS_8)

        assert code == 0
        assert out.strip() == KNOWN_ROOTS[(2, 8)]["md5"]

    def test_missing_explicit_config(self, capsys):
        code, _, err = run(capsys, "--config", "absent.json", "root", *DIGITS_8)

        assert code == 1
        assert "Error loading configuration" in err


class TestInspectCommand:
    """Tests for `nmerkle inspect`."""

    def test_render(self, capsys):
        code, out, _ = run(capsys, "inspect", "a", "b", "c", "d")
        lines = out.strip().splitlines()

        assert code == 0
        assert lines[0] == "hash=sha256 arity=2 leaves=4 rows=3 nodes=7"
        assert len(lines) == 8
        assert lines[1].endswith("--- leaf")
        assert "<-- (4, " in lines[-1]

    def test_json_rows(self, capsys):
        code, out, _ = run(capsys, "inspect", *DIGITS_9, "--arity", "3", "--json")
        data = json.loads(out)

        assert code == 0
        assert [len(row) for row in data["rows"]] == [9, 3, 1]
        assert data["rows"][-1] == [data["root"]]


class TestProveCommand:
    """Tests for `nmerkle prove`."""

    def test_path(self, capsys):
        code, out, _ = run(capsys, "prove", "3", *DIGITS_8)
        lines = out.strip().splitlines()

        assert code == 0
        assert len(lines) == 4
        assert lines[0] == hashlib.sha256(b"3").hexdigest()
        assert lines[-1] == KNOWN_ROOTS[(2, 8)]["sha256"]

    def test_path_json(self, capsys):
        code, out, _ = run(capsys, "prove", "0", *DIGITS_9, "-a", "3", "--json")
        data = json.loads(out)

        assert code == 0
        assert data["leaf_index"] == 0
        assert len(data["path"]) == 3

    def test_detached_json(self, capsys):
        code, out, _ = run(capsys, "prove", "7", *DIGITS_9, "-a", "3", "--detached", "--json")
        data = json.loads(out)

        assert code == 0
        assert data["arity"] == 3
        assert data["leaf_count"] == 9
        assert [step["position"] for step in data["steps"]] == [1, 2]
        assert all(len(step["siblings"]) == 2 for step in data["steps"])
        assert data["root"] == KNOWN_ROOTS[(3, 9)]["sha256"]

    def test_detached_text(self, capsys):
        code, out, _ = run(capsys, "prove", "0", *DIGITS_8, "--detached")

        assert code == 0
        assert out.startswith("leaf 0 (arity 2), root ")
        assert "row 2: position=0" in out

    def test_index_out_of_range(self, capsys):
        code, _, err = run(capsys, "prove", "8", *DIGITS_8)

        assert code == 1
        assert "Error:" in err


class TestValidateCommand:
    """Tests for `nmerkle validate`."""

    def test_valid(self, capsys):
        code, out, _ = run(capsys, "validate", "0", "0", *DIGITS_8)

        assert code == 0
        assert out.startswith("VALID: leaf 0 (path proof)")

    def test_wrong_leaf_value(self, capsys):
        code, out, _ = run(capsys, "validate", "0", "1", *DIGITS_8)

        assert code == 2
        assert out.startswith("INVALID: leaf 0")
        assert "[FAIL] leaf_hash_matches" in out
        assert "leaf_index_in_range" not in out

    def test_data_not_in_tree(self, capsys):
        code, _, _ = run(capsys, "validate", "0", "message", *DIGITS_9, "-a", "3")

        assert code == 2

    @pytest.mark.parametrize("claim,expected", [("5", 0), ("4", 2)])
    def test_detached(self, capsys, claim, expected):
        code, out, _ = run(capsys, "validate", "5", claim, *DIGITS_8, "--detached")

        assert code == expected
        assert "(detached proof)" in out

    def test_json_checks(self, capsys):
        code, out, _ = run(capsys, "validate", "2", "9", *DIGITS_8, "--json")
        data = json.loads(out)

        assert code == 2
        assert data["valid"] is False
        assert data["mode"] == "path"
        failed = [c["check_id"] for c in data["checks"] if not c["ok"]]
        assert failed == ["leaf_hash_matches"]

    def test_out_of_range_reports_failure(self, capsys):
        code, out, _ = run(capsys, "validate", "12", "0", *DIGITS_8)

        assert code == 2
        assert out.startswith("INVALID: leaf 12")

    def test_hex_claim(self, capsys):
        code, _, _ = run(capsys, "validate", "1", "0xbb", "aa", "bb", "--hex")

        assert code == 0


class TestHashesCommand:
    """Tests for `nmerkle hashes`."""

    def test_text(self, capsys):
        code, out, _ = run(capsys, "hashes")

        assert code == 0
        assert "  - sha256 (32 bytes)" in out.splitlines()
        assert "  - blake2b-224 (28 bytes)" in out.splitlines()

    def test_json(self, capsys):
        code, out, _ = run(capsys, "hashes", "--json")
        data = {entry["name"]: entry["digest_size"] for entry in json.loads(out)}

        assert code == 0
        assert data["md5"] == 16
        assert data["sha512"] == 64


class TestConfigCommand:
    """Tests for `nmerkle config`."""

    def test_init_creates_file(self, capsys, isolated_cwd):
        code, out, _ = run(capsys, "config", "--init")

        assert code == 0
        assert (isolated_cwd / "nmerkle.json").exists()
        assert "Created configuration file" in out

    def test_init_refuses_overwrite(self, capsys, isolated_cwd):
        (isolated_cwd / "nmerkle.json").write_text("{}")

        code, _, err = run(capsys, "config", "--init")

        assert code == 1
        assert "already exists" in err

    def test_show(self, capsys, clean_env):
        clean_env.setenv("NMERKLE_HASH_ALGORITHM", "sha3-512")

        code, out, _ = run(capsys, "config", "--show")
        data = json.loads(out)

        assert code == 0
        assert data["tree"]["hash_algorithm"] == "sha3-512"
        assert data["tree"]["arity"] == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
