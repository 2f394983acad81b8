"""
CLI Unit Tests
Tests for smt_cli (argument parsing, commands, exit codes)
"""
import json

import pytest

from smt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from smt_cli.main import create_parser, main

from fixtures.common import SAMPLE_LEAVES, write_leaf_file


SAMPLE_DEPTH2_ROOT = "0x63b837bc262a357e26206290926736b07ad45ddc1e15b5a7e0092b708c093104"
SAMPLE_DEPTH3_PROOF_0 = (
    "0x0000000000000002"
    "1b6d2a8dca8d96e6dfa28a826037521bb587d3cb435c44c90139e87a7a4fa164"
)


@pytest.fixture
def cli_env(tmp_path, clean_env):
    """Run the CLI from an empty directory with no user config."""
    clean_env.chdir(tmp_path)
    clean_env.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def leaf_file(cli_env):
    return write_leaf_file(cli_env / "leaves.json", SAMPLE_LEAVES)


class TestParser:
    """Tests for argument parsing."""

    def test_no_command(self, cli_env, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_prove_arguments(self):
        args = create_parser().parse_args(["prove", "leaves.json", "5", "--depth", "3"])
        assert args.leaves == "leaves.json"
        assert args.index == 5
        assert args.depth == 3

    def test_leaf_and_empty_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["verify", "l.json", "0", "0x00", "--leaf", "0x00", "--empty"])


class TestRootCommand:
    """Tests for `smt root`."""

    def test_root_human(self, leaf_file, capsys):
        assert main(["root", str(leaf_file), "--depth", "2"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert f"root: {SAMPLE_DEPTH2_ROOT}" in out
        assert "leaves: 2" in out

    def test_root_json(self, leaf_file, capsys):
        assert main(["root", str(leaf_file), "--depth", "2", "--json"]) == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary == {
            "root": SAMPLE_DEPTH2_ROOT,
            "depth": 2,
            "hash_algorithm": "sha256",
            "leaves": 2,
        }

    def test_depth_from_leaf_file(self, cli_env, capsys):
        path = write_leaf_file(cli_env / "leaves.json", SAMPLE_LEAVES, depth=2)
        assert main(["root", str(path), "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["root"] == SAMPLE_DEPTH2_ROOT

    def test_depth_from_environment(self, leaf_file, clean_env, capsys):
        clean_env.setenv("SMT_DEPTH", "2")
        assert main(["root", str(leaf_file), "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["depth"] == 2

    def test_depth_from_config_file(self, leaf_file, cli_env, capsys):
        config_path = cli_env / "custom.yaml"
        config_path.write_text("tree:\n  depth: 2\n")
        assert main(["--config", str(config_path), "root", str(leaf_file), "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["root"] == SAMPLE_DEPTH2_ROOT

    def test_index_out_of_range(self, leaf_file, capsys):
        assert main(["root", str(leaf_file), "--depth", "1"]) == EXIT_RUNTIME_ERROR
        assert "too large leaf index" in capsys.readouterr().err

    def test_error_as_json(self, leaf_file, capsys):
        assert main(["root", str(leaf_file), "--depth", "65", "--json"]) == EXIT_RUNTIME_ERROR
        error = json.loads(capsys.readouterr().out)
        assert error["code"] == "TOO_LARGE_TREE_DEPTH"
        assert error["details"] == {"depth": 65, "depth_max": 64}

    def test_missing_leaf_file(self, cli_env, capsys):
        assert main(["root", str(cli_env / "missing.json")]) == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_missing_config_file(self, leaf_file, cli_env, capsys):
        assert main(["--config", str(cli_env / "none.yaml"), "root", str(leaf_file)]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err


class TestProveCommand:
    """Tests for `smt prove`."""

    def test_reference_proof(self, leaf_file, capsys):
        assert main(["prove", str(leaf_file), "0", "--depth", "3"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == SAMPLE_DEPTH3_PROOF_0

    def test_json_summary(self, leaf_file, capsys):
        assert main(["prove", str(leaf_file), "5", "--depth", "3", "--json"]) == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["inclusion"] is False
        assert summary["head"] == 0b100
        assert summary["siblings"] == 1
        assert summary["size"] == 8 + 32

    def test_write_to_file(self, leaf_file, cli_env, capsys):
        out = cli_env / "proof.hex"
        assert main(["prove", str(leaf_file), "0", "--depth", "3", "--out", str(out)]) == EXIT_SUCCESS
        assert out.read_text().strip() == SAMPLE_DEPTH3_PROOF_0

    def test_index_at_limit(self, leaf_file, capsys):
        assert main(["prove", str(leaf_file), "8", "--depth", "3"]) == EXIT_RUNTIME_ERROR


class TestVerifyCommand:
    """Tests for `smt verify`."""

    def test_valid_proof(self, leaf_file, capsys):
        code = main(["verify", str(leaf_file), "0", SAMPLE_DEPTH3_PROOF_0, "--depth", "3"])
        assert code == EXIT_SUCCESS
        assert "valid: true" in capsys.readouterr().out

    def test_tampered_proof(self, leaf_file, capsys):
        tampered = SAMPLE_DEPTH3_PROOF_0[:-2] + "00"
        code = main(["verify", str(leaf_file), "0", tampered, "--depth", "3", "--json"])
        assert code == EXIT_VERIFICATION_FAILED
        result = json.loads(capsys.readouterr().out)
        assert result["valid"] is False
        assert result["mode"] == "tree"

    def test_proof_from_file(self, leaf_file, cli_env, capsys):
        proof_path = cli_env / "proof.hex"
        proof_path.write_text(SAMPLE_DEPTH3_PROOF_0 + "\n")
        code = main(["verify", str(leaf_file), "0", f"@{proof_path}", "--depth", "3"])
        assert code == EXIT_SUCCESS

    def test_claimed_leaf(self, leaf_file, capsys):
        code = main([
            "verify", str(leaf_file), "0", SAMPLE_DEPTH3_PROOF_0,
            "--depth", "3", "--leaf", "0x0000000000000000", "--json",
        ])
        assert code == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["mode"] == "claimed-leaf"

    def test_wrong_claimed_leaf(self, leaf_file, capsys):
        code = main([
            "verify", str(leaf_file), "0", SAMPLE_DEPTH3_PROOF_0,
            "--depth", "3", "--leaf", "0x01",
        ])
        assert code == EXIT_VERIFICATION_FAILED

    def test_empty_claim(self, leaf_file, capsys):
        main(["prove", str(leaf_file), "6", "--depth", "3", "--out", "p.hex"])
        capsys.readouterr()
        code = main(["verify", str(leaf_file), "6", "@p.hex", "--depth", "3", "--empty"])
        assert code == EXIT_SUCCESS

    def test_oversized_proof(self, leaf_file, capsys):
        proof = "0x" + "00" * (8 + 32 * 4)
        code = main(["verify", str(leaf_file), "0", proof, "--depth", "3", "--json"])
        assert code == EXIT_RUNTIME_ERROR
        assert json.loads(capsys.readouterr().out)["code"] == "TOO_LARGE_PROOF_SIZE"

    def test_bad_hex(self, leaf_file, capsys):
        code = main(["verify", str(leaf_file), "0", "zz", "--depth", "3"])
        assert code == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """Tests for `smt config`."""

    def test_init_creates_template(self, cli_env, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (cli_env / "smt.yaml").exists()

    def test_init_refuses_overwrite(self, cli_env, capsys):
        (cli_env / "smt.yaml").write_text("tree:\n  depth: 3\n")
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_show_picks_up_default_file(self, cli_env, capsys):
        (cli_env / "smt.yaml").write_text("tree:\n  depth: 9\n")
        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["tree"]["depth"] == 9

    def test_template_is_loadable(self, cli_env, capsys):
        main(["config", "--init"])
        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["tree"] == {
            "hash_algorithm": "sha256",
            "depth": 64,
        }
