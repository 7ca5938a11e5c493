"""
CLI Unit Tests
Tests for distributor_cli/main.py and its commands

Covers:
1. hash prints identifier hashes
2. generate writes artifacts that verify accepts
3. verify exit codes (0 ok, 1 unreadable, 2 failed checks)
4. config --init / --show
"""
import json

import pytest

from contracts.chain import make_address
from distributor.balances import parse_balance_map
from distributor.config import set_default_config
from distributor_cli.main import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, EXIT_VERIFICATION_FAILED, main
from fixtures.common import KNOWN_IDENTIFIER_HASHES, KNOWN_STRING_BALANCES


BALANCES = {make_address(f"cli{i}"): 10 + i for i in range(5)}


@pytest.fixture
def workdir(tmp_path, clean_env):
    """Empty working directory with no config file and no DISTRIBUTOR_* env."""
    clean_env.chdir(tmp_path)
    yield tmp_path
    set_default_config(None)


def _write(path, data):
    path.write_text(json.dumps(data))
    return str(path)


class TestHashCommand:
    """Tests for `distributor hash`."""

    def test_tab_separated(self, workdir, capsys):
        raw = "6ccbe73b-2166-4109-816a-193c9dde9a14"
        assert main(["hash", raw]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == f"{raw}\t{KNOWN_IDENTIFIER_HASHES[raw]}"

    def test_json(self, workdir, capsys):
        assert main(["hash", "--json", *KNOWN_IDENTIFIER_HASHES]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out) == KNOWN_IDENTIFIER_HASHES


class TestGenerateCommand:
    """Tests for `distributor generate`."""

    def test_stdout(self, workdir, capsys):
        source = _write(workdir / "balances.json", BALANCES)
        assert main(["generate", source]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out) == parse_balance_map(BALANCES).to_dict()

    def test_out_file(self, workdir, capsys):
        source = _write(workdir / "balances.json", BALANCES)
        out = workdir / "out" / "artifact.json"
        assert main(["generate", source, "--out", str(out)]) == EXIT_SUCCESS

        expected = parse_balance_map(BALANCES)
        assert json.loads(out.read_text()) == expected.to_dict()
        printed = capsys.readouterr().out
        assert f"merkle_root: {expected.merkle_root}" in printed
        assert f"token_total: {sum(BALANCES.values())}" in printed

    def test_string_kind_with_hash_keys(self, workdir, capsys):
        raw_balances = {raw: KNOWN_STRING_BALANCES[h] for raw, h in KNOWN_IDENTIFIER_HASHES.items()}
        source = _write(workdir / "raw.json", raw_balances)
        assert main(["generate", source, "--kind", "string", "--hash-keys"]) == EXIT_SUCCESS
        artifact = json.loads(capsys.readouterr().out)
        assert artifact["tokenTotal"] == "0x02ee"
        assert set(artifact["claims"]) == set(KNOWN_STRING_BALANCES)

    def test_hash_keys_requires_string_kind(self, workdir, capsys):
        source = _write(workdir / "balances.json", BALANCES)
        assert main(["generate", source, "--hash-keys"]) == EXIT_RUNTIME_ERROR
        assert "--hash-keys" in capsys.readouterr().err

    def test_kind_from_config_file(self, workdir, capsys):
        (workdir / "distributor.yaml").write_text("generator:\n  identifier_kind: string\n")
        source = _write(workdir / "hashed.json", KNOWN_STRING_BALANCES)
        assert main(["generate", source]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["tokenTotal"] == "0x02ee"

    def test_missing_input(self, workdir, capsys):
        assert main(["generate", "absent.json"]) == EXIT_RUNTIME_ERROR
        assert "Input not found" in capsys.readouterr().err

    def test_invalid_json(self, workdir, capsys):
        (workdir / "broken.json").write_text("{")
        assert main(["generate", "broken.json"]) == EXIT_RUNTIME_ERROR

    def test_invalid_balance(self, workdir, capsys):
        account = next(iter(BALANCES))
        source = _write(workdir / "balances.json", {account: 0})
        assert main(["generate", source]) == EXIT_RUNTIME_ERROR
        assert f"Invalid amount for target: {account}" in capsys.readouterr().err

    def test_no_artifact_on_error(self, workdir):
        source = _write(workdir / "balances.json", {})
        out = workdir / "artifact.json"
        assert main(["generate", source, "--out", str(out)]) == EXIT_RUNTIME_ERROR
        assert not out.exists()


class TestVerifyCommand:
    """Tests for `distributor verify`."""

    @pytest.fixture
    def artifact_path(self, workdir, capsys):
        source = _write(workdir / "balances.json", BALANCES)
        out = workdir / "artifact.json"
        main(["generate", source, "--out", str(out)])
        capsys.readouterr()
        return out

    def test_valid(self, artifact_path, capsys):
        assert main(["verify", str(artifact_path)]) == EXIT_SUCCESS
        assert "ok: true" in capsys.readouterr().out

    def test_json_report(self, artifact_path, capsys):
        assert main(["verify", str(artifact_path), "--json"]) == EXIT_SUCCESS
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is True
        assert report["claim_count"] == len(BALANCES)
        assert "errors" not in report

    def test_tampered(self, artifact_path, capsys):
        data = json.loads(artifact_path.read_text())
        first = next(iter(data["claims"]))
        data["claims"][first]["amount"] = "0x0100"
        artifact_path.write_text(json.dumps(data))

        assert main(["verify", str(artifact_path), "--json"]) == EXIT_VERIFICATION_FAILED
        report = json.loads(capsys.readouterr().out)
        assert report["ok"] is False
        assert report["errors"]

    def test_missing(self, workdir):
        assert main(["verify", "absent.json"]) == EXIT_RUNTIME_ERROR

    def test_malformed(self, workdir, capsys):
        (workdir / "bad.json").write_text(json.dumps({"merkleRoot": "0x12"}))
        assert main(["verify", "bad.json"]) == EXIT_RUNTIME_ERROR
        assert "Error loading artifact" in capsys.readouterr().err


class TestConfigCommand:
    """Tests for `distributor config`."""

    def test_init_then_show(self, workdir, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (workdir / "distributor.yaml").exists()
        capsys.readouterr()

        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["generator"]["identifier_kind"] == "address"

    def test_init_refuses_overwrite(self, workdir):
        (workdir / "distributor.yaml").write_text("")
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_show_env_override(self, workdir, clean_env, capsys):
        clean_env.setenv("DISTRIBUTOR_JSON_INDENT", "4")
        assert main(["config", "--show"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["generator"]["json_indent"] == 4

    def test_invalid_config_file(self, workdir, capsys):
        (workdir / "distributor.yaml").write_text("generator:\n  identifier_kind: email\n")
        assert main(["config", "--show"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err


class TestParser:
    """Tests for argument handling."""

    def test_no_command(self, workdir, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_unknown_kind_rejected(self, workdir):
        with pytest.raises(SystemExit):
            main(["generate", "x.json", "--kind", "email"])
