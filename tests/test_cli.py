"""CLI tests. Nothing here reaches the network."""

import json

from tokerz import __version__
from tokerz.__main__ import main

ANTHROPIC_KEY = "sk-ant-" + "Abc123xyz0" * 4


class TestClassifyCommand:
    def test_json(self, capsys):
        assert main(["--classify", ANTHROPIC_KEY, "--json"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["format"]["is_valid"]
        assert out["detection"]["provider"] == "claude-3-5-sonnet"
        assert out["explanation"].startswith("High confidence")

    def test_table_hides_key(self, capsys):
        assert main(["--classify", ANTHROPIC_KEY]) == 0
        assert ANTHROPIC_KEY not in capsys.readouterr().out

    def test_unknown_key_exit_code(self, capsys):
        assert main(["--classify", "not-a-known-key-format", "--json"]) == 1

    def test_output_file(self, tmp_path, capsys):
        path = tmp_path / "classified.json"
        assert main(["--classify", ANTHROPIC_KEY, "--output", str(path), "--force-insecure-output", "-q"]) == 0
        assert json.loads(path.read_text())["detection"]["suggestions"][0] == "claude-3-5-sonnet"


class TestCatalogCommands:
    def test_list_providers_json(self, capsys):
        assert main(["--list-providers", "--json"]) == 0
        ids = {p["id"] for p in json.loads(capsys.readouterr().out)}
        assert {"deepseek-r1", "elevenlabs-v2", "openai"} <= ids

    def test_list_by_category(self, capsys):
        assert main(["--list-providers", "--category", "audio", "--json"]) == 0
        rows = json.loads(capsys.readouterr().out)
        assert rows and all(p["category"] == "audio" for p in rows)

    def test_list_table(self, capsys):
        assert main(["--list-providers"]) == 0
        assert capsys.readouterr().out.strip()

    def test_cost(self, capsys):
        argv = ["--cost", "deepseek-r1", "--input-tokens", "1000000", "--output-tokens", "500000", "--json"]
        assert main(argv) == 0
        out = json.loads(capsys.readouterr().out)
        assert out["provider"] == "deepseek-r1"
        assert out["cost_usd"] == 0.28

    def test_cost_unknown_provider(self, capsys):
        assert main(["--cost", "nope-9000"]) == 2


class TestLookupCommands:
    def test_invalid_key(self, capsys):
        assert main(["--balance", "your-api-key-here"]) == 1

    def test_usage_billed_vendor_answers_offline(self, capsys):
        assert main(["--balance", "sk-" + "Q" * 40, "--vendor", "openai", "--json"]) == 1
        out = json.loads(capsys.readouterr().out)
        assert "usage-based billing" in out["error"]
        assert out["key"] == "sk-Q...QQQQ"

    def test_env_without_balance_keys(self, tmp_path, capsys):
        env = tmp_path / ".env"
        env.write_text(f"ANTHROPIC_API_KEY={ANTHROPIC_KEY}\nPLACEHOLDER=your-api-key-here\nEMPTY=\n")
        assert main(["--env", str(env)]) == 0
        assert "No keys with a balance API found" in capsys.readouterr().out

    def test_env_missing_file(self, tmp_path, capsys):
        assert main(["--env", str(tmp_path / "missing.env")]) == 2


class TestMisc:
    def test_version(self, capsys):
        assert main(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_nothing_to_do(self, capsys):
        assert main([]) == 2
