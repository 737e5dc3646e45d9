"""Tests for CLI commands."""

import json

import httpx

import pytest
from typer.testing import CliRunner

from aicli import config as config_module
from aicli.ai import dispatch
from aicli.ai.base import Model
from aicli.cli.main import app, load_inputs
from aicli.cli.output import generate_envelope
from aicli.errors import InputError
from conftest import Recorder

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr("aicli.cli.main._setup_logging", lambda verbose=False: None)


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "generate" in result.output


class TestGenerate:
    def test_missing_api_key(self):
        result = runner.invoke(app, ["generate", "-p", "hello", "--provider", "openai"])
        assert result.exit_code == 1
        assert "API key required" in result.output

    def test_missing_api_key_json(self, monkeypatch):
        monkeypatch.setattr(config_module, "ENV_FILE_FOUND", True)
        result = runner.invoke(app, ["generate", "-p", "hello", "--json"])
        assert result.exit_code == 0
        envelope = json.loads(result.stdout)
        assert envelope["success"] is False
        assert "API key required" in envelope["error"]
        assert "content" not in envelope

    def test_image_on_text_only_provider(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "ds-key")
        image = tmp_path / "photo.png"
        image.write_bytes(b"\x89PNG")
        result = runner.invoke(
            app, ["generate", "-p", "describe", "-i", str(image), "--provider", "deepseek"]
        )
        assert result.exit_code == 1
        assert "does not support image analysis" in result.output

    def test_plain_output(self, monkeypatch):
        calls = {}

        def fake_generate(provider_name, inputs, **kwargs):
            calls["provider"] = provider_name
            calls["inputs"] = inputs
            calls.update(kwargs)
            return "hello"

        monkeypatch.setattr(dispatch, "generate", fake_generate)
        result = runner.invoke(
            app, ["generate", "-p", "hi", "--provider", "mistral", "-k", "mk", "-m", "m1", "--debug"]
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "hello"
        assert calls["provider"] == "mistral"
        assert calls["inputs"].prompt == "hi"
        assert calls["api_key"] == "mk"
        assert calls["model"] == "m1"
        assert calls["debug"] is True

    def test_json_output_with_env_warning(self, monkeypatch):
        monkeypatch.setattr(config_module, "ENV_FILE_FOUND", False)
        monkeypatch.setattr(dispatch, "generate", lambda *a, **k: "hello")
        result = runner.invoke(app, ["generate", "-p", "hi", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "success": True,
            "content": "hello",
            "warnings": ["No .env file found"],
        }

    def test_aliases(self, monkeypatch):
        monkeypatch.setattr(dispatch, "generate", lambda *a, **k: "aliased")
        for alias in ("gen", "ask"):
            result = runner.invoke(app, [alias, "-p", "hi"])
            assert result.exit_code == 0
            assert "aliased" in result.stdout

    def test_missing_prompt(self):
        result = runner.invoke(app, ["generate"])
        assert result.exit_code == 1
        assert "prompt is required" in result.output

    def test_undecodable_prompt_file_json(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "ENV_FILE_FOUND", True)
        prompt_file = tmp_path / "prompt.txt"
        prompt_file.write_bytes(b"\xff\xfe bad")
        result = runner.invoke(app, ["generate", "--prompt-file", str(prompt_file), "--json"])
        assert result.exit_code == 0
        envelope = json.loads(result.stdout)
        assert envelope["success"] is False
        assert "failed to read prompt file" in envelope["error"]

    def test_ctrl_c_during_request(self, monkeypatch):
        monkeypatch.setenv("MISTRAL_API_KEY", "mk-key")
        rec = Recorder(KeyboardInterrupt())
        real_generate = dispatch.generate

        def generate_with_transport(*args, **kwargs):
            return real_generate(*args, transport=httpx.MockTransport(rec), **kwargs)

        monkeypatch.setattr(dispatch, "generate", generate_with_transport)
        result = runner.invoke(app, ["generate", "-p", "hi", "--provider", "mistral"])
        assert result.exit_code == 130
        assert "Cancelled" in result.output
        assert rec.count == 1


class TestLoadInputs:
    def test_prompt_file_overrides_flag(self, tmp_path):
        prompt_file = tmp_path / "prompt.txt"
        prompt_file.write_text("from file", encoding="utf-8")
        inputs = load_inputs("from flag", prompt_file, [])
        assert inputs.prompt == "from file"
        assert inputs.images == ()

    def test_images_loaded_in_order(self, tmp_path):
        a = tmp_path / "a.png"
        b = tmp_path / "b.jpg"
        a.write_bytes(b"A")
        b.write_bytes(b"B")
        inputs = load_inputs("hi", None, [str(a), str(b)])
        assert [(i.filename, i.data) for i in inputs.images] == [("a.png", b"A"), ("b.jpg", b"B")]

    def test_missing_image(self, tmp_path):
        with pytest.raises(InputError, match="failed to read image"):
            load_inputs("hi", None, [str(tmp_path / "nope.png")])

    def test_prompt_file_not_utf8(self, tmp_path):
        prompt_file = tmp_path / "prompt.txt"
        prompt_file.write_bytes(b"\xff\xfe")
        with pytest.raises(InputError, match="failed to read prompt file"):
            load_inputs("", prompt_file, [])


class TestModels:
    def test_json_listing_and_errors(self, monkeypatch):
        listing = dispatch.ModelListing(
            models={"openai": [Model("gpt-4o", "gpt-4o (openai)", 4096, True)]},
            errors={"deepseek": "API key required for deepseek"},
        )
        seen = {}

        def fake_list(names=None, **kwargs):
            seen["names"] = names
            return listing

        monkeypatch.setattr(dispatch, "list_models", fake_list)
        result = runner.invoke(app, ["models", "--provider", "openai,deepseek", "--json"])
        assert result.exit_code == 0
        assert seen["names"] == ["openai", "deepseek"]
        assert json.loads(result.stdout) == {
            "openai": [{
                "id": "gpt-4o",
                "description": "gpt-4o (openai)",
                "context_window": 4096,
                "supports_vision": True,
            }]
        }

    def test_table_listing(self, monkeypatch):
        listing = dispatch.ModelListing(
            models={"mistral": [Model("mistral-large-latest", "Mistral model", 128000)]}
        )
        monkeypatch.setattr(dispatch, "list_models", lambda names=None, **k: listing)
        result = runner.invoke(app, ["models"])
        assert result.exit_code == 0
        assert "Mistral Models" in result.output
        assert "128,000" in result.output

    def test_all_failed(self, monkeypatch):
        listing = dispatch.ModelListing(errors={"openai": "boom"})
        monkeypatch.setattr(dispatch, "list_models", lambda names=None, **k: listing)
        result = runner.invoke(app, ["models"])
        assert result.exit_code == 1


def test_config_masks_keys(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-abcdef123456")
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "sk-a...3456" in result.output
    assert "sk-abcdef123456" not in result.output


def test_envelope_omits_empty_fields():
    assert generate_envelope(content="x") == {"success": True, "content": "x"}
    assert generate_envelope(error="bad", warnings=["w"]) == {
        "success": False,
        "error": "bad",
        "warnings": ["w"],
    }
