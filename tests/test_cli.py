"""Tests for the command-line front end."""

import json

import pytest

from knowledge_clone import cli
from knowledge_clone.core import AuthError, ServiceError
from knowledge_clone.pipeline import FALLBACK_ERROR_MESSAGE
from knowledge_clone.pipeline.composer import VECTOR_WARNING
from knowledge_clone.pipeline.ingest import UPLOAD_FAILED_MESSAGE


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    for env_var in ("OPENAI_API_KEY", "PINECONE_API_KEY", "ZAI_API_KEY", "KNOWLEDGE_CLONE_SETTINGS"):
        monkeypatch.delenv(env_var, raising=False)
    return tmp_path / "settings.json"


def test_settings_shows_defaults(settings_file, capsys):
    assert cli.main(["--settings", str(settings_file), "settings"]) == 0

    out = capsys.readouterr().out
    assert "Vector database:        75%" in out
    assert "Web search:             25% (stub)" in out
    assert "Result length:          200 words" in out
    assert not settings_file.exists()


def test_settings_saves_values(settings_file, capsys):
    code = cli.main(
        [
            "--settings",
            str(settings_file),
            "settings",
            "--vector-weight",
            "60",
            "--result-length",
            "120",
            "--web-search",
            "zai",
        ]
    )

    assert code == 0
    saved = json.loads(settings_file.read_text())
    assert saved["vectorPercentage"] == "60"
    assert saved["resultLength"] == "120"
    assert saved["summarizeThreshold"] == "500"
    assert saved["webSearchProvider"] == "zai"
    assert "Web search:             40% (zai)" in capsys.readouterr().out


@pytest.mark.parametrize(
    "args",
    [
        ["--vector-weight", "150"],
        ["--vector-weight", "abc"],
        ["--result-length", "0"],
        ["--top-k", "2.5"],
    ],
)
def test_settings_rejects_invalid_values(settings_file, capsys, args):
    assert cli.main(["--settings", str(settings_file), "settings", *args]) == 2

    assert "[error]" in capsys.readouterr().err
    assert not settings_file.exists()


def test_settings_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env-settings.json"
    monkeypatch.setenv("KNOWLEDGE_CLONE_SETTINGS", str(path))

    assert cli.main(["settings", "--top-k", "4"]) == 0

    assert json.loads(path.read_text())["topK"] == "4"


def test_keys_saves_and_clears(settings_file, capsys):
    assert cli.main(["--settings", str(settings_file), "keys", "--openai", "sk-user", "--zai", "zai-user"]) == 0

    saved = json.loads(settings_file.read_text())
    assert saved["openaiApiKey"] == "sk-user"
    assert saved["zaiApiKey"] == "zai-user"
    out = capsys.readouterr().out
    assert "embedding      configured" in out
    assert "vector-store   missing" in out
    assert "sk-user" not in out

    assert cli.main(["--settings", str(settings_file), "keys", "--openai", ""]) == 0
    assert "openaiApiKey" not in json.loads(settings_file.read_text())


def test_sources_empty(settings_file, capsys):
    assert cli.main(["--settings", str(settings_file), "sources"]) == 0

    assert "don't have any knowledge sources" in capsys.readouterr().out


def test_sources_lists_uploaded_files(settings_file, capsys):
    settings_file.write_text(json.dumps({"knowledgeSources": json.dumps(["a.txt", "b.md"])}))

    assert cli.main(["--settings", str(settings_file), "sources"]) == 0

    assert capsys.readouterr().out.splitlines() == ["a.txt", "b.md"]


def test_upload_missing_file(settings_file, tmp_path, capsys):
    code = cli.main(["--settings", str(settings_file), "upload", str(tmp_path / "missing.txt")])

    assert code == 1
    assert "Cannot read" in capsys.readouterr().err


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])


@pytest.fixture
def fake_clients(mocker, embedding_client, vector_store, completion_client):
    """Swap the network clients the CLI builds for in-memory fakes."""
    mocker.patch.object(cli, "OpenAIEmbeddingClient", return_value=embedding_client)
    mocker.patch.object(cli, "OpenAICompletionClient", return_value=completion_client)
    mocker.patch.object(cli, "_vector_store", return_value=vector_store)
    return embedding_client, vector_store, completion_client


def _write_settings(path, **values):
    settings = {"openaiApiKey": "sk-user", "pineconeApiKey": "pc-user"}
    settings.update(values)
    path.write_text(json.dumps(settings))


def test_chat_summarizes_and_expands(settings_file, fake_clients, mocker, capsys):
    _, _, completion_client = fake_clients
    completion_client.reply = "one two three four five six"
    _write_settings(settings_file, summarizeThreshold="4")
    mocker.patch("builtins.input", side_effect=["hi", ":more", ":quit"])

    assert cli.main(["--settings", str(settings_file), "chat"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("assistant> Hi there!")
    assert "assistant> one two..." in out
    assert "(Show more details: :more)" in out
    assert out[-1] == "assistant> one two three four five six"
    assert completion_client.requests[0]["credentials"].key == "sk-user"


def test_chat_prints_notifications(settings_file, fake_clients, mocker, capsys):
    _, vector_store, completion_client = fake_clients
    vector_store.error = ServiceError("boom", provider="pinecone", status_code=500)
    _write_settings(settings_file)
    mocker.patch("builtins.input", side_effect=["hi", ":more", EOFError()])

    assert cli.main(["--settings", str(settings_file), "chat"]) == 0

    captured = capsys.readouterr()
    assert f"[warning] {VECTOR_WARNING}" in captured.err
    assert f"assistant> {completion_client.reply}" in captured.out
    assert "Nothing to expand." in captured.out


def test_chat_shows_fallback_on_completion_failure(settings_file, fake_clients, mocker, capsys):
    _, _, completion_client = fake_clients
    completion_client.error = AuthError("Request rejected (401)", provider="openai")
    _write_settings(settings_file)
    mocker.patch("builtins.input", side_effect=["hi", "   ", ":q"])

    assert cli.main(["--settings", str(settings_file), "chat"]) == 0

    captured = capsys.readouterr()
    assert "[error]" in captured.err
    assert f"assistant> {FALLBACK_ERROR_MESSAGE}" in captured.out
    assert len(completion_client.requests) == 1


def test_upload_then_sources(settings_file, fake_clients, tmp_path, capsys):
    _, vector_store, _ = fake_clients
    _write_settings(settings_file)
    document = tmp_path / "Team Notes.txt"
    document.write_text("Pricing is reviewed every quarter.")

    assert cli.main(["--settings", str(settings_file), "upload", str(document)]) == 0

    assert "[ok] Successfully uploaded Team Notes.txt to the vector database" in capsys.readouterr().err
    assert vector_store.records["team-notes.txt"][0].content == "Pricing is reviewed every quarter."

    assert cli.main(["--settings", str(settings_file), "sources"]) == 0
    assert capsys.readouterr().out.splitlines() == ["Team Notes.txt"]


def test_upload_failure_exit_code(settings_file, fake_clients, tmp_path, capsys):
    _, vector_store, _ = fake_clients
    vector_store.error = AuthError("Request rejected (401)", provider="pinecone")
    _write_settings(settings_file)
    document = tmp_path / "notes.txt"
    document.write_text("text")

    assert cli.main(["--settings", str(settings_file), "upload", str(document)]) == 1

    assert f"[error] {UPLOAD_FAILED_MESSAGE}" in capsys.readouterr().err
    assert "knowledgeSources" not in json.loads(settings_file.read_text())
