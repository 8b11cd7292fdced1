"""Command-line front end: chat, upload, settings and API keys."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from knowledge_clone.config import ConfigProvider, JsonFileSettingsStore, parse_int_setting
from knowledge_clone.core import ConfigError, Notification, ProviderName, RetrievalConfig
from knowledge_clone.embeddings import OpenAIEmbeddingClient
from knowledge_clone.pipeline import ChatSession, DocumentIngestor, ResponseComposer
from knowledge_clone.providers import OpenAICompletionClient
from knowledge_clone.retrieval import PineconeVectorStore
from knowledge_clone.web_search import WebRetrieverFactory

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("~/.knowledge_clone/settings.json")
MORE_COMMAND = ":more"
QUIT_COMMANDS = {":quit", ":q", ":exit"}

_NOTIFICATION_PREFIX = {"success": "[ok]", "warning": "[warning]", "error": "[error]"}


def _print_notifications(notifications: list[Notification]) -> None:
    for notification in notifications:
        prefix = _NOTIFICATION_PREFIX.get(notification.level, "[info]")
        print(f"{prefix} {notification.message}", file=sys.stderr)


def _settings_path(args: argparse.Namespace) -> Path:
    if args.settings:
        return Path(args.settings)
    return Path(os.environ.get("KNOWLEDGE_CLONE_SETTINGS", str(DEFAULT_SETTINGS_PATH)))


def _vector_store() -> PineconeVectorStore:
    return PineconeVectorStore(base_url=os.environ.get("PINECONE_INDEX_HOST"))


async def run_chat(config_provider: ConfigProvider) -> int:
    vector_store = _vector_store()
    embedding_client = OpenAIEmbeddingClient()
    completion_client = OpenAICompletionClient()
    web_retrievers = WebRetrieverFactory()
    composer = ResponseComposer(embedding_client, vector_store, completion_client, web_retrievers)
    session = ChatSession(config_provider, composer)

    print(f"assistant> {session.transcript[0].display_content}")
    print(f"(type {MORE_COMMAND} to expand the last summarized answer, :quit to exit)")
    try:
        while True:
            try:
                prompt = input("you> ")
            except EOFError:
                break

            command = prompt.strip().lower()
            if command in QUIT_COMMANDS:
                break
            if command == MORE_COMMAND:
                index = session.last_summarized_index()
                if index is None:
                    print("Nothing to expand.")
                else:
                    print(f"assistant> {session.expand(index)}")
                continue

            result = await session.submit(prompt)
            if not result.accepted:
                continue
            _print_notifications(result.notifications)
            if result.turn is not None:
                print(f"assistant> {result.turn.display_content}")
                if result.turn.is_summarized:
                    print(f"(Show more details: {MORE_COMMAND})")
    finally:
        await embedding_client.close()
        await completion_client.close()
        await vector_store.close()
        await web_retrievers.close()
    return 0


async def run_upload(config_provider: ConfigProvider, files: list[str]) -> int:
    vector_store = _vector_store()
    embedding_client = OpenAIEmbeddingClient()
    ingestor = DocumentIngestor(config_provider, embedding_client, vector_store)

    failures = 0
    try:
        for file_name in files:
            path = Path(file_name)
            try:
                data = path.read_bytes()
            except OSError as e:
                print(f"[error] Cannot read {path}: {e}", file=sys.stderr)
                failures += 1
                continue
            result = await ingestor.ingest(path.name, data)
            _print_notifications(result.notifications)
            if not result.success:
                failures += 1
    finally:
        await embedding_client.close()
        await vector_store.close()
    return 1 if failures else 0


def run_settings(config_provider: ConfigProvider, args: argparse.Namespace) -> int:
    current = config_provider.retrieval_config()
    updates = {
        "vector_weight": ("vectorPercentage", args.vector_weight, 0, 100),
        "result_length": ("resultLength", args.result_length, 1, None),
        "summarize_threshold": ("summarizeThreshold", args.summarize_threshold, 1, None),
        "top_k": ("topK", args.top_k, 1, None),
    }

    values = current.model_dump(exclude={"web_weight"})
    changed = False
    try:
        for field, (key, raw, minimum, maximum) in updates.items():
            if raw is None:
                continue
            value = parse_int_setting(key, raw, values[field], strict=True)
            if value < minimum or (maximum is not None and value > maximum):
                raise ConfigError(key, raw)
            values[field] = value
            changed = True
        if args.web_search:
            config_provider.save_web_search_provider(args.web_search)
    except ConfigError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    if changed:
        config_provider.save_retrieval_config(RetrievalConfig(**values))
        print("[ok] Settings saved successfully", file=sys.stderr)

    config = config_provider.retrieval_config()
    print(f"Vector database:        {config.vector_weight}%")
    print(f"Web search:             {config.web_weight}% ({config_provider.web_search_provider()})")
    print(f"Result length:          {config.result_length} words")
    print(f"Summarize threshold:    {config.summarize_threshold} words")
    print(f"Results per query:      {config.top_k}")
    return 0


def run_keys(config_provider: ConfigProvider, args: argparse.Namespace) -> int:
    overrides = {
        ProviderName.EMBEDDING: args.openai,
        ProviderName.VECTOR_STORE: args.pinecone,
        ProviderName.WEB_SEARCH: args.zai,
    }
    saved = False
    for provider, key in overrides.items():
        if key is not None:
            config_provider.save_credentials(provider, key)
            saved = True
    if saved:
        print("[ok] API keys saved successfully", file=sys.stderr)

    for provider in ProviderName:
        status = "configured" if config_provider.resolve_credentials(provider) else "missing"
        print(f"{provider.value:<14} {status}")
    return 0


def run_sources(config_provider: ConfigProvider) -> int:
    sources = config_provider.knowledge_sources()
    if not sources:
        print("You don't have any knowledge sources yet. Upload files to see them here.")
        return 0
    for source in sources:
        print(source)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="knowledge-clone", description="Knowledge clone chat assistant")
    parser.add_argument("--settings", help="Path to the settings JSON file")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("chat", help="Chat with your knowledge clone")

    upload = subparsers.add_parser("upload", help="Upload files to the vector database")
    upload.add_argument("files", nargs="+")

    settings = subparsers.add_parser("settings", help="Show or change search settings")
    settings.add_argument("--vector-weight", help="Percentage of context from the vector database (0-100)")
    settings.add_argument("--result-length", help="Preferred answer length in words")
    settings.add_argument("--summarize-threshold", help="Summarize answers longer than this many words")
    settings.add_argument("--top-k", help="Number of vector matches per query")
    settings.add_argument("--web-search", choices=["stub", "zai"], help="Web search provider")

    keys = subparsers.add_parser("keys", help="Show or change API keys")
    keys.add_argument("--openai", help="OpenAI API key (empty string clears it)")
    keys.add_argument("--pinecone", help="Pinecone API key (empty string clears it)")
    keys.add_argument("--zai", help="z.ai API key (empty string clears it)")

    subparsers.add_parser("sources", help="List uploaded knowledge sources")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_provider = ConfigProvider(JsonFileSettingsStore(_settings_path(args)))

    if args.command == "chat":
        return asyncio.run(run_chat(config_provider))
    if args.command == "upload":
        return asyncio.run(run_upload(config_provider, args.files))
    if args.command == "settings":
        return run_settings(config_provider, args)
    if args.command == "keys":
        return run_keys(config_provider, args)
    return run_sources(config_provider)


if __name__ == "__main__":
    sys.exit(main())
