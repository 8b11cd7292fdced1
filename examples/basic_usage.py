"""Basic usage examples for knowledge-clone."""

import asyncio
import os

from knowledge_clone import (
    ChatSession,
    ConfigProvider,
    DocumentIngestor,
    InMemorySettingsStore,
    OpenAICompletionClient,
    OpenAIEmbeddingClient,
    PineconeVectorStore,
    ResponseComposer,
    RetrievalConfig,
)


async def example_upload(config_provider: ConfigProvider, embeddings, vector_store) -> None:
    """Example: Uploading a document to the knowledge database."""
    print("\n=== Upload Example ===\n")

    ingestor = DocumentIngestor(config_provider, embeddings, vector_store)

    result = await ingestor.ingest(
        "Team Handbook.txt",
        b"Pricing is reviewed every quarter by the finance team.",
    )

    for notification in result.notifications:
        print(f"{notification.level}: {notification.message}")
    print(f"Document id: {result.document_id}")
    print(f"Knowledge sources: {config_provider.knowledge_sources()}")


async def example_chat(config_provider: ConfigProvider, embeddings, vector_store) -> None:
    """Example: Chatting with retrieval from the knowledge database."""
    print("\n=== Chat Example ===\n")

    completions = OpenAICompletionClient()
    composer = ResponseComposer(embeddings, vector_store, completions)
    session = ChatSession(config_provider, composer)

    print(f"Assistant: {session.transcript[0].display_content}")

    for prompt in ["How often is pricing reviewed?", "Who reviews it?"]:
        print(f"\nUser: {prompt}")
        result = await session.submit(prompt)
        for notification in result.notifications:
            print(f"({notification.level}) {notification.message}")
        print(f"Assistant: {result.turn.display_content}")
        if result.turn.is_summarized:
            print(f"Full answer: {session.expand(-1)}")

    print(f"\nCompletion requests: {completions.get_request_count()}")
    await completions.close()


async def example_short_answers(config_provider: ConfigProvider, embeddings, vector_store) -> None:
    """Example: Vector-only retrieval with short, summarized answers."""
    print("\n=== Short Answers Example ===\n")

    config_provider.save_retrieval_config(
        RetrievalConfig(vector_weight=100, result_length=80, summarize_threshold=40)
    )

    completions = OpenAICompletionClient()
    session = ChatSession(config_provider, ResponseComposer(embeddings, vector_store, completions))

    result = await session.submit("Summarize the team handbook.")
    print(f"Summarized: {result.turn.is_summarized}")
    print(f"Display: {result.turn.display_content}")
    await completions.close()


async def main() -> None:
    """Run all examples.

    Reads OPENAI_API_KEY and PINECONE_API_KEY from the environment and the
    Pinecone index host from PINECONE_INDEX_HOST.
    """
    config_provider = ConfigProvider(InMemorySettingsStore())
    embeddings = OpenAIEmbeddingClient()
    vector_store = PineconeVectorStore(base_url=os.getenv("PINECONE_INDEX_HOST"))

    try:
        await example_upload(config_provider, embeddings, vector_store)
        await example_chat(config_provider, embeddings, vector_store)
        await example_short_answers(config_provider, embeddings, vector_store)
    finally:
        await embeddings.close()
        await vector_store.close()


if __name__ == "__main__":
    asyncio.run(main())
