"""Query pipeline — question → retrieve → LLM → page citations."""

from __future__ import annotations

import logging

from pagerag.embeddings.base import EmbeddingProvider
from pagerag.llm.base import LLMProvider
from pagerag.pipeline.citations import resolve_citation_pages
from pagerag.pipeline.prompts import NO_CONTEXT_ANSWER, RAG_SYSTEM_PROMPT, build_rag_prompt
from pagerag.pipeline.schemas import RAGQuery, RAGResponse
from pagerag.retrieval.retriever import Retriever
from pagerag.retrieval.schemas import RetrievalConfig
from pagerag.vectorstore.base import VectorStore
from pagerag.vectorstore.schemas import MetadataFilter

logger = logging.getLogger(__name__)

# Rough chars-per-token ratio for usage reporting
_CHARS_PER_TOKEN = 4


class QueryPipeline:
    """Orchestrates question → retrieve → generate → cite."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        llm_provider: LLMProvider,
        system_prompt: str = RAG_SYSTEM_PROMPT,
    ):
        self.retriever = Retriever(
            embedding_provider=embedding_provider,
            vector_store=vector_store,
        )
        self.llm_provider = llm_provider
        self.system_prompt = system_prompt

    def query(self, rag_query: RAGQuery) -> RAGResponse:
        """Run a full query: retrieve → prompt → generate → cite.

        Args:
            rag_query: The question with optional filters.

        Returns:
            A ``RAGResponse`` whose citations are the pages of the chunks
            sent to the model.

        Raises:
            EmbeddingError: The question could not be embedded.
            VectorStoreError: The similarity search failed.
            GenerationError: The model call failed.
        """
        mf = None
        if rag_query.filename or rag_query.content_type:
            mf = MetadataFilter(
                filename=rag_query.filename,
                content_type=rag_query.content_type,
            )

        retrieval_result = self.retriever.retrieve(
            rag_query.question,
            config=RetrievalConfig(
                top_k=rag_query.top_k,
                metadata_filter=mf,
                min_score=rag_query.min_score,
            ),
        )
        results = retrieval_result.results
        model = getattr(self.llm_provider, "model", "unknown")

        if not results:
            return RAGResponse(
                question=rag_query.question,
                answer=NO_CONTEXT_ANSWER,
                model=model,
            )

        prompt = build_rag_prompt(rag_query.question, results)
        answer = self.llm_provider.generate(prompt, system=self.system_prompt)

        citations = resolve_citation_pages(results)
        logger.info(
            "Query answered from %d chunks; citing pages %s",
            len(results),
            ", ".join(str(p) for p in citations) or "none",
        )

        return RAGResponse(
            question=rag_query.question,
            answer=answer,
            citations=citations,
            context_texts=[r.text for r in results],
            model=model,
            sources_used=len(results),
            contained_tables=any(r.metadata.has_table for r in results),
            contained_images=any(r.metadata.has_image for r in results),
            tokens_used=(len(prompt) + len(answer)) // _CHARS_PER_TOKEN,
        )

    def query_simple(self, question: str, **kwargs) -> RAGResponse:
        """Convenience method for simple queries.

        Args:
            question: The question string.
            **kwargs: Additional fields for ``RAGQuery``.
        """
        return self.query(RAGQuery(question=question, **kwargs))
