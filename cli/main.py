"""CLI entry point — Typer app for pagerag commands.

Usage:
    pagerag ingest report.pdf
    pagerag chunk report.pdf --parser local
    pagerag query "What does the revenue table show?"
    pagerag status
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from pagerag.errors import PageRagError

app = typer.Typer(
    name="pagerag",
    help="Page-aware RAG — ingest parsed documents, query with page citations.",
    no_args_is_help=True,
)

console = Console()

_DOC_PATH = typer.Argument(..., help="Path to the document")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Typed pipeline failures, plus a missing or unsupported input file
_INPUT_ERRORS = (PageRagError, FileNotFoundError, ValueError)


def _fail(exc: Exception) -> None:
    console.print(f"[bold red]{type(exc).__name__}:[/] {exc}")
    raise typer.Exit(code=1) from exc


@app.command()
def ingest(
    path: Annotated[Path, _DOC_PATH],
    parser: str | None = typer.Option(
        None, "--parser", "-p", help="Parser (llamaparse, local); defaults to settings",
    ),
) -> None:
    """Parse a document and store its chunks in the collection."""
    from pagerag.config import load_settings
    from pagerag.embeddings.factory import embedding_provider_from_settings
    from pagerag.pipeline.ingest import IngestPipeline

    settings = load_settings()
    emb = embedding_provider_from_settings(settings.embedding)
    store = _store(settings, emb.dimension)
    try:
        pipeline = IngestPipeline(
            embedding_provider=emb,
            vector_store=store,
            parser=_parser(settings, parser),
            assembler=_assembler(settings),
        )
        result = pipeline.ingest_file(path)
    except _INPUT_ERRORS as exc:
        _fail(exc)

    if settings.vectorstore.backend == "faiss":
        store.save(settings.vectorstore.path)

    console.print(f"\n[bold green]Ingested:[/] {path.name}")
    console.print(f"  Pages: {result.page_count}")
    console.print(f"  Chunks: {result.chunks_created}")
    console.print(f"  Stored: {result.chunks_stored}")
    console.print(f"  Tables: {result.tables_count}, Images: {result.images_count}")

    for w in result.warnings:
        console.print(f"  [yellow]Warning:[/] {w}")


@app.command()
def chunk(
    path: Annotated[Path, _DOC_PATH],
    parser: str | None = typer.Option(
        None, "--parser", "-p", help="Parser (llamaparse, local); defaults to settings",
    ),
    preview_chars: int = typer.Option(60, "--preview", help="Characters of text to show"),
) -> None:
    """Parse and chunk a document without storing it."""
    from pagerag.config import load_settings

    settings = load_settings()
    try:
        document = _parser(settings, parser).parse(path)
        chunks = _assembler(settings).assemble(
            document.markdown, document.pages, filename=document.source,
        )
    except _INPUT_ERRORS as exc:
        _fail(exc)

    table = Table(title=f"{path.name}: {len(chunks)} chunks")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Page", justify="right")
    table.add_column("Type")
    table.add_column("Chars", justify="right")
    table.add_column("Text")

    for c in chunks:
        page = f"~{c.metadata.page}" if c.metadata.page_estimated else str(c.metadata.page)
        snippet = c.text[:preview_chars].replace("\n", " ")
        table.add_row(
            str(c.chunk_index), page, str(c.metadata.content_type), str(len(c.text)), snippet,
        )

    console.print(table)


@app.command()
def query(
    question: str = typer.Argument(..., help="Question to ask"),
    top_k: int | None = typer.Option(
        None, "--top-k", "-k", help="Number of context chunks",
    ),
    filename: str | None = typer.Option(
        None, "--file", "-f", help="Restrict to one ingested document",
    ),
) -> None:
    """Ask a question and show the answer with page citations."""
    from pagerag.config import load_settings
    from pagerag.embeddings.factory import embedding_provider_from_settings
    from pagerag.llm.factory import llm_provider_from_settings
    from pagerag.pipeline.citations import format_citations
    from pagerag.pipeline.query import QueryPipeline
    from pagerag.pipeline.schemas import RAGQuery

    settings = load_settings()
    emb = embedding_provider_from_settings(settings.embedding)
    pipeline = QueryPipeline(
        embedding_provider=emb,
        vector_store=_store(settings, emb.dimension),
        llm_provider=llm_provider_from_settings(settings.llm),
    )

    rag_query = RAGQuery(
        question=question,
        top_k=top_k or settings.retrieval.top_k,
        filename=filename,
        min_score=settings.retrieval.min_score,
    )
    try:
        response = pipeline.query(rag_query)
    except PageRagError as exc:
        _fail(exc)

    console.print(f"\n[bold]Q:[/] {response.question}")
    console.print(f"\n[bold green]A:[/] {response.answer}")

    if response.citations:
        console.print(format_citations(response.citations))

    console.print(
        f"\n[dim]Model: {response.model} "
        f"| Context chunks: {response.sources_used} "
        f"| ~{response.tokens_used} tokens[/]",
    )


@app.command()
def status() -> None:
    """Show configured components and the collection size."""
    from pagerag import __version__
    from pagerag.config import load_settings
    from pagerag.documents.factory import available_parsers
    from pagerag.embeddings.factory import available_providers as emb_providers
    from pagerag.llm.factory import available_providers as llm_providers
    from pagerag.vectorstore.factory import available_stores

    settings = load_settings()
    console.print(f"\n[bold green]page-aware-rag[/] v{__version__}\n")

    table = Table(title="Available Components")
    table.add_column("Layer", style="cyan")
    table.add_column("Available")
    table.add_column("Configured")

    table.add_row("Parsers", ", ".join(available_parsers()), settings.parsing.provider)
    table.add_row("Embedding Providers", ", ".join(emb_providers()), settings.embedding.provider)
    table.add_row("Vector Stores", ", ".join(available_stores()), settings.vectorstore.backend)
    table.add_row("LLM Providers", ", ".join(llm_providers()), settings.llm.provider)
    console.print(table)

    try:
        count = _store(settings, settings.embedding.dimension).count()
    except PageRagError as exc:
        console.print(f"[red]Collection '{settings.vectorstore.collection}': {exc}[/]")
        return
    console.print(f"Collection '{settings.vectorstore.collection}': {count} chunks")


def _store(settings, dimension: int):
    from pagerag.vectorstore.factory import vector_store_from_settings

    try:
        return vector_store_from_settings(
            settings.vectorstore,
            dimension=dimension,
            default_score=settings.retrieval.default_score,
        )
    except PageRagError as exc:
        _fail(exc)


def _parser(settings, name: str | None):
    from pagerag.documents.factory import parser_from_settings

    parsing = settings.parsing
    if name:
        parsing = parsing.model_copy(update={"provider": name})
    return parser_from_settings(parsing)


def _assembler(settings):
    from pagerag.chunking.assembler import ChunkAssembler

    return ChunkAssembler(
        max_chars=settings.chunking.max_chars,
        chunks_per_page=settings.chunking.chunks_per_page,
        min_segment_chars=settings.chunking.min_segment_chars,
    )


if __name__ == "__main__":
    app()
