"""
Strapi Client: Query & Dynamic Zone Example.

This script demonstrates a complete read workflow against a Strapi v5 server
running the default "blog" template:
1. Describing a query (filters, population, sorting and pagination) with the
    fluent `StrapiRequest` builder and previewing the generated URL.
2. Registering a project-specific block type for the `blocks` dynamic zone.
3. Running the query and inspecting the decoded entries and their blocks.

Set `STRAPI_BASE_URL` (e.g. `http://localhost:1337/api`) and, for protected
collections, `STRAPI_API_KEY` before running it.
"""

import logging as log
import sys
from typing import List, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel

# Strapi Client Imports
from strapiclient import (
    BlockComponent,
    BlockList,
    ConfigurationError,
    Field,
    SortDirection,
    StrapiRequest,
    StrapiRestClient,
    TransportFailure,
    block_component,
    register_block,
)
from strapiclient.blocks import QuoteBlock, RichTextBlock, blocks_of_type, unknown_blocks

# Initialize Rich Console for terminal output
console = Console()


@block_component("shared.call-to-action")
class CallToActionBlock(BlockComponent):
    """A project-specific block not shipped with the client."""

    label: Optional[str] = None
    url: Optional[str] = None


class Author(BaseModel):
    name: str
    email: Optional[str] = None


class Article(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    slug: Optional[str] = None
    author: Optional[Author] = None
    blocks: BlockList = []


def build_request() -> StrapiRequest:
    """Latest articles written by one of two authors, with their blocks."""
    return (
        StrapiRequest.get("articles")
        .with_filter(Field("author.name").eq("Sarah Baker") | Field("author.name").eq("David Doe"))
        .with_populate_fields("author", "name", "email")
        .with_deep_populate("blocks")
        .with_sort("publishedAt", SortDirection.Descending)
        .with_page(1)
        .with_page_size(5)
    )


def run_example():
    # --- PHASE 1: Query description ---
    request = build_request()
    console.print(Panel("[bold green]Phase 1: Building the query[/bold green]"))
    console.print(f"• [bold]Readable query:[/bold] {request.to_query_string(encode=False)}")

    # --- PHASE 2: Block registration ---
    # Built-in `shared.*` blocks are already known; unknown tags decode as GenericBlock
    register_block("shared.call-to-action", CallToActionBlock)

    # --- PHASE 3: Execution ---
    console.print(Panel("[bold green]Phase 3: Querying the server[/bold green]"))
    try:
        client = StrapiRestClient.from_env()
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)

    with client:
        console.print(f"• [bold]Request URL:[/bold] {client.build_url(request)}")
        try:
            result = client.execute(request, List[Article])
        except TransportFailure as e:
            console.print(f"[bold red]Request Failed:[/bold red] {e}")
            sys.exit(1)

        if not result.is_success:
            console.print(f"[bold red]Error:[/bold red] {result.error_message}")
            return

        console.print(
            f"• [bold]Entries:[/bold] {len(result.data)} of {result.total_count} "
            f"(page {result.current_page}/{result.page_count})"
        )
        for article in result.data:
            author = article.author.name if article.author else "unknown"
            console.print(f"  - [bold]{article.title}[/bold] by {author}")
            for text in blocks_of_type(article.blocks, RichTextBlock):
                console.print(f"      rich text: {len(text.body or '')} chars")
            for quote in blocks_of_type(article.blocks, QuoteBlock):
                console.print(f"      quote: {quote.title}")
            for cta in blocks_of_type(article.blocks, CallToActionBlock):
                console.print(f"      call to action: {cta.label} -> {cta.url}")
            for block in unknown_blocks(article.blocks):
                console.print(f"      [yellow]unmapped block[/yellow] {block.component}")


if __name__ == "__main__":
    # Setup simple logging for background client processes
    log.basicConfig(level=log.INFO)
    run_example()
