"""First-run sample prompts."""

from __future__ import annotations

import logging
import textwrap

from promptshelf.documents import DocumentStore
from promptshelf.index import IndexRepository
from promptshelf.state.models import Document, PromptIndex

LOGGER = logging.getLogger(__name__)

_SUMMARIZE = textwrap.dedent(
    """\
    # Task

    Transform the provided content into a structured summary. Extract and organize
    key information while keeping the document's original terminology and structure.

    # Instructions

    1. **Main Ideas** (typically 3-8 points): list the primary concepts or arguments.
    2. **Key Points** (typically 3-8 points): supporting details tied to a main idea.
    3. **Quotes** (3-8 most relevant): exact passages that define key concepts,
       contain critical instructions or warnings, or carry unique insights.
    4. **Stated Facts**: explicit factual claims, keeping process steps in order.
    5. **Document Metadata** (if present): type, systems mentioned, roles referenced.
    6. **Relationships** (if applicable): interacting systems, prerequisites,
       cause-and-effect statements.

    # Output Guidelines

    - Use numbered or bulleted lists and label every section.
    - Preserve technical terms, file paths, and error messages exactly as written.
    - Do not include information that is not explicitly stated in the text.
    - Omit any section for which no relevant content exists.
    """
)

_MARKOV = "Create a full Markov Chain state graph to find any possible flaws in this"

_CRITICAL_THINKING = textwrap.dedent(
    """\
    # Critical Thinking

    Think of 3 alternative ways this could have been solved:

        - [Alternative approach 1]
        - [Alternative approach 2]
        - [Alternative approach 3]

    Come up with 3 different ideas or perspectives:

        - [Idea or perspective 1]
        - [Idea or perspective 2]
        - [Idea or perspective 3]
    """
)

SAMPLE_PROMPTS: tuple[Document, ...] = (
    Document(
        name="Summarize",
        folder="Writing",
        description="Summarize the content",
        icon="file-text",
        content=_SUMMARIZE,
    ),
    Document(
        name="Markov Chain State",
        folder="AnalyzeCode",
        description="Find all scary bugs",
        icon="pencil",
        content=_MARKOV,
    ),
    Document(
        name="Critical Thinking",
        folder="AnalyzeCode",
        description="Generate alternatives and perspectives",
        icon="lightbulb",
        content=_CRITICAL_THINKING,
    ),
)


def seed_if_needed(
    store: DocumentStore,
    repository: IndexRepository,
    index: PromptIndex,
) -> bool:
    """Install the sample prompts unless the index was already seeded.

    An index that already holds prompts is only marked as seeded.

    Args:
        store: Document store used to write the samples.
        repository: Repository used to persist the index.
        index: Reconciled index; mutated in place.

    Returns:
        bool: Whether sample prompts were written.
    """

    if index.seeded:
        return False

    if index.prompts:
        index.seeded = True
        repository.save(index)
        return False

    for sample in SAMPLE_PROMPTS:
        store.save(index, sample.model_copy())

    index.seeded = True
    repository.save(index)
    LOGGER.info("Installed %d sample prompt(s)", len(SAMPLE_PROMPTS))
    return True


__all__ = ["SAMPLE_PROMPTS", "seed_if_needed"]
