from __future__ import annotations

"""
Import Reference Scanner.

Turns source text into structured ``ImportReference`` records. The set of
recognized syntaxes is the explicit, ordered ``IMPORT_MATCHERS`` table:
ES module ``from "..."``, CommonJS ``require("...")`` and dynamic
``import("...")``. Anything else is invisible to the dependency copier.
"""

import re
from typing import Iterator, List, Tuple

from deploykit.domain.closure_models import ImportReference, ImportSyntax

# Scanned in this order; matches of one syntax are reported before the next.
IMPORT_MATCHERS: Tuple[Tuple[ImportSyntax, re.Pattern], ...] = (
    (ImportSyntax.MODULE, re.compile(r"""from\s+['"]([^'"]+)['"]""")),
    (ImportSyntax.REQUIRE, re.compile(r"""require\(['"]([^'"]+)['"]\)""")),
    (ImportSyntax.DYNAMIC, re.compile(r"""import\(['"]([^'"]+)['"]\)""")),
)


def iter_references(content: str) -> Iterator[ImportReference]:
    """
    Yield every reference in ``content``, syntax by syntax.

    Args:
        content: Full text of a source file.

    Yields:
        ImportReference: Local and external references alike.
    """
    for syntax, pattern in IMPORT_MATCHERS:
        for match in pattern.finditer(content):
            yield ImportReference(syntax=syntax, target=match.group(1), offset=match.start())


def scan_local_references(content: str) -> List[ImportReference]:
    """Return only the references whose target starts with a relative marker."""
    return [ref for ref in iter_references(content) if ref.is_local]
