from __future__ import annotations

"""
Unit tests for the Import Reference Scanner.

Verifies the recognized syntaxes, their scanning order and the local
reference filter.
"""

from deploykit.core.services.import_scanner import (
    IMPORT_MATCHERS,
    iter_references,
    scan_local_references,
)
from deploykit.domain.closure_models import ImportSyntax


def test_matchers_are_scanned_in_fixed_order() -> None:
    """Module imports first, then require, then dynamic import."""
    assert [syntax for syntax, _ in IMPORT_MATCHERS] == [
        ImportSyntax.MODULE,
        ImportSyntax.REQUIRE,
        ImportSyntax.DYNAMIC,
    ]


def test_all_three_syntaxes_are_recognized() -> None:
    content = (
        "const lazy = import('./lazy');\n"
        "const legacy = require(\"./legacy\");\n"
        "import { x } from \"./module\";\n"
    )

    refs = list(iter_references(content))

    assert [(r.syntax, r.target) for r in refs] == [
        (ImportSyntax.MODULE, "./module"),
        (ImportSyntax.REQUIRE, "./legacy"),
        (ImportSyntax.DYNAMIC, "./lazy"),
    ]


def test_matches_within_a_syntax_keep_source_order() -> None:
    content = "import a from './a';\nexport * from './b';\nimport c from \"./c\";\n"

    refs = list(iter_references(content))

    assert [r.target for r in refs] == ["./a", "./b", "./c"]
    assert refs[0].offset < refs[1].offset < refs[2].offset


def test_external_packages_are_filtered_out() -> None:
    content = (
        "import React from 'react';\n"
        "import { ethers } from \"ethers\";\n"
        "const fs = require('fs');\n"
        "import cfg from '../config';\n"
    )

    local = scan_local_references(content)

    assert [r.target for r in local] == ["../config"]
    assert all(r.is_local for r in local)


def test_unrecognized_syntax_is_ignored() -> None:
    """Bare side-effect imports are outside the recognized syntax set."""
    content = "import './side-effect';\n/// <reference path=\"./types.d.ts\" />\n"

    assert list(iter_references(content)) == []
