#!/usr/bin/env python3
"""Tests for the Solidity import and pragma extractor."""

import pytest

from solresolve.parser import ParsedContent, SolidityParser, compute_content_hash, strip_comments

SOURCE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.5.0;
pragma experimental ABIEncoderV2;

import "./Plain.sol";
import './SingleQuoted.sol';
import "./Aliased.sol" as Aliased;
import * as Everything from "lib/Star.sol";
import {A, B as C} from "@scope/lib/Named.sol";
import Default from "../Default.sol";

contract Token {
    string constant NOTE = "import \\"./NotAnImport.sol\\";";
}
"""


class TestSolidityParser:
    """Tests for SolidityParser."""

    def test_import_forms(self):
        """Test that every import form is recognised, in source order."""
        parsed = SolidityParser().parse(SOURCE, "/p/Token.sol")
        assert parsed.imports[:6] == (
            "./Plain.sol",
            "./SingleQuoted.sol",
            "./Aliased.sol",
            "lib/Star.sol",
            "@scope/lib/Named.sol",
            "../Default.sol",
        )
        assert "./NotAnImport.sol" not in parsed.imports

    def test_version_pragmas(self):
        """Test that only solidity pragmas are reported."""
        parsed = SolidityParser().parse(SOURCE, "/p/Token.sol")
        assert parsed.version_pragmas == ("^0.5.0",)

    def test_multiple_pragmas(self):
        source = "pragma solidity >=0.5.0   <0.7.0;\npragma solidity 0.6.2;"
        parsed = SolidityParser().parse(source, "/p/A.sol")
        assert parsed.version_pragmas == (">=0.5.0 <0.7.0", "0.6.2")

    def test_commented_out_imports(self):
        """Test that imports inside comments are ignored."""
        source = '// import "./Line.sol";\n/* import "./Block.sol";\n*/\nimport "./Real.sol";'
        parsed = SolidityParser().parse(source, "/p/A.sol")
        assert parsed.imports == ("./Real.sol",)

    def test_comment_markers_in_strings(self):
        """Test that // inside a string literal doesn't start a comment."""
        source = 'import "https://example.com/A.sol";'
        parsed = SolidityParser().parse(source, "/p/A.sol")
        assert parsed.imports == ("https://example.com/A.sol",)

    def test_malformed_source(self):
        """Test that garbage produces empty results instead of errors."""
        parsed = SolidityParser().parse('import "unterminated\npragma solidity', "/p/A.sol")
        assert parsed == ParsedContent()

    def test_empty_source(self):
        assert SolidityParser().parse("", "/p/A.sol") == ParsedContent()

    def test_results_are_cached(self):
        """Test that unchanged content is only scanned once per path."""
        parser = SolidityParser()
        first = parser.parse(SOURCE, "/p/Token.sol")
        second = parser.parse(SOURCE, "/p/Token.sol")
        assert first is second
        assert parser.cache_size == 1

        parser.parse(SOURCE + "\nimport './Extra.sol';", "/p/Token.sol")
        parser.parse(SOURCE, "/p/Other.sol")
        assert parser.cache_size == 3

    def test_cache_is_bounded(self):
        """Test that the least recently used result is evicted first."""
        parser = SolidityParser(max_entries=2)
        first = parser.parse('import "./A.sol";', "/p/A.sol")
        parser.parse('import "./B.sol";', "/p/B.sol")
        assert parser.parse('import "./A.sol";', "/p/A.sol") is first

        parser.parse('import "./C.sol";', "/p/C.sol")

        assert parser.cache_size == 2
        assert parser.parse('import "./A.sol";', "/p/A.sol") is first
        assert parser.cache_size == 2

    def test_cache_size_must_be_positive(self):
        with pytest.raises(ValueError):
            SolidityParser(max_entries=0)


class TestComputeContentHash:
    """Tests for compute_content_hash."""

    def test_full_digest(self):
        assert compute_content_hash("contract A {}") == compute_content_hash("contract A {}")
        assert len(compute_content_hash("contract A {}")) == 32

    def test_different_content(self):
        assert compute_content_hash("contract A {}") != compute_content_hash("contract B {}")

    def test_exported_from_package(self):
        import solresolve

        assert solresolve.compute_content_hash is compute_content_hash


class TestStripComments:
    """Tests for strip_comments."""

    def test_preserves_line_count(self):
        source = "a /* one\ntwo */ b // three\nc"
        stripped = strip_comments(source)
        assert stripped.count("\n") == source.count("\n")
        assert "one" not in stripped and "three" not in stripped
        assert stripped.startswith("a ") and stripped.endswith("c")
