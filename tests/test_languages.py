"""Tests for the language registry, adapters and definition matcher."""

from __future__ import annotations

import pytest
import tree_sitter

from todoctx.languages import (
    DefinitionMatcher,
    JavaScriptSupport,
    LanguageSupport,
    ObjCSupport,
    SwiftSupport,
    for_extension,
    for_path,
    supported_extensions,
)


class _PlainSupport(LanguageSupport):
    name = "plain"
    extensions = ("txt",)
    matcher = DefinitionMatcher(("class",))

    def extract_identifiers(self, source: str) -> list[str]:
        return []


class _MissingGrammarSupport(_PlainSupport):
    grammar_module = "tree_sitter_does_not_exist"


# ── Registry ──────────────────────────────────────────────────────


class TestRegistry:
    @pytest.mark.parametrize(
        ("ext", "cls"),
        [
            ("swift", SwiftSupport),
            ("SWIFT", SwiftSupport),
            (".swift", SwiftSupport),
            ("js", JavaScriptSupport),
            ("jsx", JavaScriptSupport),
            ("mjs", JavaScriptSupport),
            ("cjs", JavaScriptSupport),
            ("h", ObjCSupport),
            ("M", ObjCSupport),
        ],
    )
    def test_lookup(self, ext, cls):
        assert isinstance(for_extension(ext), cls)

    def test_unsupported(self):
        assert for_extension("py") is None
        assert for_extension("") is None
        assert for_path("README.md") is None

    def test_for_path(self):
        assert isinstance(for_path("/a/b/View.Swift"), SwiftSupport)

    def test_supported_extensions(self):
        assert {"swift", "js", "h", "m"} <= supported_extensions()

    def test_same_instance_per_language(self):
        assert for_extension("js") is for_extension("mjs")


# ── Definition matcher ────────────────────────────────────────────


class TestDefinitionMatcher:
    swift = SwiftSupport.matcher
    objc = ObjCSupport.matcher

    @pytest.mark.parametrize(
        "content",
        [
            "public class MyType { }",
            "struct MyType { }",
            "enum MyType { case one }",
            "protocol MyType { func run() }",
            "typealias MyType = Int",
        ],
    )
    def test_swift_keywords(self, content):
        assert self.swift.defines(content, "MyType")

    def test_prefix_never_matches(self):
        assert not self.swift.defines("class MyTypeExtra { }", "MyType")
        assert not self.objc.defines("@interface MessageExtra : NSObject", "Message")

    def test_keyword_must_be_a_word(self):
        assert not self.swift.defines("subclass MyType", "MyType")

    def test_objc_interface_and_implementation(self):
        assert self.objc.defines("@interface Message : NSObject\n@end", "Message")
        assert self.objc.defines("@implementation Message\n@end", "Message")
        assert self.objc.defines("   @interface   Message   : NSObject", "Message")

    def test_objc_plain_word_is_not_a_definition(self):
        assert not self.objc.defines("interface Message", "Message")

    def test_empty_name(self):
        assert not self.swift.defines("class X {}", "")

    def test_defines_any(self):
        assert self.swift.defines_any("struct B {}", ["A", "B"])
        assert not self.swift.defines_any("struct C {}", ["A", "B"])

    def test_requires_keywords(self):
        with pytest.raises(ValueError):
            DefinitionMatcher(())


# ── Swift ─────────────────────────────────────────────────────────


class TestSwiftSupport:
    lang = SwiftSupport()

    def test_identifiers(self):
        src = "class Foo {}\nlet x = helper()\nif (a) { }\nhelper()\n"
        assert self.lang.extract_identifiers(src) == ["Foo", "helper"]

    def test_func_counts_as_definition(self):
        assert self.lang.file_defines_any("func helper(x: Int) {}", ["helper"])
        assert not self.lang.file_defines_any("func helperTwo() {}", ["helper"])

    def test_no_dependency_paths(self, tmp_path):
        f = tmp_path / "A.swift"
        f.write_text("import Foundation\n")
        assert self.lang.walk_dependencies(f, tmp_path) == []

    def test_enclosing_function(self):
        content = (
            "struct S {\n"
            "    func run() {\n"
            "        // TODO: - x\n"
            "    }\n"
            "}\n"
        )
        assert self.lang.extract_enclosing_function(content, "// TODO: - ") == (
            "    func run() {\n        // TODO: - x\n    }"
        )

    def test_enclosing_function_absent(self):
        assert self.lang.extract_enclosing_function("// TODO: - x\n", "// TODO: - ") is None


# ── JavaScript ────────────────────────────────────────────────────


class TestJavaScriptSupport:
    lang = JavaScriptSupport()

    def test_identifiers(self):
        src = "const x = new Widget();\nrender(x);\nif (y) {}\n"
        assert self.lang.extract_identifiers(src) == ["render", "Widget"]

    @pytest.mark.parametrize(
        "content",
        [
            "function render(a) {}",
            "const render = (a) => a",
            "let render = async function () {}",
            "export function render() {}",
            "export async function render() {}",
            "export { a, render, b }",
            "module.exports = render",
            "exports.render = () => 1",
            "class render {}",
        ],
    )
    def test_defines(self, content):
        assert self.lang.file_defines_any(content, ["render"])

    def test_does_not_define_prefix(self):
        assert not self.lang.file_defines_any("function renderAll() {}", ["render"])

    def test_resolve_dependency_path(self, tmp_path):
        assert self.lang.resolve_dependency_path("import a from './a'", tmp_path) == tmp_path / "a"
        assert (
            self.lang.resolve_dependency_path('const b = require("../b.js")', tmp_path)
            == tmp_path / "../b.js"
        )
        assert self.lang.resolve_dependency_path("const c = 1;", tmp_path) is None

    def test_walk_dependencies(self, tmp_path):
        root = tmp_path / "proj"
        (root / "lib").mkdir(parents=True)
        (root / "lib" / "a.js").write_text("export const a = 1;\n")
        (root / "b.js").write_text("module.exports = 2;\n")
        (tmp_path / "outside.js").write_text("x\n")
        main = root / "main.js"
        main.write_text(
            "import { a } from './lib/a';\n"
            "const b = require('./b.js');\n"
            "const React = require('react');\n"
            "import x from '../outside';\n"
            "import gone from './missing';\n"
        )
        deps = self.lang.walk_dependencies(main, root)
        assert deps == [(root / "lib" / "a.js").resolve(), (root / "b.js").resolve()]

    def test_enclosing_function(self):
        content = "function go(a) {\n  // TODO: - x\n}\n"
        assert self.lang.extract_enclosing_function(content, "// TODO: - ") == content.rstrip("\n")

    def test_grammar_loads(self):
        assert isinstance(self.lang.load_language(), tree_sitter.Language)


# ── Objective-C ───────────────────────────────────────────────────


class TestObjCSupport:
    lang = ObjCSupport()

    def test_identifiers(self):
        src = "@implementation Foo\n- (void)go { Bar *b = [Baz make]; }\n@end\n"
        assert self.lang.extract_identifiers(src) == ["Foo", "Baz", "Bar"]

    def test_local_imports_only(self, tmp_path):
        (tmp_path / "Foo.h").write_text("@interface Foo\n@end\n")
        m = tmp_path / "Foo.m"
        m.write_text('#import <Foundation/Foundation.h>\n#import "Foo.h"\n')
        assert self.lang.walk_dependencies(m, tmp_path) == [(tmp_path / "Foo.h").resolve()]

    def test_enclosing_method_with_brace_on_next_line(self):
        content = "- (void)run\n{\n    // TODO: - x\n}\n"
        assert self.lang.extract_enclosing_function(content, "// TODO: - ") == (
            "- (void)run\n{\n    // TODO: - x\n}"
        )

    def test_no_grammar(self):
        assert self.lang.load_language() is None


# ── Base defaults ─────────────────────────────────────────────────


class TestBaseDefaults:
    def test_enclosing_function_defaults_to_none(self):
        assert _PlainSupport().extract_enclosing_function("{ // TODO: - x }", "// TODO: - ") is None

    def test_no_dependencies_by_default(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_text("import x from './y'\n")
        assert _PlainSupport().walk_dependencies(f, tmp_path) == []

    def test_unreadable_file_has_no_dependencies(self, tmp_path):
        assert JavaScriptSupport().walk_dependencies(tmp_path / "nope.js", tmp_path) == []

    def test_missing_grammar_module(self):
        assert _MissingGrammarSupport().load_language() is None
        assert _PlainSupport().load_language() is None
