"""Tests for the code generator."""

import pytest

from crml.ast import Parser
from crml.compiler import Compiler, DictResolver, GeneratorState
from crml.compiler.compiler import escape_braces
from crml.compiler.spec import Fragment, HostCode, HostExpr, Newline


def compile_source(source):
    return Compiler(resolver=DictResolver()).compile(source)


def html_of(statements):
    return [s.html for s in statements if isinstance(s, Fragment)]


class CheckedState(GeneratorState):
    """Asserts that the indent and tag stacks move together."""

    def push(self, indent, tag):
        super().push(indent, tag)
        assert len(self.indents) == len(self.tags)

    def pop(self):
        tag = super().pop()
        assert len(self.indents) == len(self.tags)
        return tag


def test_element_with_host_code():
    source = "%div.class#id[attr=value]\n  - let a = 1\n  = a"

    assert compile_source(source) == [
        Fragment('<div class="class " id="id" attr=value>', line=0),
        HostCode("let a = 1;", line=1),
        HostExpr("a", line=2),
        Fragment("</div>"),
    ]


def test_siblings_close_previous_element():
    source = "%ul\n  %li=one\n  %li=two\n%p=after"

    assert html_of(compile_source(source)) == [
        "<ul>",
        "<li>one</li>",
        "<li>two</li>",
        "</ul>",
        "<p>after</p>",
    ]


def test_nested_blocks_close_once():
    source = "%div\n  %p\n    text\n  %p\n    more"

    html = html_of(compile_source(source))
    assert html == ["<div>", "<p>", "text", "</p>", "<p>", "more", "</p>", "</div>"]
    assert html.count("</p>") == html.count("<p>")


def test_explicit_close_pops_one_frame():
    source = "%div\n  %span\n%/div"

    assert html_of(compile_source(source)) == ["<div>", "<span>", "</span>", "</div>"]


def test_explicit_close_at_child_column():
    source = "%div\n  %p\n  %/div"

    assert html_of(compile_source(source)) == ["<div>", "<p>", "</p>", "</div>"]


def test_explicit_close_closes_inner_pinned_elements():
    source = "%section\n  %~em\n    x\n%/section\n%p=after"

    assert html_of(compile_source(source)) == [
        "<section>",
        "<em>",
        "x",
        "</em>",
        "</section>",
        "<p>after</p>",
    ]


def test_close_with_nothing_open():
    assert compile_source("%/div") == [Fragment("</div>", line=0)]


def test_host_statements_get_semicolons_except_blocks():
    source = "- if ok {\n  %b=yes\n- }"

    statements = compile_source(source)
    assert statements[0] == HostCode("if ok {", line=0)
    assert statements[-1] == HostCode("}", line=2)


def test_interpolation_outside_sensitive_elements():
    statements = compile_source("%p=Hello {page.name}")
    assert statements == [Fragment("<p>Hello {page.name}</p>", line=0)]


def test_braces_escaped_in_script():
    source = "%script\n  var x = {a: 1};\n%/script"

    assert html_of(compile_source(source)) == [
        "<script>",
        "var x = {{a: 1}};",
        "</script>",
    ]


def test_braces_escaped_in_inline_style():
    statements = compile_source("%style=body {color: red}")
    assert statements == [Fragment("<style>body {{color: red}}</style>", line=0)]


def test_sensitive_element_not_closed_automatically():
    html = html_of(compile_source("%pre\n  x\n%p=y"))
    assert "</pre>" not in html
    assert html == ["<pre>", "x", "<p>y</p>"]


def test_pinned_element_needs_explicit_close():
    source = "%div\n  %~span\n    text\n  %/span\n%p=x"

    assert html_of(compile_source(source)) == [
        "<div>",
        "<span>",
        "text",
        "</span>",
        "</div>",
        "<p>x</p>",
    ]


def test_blank_lines_and_comments_do_not_close():
    source = "%div\n  %p=a\n\n/ comment\n  %p=b"

    assert compile_source(source) == [
        Fragment("<div>", line=0),
        Fragment("<p>a</p>", line=1),
        Newline(line=2),
        Fragment("<p>b</p>", line=4),
        Fragment("</div>"),
    ]


def test_raw_block():
    source = "%!\n  %div {not} interpolated\n  - still_code\n%/!\n%p=after"

    assert compile_source(source) == [
        Fragment("%div {{not}} interpolated", line=1),
        HostCode("still_code;", line=2),
        Fragment("<p>after</p>", line=4),
    ]


def test_raw_passthrough_is_not_formatted():
    assert compile_source("@<b>{x}</b>") == [
        Fragment("<b>{x}</b>", line=0, formatted=False)
    ]


def test_generation_is_deterministic():
    source = "%ul\n  - for i in items {\n    %li={i}\n  - }\n%script\n  {}\n%/script"
    compiler = Compiler(resolver=DictResolver())

    assert compiler.compile(source) == compiler.compile(source)


def test_stacks_stay_in_lock_step():
    source = (
        "%div\n  %~em\n    %b=a\n  %/em\n  %ul\n    %li=a\n"
        "%!\n  x\n%/!\n%pre\n%/pre\n%p"
    )
    state = CheckedState()

    Compiler(resolver=DictResolver()).generate(Parser().parse(source), state=state)

    assert state.tags == []
    assert state.indents == []


def test_compile_template_uses_resolver():
    compiler = Compiler(resolver=DictResolver({"hello": "%h1=Hi"}))
    assert compiler.compile_template("hello") == [Fragment("<h1>Hi</h1>", line=0)]


def test_compile_function():
    compiler = Compiler(resolver=DictResolver({"hello": "%h1=Hi"}))
    fn = compiler.compile_function("hello", "HelloProps")

    assert fn.name == "hello"
    assert fn.props_type == "HelloProps"
    assert fn.body == [Fragment("<h1>Hi</h1>", line=0)]


def test_compile_file(tmp_path):
    path = tmp_path / "page.crml"
    path.write_text("%p=x", encoding="utf-8")

    assert Compiler().compile_file(path) == [Fragment("<p>x</p>", line=0)]


@pytest.mark.parametrize(
    "html, expected",
    [
        ("plain", "plain"),
        ("{a}", "{{a}}"),
        ("}{", "}}{{"),
    ],
)
def test_escape_braces(html, expected):
    assert escape_braces(html) == expected
