"""Tests for rendering templates through generated Python code."""

from types import SimpleNamespace

from crml import DictResolver, Template

BASE = "%html\n%body\n  %@slot[main]\n%/body\n%/html"


def test_render_interpolation():
    template = Template.from_string("%p=Hello {page.name}")
    assert template.render(SimpleNamespace(name="you")) == "<p>Hello you</p>"


def test_generated_code_is_a_function():
    template = Template.from_string("%p=x", name="greeting")
    assert "def greeting(page) -> str:" in template.code


def test_loop():
    source = "%ul\n  - for item in page.items {\n    %li=item {item}\n  - }"
    template = Template.from_string(source)

    html = template.render(SimpleNamespace(items=["a", "b"]))
    assert html == "<ul><li>item a</li><li>item b</li></ul>"


def test_if_else():
    source = "- if page.admin {\n  %b=admin\n- } else {\n  %i=user\n- }"
    template = Template.from_string(source)

    assert template.render(SimpleNamespace(admin=True)) == "<b>admin</b>"
    assert template.render(SimpleNamespace(admin=False)) == "<i>user</i>"


def test_host_statement_and_expression():
    template = Template.from_string("- x = 2\n= x * 3")
    assert template.render() == "6"


def test_script_braces_are_literal():
    template = Template.from_string("%script\n  var a = {b: 1};\n%/script")
    assert template.render() == "<script>var a = {b: 1};</script>"


def test_raw_passthrough():
    template = Template.from_string("@<b>{x}</b>")
    assert template.render() == "<b>{x}</b>"


def test_blank_line_renders_newline():
    template = Template.from_string("%p=a\n\n%p=b")
    assert template.render() == "<p>a</p>\n<p>b</p>"


def test_include_with_resolver():
    template = Template.from_string(
        "%@base.main\n%p=Hi", resolver=DictResolver({"base": BASE})
    )
    assert template.render() == "<html><body><p>Hi</p></body></html>"


def test_globals_are_visible():
    template = Template.from_string("= shout(page)", globals={"shout": str.upper})
    assert template.render("hi") == "HI"


def test_from_file_resolves_includes_next_to_it(tmp_path):
    (tmp_path / "base.crml").write_text(BASE, encoding="utf-8")
    path = tmp_path / "hello.crml"
    path.write_text("%@base.main\n%h1={page.title}", encoding="utf-8")

    template = Template.from_file(path)

    assert template.name == "hello"
    html = template.render(SimpleNamespace(title="Welcome"))
    assert html == "<html><body><h1>Welcome</h1></body></html>"


def test_compiled_once():
    template = Template.from_string("%p=x")
    assert template.function is template.function


def test_quotes_inside_interpolation():
    template = Template.from_string('%p={page["k"]}', resolver=DictResolver({}))
    assert template.render({"k": 1}) == "<p>1</p>"


def test_join_inside_interpolation():
    template = Template.from_string('%p=Tags: {", ".join(page.tags)}')
    assert template.render(SimpleNamespace(tags=["a", "b"])) == "<p>Tags: a, b</p>"


def test_template_named_after_keyword():
    template = Template.from_string("%p=x", name="class")
    assert template.render() == "<p>x</p>"
