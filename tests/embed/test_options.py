from sysfs_embed.diagnostics import DiagnosticsCollector
from sysfs_embed.embed.options import OptionResolver
from sysfs_embed.types import (
    EmbedCall,
    LiteralArg,
    OptionProperty,
    OptionsOnly,
    OptionsSpec,
    SourceLocation,
    VariableRef,
)

LOC = SourceLocation("/p/mod.ts", 1, 0)


def _prop(key, value, node_type="string"):
    return OptionProperty(key, value, node_type, LOC)


def _resolver():
    diags = DiagnosticsCollector(echo=False)
    return OptionResolver("constSysfsExpr", "utf8", diags), diags


def _call(form, options=()):
    return EmbedCall(start=0, end=10, form=form, location=LOC, options=options)


def test_defaults_without_options():
    resolver, diags = _resolver()
    resolved = resolver.resolve(_call(LiteralArg("a.txt")), {})
    assert resolved.path_or_pattern == "a.txt"
    assert resolved.options == OptionsSpec(base_path="", include="**/*", encoding="utf8")
    assert diags.entries == []


def test_literal_options_override_defaults():
    resolver, _ = _resolver()
    props = (_prop("basePath", "assets"), _prop("encoding", "base64"))
    resolved = resolver.resolve(_call(LiteralArg("*.png"), props), {})
    assert resolved.options.base_path == "assets"
    assert resolved.options.encoding == "base64"


def test_non_literal_option_warns_and_keeps_default():
    resolver, diags = _resolver()
    props = (_prop("encoding", None, "identifier"),)
    resolved = resolver.resolve(_call(LiteralArg("a.txt"), props), {})
    assert resolved.options.encoding == "utf8"
    (w,) = diags.warnings
    assert 'Option "encoding"' in w.message and "identifier" in w.message


def test_variable_resolution():
    resolver, diags = _resolver()
    call = _call(VariableRef("p", LOC))
    assert resolver.resolve(call, {"p": "x/*.md"}).path_or_pattern == "x/*.md"
    assert resolver.resolve(call, {}) is None
    assert 'Unable to resolve variable "p"' in diags.warnings[0].message


def test_options_only_uses_include_as_pattern():
    resolver, _ = _resolver()
    form = OptionsOnly((_prop("include", "*.json"), _prop("basePath", "locales")))
    resolved = resolver.resolve(_call(form), {})
    assert resolved.path_or_pattern == "*.json"
    assert resolved.options.base_path == "locales"


def test_options_only_requires_include():
    resolver, diags = _resolver()
    assert resolver.resolve(_call(OptionsOnly(())), {}) is None
    assert resolver.resolve(_call(OptionsOnly((_prop("basePath", "x"),))), {}) is None
    first, second = diags.warnings
    assert "at least 'include' or 'basePath'" in first.message
    assert "explicit 'include'" in second.message


def test_empty_path_warns():
    resolver, diags = _resolver()
    assert resolver.resolve(_call(LiteralArg("")), {}) is None
    assert "Invalid or unresolved path/pattern" in diags.warnings[0].message
