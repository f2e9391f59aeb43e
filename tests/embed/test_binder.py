from sysfs_embed.embed.binder import collect_bindings
from sysfs_embed.lang.documents import create_document


def _bindings(src: str, module_id: str = "/p/mod.ts"):
    return dict(collect_bindings(create_document(src, module_id)))


def test_collects_top_level_string_declarations():
    src = """
const a = "a.txt";
let b = 'b.txt', c = "c.txt";
var d = "d.txt";
export const e = "e.txt";
"""
    assert _bindings(src) == {"a": "a.txt", "b": "b.txt", "c": "c.txt", "d": "d.txt", "e": "e.txt"}


def test_ignores_non_literals_and_patterns():
    src = """
const n = 1;
const t = `tpl`;
const call = f();
const { x } = { x: "x.txt" };
const [y] = ["y.txt"];
let uninitialized;
"""
    assert _bindings(src) == {}


def test_ignores_nested_scopes():
    src = """
function f() { const inner = "inner.txt"; }
if (true) { var block = "block.txt"; }
const outer = "outer.txt";
"""
    assert _bindings(src) == {"outer": "outer.txt"}


def test_later_declaration_wins():
    src = """
var p = "first.txt";
var p = "second.txt";
"""
    assert _bindings(src, "/p/mod.js") == {"p": "second.txt"}


def test_type_annotations_are_allowed():
    assert _bindings('const p: string = "p.txt";') == {"p": "p.txt"}
