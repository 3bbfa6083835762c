"""
Python Frontend Tests
=====================
Lowering of Python source into the statement tree, plus the per-file facts
the scans consume.
"""

import textwrap

import pytest

from method_audit.analyzers.complexity import score_body
from method_audit.analyzers.nesting import method_depth
from method_audit.analyzers.reachability import unreachable_lines
from method_audit.frontends import InvalidSourceError, parse_source
from method_audit.frontends.python import parse
from method_audit.model import Language
from method_audit.model.tree import Block, ForEach, If, Other, Switch, Throw, While


def parse_py(code: str):
    return parse(textwrap.dedent(code), "sample.py")


def only_method(code: str):
    source = parse_py(code)
    assert len(source.methods) == 1
    return source.methods[0]


# ============================================================================
# Methods and parameters
# ============================================================================

class TestMethods:
    """Every def becomes a MethodUnit."""

    def test_functions_and_methods_in_source_order(self):
        source = parse_py("""
            def top():
                pass

            class Invoice:
                def total(self):
                    def helper(x):
                        return x
                    return helper(1)

                async def fetch(self):
                    pass
        """)
        assert [m.name for m in source.methods] == ["top", "total", "helper", "fetch"]
        assert source.language == Language.PYTHON

    def test_lines_and_length(self):
        method = only_method("""
            def f():
                a = 1
                return a
        """)
        assert method.line == 2
        assert method.end_line == 4
        assert method.line_count == 3

    def test_self_not_counted(self):
        source = parse_py("""
            class A:
                def m(self, a, b=2, *args, c, **kwargs):
                    pass

                @classmethod
                def build(cls, data):
                    pass

            def free(self, a):
                pass
        """)
        counts = {m.name: m.parameter_count for m in source.methods}
        assert counts == {"m": 5, "build": 1, "free": 2}

    def test_properties_counted_not_analysed(self):
        source = parse_py("""
            class A:
                rate = 3
                name: str = "a"

                @property
                def value(self):
                    return self._value

                @value.setter
                def value(self, v):
                    self._value = v

                def run(self):
                    pass
        """)
        assert [m.name for m in source.methods] == ["run"]
        assert source.property_count == 1
        assert source.field_count == 2
        assert source.class_count == 1


# ============================================================================
# Statement lowering
# ============================================================================

class TestLowering:
    """Python statements map onto the closed statement variants."""

    def test_statement_after_return(self):
        method = only_method("""
            def f():
                return 1
                print("never")
        """)
        assert unreachable_lines(method.body) == [4]

    def test_raise_is_throw(self):
        method = only_method("""
            def f():
                raise ValueError("x")
        """)
        assert isinstance(method.body[0], Throw)

    def test_elif_is_nested_if(self):
        method = only_method("""
            def f(x):
                if x == 1:
                    return "a"
                elif x == 2:
                    return "b"
                else:
                    return "c"
                print("never")
        """)
        top = method.body[0]
        assert isinstance(top, If)
        assert isinstance(top.orelse, If)
        assert isinstance(top.orelse.orelse, Block)
        assert unreachable_lines(method.body) == [9]
        assert score_body(method.body).if_statements == 2

    def test_for_else_is_loop_then_block(self):
        method = only_method("""
            def f(items):
                for item in items:
                    pass
                else:
                    return None
                print("never")
        """)
        assert isinstance(method.body[0], ForEach)
        assert isinstance(method.body[1], Block)
        assert unreachable_lines(method.body) == []

    def test_while_is_while(self):
        method = only_method("""
            def f(n):
                while n > 0 and n < 10:
                    n -= 1
        """)
        loop = method.body[0]
        assert isinstance(loop, While)
        assert loop.logic_ops == 1

    def test_with_is_block(self):
        """The with body is checked on its own; the block never ends the method."""
        method = only_method("""
            def f(path):
                with open(path) as fh:
                    return fh.read()
                    print("dead in with")
                print("reached")
        """)
        assert isinstance(method.body[0], Block)
        assert unreachable_lines(method.body) == [5]

    def test_try_is_other_with_clause_children(self):
        method = only_method("""
            def f():
                try:
                    return 1
                    print("dead in try")
                except ValueError:
                    return 2
                finally:
                    pass
                print("reachable by our rules")
        """)
        stmt = method.body[0]
        assert isinstance(stmt, Other) and stmt.kind == "try"
        assert len(stmt.children) == 3
        assert unreachable_lines(method.body) == [5]

    def test_match_is_switch(self):
        method = only_method("""
            def f(cmd):
                match cmd:
                    case "start":
                        return 1
                    case "stop" | "halt":
                        return 2
                    case _:
                        return 3
                print("never")
        """)
        sw = method.body[0]
        assert isinstance(sw, Switch)
        assert [label.is_default for s in sw.sections for label in s.labels] == [
            False,
            False,
            True,
        ]
        assert score_body(method.body).case_labels == 2
        assert unreachable_lines(method.body) == [10]

    def test_guarded_wildcard_is_not_default(self):
        method = only_method("""
            def f(x):
                match x:
                    case _ if x > 1 and x < 5:
                        return 1
        """)
        sw = method.body[0]
        assert sw.sections[0].labels[0].is_default is False
        assert sw.logic_ops == 1

    def test_nested_def_is_opaque(self):
        source = parse_py("""
            def outer():
                def inner():
                    for i in range(3):
                        for j in range(3):
                            pass
                return inner
        """)
        outer = source.methods[0]
        assert isinstance(outer.body[0], Other)
        assert method_depth(outer.body) == 0
        assert method_depth(source.methods[1].body) == 2

    def test_bool_ops_counted_per_operator(self):
        method = only_method("""
            def f(a, b, c):
                if a and b and c:
                    return a or b
        """)
        assert score_body(method.body).logical_operators == 3
        assert score_body(method.body).total == 5

    def test_break_after_loop_body_statement(self):
        method = only_method("""
            def f(items):
                for item in items:
                    break
                    print(item)
        """)
        # break inside a loop never ends the sequence
        assert unreachable_lines(method.body) == []

    def test_nested_loops_depth(self):
        method = only_method("""
            def f(grid):
                for row in grid:
                    for cell in row:
                        while cell:
                            cell -= 1
        """)
        assert method_depth(method.body) == 3


# ============================================================================
# Literals and comments
# ============================================================================

class TestFacts:
    """Numeric literals, strings and comments."""

    def test_magic_number_candidates(self):
        method = only_method("""
            def f(x, retries=5):
                limit = 10
                self.timeout = 30
                if x > 42:
                    return x * 1.5
                return True
        """)
        texts = [lit.text for lit in method.numeric_literals]
        assert texts == ["30", "42", "1.5"]

    def test_case_patterns_exempt(self):
        method = only_method("""
            def f(x):
                match x:
                    case 404:
                        return x + 7
        """)
        assert [lit.text for lit in method.numeric_literals] == ["7"]

    def test_strings_skip_docstrings_and_fstrings(self):
        source = parse_py('''
            """Module docstring."""

            def f(name):
                """Function docstring."""
                print("hello")
                return f"hi {name}"
        ''')
        assert [s.value for s in source.string_literals] == ["hello"]

    def test_comments(self):
        source = parse_py("""
            # TODO: remove this shim once callers migrate
            def f():
                return 1  # trailing
        """)
        assert [(c.line, c.text) for c in source.comments] == [
            (2, "# TODO: remove this shim once callers migrate"),
            (4, "# trailing"),
        ]

    def test_line_count(self):
        source = parse("a = 1\nb = 2\n", "x.py")
        assert source.line_count == 2


# ============================================================================
# Errors
# ============================================================================

class TestErrors:
    def test_syntax_error_is_invalid_source(self):
        with pytest.raises(InvalidSourceError) as exc_info:
            parse("def f(:\n    pass\n", "broken.py")
        assert "broken.py" in str(exc_info.value)

    def test_dispatch_through_parse_source(self):
        source = parse_source("def f():\n    return 1\n", "python", "m.py")
        assert source.methods[0].name == "f"
