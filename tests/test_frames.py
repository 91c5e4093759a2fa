"""Tests for logex.frames — scope descriptors, stack capture, caller location."""

import inspect

import pytest

from conftest import make_frame
from logex.frames import (
    INTERNAL_MODULES, CallerFrame, ScopeKind, capture_stack, describe_scope,
    locate_caller, stack_from_exception,
)


class Outer:
    class Inner:
        def where(self):
            return capture_stack()[0]

    def local_where(self):
        class Local:
            def where(self):
                return capture_stack()[0]
        return Local().where()

    def lambda_where(self):
        grab = lambda: capture_stack()[0]  # noqa: E731
        return grab()


def plain_where():
    return capture_stack()[0]


def raiser():
    raise RuntimeError("boom")


# =============================================================================
# Scope descriptors
# =============================================================================

class TestDescribeScope:
    """describe_scope() builds the enclosing-scope graph from a qualname."""

    def test_module_scope(self):
        node = describe_scope("pkg.mod")
        assert node.kind is ScopeKind.MODULE
        assert node.enclosing is None
        assert node.simple_name() == "mod"
        assert node.class_name() == "pkg.mod"
        assert node.canonical_name() == "pkg.mod"
        assert node.package_name() == "pkg"

    def test_nested_classes(self):
        node = describe_scope("pkg.mod", "Outer.Inner")
        assert [n.kind for n in node.chain()] == [
            ScopeKind.CLASS, ScopeKind.CLASS, ScopeKind.MODULE]
        assert node.simple_name() == "Inner"
        assert node.class_name() == "pkg.mod.Outer.Inner"
        assert node.canonical_name() == "pkg.mod.Outer.Inner"
        assert node.package_name() == ""

    def test_local_scope_is_anonymous(self):
        node = describe_scope("pkg.mod", "build.<locals>")
        assert node.kind is ScopeKind.LOCAL
        assert node.name == "build"
        assert node.simple_name() == ""
        assert node.canonical_name() == ""
        assert node.class_name() == "pkg.mod.build.<locals>"

    def test_class_inside_function_has_no_canonical_name(self):
        node = describe_scope("pkg.mod", "Outer.build.<locals>.Local")
        assert node.simple_name() == "Local"
        assert node.in_local_scope is True
        assert node.canonical_name() == ""
        assert node.enclosing.kind is ScopeKind.LOCAL
        assert node.enclosing.enclosing.qualname == "Outer"

    def test_cached(self):
        assert describe_scope("pkg.mod", "A.B") is describe_scope("pkg.mod", "A.B")


# =============================================================================
# Stack capture
# =============================================================================

class TestCaptureStack:
    """capture_stack() describes live frames, innermost first."""

    def test_first_entry_is_caller(self):
        line = inspect.currentframe().f_lineno + 1
        top = capture_stack()[0]
        assert top.method_name == "test_first_entry_is_caller"
        assert top.line_number == line
        assert top.file_name == "test_frames.py"
        assert top.module == __name__
        assert top.declaring_type.simple_name() == "TestCaptureStack"

    def test_outer_frames_follow(self):
        stack = capture_stack()
        assert len(stack) > 1
        assert stack[1].method_name != "test_outer_frames_follow"

    def test_nested_class_method(self):
        frame = Outer.Inner().where()
        assert frame.method_name == "where"
        assert frame.declaring_type.qualname == "Outer.Inner"
        assert frame.declaring_type.enclosing.qualname == "Outer"

    def test_local_class_method(self):
        frame = Outer().local_where()
        assert frame.declaring_type.simple_name() == "Local"
        assert frame.declaring_type.enclosing.kind is ScopeKind.LOCAL

    def test_lambda_declares_in_local_scope(self):
        frame = Outer().lambda_where()
        assert frame.method_name == "<lambda>"
        assert frame.declaring_type.kind is ScopeKind.LOCAL

    def test_module_level_function(self):
        frame = plain_where()
        assert frame.method_name == "plain_where"
        assert frame.declaring_type.kind is ScopeKind.MODULE

    def test_frame_without_module_name(self):
        """Code run with bare globals gets no declaring type."""
        namespace = {"capture_stack": capture_stack}
        exec("result = capture_stack()[0]", namespace)
        frame = namespace["result"]
        assert frame.module is None
        assert frame.declaring_type is None
        assert frame.is_internal is False

    def test_hash_code_is_stable_for_equal_frames(self):
        a = make_frame()
        b = make_frame()
        assert a == b
        assert a.hash_code == b.hash_code


class TestStackFromException:
    """stack_from_exception() reads a traceback, raise site first."""

    def test_raise_site_first(self):
        try:
            raiser()
        except RuntimeError as exc:
            stack = stack_from_exception(exc)
        assert stack[0].method_name == "raiser"
        assert stack[1].method_name == "test_raise_site_first"

    def test_line_points_at_raise(self):
        try:
            raiser()
        except RuntimeError as exc:
            stack = stack_from_exception(exc)
        expected = inspect.getsourcelines(raiser)[1] + 1
        assert stack[0].line_number == expected

    def test_unraised_exception_has_empty_stack(self):
        assert stack_from_exception(ValueError("never raised")) == []


# =============================================================================
# Caller location
# =============================================================================

def _internal(method):
    return make_frame(method=method, module="logex.manager",
                      file_name="manager.py", scope="LogManager")


class TestLocateCaller:
    """locate_caller() filters only synthesized stacks."""

    def test_internal_modules_cover_dispatch_code(self):
        assert {"logex.manager", "logex.facade", "logex.frames"} <= INTERNAL_MODULES

    def test_synthesized_skips_internal_frames(self):
        caller = make_frame(method="handle", module="app.views")
        stack = [_internal("println"), _internal("d"), caller,
                 make_frame(method="main", module="app.__main__")]
        assert locate_caller(stack, synthesized=True) is caller

    def test_explicit_error_takes_first_frame_unfiltered(self):
        first = _internal("println")
        stack = [first, make_frame(method="handle", module="app.views")]
        assert locate_caller(stack, synthesized=False) is first

    def test_synthesized_first_frame_external(self):
        caller = make_frame(method="handle", module="app.views")
        assert locate_caller([caller, _internal("d")], synthesized=True) is caller

    def test_all_internal_stack_yields_none(self):
        stack = [_internal("println"), _internal("d")]
        assert locate_caller(stack, synthesized=True) is None

    @pytest.mark.parametrize("synthesized", [True, False])
    def test_empty_stack_yields_none(self, synthesized):
        assert locate_caller([], synthesized=synthesized) is None

    def test_frame_without_module_is_not_internal(self):
        bare = CallerFrame(file_name="<string>", line_number=1,
                           method_name="<module>")
        assert locate_caller([bare], synthesized=True) is bare
