import pytest
from llvmlite import ir

from walter.codegen.verify import structural_problems, verify_module
from walter.errors import ModuleVerificationError


def unterminated_module():
    module = ir.Module(name="broken")
    fn = ir.Function(module, ir.FunctionType(ir.IntType(32), []), name="main")
    fn.append_basic_block("entry")
    return module


class TestVerify:
    def test_unterminated_block(self):
        with pytest.raises(ModuleVerificationError) as exc:
            verify_module(unterminated_module())
        assert "'entry'" in exc.value.message
        assert "'main'" in exc.value.message

    def test_problems_are_listed_per_block(self):
        module = unterminated_module()
        module.get_global("main").append_basic_block("other")
        assert len(list(structural_problems(module))) == 2

    def test_declarations_are_skipped(self):
        module = ir.Module(name="decls")
        ir.Function(module, ir.FunctionType(ir.VoidType(), []), name="ext")
        assert list(structural_problems(module)) == []

    def test_llvm_verifier_runs(self):
        module = ir.Module(name="badret")
        fn = ir.Function(module, ir.FunctionType(ir.IntType(32), []), name="main")
        builder = ir.IRBuilder(fn.append_basic_block("entry"))
        builder.ret(ir.Constant(ir.IntType(8), 0))
        with pytest.raises(ModuleVerificationError):
            verify_module(module)

    def test_well_formed_module(self):
        module = ir.Module(name="ok")
        fn = ir.Function(module, ir.FunctionType(ir.IntType(32), []), name="main")
        ir.IRBuilder(fn.append_basic_block("entry")).ret(ir.Constant(ir.IntType(32), 0))
        assert verify_module(module) is not None
