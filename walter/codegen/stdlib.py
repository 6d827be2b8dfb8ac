"""
Signatures of the routines exported by the prebuilt standard library
archive (libstd.a). They must match the archive's symbols exactly: the
module only declares them, the linker supplies the bodies.
"""
from llvmlite import ir

from ..semantics.types import llvm_type
from .context import CodegenContext, FunctionSig


class StdlibRoutine:
    def __init__(self, name: str, symbol: str, param_types, return_type: str):
        self.name = name          # what source code calls
        self.symbol = symbol      # what the archive exports
        self.param_types = list(param_types)
        self.return_type = return_type

    def function_type(self) -> ir.FunctionType:
        return ir.FunctionType(
            llvm_type(self.return_type),
            [llvm_type(t) for t in self.param_types],
        )

    def __repr__(self):
        return f"StdlibRoutine({self.name} -> @{self.symbol})"


STDLIB = (
    # void coitusinterruptus(i8*): prints a NUL-terminated string and a newline.
    StdlibRoutine("print", "coitusinterruptus", ["str"], "void"),
)


def declare_stdlib(ctx: CodegenContext, routines=STDLIB):
    """Declares every stdlib routine on the module and makes it callable."""
    for routine in routines:
        fn = ir.Function(ctx.module, routine.function_type(), name=routine.symbol)
        ctx.functions[routine.name] = FunctionSig(
            routine.name, fn, routine.param_types, routine.return_type, external=True
        )
