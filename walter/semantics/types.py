from llvmlite import ir

from ..errors import TypeMismatchError


class WalterType:
    """Base class for all source-level types."""

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return self.name

    def to_llvm(self) -> ir.Type:
        return _LLVM[self.name]()


IntType = WalterType("int")
ByteType = WalterType("byte")
StrType = WalterType("str")  # i8*
VoidType = WalterType("void")

BY_NAME = {t.name: t for t in (IntType, ByteType, StrType, VoidType)}

_LLVM = {
    "int": lambda: ir.IntType(32),
    "byte": lambda: ir.IntType(8),
    "str": lambda: ir.IntType(8).as_pointer(),
    "void": lambda: ir.VoidType(),
}


def lookup(name: str, span=None) -> WalterType:
    try:
        return BY_NAME[name]
    except KeyError:
        raise TypeMismatchError(f"Unknown type '{name}'", span) from None


def llvm_type(name: str, span=None) -> ir.Type:
    return lookup(name, span).to_llvm()


def from_llvm(llvm_ty: ir.Type) -> str:
    """Name of the source type an LLVM value type came from ('bool' for i1)."""
    if isinstance(llvm_ty, ir.IntType):
        return {32: "int", 8: "byte", 1: "bool"}.get(llvm_ty.width, f"i{llvm_ty.width}")
    if isinstance(llvm_ty, ir.PointerType):
        return "str"
    if isinstance(llvm_ty, ir.VoidType):
        return "void"
    return str(llvm_ty)
