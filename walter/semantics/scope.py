from ..errors import DuplicateSymbolError


class SymbolInfo:
    def __init__(self, llvm_value, type_name):
        self.llvm_value = llvm_value
        self.type_name = type_name

    def __repr__(self):
        return f"SymbolInfo({self.type_name})"


class Scope:
    def __init__(self, parent=None):
        self.parent = parent
        self.symbols = {}  # Maps name -> SymbolInfo

    @property
    def depth(self) -> int:
        """0 for the global scope."""
        return 0 if self.parent is None else self.parent.depth + 1

    # --- Symbols (Variables/Functions) ---
    def define(self, name, llvm_value, type_name=None, span=None):
        if name in self.symbols:
            raise DuplicateSymbolError(f"Symbol '{name}' already defined in this scope.", span)
        self.symbols[name] = SymbolInfo(llvm_value, type_name)

    def resolve(self, name):
        info = self.resolve_info(name)
        return info.llvm_value if info else None

    def resolve_type(self, name):
        info = self.resolve_info(name)
        return info.type_name if info else None

    def resolve_info(self, name):
        if name in self.symbols:
            return self.symbols[name]
        if self.parent:
            return self.parent.resolve_info(name)
        return None
