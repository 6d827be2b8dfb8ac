import logging

from llvmlite import binding, ir
from llvmlite.ir.instructions import Terminator

from ..errors import ModuleVerificationError

log = logging.getLogger("walter.codegen")


def structural_problems(module: ir.Module):
    """Yields one message per block that does not end in exactly one terminator."""
    for fn in module.functions:
        if fn.is_declaration:
            continue
        for block in fn.blocks:
            terminators = [i for i in block.instructions if isinstance(i, Terminator)]
            if not block.is_terminated or not terminators:
                yield f"block '{block.name}' in function '{fn.name}' has no terminator"
            elif len(terminators) > 1 or block.instructions[-1] is not terminators[0]:
                yield f"block '{block.name}' in function '{fn.name}' has instructions after its terminator"


def verify_module(module: ir.Module) -> binding.ModuleRef:
    """
    Structural check of the lowered module followed by LLVM's own verifier.
    Returns the parsed module so emission does not have to re-parse it.
    """
    problems = list(structural_problems(module))
    if problems:
        raise ModuleVerificationError(
            "Module verification failed: " + problems[0],
            hint=f"{len(problems)} malformed block(s)" if len(problems) > 1 else None,
        )

    try:
        llvm_module = binding.parse_assembly(str(module))
        llvm_module.verify()
    except RuntimeError as e:
        raise ModuleVerificationError(f"Module verification failed: {e}") from e

    log.debug("module '%s' verified", module.name)
    return llvm_module
