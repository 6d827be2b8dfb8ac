import logging
import os

from llvmlite import binding, ir

from ..errors import ExternalToolError
from ..project import TargetConfig
from .verify import verify_module

log = logging.getLogger("walter.codegen")


def create_target_machine(config: TargetConfig, opt: int) -> binding.TargetMachine:
    binding.initialize_native_target()
    binding.initialize_native_asmprinter()
    try:
        target = binding.Target.from_triple(config.triple)
        return target.create_target_machine(
            cpu=config.cpu,
            features=config.features,
            opt=opt,
            reloc=config.reloc,
            codemodel=config.code_model,
        )
    except RuntimeError as e:
        raise ExternalToolError(f"Failed to initialize LLVM target '{config.triple}'",
                                tool="llvm", output=str(e)) from e


def optimize(llvm_module: binding.ModuleRef, target_machine, opt: int):
    pto = binding.create_pipeline_tuning_options(speed_level=opt)
    pb = binding.create_pass_builder(target_machine, pto)
    pb.getModulePassManager().run(llvm_module, pb)


def emit_object(module: ir.Module, config: TargetConfig, path: str, release: bool = False) -> str:
    """
    Writes 'module' as a native object file at 'path'. The release build runs
    the LLVM optimisation pipeline before emission.
    """
    llvm_module = verify_module(module)

    opt = config.opt_level(release)
    tm = create_target_machine(config, opt)
    llvm_module.triple = config.triple
    llvm_module.data_layout = str(tm.target_data)

    try:
        if opt:
            optimize(llvm_module, tm, opt)
        obj = tm.emit_object(llvm_module)
    except RuntimeError as e:
        raise ExternalToolError("LLVM failed to emit the object file", tool="llvm", output=str(e)) from e

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "wb") as f:
            f.write(obj)
    except OSError as e:
        raise ExternalToolError(f"Cannot write object file '{path}': {e.strerror}", tool="llvm") from None
    log.debug("wrote %d bytes to %s", len(obj), path)
    return path
