from .compiler import WalterCompiler, generate_module
from .verify import verify_module
