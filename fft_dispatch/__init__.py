"""Run-time dispatch of generated FFT launchers.

Build a DispatchRegistry from a generator run (or its manifest) and a
resolver that maps launcher names to callables, then look kernels up by
SpecializationKey. LazyRegistry defers the build to first use.
"""

from fft_dispatch.errors import KernelNotFoundError, NullKernelEntryError
from fft_dispatch.registry import DispatchRegistry, KernelEntry, LazyRegistry, Resolver

__all__ = [
    "DispatchRegistry",
    "KernelEntry",
    "KernelNotFoundError",
    "LazyRegistry",
    "NullKernelEntryError",
    "Resolver",
]
