"""Kernel body generation interface.

The Stockham butterfly/twiddle generator is an external collaborator: given
a length, a scheme and a geometry it returns the text of a kernel body that
defines the device functions the launchers call. KernelSourceEngine is that
seam. PlaceholderKernelEngine emits declaration-only bodies with the
geometry baked in, which is enough for launcher and dispatch wiring.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fft_generator.geometry import GeometryParams
from fft_generator.naming import device_function_suffix, device_function_suffix_2d
from fft_generator.scheme import ComputeScheme


class KernelSourceEngine(ABC):
    """Produces kernel body text for one specialization."""

    @abstractmethod
    def kernel_1d(self, length: int, scheme: ComputeScheme, geometry: GeometryParams) -> str:
        """Body defining fft_{fwd,back}_{ip,op}_len<N>[_sbcc|_sbrc]."""

    @abstractmethod
    def kernel_2d(self, length1: int, length2: int, geometry: GeometryParams) -> str:
        """Body defining fft_{fwd,back}_{ip,op}_2D_<N1>_<N2>."""


_DEVICE_FUNCTIONS_TEMPLATE = r"""
// {description}
#define FFT_WGS{suffix} {wgs}
#define FFT_NT{suffix} {nt}

template <typename T, StrideBin sb>
__global__ void __launch_bounds__({wgs})
fft_fwd_ip{suffix}(const T* __restrict__ twiddles, const size_t dim, const size_t* __restrict__ lengths,
                   const size_t* __restrict__ stride, const size_t batch_count, T* __restrict__ buffer);

template <typename T, StrideBin sb>
__global__ void __launch_bounds__({wgs})
fft_back_ip{suffix}(const T* __restrict__ twiddles, const size_t dim, const size_t* __restrict__ lengths,
                    const size_t* __restrict__ stride, const size_t batch_count, T* __restrict__ buffer);

template <typename T, StrideBin sb>
__global__ void __launch_bounds__({wgs})
fft_fwd_op{suffix}(const T* __restrict__ twiddles, const size_t dim, const size_t* __restrict__ lengths,
                   const size_t* __restrict__ stride_in, const size_t* __restrict__ stride_out,
                   const size_t batch_count, T* __restrict__ buffer_in, T* __restrict__ buffer_out);

template <typename T, StrideBin sb>
__global__ void __launch_bounds__({wgs})
fft_back_op{suffix}(const T* __restrict__ twiddles, const size_t dim, const size_t* __restrict__ lengths,
                    const size_t* __restrict__ stride_in, const size_t* __restrict__ stride_out,
                    const size_t batch_count, T* __restrict__ buffer_in, T* __restrict__ buffer_out);
"""


class PlaceholderKernelEngine(KernelSourceEngine):
    """Declaration-only kernel bodies for wiring and tests."""

    def kernel_1d(self, length: int, scheme: ComputeScheme, geometry: GeometryParams) -> str:
        radices = " ".join(str(r) for r in geometry.radices) or "auto"
        return _DEVICE_FUNCTIONS_TEMPLATE.format(
            description=f"{scheme.value} length {length}, radices: {radices}",
            suffix=device_function_suffix(length, scheme),
            wgs=geometry.work_group_size,
            nt=geometry.transforms_per_group,
        )

    def kernel_2d(self, length1: int, length2: int, geometry: GeometryParams) -> str:
        return _DEVICE_FUNCTIONS_TEMPLATE.format(
            description=f"fused 2D {length1}x{length2}",
            suffix=device_function_suffix_2d(length1, length2),
            wgs=geometry.work_group_size,
            nt=geometry.transforms_per_group,
        )
