"""Example: generate launchers for a catalog and dispatch through the registry.

Kernel entry points normally come from the compiled launcher library; here
each name resolves to a Python stub that reports which launcher ran.
"""

import os

import fft_generator
from fft_dispatch import DispatchRegistry, KernelNotFoundError, LazyRegistry
from fft_generator import ComputeScheme, Precision, SpecializationKey, TransposeMode

CATALOG = os.path.join(os.path.dirname(__file__), "catalog.json")


def _stub_launcher(name):
    def launch(data_p, back_p):
        print(f"launch {name}")
    return launch


def main(out_dir: str = "build/kernels"):
    # 1. Generate and write sources
    result = fft_generator.generate_to_directory(CATALOG, out_dir, group_count=4)
    print(f"Generated {len(result.symbols)} launchers, {len(result.artifacts)} files")

    # 2. Registry is built on first use from the manifest written in step 1
    manifest = os.path.join(out_dir, "kernel_manifest.json")
    registry = LazyRegistry(lambda: DispatchRegistry.from_manifest(manifest, _stub_launcher))
    pool = registry.get()
    pool.validate_complete()
    print(f"Sub-table sizes: {pool.table_sizes()}")

    # 3. Dispatch
    pool.lookup(SpecializationKey(4096, ComputeScheme.STOCKHAM, Precision.SINGLE))(None, None)
    xy_z = SpecializationKey(128, ComputeScheme.TRANSPOSE_XY_Z, Precision.DOUBLE)
    pool.lookup_transpose(xy_z, TransposeMode.DIAGONAL)(None, None)
    try:
        pool.lookup_transpose(xy_z, TransposeMode.TILE_UNALIGNED)
    except KernelNotFoundError as e:
        print(e)


if __name__ == "__main__":
    main()
