"""FFT kernel generator: specializes transform lengths into launcher sources.

Entry point: generate(catalog) -> GenerationResult

Pipeline: catalog -> geometry selection + classification -> partitioning
into launcher units -> in-memory artifacts and the launcher symbol list.
write_artifacts() persists the artifacts; fft_dispatch builds the
run-time registry from the symbol list.
"""

from __future__ import annotations

from fft_generator.artifacts import Artifact as Artifact
from fft_generator.artifacts import GenerationResult as GenerationResult
from fft_generator.catalog import Fused2DSpec as Fused2DSpec
from fft_generator.catalog import KernelCatalog, load_catalog, load_catalog_from_dict
from fft_generator.catalog import Large1DSpec as Large1DSpec
from fft_generator.classify import classify_2d as classify_2d
from fft_generator.classify import is_diagonal_eligible as is_diagonal_eligible
from fft_generator.emitter import generate
from fft_generator.errors import ArtifactWriteError as ArtifactWriteError
from fft_generator.errors import DuplicateSpecializationError as DuplicateSpecializationError
from fft_generator.errors import FFTGeneratorError as FFTGeneratorError
from fft_generator.errors import GeometryError as GeometryError
from fft_generator.errors import UnsupportedConfigurationError as UnsupportedConfigurationError
from fft_generator.geometry import GeometryParams as GeometryParams
from fft_generator.geometry import select_geometry as select_geometry
from fft_generator.scheme import ComputeScheme as ComputeScheme
from fft_generator.scheme import KernelSymbol as KernelSymbol
from fft_generator.scheme import Precision as Precision
from fft_generator.scheme import RadixFamily as RadixFamily
from fft_generator.scheme import SpecializationKey as SpecializationKey
from fft_generator.scheme import TransposeMode as TransposeMode
from fft_generator.target_config import DEFAULT_TARGET, TargetConfig
from fft_generator.writer import write_artifacts


def generate_to_directory(
    catalog: str | dict | KernelCatalog,
    out_dir: str,
    config: TargetConfig = DEFAULT_TARGET,
    group_count: int | None = None,
) -> GenerationResult:
    """Generate a catalog and write every artifact under out_dir.

    Args:
        catalog: path to a catalog JSON file, an in-memory catalog dict, or a KernelCatalog.
        out_dir: destination directory (created if missing).
    """
    if isinstance(catalog, str):
        catalog = load_catalog(catalog)
    elif isinstance(catalog, dict):
        catalog = load_catalog_from_dict(catalog)
    result = generate(catalog, config=config, group_count=group_count)
    write_artifacts(result.artifacts, out_dir)
    return result
