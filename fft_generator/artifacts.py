"""Generation output: named text artifacts plus the launcher symbol list."""

from __future__ import annotations

from dataclasses import dataclass, field

from fft_generator.scheme import KernelSymbol


@dataclass(frozen=True)
class Artifact:
    """One generated file, held in memory until written."""

    name: str
    text: str


@dataclass
class GenerationResult:
    """Everything one generator run produced.

    symbols is the authoritative list of launcher entry points; the dispatch
    registry is populated from it and nothing else.
    """

    artifacts: list[Artifact] = field(default_factory=list)
    symbols: list[KernelSymbol] = field(default_factory=list)

    @property
    def artifact_names(self) -> list[str]:
        return [a.name for a in self.artifacts]

    def artifact(self, name: str) -> Artifact:
        for a in self.artifacts:
            if a.name == name:
                return a
        raise KeyError(f"No artifact named '{name}'")

    def has_artifact(self, name: str) -> bool:
        return any(a.name == name for a in self.artifacts)
