"""Artifact production edges and output layout.

The edge set is fixed and forms a DAG::

    COMPILED_OBJECT -> ELF -> {BIN, HEX, LISTING}

Paths are derived from the full artifact identity::

    <target_dir>/<triple>/<profile>/<platform><suffix>
"""

from __future__ import annotations

from pathlib import Path

from ferrite_core.models import Artifact, ArtifactKind

PRODUCTION_EDGES: tuple[tuple[ArtifactKind, ArtifactKind], ...] = (
    (ArtifactKind.COMPILED_OBJECT, ArtifactKind.ELF),
    (ArtifactKind.ELF, ArtifactKind.BIN),
    (ArtifactKind.ELF, ArtifactKind.HEX),
    (ArtifactKind.ELF, ArtifactKind.LISTING),
)
"""(source, target) pairs: producing target requires source to be current."""


def sources_of(kind: ArtifactKind) -> list[ArtifactKind]:
    """Kinds that must be resolved before ``kind`` can be produced."""
    return [source for source, target in PRODUCTION_EDGES if target == kind]


def is_leaf(kind: ArtifactKind) -> bool:
    """Whether ``kind`` has no incoming edge and is produced by the compile step."""
    return not sources_of(kind)


class ArtifactLayout:
    """Maps artifact identities to filesystem paths.

    Attributes:
        target_dir: Build output root shared by all triples and profiles

    Example:
        >>> layout = ArtifactLayout(Path("target"))
        >>> layout.path_for(artifact)
        PosixPath('target/thumbv7em-none-eabi/release/imix.bin')
    """

    def __init__(self, target_dir: Path) -> None:
        self.target_dir = target_dir

    def profile_dir(self, artifact: Artifact) -> Path:
        """Directory holding every artifact of the artifact's triple and profile."""
        return self.target_dir / artifact.target.triple / artifact.profile.value

    def path_for(self, artifact: Artifact) -> Path:
        """Final path of an artifact."""
        name = f"{artifact.target.platform}{artifact.kind.suffix}"
        return self.profile_dir(artifact) / name

    def partial_path_for(self, artifact: Artifact) -> Path:
        """Scratch path a conversion writes to before it is moved into place."""
        path = self.path_for(artifact)
        return path.with_name(f"{path.name}.partial")
