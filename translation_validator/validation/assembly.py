"""
Genome assembly lookup for RefSeq chromosome accessions.

Maps each human chromosome RefSeq accession to the short build tag of the
assembly it belongs to (b36 = NCBI36, b37 = GRCh37, b38 = GRCh38).
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)


def _chromosomes(versions: List[int], build: str) -> Dict[str, str]:
    return {
        f"NC_{number:06d}.{version}": build
        for number, version in enumerate(versions, start=1)
    }


# Accession versions for chromosomes 1-22, X (23) and Y (24), in order
_B36_VERSIONS = [9, 10, 10, 10, 8, 10, 12, 9, 10, 9, 8, 10, 9, 7, 8, 8, 9, 8, 8, 9, 7, 9, 9, 8]
_B37_VERSIONS = [10, 11, 11, 11, 9, 11, 13, 10, 11, 10, 9, 11, 10, 8, 9, 9, 10, 9, 9, 10, 8, 10, 10, 9]
_B38_VERSIONS = [11, 12, 12, 12, 10, 12, 14, 11, 12, 11, 10, 12, 11, 9, 10, 10, 11, 10, 10, 11, 9, 11, 11, 10]

DEFAULT_ASSEMBLIES: Mapping[str, str] = MappingProxyType({
    **_chromosomes(_B36_VERSIONS, "b36"),
    **_chromosomes(_B37_VERSIONS, "b37"),
    **_chromosomes(_B38_VERSIONS, "b38"),
    "NC_012920.1": "b38",  # rCRS mitochondrion
})


class AssemblyMap:
    """
    Read-only lookup from RefSeq chromosome accession to genome build tag.

    Instances never change after construction, so one map can be shared by
    any number of concurrent validations.
    """

    def __init__(self, assemblies: Optional[Mapping[str, str]] = None):
        """
        Args:
            assemblies: Accession to build tag pairs; defaults to the
                embedded human chromosome table
        """
        source = DEFAULT_ASSEMBLIES if assemblies is None else assemblies
        self._assemblies = MappingProxyType(dict(source))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AssemblyMap":
        """Load a map from a JSON object of {accession: build tag}."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Assembly map {path} must be a JSON object")

        logger.info("Loaded assembly map from %s", path, extra={"accession_count": len(data)})
        return cls({str(k): str(v) for k, v in data.items()})

    def lookup(self, accession: str) -> Optional[str]:
        """Return the build tag for an accession, or None when it is not known."""
        return self._assemblies.get(accession)

    def accessions_for(self, build: str) -> List[str]:
        """All accessions mapped to the given build tag, sorted."""
        return sorted(acc for acc, tag in self._assemblies.items() if tag == build)

    def __contains__(self, accession: object) -> bool:
        return accession in self._assemblies

    def __len__(self) -> int:
        return len(self._assemblies)

    def __iter__(self) -> Iterator[str]:
        return iter(self._assemblies)


_default_map: Optional[AssemblyMap] = None


def get_assembly_map(path: Optional[str] = None) -> AssemblyMap:
    """
    Get an assembly map.

    Without a path the process-wide embedded map is returned; with one, the
    map is loaded from that JSON file.
    """
    global _default_map
    if path:
        return AssemblyMap.from_file(path)
    if _default_map is None:
        _default_map = AssemblyMap()
    return _default_map
