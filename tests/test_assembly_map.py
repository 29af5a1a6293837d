"""
Unit tests for the genome assembly lookup.
"""

import json

import pytest

from translation_validator.validation.assembly import AssemblyMap, get_assembly_map


class TestAssemblyMap:
    """Test accession to build lookups."""

    @pytest.mark.parametrize("accession, build", [
        ("NC_000022.11", "b38"),
        ("NC_000001.11", "b38"),
        ("NC_000023.11", "b38"),
        ("NC_000024.10", "b38"),
        ("NC_000022.10", "b37"),
        ("NC_000001.10", "b37"),
        ("NC_000022.9", "b36"),
    ])
    def test_known_accessions(self, accession, build):
        assert AssemblyMap().lookup(accession) == build

    def test_unknown_accession(self):
        """Unknown accessions are not found rather than an error."""
        assembly_map = AssemblyMap()
        assert assembly_map.lookup("NC_000022.99") is None
        assert assembly_map.lookup("NG_008376.4") is None
        assert "NC_000022.99" not in assembly_map

    def test_every_chromosome_has_one_b38_accession(self):
        accessions = AssemblyMap().accessions_for("b38")
        chromosomes = [a for a in accessions if a.startswith("NC_0000")]
        assert len(chromosomes) == 24
        assert chromosomes[0] == "NC_000001.11"
        assert chromosomes[-1] == "NC_000024.10"

    def test_map_is_read_only(self):
        source = {"NC_000022.11": "b38"}
        assembly_map = AssemblyMap(source)
        source["NC_000022.11"] = "b37"

        assert assembly_map.lookup("NC_000022.11") == "b38"
        with pytest.raises(TypeError):
            assembly_map._assemblies["NC_000001.11"] = "b38"

    def test_from_file(self, tmp_path):
        path = tmp_path / "assemblies.json"
        path.write_text(json.dumps({"NC_000022.11": "b38", "NC_000022.10": "b37"}))

        assembly_map = AssemblyMap.from_file(path)

        assert len(assembly_map) == 2
        assert assembly_map.lookup("NC_000022.10") == "b37"
        assert assembly_map.lookup("NC_000001.11") is None

    def test_from_file_rejects_non_object(self, tmp_path):
        path = tmp_path / "assemblies.json"
        path.write_text(json.dumps(["NC_000022.11"]))

        with pytest.raises(ValueError):
            AssemblyMap.from_file(path)

    def test_default_map_is_shared(self):
        assert get_assembly_map() is get_assembly_map()
