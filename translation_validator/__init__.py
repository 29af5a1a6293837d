"""
Translation Table Validator - checks pharmacogene allele translation tables.

This package validates tab-separated allele translation tables against their
fixed layout: the gene and version header, RefSeq accessions and genome build
of the sequence lines, the population header row, and the allele tokens of
every variant row. Tables can also be exported to Excel workbooks.
"""

__version__ = "0.1.0"
__author__ = "Translation Table Validator Team"
