"""Genome coordinates, genetic maps, sample lists, genotype containers and local-ancestry segments."""

__version__ = "0.1.11"