# ishare

Building blocks for identity-by-descent (IBD) analysis of genomic data:
genome coordinates, genetic maps, sample lists, genotype containers and
local-ancestry segments. It is a library; it has no command-line tool.

## Modules

- `ishare.genome`
  - `GenomeInfo` holds chromosome names, sizes, a name-to-index map and
    genome-wide start offsets.
    - `to_gw_pos` and `to_chr_pos` convert between chromosomal and
      genome-wide 0-based positions.
    - `split_chromosomes_by_regions` cuts the genome at region boundaries into
      pseudo-chromosomes named `<chrname>_<pos>`.
    - `partition_genome` covers each chromosome with `(chrid, start, end)`
      chunks, or returns `[None]` when no maximum length is given.
    - `to_toml_file` and `from_toml_file` write and read the layout as TOML.
  - `Genome` pairs a `GenomeInfo` with a genome-wide `GeneticMap`. It can be
    built in these ways:
    - `from_builtin` with a `BuiltinGenome`: `PF3D7_CONST15K` or
      `SIM14CHR100CM_CONST15K`.
    - `from_constant_recombination_rate`.
    - `from_plink_gmaps`, from per-chromosome PLINK map files.

    It is saved and loaded in these ways:
    - `save_binary` and `load_binary` use a single msgpack file.
    - `save_to_text_files` and `load_from_text_file` use a TOML file plus one
      PLINK map per chromosome. The map paths are set with
      `set_gmap_path_prefix`.
- `ishare.gmap`
  - `GeneticMap` is an ordered list of `(bp, cM)` points.
    - `get_cm`, `get_bp` and `get_cm_len` interpolate linearly between points.
    - `from_plink_map` reads a single-chromosome PLINK map.
    - `from_gmap_vec` and `from_genome_info` merge per-chromosome maps into
      genome-wide coordinates.
    - `to_plink_map_files` writes `<prefix>_<chrname>.map` files.
- `ishare.indiv`
  - `Individuals` is an ordered list of sample names with `index` and `get`
    lookups.
    - `from_txt_file` reads one-column sample lists. It also reads
      two-column files (haploid name, diploid name) and three-column files
      (diploid name, haplotype 1, haplotype 2). For those it also returns a
      `PloidyConverter` and a `PloidyConvertDirection`.
    - `get_ploidy_converter` pairs consecutive samples into diploids named
      `first|second`.
- `ishare.intervals`
  - `Intervals` is a list of half-open `(start, end)` intervals with `sort`,
    `merge` and `complement`.
- `ishare.intervaltree`
  - `IntervalTree` is an immutable interval tree of `Element`s with `query`
    (overlap with `[start, end)`) and `query_point`.
- `ishare.histogram`
  - `Histogram` counts values into bins given by sorted, unique lower
    boundaries. Values below the smallest boundary are ignored.
- `ishare.genotype_matrix`
  - `GenotypeMatrix` is a dense 0/1 matrix of biallelic calls.
    - Rows are appended, reordered, merged and transposed.
    - `get_afreq` gives per-row frequencies.
    - `has_too_many_discord_sites` counts opposite-homozygote sites between
      two diploid individuals.
- `ishare.rare`
  - `GenotypeRecord` packs position (32 bits), genome (24 bits) and allele
    (8 bits) into one 64-bit integer.
  - `GenotypeRecords` tracks its `SortStatus` and supports these operations:
    - `sort_by_position` and `sort_by_genome`.
    - `iter_genome_pair_genotypes`.
    - `filter_multi_allelic_site`.
    - `subset_by_genomes`.
- `ishare.fb`
  - `FbMatrix.from_fb_file` reads a tab-separated forward-backward ancestry
    probability table. It gives each haplotype its most likely ancestry per
    window, or `"Unknown"` below `min_prob`.
  - `LASet.from_fbmat` turns that into runs of constant ancestry (`LASeg`).
  - `get_hap_pair_tree` builds an `IntervalTree` of intervals over which two
    haplotypes both keep a constant ancestry.

## Example

```python
from ishare.genome import BuiltinGenome, Genome

genome = Genome.from_builtin(BuiltinGenome.PF3D7_CONST15K)
chrid, chrname, pos = genome.ginfo.to_chr_pos(1_000_000)
print(chrname, pos, genome.gmap.get_cm(1_000_000))

genome.set_gmap_path_prefix("maps/map")
genome.save_to_text_files("out/genome.toml")
reloaded = Genome.load_from_text_file("out/genome.toml")
```

## What it does not do

- It does not read VCF/BCF files.
- It does not compute allele frequencies from variant files.
- It does not call or store IBD segments.
- It does not write ancestry-specific IBD output.
- `GenotypeMatrix`, `GenotypeRecords` and `Individuals` live in memory only.
  They have no file storage format.
- There is no command-line program.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```