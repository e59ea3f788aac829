[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ishare"
version = "0.1.11"
description = "Genome coordinates, genetic maps, genotype containers and local-ancestry segments for IBD analysis"
requires-python = ">=3.11"
dependencies = [
    "tomli-w",
    "msgpack",
]
keywords = [
    "genetics",
    "ibd",
    "genetic map",
    "genotype",
    "local ancestry",
    "interval tree",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ishare"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
