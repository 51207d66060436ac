[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parlabs"
version = "0.1.0"
description = "Concurrency exercises: a thread-safe bank simulation, a bounded warehouse, Conway's Life, Gaussian blur, a melody synthesiser, a semaphore demo and parallel gzip archiving."
requires-python = ">=3.10"
keywords = [
    "concurrency",
    "threads",
    "multiprocessing",
    "game-of-life",
    "gaussian-blur",
    "simulation",
    "synthesis",
    "gzip",
    "tar",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pillow",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pillow",
]

[project.scripts]
parlabs-bank = "parlabs.simulation:main"
parlabs-warehouse = "parlabs.warehouse:main"
parlabs-life = "parlabs.life:main"
parlabs-blur = "parlabs.blur:main"
parlabs-player = "parlabs.melody:main"
parlabs-semaphore = "parlabs.semaphore_demo:main"
parlabs-archive = "parlabs.archiver:main"
parlabs-extract = "parlabs.extractor:main"

[tool.hatch.build.targets.wheel]
packages = ["parlabs"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
