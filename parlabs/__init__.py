"""Concurrency exercises: bank simulation, warehouse, Life, blur, melody, semaphore demo and archiving."""

__version__ = "0.1.0"