"""
Setup configuration for Vector Engine package.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

# Read requirements from requirements.txt
requirements = []
try:
    with open(this_directory / 'requirements.txt') as f:
        requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]
except FileNotFoundError:
    pass

setup(
    name="vector-engine",
    version="0.1.0",
    author="Vector Engine Team",
    description="An embeddable vector-similarity store with collections, filters and on-disk persistence",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["vector_core", "vector_core.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Database :: Database Engines/Servers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-asyncio>=0.21.0",
            "aioresponses>=0.7.4",
        ],
        "sentence-transformers": [
            "sentence-transformers>=2.2.0",
        ],
    },
    keywords="vector-database embeddings similarity-search cosine-similarity",
)
