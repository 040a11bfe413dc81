from setuptools import setup, find_packages

setup(
    name="tilewfc",
    version="0.1.0",
    author="Your Name",
    description="Tile map generation with backtracking wave function collapse",
    packages=find_packages(include=["tilewfc", "tilewfc.*"]),
    install_requires=[
        "numpy",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "tilewfc=tilewfc.cli:main",
        ],
    },
    python_requires=">=3.8",
)
