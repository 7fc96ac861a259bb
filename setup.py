# setup.py
from setuptools import setup, find_packages

setup(
    name="invsolver",
    version="0.1.0",
    description="Isolate a variable in an equation by applying inverse operations",
    packages=find_packages(include=["invsolver", "invsolver.*"]),
    python_requires=">=3.10",
    install_requires=[
        "sympy",
        "matplotlib",
        "numpy",
        "networkx",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "invsolver = invsolver.cli:main",
        ],
    },
)
