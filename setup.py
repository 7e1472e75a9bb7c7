from setuptools import setup, find_packages


setup(
    name="coalesced",
    version="0.1",
    packages=find_packages(include=["coalesced", "coalesced.*"]),
    description="Compile and decompile Mass Effect 2 Coalesced.ini containers.",
    author="vercingetorx",
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "coalesced=coalesced.cli:main",
        ]
    },
)
