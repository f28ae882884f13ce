# setup.py
from setuptools import setup, find_packages

setup(
    name="rpglump",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "construct>=2.10",
        "numpy>=1.21",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    description="Decoder for legacy RPG project lump containers and their record formats",
    keywords="rpg, lump, binary, decoder",
    entry_points={
        'console_scripts': [
            'rpglump=rpglump.main:main',
        ],
    }
)
