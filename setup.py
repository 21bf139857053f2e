from setuptools import setup, find_packages

setup(
    name="voicecalc",
    version="0.1.0",
    description="Voice calculator that turns spoken amounts into a running ledger",
    author="",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "rich>=13.0.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "voicecalc=voicecalc.main:main",
        ],
    },
)
