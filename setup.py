"""
Setup script for kybalion-path.

Kybalion Path is a terminal course on the seven Hermetic principles,
framed as practical self-responsibility. It serves three roles:

1. Lessons - Guided lessons with hearts, XP and a mastery gate
2. Practice - Deterministic daily practice sets derived from lesson prose
3. Daily Session - Check-in, micro practice and a graded reflection

The 'kybalion' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="kybalion-path",
    version="1.0.0",
    description="Terminal course on the Hermetic principles with adaptive practice",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Kybalion Path",
    packages=find_packages(include=["kybalion_path", "kybalion_path.*"]),
    py_modules=["config"],
    package_data={
        "kybalion_path.content": ["data/*.json"],
    },
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kybalion=kybalion_path.delivery.path_cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning practice cli education hermetic kybalion",
)
