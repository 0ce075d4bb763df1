import os
from setuptools import setup, find_packages

SETUP_DIR = os.path.dirname(os.path.realpath(__file__))
README_PATH = os.path.join(SETUP_DIR, "README.md")

with open(README_PATH, "r") as readme:
    README = readme.read()

setup(
    name="dependents",
    description="Find the packages that depend on a set of packages",
    long_description=README,
    long_description_content_type="text/markdown",
    license="LGPL-3.0-or-later",
    version="0.1.0",
    packages=find_packages("src", exclude=["test"]),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "networkx>=2.4",
        "platformdirs>=3.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.7",
        "semantic_version~=2.8",
        "sqlalchemy>=2.0",
        "tqdm>=4.48.0",
    ],
    extras_require={
        "dev": ["flake8", "pytest", "mypy>=0.812", "types-setuptools"]
    },
    entry_points={
        "console_scripts": [
            "dependents = dependents._cli:main"
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: System :: Software Distribution",
        "Topic :: Utilities"
    ]
)
