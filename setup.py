"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/zackees/ccu"
KEYWORDS = "build defines symbols conditional compilation optional dependencies reconciliation"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="ccu",
        version="0.1.0",
        description="Keep build symbols in sync with loaded optional dependencies",
        maintainer="Zachary Vorhies",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["ccu=ccu.cli:main"]},
        include_package_data=True)
