import os

from setuptools import setup, find_packages

about = {}
with open(os.path.join(os.path.dirname(os.path.abspath(__file__)),
                       "src", "multilog", "_version.py"), encoding="utf-8") as f:
    exec(f.read(), about)

setup(
    name=about["__app_name__"],
    version=about["VERSION"],
    description="Multiplexed System/Access/Error logging to files, console and syslog",
    author="John Scherff",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7.0", "pytest-cov"],
    },
    entry_points={
        "console_scripts": ["multilog=multilog.cli:main"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Logging",
    ],
    python_requires=">=3.10",
)
