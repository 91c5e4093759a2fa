from setuptools import setup, find_packages

setup(
    name="logex",
    version="0.3.0b0",
    description="Caller-aware log-record formatting — class, method, file and line filled in from the call site",
    author="Dustin",
    author_email="6962246+djdarcy@users.noreply.github.com",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7", "pytest-cov"],
    },
    entry_points={
        "console_scripts": ["logex=logex.cli:main"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: System :: Logging",
    ],
    python_requires=">=3.11",
)
