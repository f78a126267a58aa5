from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
this_directory = Path(__file__).parent
readme = this_directory / "README.md"
long_description = readme.read_text() if readme.exists() else ""

setup(
    name="courseproc",
    version="0.1.0",
    description="Resource filtering and reference collation for CBT course builds",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="courseproc Contributors",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "tqdm>=4.65.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
        "Topic :: Text Processing :: Markup :: HTML",
    ],
    keywords="cbt course e-learning glossary citations filtering",
)
