"""A setuptools based setup module.

See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages

# To use a consistent encoding
from codecs import open
from os import path

# Read some info from the rnxcodec package itself
import rnxcodec

here = path.abspath(path.dirname(__file__))

# Get the long description from the relevant file
with open(path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name=rnxcodec.__name__,
    version=rnxcodec.__version__,
    description=[s.replace("\n", " ") for s in rnxcodec.__doc__.strip().split("\n\n")][0],
    long_description=long_description,
    long_description_content_type="text/markdown",
    # Author details
    author=rnxcodec.__author__,
    author_email=rnxcodec.__contact__,
    # See https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: MacOS",
        "Operating System :: Microsoft",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering",
    ],
    # What does your project relate to?
    keywords="gnss rinex crinex hatanaka binex",
    packages=find_packages(exclude=["tests", "tests.*"]),
    # The default configuration is read from inside the package
    package_data={"rnxcodec": ["config/rnxcodec.conf"]},
    python_requires=">=3.7",
    # List run-time dependencies here.  These will be installed by pip when your project is installed. For an analysis
    # of "install_requires" vs pip's requirements files see: https://packaging.python.org/en/latest/requirements.html
    install_requires=["colorama", "crccheck", "midgard>=1.2.0", "numpy", "pandas"],
    # List additional groups of dependencies here (e.g. development dependencies). You can install these using the
    # following syntax, for example:
    #   $ pip install -e .[test,dev_tools]
    extras_require={"test": ["pytest"], "dev_tools": ["black", "bumpversion", "flake8", "mypy", "pytest"]},
)
