from setuptools import setup
from specopt.const import VERSION_STR, DESCRIPTION

setup(
    name="specopt",
    version=VERSION_STR,
    python_requires='>=3.10',
    description=DESCRIPTION,
    author="Cute Engineering",
    author_email="contact@cute.engineering",
    url="https://cute.engineering/",
    packages=["specopt"],
    install_requires=[
        "requests",
        "graphviz",
        "dataclasses-json",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "specopt = specopt:main",
        ],
    },
    license="MIT",
    platforms="any",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
