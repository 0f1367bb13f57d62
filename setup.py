from setuptools import setup, find_packages

setup(
    name="seqpipe",
    version="0.1.0",
    description="Lazy pull-based sequence pipelines with Option/Result outcomes and eager collections",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2",
        "greenlet",
        "numpy",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
