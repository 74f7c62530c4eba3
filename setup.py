from setuptools import setup, find_packages

setup(
    name="ktmpl",
    version="0.9.0",
    description="Produce Kubernetes manifests from parameterized templates",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "PyYAML>=6.0",
        "pydantic>=2.0",
        "typer>=0.9",
        "cli-core-yo>=1.0,<1.2",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "ktmpl=ktmpl.cli:main",
        ],
    },
)
